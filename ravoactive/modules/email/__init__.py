"""
Email Module
============

Waitlist email delivery: Resend as the primary provider with an SMTP
fallback, background job runner, and template previews.
"""

from .routes import email_preview_bp
from .email_service import EmailService
from .dispatcher import NotificationDispatcher
from .providers import EmailProvider, ResendProvider, SMTPProvider
from .background import NotificationRunner

__all__ = [
    'email_preview_bp', 'EmailService', 'NotificationDispatcher',
    'EmailProvider', 'ResendProvider', 'SMTPProvider', 'NotificationRunner',
]
