"""
Email Service Module
====================

Builds the waitlist emails (admin alert and subscriber welcome) and hands
them to the NotificationDispatcher, which tries the primary provider first
and the SMTP fallback second. Every message gets an HTML and a plain-text
body. All branding is configurable through Flask app config.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from markupsafe import escape
from sqlalchemy import insert

from ravoactive.core.database import db, utcnow
from .dispatcher import NotificationDispatcher
from .models import EmailLog

# Rejects consecutive dots and leading/trailing dots in the local part
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

logger = logging.getLogger(__name__)

WELCOME_BENEFITS = [
    ('Early Access', 'Be the first to shop our collection'),
    ('Exclusive Discounts', 'Special launch pricing just for you'),
    ('Insider Updates', 'Behind-the-scenes content and launch news'),
    ('VIP Treatment', 'Priority customer support and perks'),
]


class EmailService:
    """
    Waitlist email service.

    Configuration (set in Flask app.config):
        EMAIL_PROVIDERS: provider entries keyed by role ('primary', 'secondary')
        EMAIL_ADMIN_EMAIL: Operational mailbox that receives new-subscriber alerts
        EMAIL_BRAND_NAME: Brand name for emails (default: 'RavoActive')
        EMAIL_BRAND_TAGLINE: Brand tagline
        EMAIL_WEBSITE_URL: Website URL used for links
        EMAIL_TIMEZONE: Timezone for timestamps shown in admin alerts
    """

    def __init__(self, app=None, dispatcher=None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.brand_name = 'RavoActive'
        self.brand_tagline = ''
        self.website_url = 'https://ravoactive.com'
        self.admin_email = None
        self.timezone = timezone.utc

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.dispatcher = NotificationDispatcher.from_config(app.config.get('EMAIL_PROVIDERS'))
        logger.info(f"=== INITIALIZING EMAIL SERVICE (providers: {self.dispatcher.providers}) ===")

        self.brand_name = app.config.get('EMAIL_BRAND_NAME', 'RavoActive')
        self.brand_tagline = app.config.get('EMAIL_BRAND_TAGLINE', '')
        self.website_url = app.config.get('EMAIL_WEBSITE_URL', 'https://ravoactive.com').rstrip('/')
        self.admin_email = app.config.get('EMAIL_ADMIN_EMAIL')

        tz_name = app.config.get('EMAIL_TIMEZONE') or 'UTC'
        try:
            self.timezone = timezone.utc if tz_name == 'UTC' else ZoneInfo(tz_name)
        except ZoneInfoNotFoundError:
            logger.warning(f"Unknown timezone {tz_name!r} - admin alerts will use UTC")
            self.timezone = timezone.utc

        if not self.dispatcher.is_configured:
            logger.warning("No email provider configured - notifications will be logged only")

    def _log_email(self, recipient: str, subject: str, email_type: str,
                   status: str, error_message: Optional[str] = None):
        """Log email attempt to database"""
        try:
            with db.engine.begin() as conn:
                conn.execute(insert(EmailLog).values(
                    recipient=recipient,
                    subject=subject,
                    email_type=email_type,
                    status=status,
                    error_message=error_message,
                    sent_at=utcnow(),
                ))
        except Exception as e:
            logger.error(f"Failed to log email to database: {e}")

    def send_email(self, to: str, subject: str, html_body: str, text_body: str,
                   email_type: str = 'other') -> bool:
        """
        Send one email through the dispatcher.

        Returns:
            bool: True if a provider delivered it, False otherwise
        """
        if not to or not EMAIL_REGEX.match(to):
            logger.warning(f"Skipping invalid email address: {to}")
            return False

        logger.info(f"Sending '{subject}' to: {to}")
        success = self.dispatcher.send(to, subject, html_body, text_body)

        if success:
            self._log_email(to, subject, email_type, 'sent')
        else:
            self._log_email(to, subject, email_type, 'failed', 'No provider delivered the message')
        return success

    def format_timestamp(self, moment: Optional[datetime] = None) -> str:
        """Human readable timestamp in the configured timezone"""
        moment = moment or utcnow()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(self.timezone).strftime('%B %d, %Y at %I:%M:%S %p %Z')

    # ==================== Welcome Email ====================

    def send_welcome_email(self, email: str) -> bool:
        """Send welcome email to a new or returning waitlist subscriber"""
        subject = f"Welcome to {self.brand_name} - You're In!"
        html_body = self._get_welcome_template(email)
        text_body = self._get_welcome_text(email)
        return self.send_email(email, subject, html_body, text_body, email_type='welcome')

    def _unsubscribe_url(self, email: str) -> str:
        return f"{self.website_url}/unsubscribe?{urlencode({'email': email})}"

    def _get_welcome_text(self, email: str) -> str:
        benefits_text = '\n'.join(f'- {title}: {desc}' for title, desc in WELCOME_BENEFITS)
        return f"""
WELCOME TO {self.brand_name.upper()}!

Thanks for joining our exclusive waitlist!

You're now part of an elite group who will be the first to experience premium activewear designed for athletes who demand excellence.

What you can expect:
{benefits_text}

We're putting the finishing touches on our activewear line. Every piece is engineered for peak performance and designed to elevate your athletic journey.

Get ready to elevate your performance.

Questions? Reply to this email - we'd love to hear from you!

---
{self.brand_name}
{self.brand_tagline}

You received this email because you subscribed to our waitlist.
To unsubscribe, visit: {self._unsubscribe_url(email)}
        """

    def _get_welcome_template(self, email: str) -> str:
        """Get welcome email HTML template"""
        benefits_html = '\n'.join(
            f'<div style="margin-bottom: 15px; color: #475569; font-size: 16px;"><strong>{title}:</strong> {desc}</div>'
            for title, desc in WELCOME_BENEFITS
        )
        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Welcome to {self.brand_name}</title>
</head>
<body style="font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; margin: 0; padding: 0; background-color: #f8fafc;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1); overflow: hidden;">
        <div style="background: linear-gradient(135deg, #ff6b6b, #43d9ad); padding: 40px 30px; text-align: center;">
            <h1 style="color: #ffffff; margin: 0; font-size: 28px; font-weight: bold;">Welcome to {self.brand_name}!</h1>
        </div>

        <div style="padding: 40px 30px;">
            <div style="display: inline-block; background-color: #ff6b6b; color: white; padding: 10px 20px; border-radius: 25px; font-size: 16px; font-weight: 600; margin-bottom: 25px;">You're on the list!</div>

            <h2 style="color: #1e293b; margin-bottom: 15px;">Thanks for joining our exclusive waitlist!</h2>

            <p style="color: #475569; font-size: 18px; line-height: 1.6; margin-bottom: 25px;">
                You're now part of an elite group who will be the first to experience premium activewear designed for athletes who demand excellence.
            </p>

            <div style="background-color: #f8fafc; border-radius: 8px; padding: 25px; margin: 25px 0;">
                <h3 style="color: #1e293b; margin-top: 0;">What you can expect:</h3>
                {benefits_html}
            </div>

            <p style="color: #475569; font-size: 16px; line-height: 1.6;">
                We're putting the finishing touches on our activewear line. Every piece is engineered for peak performance and designed to elevate your athletic journey.
            </p>

            <p style="color: #475569; font-size: 16px; line-height: 1.6;"><strong>Get ready to elevate your performance.</strong></p>

            <div style="text-align: center; margin: 30px 0;">
                <a href="{self.website_url}" style="display: inline-block; background-color: #ff6b6b; color: white; text-decoration: none; padding: 15px 30px; border-radius: 8px; font-weight: 600; font-size: 16px;">Follow Our Journey</a>
            </div>

            <p style="color: #94a3b8; font-size: 14px; text-align: center; margin-top: 30px;">
                Questions? Reply to this email - we'd love to hear from you!
            </p>
        </div>

        <div style="background-color: #1e293b; color: #94a3b8; padding: 30px; text-align: center; font-size: 14px;">
            <strong style="color: #ffffff;">{self.brand_name}</strong><br>
            {self.brand_tagline}<br><br>
            You received this email because you subscribed to our waitlist.<br>
            <a href="{escape(self._unsubscribe_url(email))}" style="color: #94a3b8;">Unsubscribe</a> | <a href="{self.website_url}" style="color: #94a3b8;">Website</a>
        </div>
    </div>
</body>
</html>
        """

    # ==================== Admin Notifications ====================

    def send_admin_subscriber_notification(self, subscriber_details: Dict[str, Any]) -> bool:
        """Send new waitlist subscriber alert to the operational mailbox"""
        if not self.admin_email:
            logger.warning("Admin email not configured - skipping admin notification")
            return False

        reactivated = subscriber_details.get('reactivated', False)
        subject = f"{'Returning' if reactivated else 'New'} {self.brand_name} Waitlist Subscription"

        html_body = self._get_admin_subscriber_template(subscriber_details)
        text_body = self._get_admin_subscriber_text(subscriber_details)
        return self.send_email(self.admin_email, subject, html_body, text_body,
                               email_type='admin_notification')

    def _admin_fields(self, subscriber_details: Dict[str, Any]) -> Dict[str, Any]:
        user_agent = subscriber_details.get('user_agent') or 'unknown'
        if len(user_agent) > 100:
            user_agent = user_agent[:100] + '...'
        return {
            'email': subscriber_details.get('email', 'N/A'),
            'subscribed_at': self.format_timestamp(subscriber_details.get('subscribed_at')),
            'source': subscriber_details.get('source') or 'unknown',
            'ip_address': subscriber_details.get('ip_address') or 'unknown',
            'user_agent': user_agent,
            'total': subscriber_details.get('total_subscriptions'),
            'reactivated': subscriber_details.get('reactivated', False),
        }

    def _get_admin_subscriber_text(self, subscriber_details: Dict[str, Any]) -> str:
        f = self._admin_fields(subscriber_details)
        total_line = f"Active Subscribers: {f['total']}\n" if f['total'] is not None else ''
        return f"""
{'RETURNING' if f['reactivated'] else 'NEW'} {self.brand_name.upper()} WAITLIST SUBSCRIPTION

Subscriber Details:
- Email: {f['email']}
- Subscribed: {f['subscribed_at']}
- Source: {f['source']}

Technical Details:
- IP Address: {f['ip_address']}
- User Agent: {f['user_agent']}

{total_line}
Recommended actions:
- Add to email marketing list
- Consider early bird promotions for launch

---
{self.brand_name} - Coming Soon
        """

    def _get_admin_subscriber_template(self, subscriber_details: Dict[str, Any]) -> str:
        """Get admin subscriber alert HTML template"""
        f = {k: escape(v) if isinstance(v, str) else v
             for k, v in self._admin_fields(subscriber_details).items()}
        badge = 'Returning Subscriber' if f['reactivated'] else 'New Subscriber Alert'
        stats_html = f"""
            <div style="background-color: #ecfdf5; border: 1px solid #d1fae5; border-radius: 8px; padding: 20px; margin: 20px 0; text-align: center;">
                <div style="font-size: 32px; font-weight: bold; color: #059669; margin-bottom: 5px;">{f['total']}</div>
                <div style="color: #047857; font-size: 14px; text-transform: uppercase; letter-spacing: 0.5px;">Active Subscribers</div>
            </div>
        """ if f['total'] is not None else ''

        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>New Waitlist Subscription</title>
</head>
<body style="font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; margin: 0; padding: 0; background-color: #f8fafc;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; overflow: hidden;">
        <div style="background: linear-gradient(135deg, #ff6b6b, #43d9ad); padding: 30px; text-align: center;">
            <h1 style="color: #ffffff; margin: 0; font-size: 24px;">Waitlist Subscription</h1>
        </div>

        <div style="padding: 30px;">
            <div style="display: inline-block; background-color: #ff6b6b; color: white; padding: 8px 16px; border-radius: 20px; font-size: 14px; font-weight: 600; margin-bottom: 20px;">{badge}</div>

            <div style="background-color: #f1f5f9; border-left: 4px solid #ff6b6b; padding: 20px; margin: 20px 0; border-radius: 4px;">
                <p style="font-size: 18px; font-weight: 600; color: #1e293b; margin: 0 0 8px 0;">{f['email']}</p>
                <p style="color: #64748b; font-size: 14px; margin: 0;">Subscribed on: {f['subscribed_at']}</p>
                <p style="color: #64748b; font-size: 14px; margin: 0;">Source: {f['source']}</p>
            </div>

            {stats_html}

            <div style="background: #e9ecef; padding: 20px; border-radius: 5px; margin: 20px 0;">
                <h3 style="margin-top: 0;">Technical Details:</h3>
                <p><strong>IP Address:</strong> {f['ip_address']}</p>
                <p><strong>User Agent:</strong> {f['user_agent']}</p>
            </div>
        </div>

        <div style="background-color: #1e293b; color: #94a3b8; padding: 20px; text-align: center; font-size: 14px;">
            <strong style="color: #ffffff;">{self.brand_name}</strong> - Coming Soon
        </div>
    </div>
</body>
</html>
        """
