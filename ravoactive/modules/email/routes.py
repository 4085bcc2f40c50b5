"""
Email Preview Routes
====================

Blueprint for previewing the waitlist email templates with sample data.
Access at /admin/email-preview/ when registered. Add ?format=text to see the
plain-text body instead of the HTML one.
"""

from flask import Blueprint, Response, current_app, request

from ravoactive.core.auth import require_admin_key
from ravoactive.core.database import utcnow

email_preview_bp = Blueprint(
    'email_preview',
    __name__,
    url_prefix='/admin/email-preview'
)


def get_email_service():
    """Get the email service bound to the current app"""
    return current_app.extensions['ravoactive'].email_service


def _render(html_body, text_body):
    if request.args.get('format') == 'text':
        return Response(text_body, mimetype='text/plain')
    return Response(html_body, mimetype='text/html')


@email_preview_bp.route('/welcome')
@require_admin_key
def preview_welcome():
    """Preview welcome email template"""
    email_service = get_email_service()
    sample_email = request.args.get('email', 'newfan@example.com')
    return _render(
        email_service._get_welcome_template(sample_email),
        email_service._get_welcome_text(sample_email),
    )


@email_preview_bp.route('/admin-alert')
@require_admin_key
def preview_admin_alert():
    """Preview admin subscriber alert template"""
    email_service = get_email_service()

    sample_subscriber_details = {
        'email': 'newfan@example.com',
        'subscribed_at': utcnow(),
        'ip_address': '192.168.1.100',
        'user_agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36',
        'source': 'coming-soon',
        'total_subscriptions': 128,
        'reactivated': request.args.get('reactivated') == '1',
    }

    return _render(
        email_service._get_admin_subscriber_template(sample_subscriber_details),
        email_service._get_admin_subscriber_text(sample_subscriber_details),
    )
