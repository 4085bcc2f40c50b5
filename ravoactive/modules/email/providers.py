"""
Email Providers
===============

Delivery backends used by the NotificationDispatcher. Each provider is built
from an explicit config entry and raises NotificationDeliveryError when a
send fails.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

import resend

from ravoactive.core.exceptions import NotificationDeliveryError

logger = logging.getLogger(__name__)


class EmailProvider:
    """Base class for delivery backends"""

    name = 'base'

    def __init__(self, sender_address, credentials=None, options=None):
        self.sender_address = sender_address
        self.credentials = credentials or {}
        self.options = options or {}

    @property
    def is_configured(self):
        return False

    def send(self, recipient, subject, html_body, text_body):
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} configured={self.is_configured}>"


class ResendProvider(EmailProvider):
    """Transactional email through the Resend API"""

    name = 'resend'

    @property
    def api_key(self):
        return self.credentials.get('api_key')

    @property
    def is_configured(self):
        return bool(self.api_key and self.sender_address)

    def send(self, recipient, subject, html_body, text_body):
        email_params = {
            "from": self.sender_address,
            "to": [recipient],
            "subject": subject,
            "html": html_body,
            "text": text_body,
        }

        # The SDK reads its key from module state
        resend.api_key = self.api_key
        try:
            r = resend.Emails.send(email_params)
        except Exception as e:
            raise NotificationDeliveryError(self.name, str(e)) from e

        if not r or not r.get('id'):
            raise NotificationDeliveryError(self.name, f"unexpected response: {r}")

        logger.debug(f"Resend accepted email to {recipient}, ID: {r['id']}")
        return r['id']


class SMTPProvider(EmailProvider):
    """SMTP delivery with STARTTLS (Gmail app password by default)"""

    name = 'smtp'

    @property
    def username(self):
        return self.credentials.get('username')

    @property
    def password(self):
        return self.credentials.get('password')

    @property
    def is_configured(self):
        return bool(self.username and self.password)

    def send(self, recipient, subject, html_body, text_body):
        msg = MIMEMultipart('alternative')
        msg['From'] = self.sender_address or self.username
        msg['To'] = recipient
        msg['Subject'] = subject
        msg['Message-ID'] = make_msgid()

        msg.attach(MIMEText(text_body, 'plain', 'utf-8'))
        msg.attach(MIMEText(html_body, 'html', 'utf-8'))

        host = self.options.get('host', 'smtp.gmail.com')
        port = int(self.options.get('port', 587))

        try:
            with smtplib.SMTP(host, port, timeout=30) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationDeliveryError(self.name, str(e)) from e

        logger.debug(f"SMTP email sent to {recipient} via {host}:{port}")
        return msg['Message-ID']


PROVIDERS = {
    ResendProvider.name: ResendProvider,
    SMTPProvider.name: SMTPProvider,
}


def build_provider(entry):
    """Create a provider from a config entry:
    {'transport': 'resend'|'smtp', 'credentials': {...}, 'sender_address': str, 'options': {...}}
    """
    transport = (entry.get('transport') or '').lower()
    provider_cls = PROVIDERS.get(transport)
    if provider_cls is None:
        raise ValueError(f"Unknown email transport: {transport!r}")

    return provider_cls(
        sender_address=entry.get('sender_address'),
        credentials=entry.get('credentials'),
        options=entry.get('options'),
    )
