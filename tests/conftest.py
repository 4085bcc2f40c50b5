"""
Shared fixtures for the RavoActive test-suite.

Every test gets a fresh SQLite file, notifications run inline
(NOTIFICATIONS_EAGER) and no real email provider is configured.
"""

import os
import shutil
import tempfile

import pytest

from ravoactive import create_app
from ravoactive.core.database import db
from ravoactive.core.exceptions import NotificationDeliveryError
from ravoactive.modules.email.dispatcher import NotificationDispatcher
from ravoactive.modules.email.providers import EmailProvider

ADMIN_EMAIL = "alerts@ravoactive.test"


class RecordingProvider(EmailProvider):
    """In-memory provider; fail=True makes every send raise"""

    def __init__(self, name="recording", fail=False, configured=True):
        super().__init__(sender_address="noreply@ravoactive.test")
        self.name = name
        self.fail = fail
        self.configured = configured
        self.sent = []
        self.attempts = 0

    @property
    def is_configured(self):
        return self.configured

    def send(self, recipient, subject, html_body, text_body):
        self.attempts += 1
        if self.fail:
            raise NotificationDeliveryError(self.name, "simulated outage")
        self.sent.append({
            "to": recipient,
            "subject": subject,
            "html": html_body,
            "text": text_body,
        })
        return f"{self.name}-{len(self.sent)}"


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="ravoactive-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Fully initialised Flask app with every waitlist module registered."""
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DB_DIR": tmp_db_dir,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///" + os.path.join(tmp_db_dir, "waitlist.db"),
        "NOTIFICATIONS_EAGER": True,
        "EMAIL_PROVIDERS": {},
        "EMAIL_ADMIN_EMAIL": ADMIN_EMAIL,
        "EMAIL_TIMEZONE": "America/Toronto",
        "ADMIN_API_KEY": None,
        "WAITLIST_URL_PREFIX": "/api",
        "CORS_ORIGINS": ["http://localhost:3000"],
    })
    yield app

    app.extensions["ravoactive"].notification_runner.shutdown()
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def provider(app):
    """A working provider installed as the only delivery backend."""
    recording = RecordingProvider()
    app.extensions["ravoactive"].email_service.dispatcher = NotificationDispatcher([recording])
    return recording
