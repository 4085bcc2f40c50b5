"""
Email Service Tests
===================

Templates, email logging, timestamps, preview routes and persistent log
maintenance.
Run with: pytest tests/test_email_service.py -v
"""

from datetime import datetime, timedelta

from sqlalchemy import select

from ravoactive.core.database import db, utcnow
from ravoactive.core.logging_service import AppLog, LoggingService
from ravoactive.modules.email.dispatcher import NotificationDispatcher
from ravoactive.modules.email.email_service import EmailService
from ravoactive.modules.email.models import EmailLog

from conftest import RecordingProvider

SUBSCRIBER = {
    "email": "fan@example.com",
    "subscribed_at": datetime(2024, 1, 15, 17, 0, 0),
    "ip_address": "203.0.113.9",
    "user_agent": "Mozilla/5.0 <script>alert(1)</script>",
    "source": "coming-soon",
    "total_subscriptions": 42,
    "reactivated": False,
}


def _email_service(app):
    return app.extensions["ravoactive"].email_service


# ---------------------------------------------------------------------------
# 1. Templates -- both bodies, branding and escaping
# ---------------------------------------------------------------------------

def test_welcome_bodies(app):
    """Welcome email has branded HTML and text with an unsubscribe link."""
    svc = _email_service(app)

    html = svc._get_welcome_template("fan+tag@example.com")
    text = svc._get_welcome_text("fan+tag@example.com")

    assert "Welcome to RavoActive!" in html
    assert "Early Access" in html and "Early Access" in text
    assert "unsubscribe?email=fan%2Btag%40example.com" in text
    assert "<" not in text


def test_admin_alert_escapes_visitor_data(app):
    """User agent and other visitor-supplied fields are escaped in HTML."""
    html = _email_service(app)._get_admin_subscriber_template(SUBSCRIBER)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "fan@example.com" in html
    assert ">42<" in html
    assert "New Subscriber Alert" in html


def test_admin_alert_text_mentions_returning(app):
    """A reactivated subscriber is flagged in the alert."""
    text = _email_service(app)._get_admin_subscriber_text(dict(SUBSCRIBER, reactivated=True))

    assert "RETURNING" in text
    assert "Active Subscribers: 42" in text


def test_timestamp_uses_configured_timezone(app):
    """Naive UTC values are rendered in EMAIL_TIMEZONE."""
    svc = _email_service(app)

    assert svc.format_timestamp(datetime(2024, 1, 15, 17, 0, 0)) == "January 15, 2024 at 12:00:00 PM EST"


def test_unknown_timezone_falls_back_to_utc(app):
    """A bad EMAIL_TIMEZONE does not break start-up."""
    app.config["EMAIL_TIMEZONE"] = "Mars/Olympus_Mons"
    svc = EmailService(app)

    assert svc.format_timestamp(datetime(2024, 1, 15, 17, 0, 0)).endswith("05:00:00 PM UTC")


# ---------------------------------------------------------------------------
# 2. Sending -- validation and email_logs rows
# ---------------------------------------------------------------------------

def test_send_email_logs_outcome(app, provider):
    """Delivered messages are logged as sent with their type."""
    assert _email_service(app).send_welcome_email("fan@example.com") is True

    row = db.session.execute(select(EmailLog)).scalar_one()
    assert row.recipient == "fan@example.com"
    assert row.email_type == "welcome"
    assert row.status == "sent"


def test_send_email_without_provider_logs_failure(app):
    """With no provider configured the attempt is logged as failed."""
    assert _email_service(app).send_welcome_email("fan@example.com") is False

    row = db.session.execute(select(EmailLog)).scalar_one()
    assert row.status == "failed"
    assert row.error_message


def test_send_email_logs_failure_on_unexpected_provider_error(app):
    """A provider crashing with a non-delivery error is still logged as failed."""
    class CrashingProvider(RecordingProvider):
        def send(self, recipient, subject, html_body, text_body):
            raise UnicodeEncodeError("ascii", "pässwörd", 1, 2, "ordinal not in range(128)")

    svc = _email_service(app)
    svc.dispatcher = NotificationDispatcher([CrashingProvider("primary")])

    assert svc.send_welcome_email("fan@example.com") is False

    row = db.session.execute(select(EmailLog)).scalar_one()
    assert row.status == "failed"


def test_send_email_rejects_invalid_recipient(app, provider):
    """Invalid recipients are skipped before reaching a provider."""
    assert _email_service(app).send_email("nope", "Hi", "<p>Hi</p>", "Hi") is False
    assert provider.attempts == 0


def test_admin_alert_skipped_without_admin_mailbox(app, provider):
    """No EMAIL_ADMIN_EMAIL means no alert and no send attempt."""
    svc = _email_service(app)
    svc.admin_email = None

    assert svc.send_admin_subscriber_notification(SUBSCRIBER) is False
    assert provider.attempts == 0


# ---------------------------------------------------------------------------
# 3. Preview routes
# ---------------------------------------------------------------------------

def test_welcome_preview(client):
    """HTML by default, plain text with ?format=text."""
    html = client.get("/admin/email-preview/welcome?email=preview@example.com")
    assert html.status_code == 200
    assert html.mimetype == "text/html"
    assert b"Welcome to RavoActive" in html.data

    text = client.get("/admin/email-preview/welcome?format=text")
    assert text.mimetype == "text/plain"
    assert b"WELCOME TO RAVOACTIVE" in text.data


def test_admin_alert_preview(client):
    """The alert preview renders sample data, optionally as returning."""
    response = client.get("/admin/email-preview/admin-alert?reactivated=1")

    assert response.status_code == 200
    assert b"Returning Subscriber" in response.data


def test_previews_guarded_by_api_key(app, client):
    """Previews follow ADMIN_API_KEY like the dashboard listing."""
    app.config["ADMIN_API_KEY"] = "dashboard-secret"

    assert client.get("/admin/email-preview/welcome").status_code == 401
    assert client.get(
        "/admin/email-preview/welcome", headers={"X-API-Key": "dashboard-secret"}
    ).status_code == 200


# ---------------------------------------------------------------------------
# 4. Persistent log maintenance
# ---------------------------------------------------------------------------

def test_cleanup_old_logs(app):
    """Entries older than the retention window are deleted."""
    db.session.add_all([
        AppLog(level="INFO", source="test", message="ancient", timestamp=utcnow() - timedelta(days=45)),
        AppLog(level="INFO", source="test", message="recent", timestamp=utcnow() - timedelta(days=2)),
    ])
    db.session.commit()

    assert LoggingService.cleanup_old_logs(days_to_keep=30) == 1

    messages = db.session.execute(
        select(AppLog.message).where(AppLog.source == "test")
    ).scalars().all()
    assert messages == ["recent"]
