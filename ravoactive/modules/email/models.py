from ravoactive.core.database import db, utcnow


class EmailLog(db.Model):
    """One row per attempted send"""
    __tablename__ = 'email_logs'

    id = db.Column(db.Integer, primary_key=True)
    recipient = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    email_type = db.Column(db.String(50))
    status = db.Column(db.String(20), nullable=False)
    error_message = db.Column(db.Text)
    sent_at = db.Column(db.DateTime, nullable=False, default=utcnow)
