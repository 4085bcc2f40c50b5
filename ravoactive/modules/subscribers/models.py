import enum

from ravoactive.core.database import db, utcnow
from ravoactive.core.exceptions import ValidationError

UNKNOWN = 'unknown'


class SubscriptionStatus(enum.Enum):
    ACTIVE = 'ACTIVE'
    UNSUBSCRIBED = 'UNSUBSCRIBED'

    @classmethod
    def parse(cls, value, default=None):
        """Case-insensitive parse of a query-string value"""
        if value is None or str(value).strip() == '':
            if default is None:
                raise ValidationError('Status is required')
            return default
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            allowed = ', '.join(s.value for s in cls)
            raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}") from None


class Subscription(db.Model):
    """A waitlist subscription, one row per normalized email address"""
    __tablename__ = 'subscriptions'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    status = db.Column(
        db.Enum(SubscriptionStatus, name='subscription_status'),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
        index=True,
    )
    # Most recent activation, not the first one
    subscribed_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    ip_address = db.Column(db.String(45), nullable=False, default=UNKNOWN)
    user_agent = db.Column(db.String(500), nullable=False, default=UNKNOWN)
    source = db.Column(db.String(50), nullable=False, default=UNKNOWN)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_active(self):
        return self.status is SubscriptionStatus.ACTIVE

    def reactivate(self):
        self.status = SubscriptionStatus.ACTIVE
        self.subscribed_at = max(utcnow(), self.subscribed_at or utcnow())

    def unsubscribe(self):
        self.status = SubscriptionStatus.UNSUBSCRIBED

    def to_summary(self):
        return {
            'id': self.id,
            'email': self.email,
            'subscribedAt': self.subscribed_at.isoformat() + 'Z',
            'status': self.status.value,
            'source': self.source,
        }

    def __repr__(self):
        return f"<Subscription {self.email} {self.status.value}>"
