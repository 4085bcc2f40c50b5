"""
Subscription Service
====================

Waitlist intake, unsubscribe and the paginated dashboard listing. Routes call
these functions and translate the exceptions they raise into HTTP responses.

Exported:
- subscribe(email, ip_address=None, user_agent=None, source=None) -> IntakeResult
- unsubscribe(email) -> bool
- list_subscriptions(page=1, limit=10, status=None) -> dict
- count_active_subscriptions() -> int
- normalize_email(email) -> str
"""

import logging
from dataclasses import dataclass

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ravoactive.core.database import db
from ravoactive.core.exceptions import (
    DuplicateSubscriptionError,
    PersistenceError,
    QueryError,
    ValidationError,
)
from ravoactive.core.logging_service import LoggingService, db_log
from ravoactive.modules.email.email_service import EMAIL_REGEX
from .models import UNKNOWN, Subscription, SubscriptionStatus

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

logger = logging.getLogger(__name__)


@dataclass
class IntakeResult:
    subscription: Subscription
    reactivated: bool
    total_subscriptions: int


def normalize_email(email):
    """Trim, lower-case and validate an address, raising ValidationError"""
    if email is None or (isinstance(email, str) and not email.strip()):
        raise ValidationError('Email address is required')
    if not isinstance(email, str):
        raise ValidationError('Please provide a valid email address')

    email = email.strip().lower()
    if len(email) > 255 or not EMAIL_REGEX.match(email):
        raise ValidationError('Please provide a valid email address')
    return email


def _provenance(value, max_length):
    if value is None:
        return UNKNOWN
    value = str(value).strip()
    return value[:max_length] if value else UNKNOWN


def _find_subscription(email):
    return db.session.execute(
        select(Subscription).where(Subscription.email == email)
    ).scalar_one_or_none()


def count_active_subscriptions():
    return db.session.execute(
        select(func.count(Subscription.id)).where(Subscription.status == SubscriptionStatus.ACTIVE)
    ).scalar_one()


# ===================
# INTAKE
# ===================

def _reactivate_or_reject(subscription):
    if subscription.is_active:
        raise DuplicateSubscriptionError('This email is already on the waitlist')
    subscription.reactivate()
    db.session.commit()
    return subscription


def _create_or_reactivate(email, ip_address, user_agent, source):
    """Returns (subscription, reactivated)"""
    existing = _find_subscription(email)
    if existing is not None:
        return _reactivate_or_reject(existing), True

    subscription = Subscription(
        email=email,
        status=SubscriptionStatus.ACTIVE,
        ip_address=ip_address,
        user_agent=user_agent,
        source=source,
    )
    db.session.add(subscription)
    try:
        db.session.commit()
        return subscription, False
    except IntegrityError:
        # A concurrent request inserted the same address first
        db.session.rollback()
        logger.info(f"Concurrent intake for {email} - resolving against stored row")
        existing = _find_subscription(email)
        if existing is None:
            raise
        return _reactivate_or_reject(existing), True


def subscribe(email, ip_address=None, user_agent=None, source=None, notify=True):
    """
    Add an address to the waitlist.

    Creates a new ACTIVE subscription, or reactivates an UNSUBSCRIBED one.
    Raises ValidationError for bad input, DuplicateSubscriptionError when
    the address is already active and PersistenceError on storage faults.
    Notifications are handed to the background runner and never affect the
    result.
    """
    email = normalize_email(email)
    ip_address = _provenance(ip_address, 45)
    user_agent = _provenance(user_agent, 500)
    source = _provenance(source, 50)

    try:
        subscription, reactivated = _create_or_reactivate(email, ip_address, user_agent, source)
        total = count_active_subscriptions()
    except DuplicateSubscriptionError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Database error in subscribe for {email}: {e}")
        db_log('error', 'subscribers', 'Database error in subscribe', {'email': email, 'error': str(e)})
        raise PersistenceError('Could not save subscription') from e

    if reactivated:
        logger.info(f"Reactivated subscription for: {email}")
        db_log('info', 'subscribers', f'Reactivated subscriber: {email}', {'total': total})
    else:
        logger.info(f"New subscription added: {email}")
        db_log('info', 'subscribers', f'New subscriber: {email}', {'ip': ip_address, 'total': total})

    if notify:
        _schedule_notifications({
            'email': subscription.email,
            'subscribed_at': subscription.subscribed_at,
            'ip_address': subscription.ip_address,
            'user_agent': subscription.user_agent,
            'source': subscription.source,
            'total_subscriptions': total,
            'reactivated': reactivated,
        })

    return IntakeResult(subscription=subscription, reactivated=reactivated, total_subscriptions=total)


def _schedule_notifications(subscriber_details):
    """Hand the admin alert and welcome email to the background runner"""
    runner = current_app.extensions['ravoactive'].notification_runner
    try:
        runner.submit(send_subscriber_notifications, subscriber_details)
    except RuntimeError as e:
        # Executor already shut down (app stopping)
        logger.error(f"Could not schedule notifications for {subscriber_details['email']}: {e}")
        db_log('error', 'subscribers', 'Notification scheduling failed',
               {'email': subscriber_details['email'], 'error': str(e)})


def send_subscriber_notifications(subscriber_details):
    """
    Background job: admin alert, then welcome email.

    Returns a dict of per-message outcomes, e.g.
    {'admin_alert': True, 'welcome': False}
    """
    email_service = current_app.extensions['ravoactive'].email_service
    email = subscriber_details['email']
    results = {}

    for name, send in (
        ('admin_alert', lambda: email_service.send_admin_subscriber_notification(subscriber_details)),
        ('welcome', lambda: email_service.send_welcome_email(email)),
    ):
        try:
            results[name] = send()
        except Exception as e:
            logger.error(f"Failed to send {name} for {email}: {e}")
            results[name] = False

        if not results[name]:
            LoggingService.warning('subscribers', f'Notification not delivered: {name}', {'email': email})

    logger.info(f"Notifications for {email}: {results}")
    return results


# ===================
# UNSUBSCRIBE
# ===================

def unsubscribe(email):
    """Mark an active subscription UNSUBSCRIBED. Returns False if none matched."""
    email = normalize_email(email)
    try:
        subscription = _find_subscription(email)
        if subscription is None or not subscription.is_active:
            return False
        subscription.unsubscribe()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Database error in unsubscribe for {email}: {e}")
        raise PersistenceError('Could not update subscription') from e

    logger.info(f"Unsubscribed: {email}")
    db_log('info', 'subscribers', f'Unsubscribed: {email}')
    return True


# ===================
# LISTING
# ===================

def _parse_positive_int(value, name, default):
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a positive integer") from None
    if number < 1:
        raise ValidationError(f"'{name}' must be a positive integer")
    return number


def list_subscriptions(page=None, limit=None, status=None):
    """
    Paginated subscriptions for the dashboard, newest activation first.

    Args:
        page: 1-based page number (default 1)
        limit: page size (default 10, capped at MAX_LIMIT)
        status: SubscriptionStatus or its name, case-insensitive (default ACTIVE)

    Returns:
        dict with 'subscriptions', 'pagination' and 'analytics' keys. The
        analytics counts cover every status, regardless of the filter.
    """
    page = _parse_positive_int(page, 'page', DEFAULT_PAGE)
    limit = min(_parse_positive_int(limit, 'limit', DEFAULT_LIMIT), MAX_LIMIT)
    if not isinstance(status, SubscriptionStatus):
        status = SubscriptionStatus.parse(status, default=SubscriptionStatus.ACTIVE)

    try:
        query = (
            select(Subscription)
            .where(Subscription.status == status)
            .order_by(Subscription.subscribed_at.desc())
        )
        pagination = db.paginate(query, page=page, per_page=limit, error_out=False)

        analytics = {s.value: 0 for s in SubscriptionStatus}
        rows = db.session.execute(
            select(Subscription.status, func.count(Subscription.id)).group_by(Subscription.status)
        ).all()
        for row_status, count in rows:
            analytics[row_status.value] = count

        subscriptions = [s.to_summary() for s in pagination.items]
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error fetching subscriptions: {e}")
        db_log('error', 'subscribers', 'Error fetching subscriptions', {'error': str(e)})
        raise QueryError('Failed to fetch subscriptions') from e

    return {
        'subscriptions': subscriptions,
        'pagination': {
            'page': page,
            'limit': limit,
            'totalCount': pagination.total,
            'totalPages': pagination.pages,
            'hasNext': page < pagination.pages,
            'hasPrev': page > 1,
        },
        'analytics': analytics,
    }
