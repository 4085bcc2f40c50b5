"""
RavoActive Core
===============

Configuration, database, logging and error types shared by the modules.
"""

from .config import Config
from .database import db, init_database
from .exceptions import (
    RavoActiveError,
    ValidationError,
    DuplicateSubscriptionError,
    PersistenceError,
    QueryError,
    NotificationDeliveryError,
)
from .logging_service import LoggingService, db_log

__all__ = [
    'Config', 'db', 'init_database', 'LoggingService', 'db_log',
    'RavoActiveError', 'ValidationError', 'DuplicateSubscriptionError',
    'PersistenceError', 'QueryError', 'NotificationDeliveryError',
]
