"""
Exceptions raised by the waitlist services.

Client errors (ValidationError, DuplicateSubscriptionError) carry a message
that is safe to show to the visitor. Storage errors are reported as a generic
500 by the routes. NotificationDeliveryError never leaves the email module.
"""


class RavoActiveError(Exception):
    """Base class for all service errors"""


class ValidationError(RavoActiveError):
    """Bad input from the caller (HTTP 400)"""


class DuplicateSubscriptionError(RavoActiveError):
    """The email is already an active subscriber (HTTP 400)"""


class PersistenceError(RavoActiveError):
    """Unexpected storage fault while writing (HTTP 500)"""


class QueryError(RavoActiveError):
    """Unexpected storage fault while reading (HTTP 500)"""


class NotificationDeliveryError(RavoActiveError):
    """A provider failed to deliver a message"""

    def __init__(self, provider, message):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
