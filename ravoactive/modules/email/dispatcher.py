"""
Notification Dispatcher
=======================

Sends one message through the configured providers in role order
(primary, then secondary). A provider that is not configured is skipped;
a provider that fails for any reason hands over to the next one.
The result is a plain bool - callers never see an exception.
"""

import logging

from ravoactive.core.exceptions import NotificationDeliveryError
from .providers import build_provider

logger = logging.getLogger(__name__)

ROLE_ORDER = ('primary', 'secondary')


class NotificationDispatcher:

    def __init__(self, providers=None):
        self.providers = list(providers or [])

    @classmethod
    def from_config(cls, provider_config):
        """Build from a mapping keyed by role, e.g. app.config['EMAIL_PROVIDERS']"""
        provider_config = provider_config or {}
        unknown = set(provider_config) - set(ROLE_ORDER)
        if unknown:
            raise ValueError(f"Unknown email provider role(s): {', '.join(sorted(unknown))}")

        providers = [
            build_provider(provider_config[role])
            for role in ROLE_ORDER
            if provider_config.get(role)
        ]
        return cls(providers)

    @property
    def is_configured(self):
        return any(p.is_configured for p in self.providers)

    def send(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Deliver a single message.

        Returns:
            bool: True once a provider confirms delivery, False if none is
            configured or every attempt failed
        """
        attempted = False
        for provider in self.providers:
            if not provider.is_configured:
                logger.info(f"Email provider '{provider.name}' not configured - skipping")
                continue

            attempted = True
            try:
                provider.send(to, subject, html_body, text_body)
            except NotificationDeliveryError as e:
                logger.warning(f"Delivery to {to} failed via {provider.name}: {e}")
                continue
            except Exception as e:
                logger.error(f"Unexpected {type(e).__name__} from {provider.name} sending to {to}: {e}")
                continue

            logger.info(f"Email '{subject}' delivered to {to} via {provider.name}")
            return True

        if not attempted:
            logger.warning(f"No email provider configured - '{subject}' to {to} not sent")
        else:
            logger.error(f"All email providers failed for '{subject}' to {to}")
        return False
