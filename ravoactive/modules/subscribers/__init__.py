"""
Subscribers Module
==================

Provides:
- Public API for joining and leaving the waitlist
- Paginated subscriptions listing with status analytics for the dashboard
- Service functions for other modules (subscribe, list_subscriptions,
  count_active_subscriptions)

The blueprint has no url_prefix of its own; the extension mounts it under
WAITLIST_URL_PREFIX (default '/api').
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__)

from . import routes  # noqa: E402,F401
