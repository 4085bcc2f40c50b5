"""
Subscribers Routes
==================

Provides:
- POST /subscribe -- join the waitlist (new or returning subscriber)
- POST /unsubscribe -- leave the waitlist
- GET /subscriptions -- paginated listing for the dashboard (API key when configured)
"""

import logging
from flask import request, jsonify
from . import subscribers_bp
from . import service
from ravoactive.core.auth import require_admin_key
from ravoactive.core.exceptions import (
    DuplicateSubscriptionError,
    PersistenceError,
    QueryError,
    ValidationError,
)
from ravoactive.core.logging_service import LoggingService

# Setup logging
logger = logging.getLogger(__name__)

GENERIC_ERROR = 'Something went wrong. Please try again.'


def get_client_ip():
    """Get client IP address from request"""
    if request.headers.get('X-Forwarded-For'):
        return request.headers.get('X-Forwarded-For').split(',')[0].strip()
    elif request.headers.get('X-Real-IP'):
        return request.headers.get('X-Real-IP')
    else:
        return request.remote_addr


# ===================
# PUBLIC API ROUTES
# ===================

@subscribers_bp.route('/subscribe', methods=['POST'])
def subscribe():
    """Handle waitlist subscription requests"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        result = service.subscribe(
            data.get('email'),
            ip_address=get_client_ip(),
            user_agent=request.headers.get('User-Agent'),
            source=data.get('source'),
        )
    except (ValidationError, DuplicateSubscriptionError) as e:
        return jsonify({'error': str(e)}), 400
    except PersistenceError:
        return jsonify({'error': GENERIC_ERROR}), 500
    except Exception as e:
        logger.error(f"Error in subscribe: {e}")
        LoggingService.log_error_with_traceback('subscribers', e)
        return jsonify({'error': GENERIC_ERROR}), 500

    if result.reactivated:
        message = 'Welcome back! Your subscription has been reactivated.'
    else:
        message = 'Thank you for subscribing! Check your email for confirmation.'

    return jsonify({
        'success': True,
        'message': message,
        'totalSubscriptions': result.total_subscriptions,
        'reactivated': result.reactivated,
    }), 200


@subscribers_bp.route('/unsubscribe', methods=['POST'])
def unsubscribe():
    """Handle unsubscribe requests"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        removed = service.unsubscribe(data.get('email'))
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except PersistenceError:
        return jsonify({'error': GENERIC_ERROR}), 500
    except Exception as e:
        logger.error(f"Error in unsubscribe: {e}")
        LoggingService.log_error_with_traceback('subscribers', e)
        return jsonify({'error': GENERIC_ERROR}), 500

    if not removed:
        return jsonify({'error': 'Email address not found in our waitlist.'}), 404

    return jsonify({
        'success': True,
        'message': 'You have been removed from the waitlist.'
    }), 200


# ===================
# DASHBOARD
# ===================

@subscribers_bp.route('/subscriptions', methods=['GET'])
@require_admin_key
def list_subscriptions():
    """Paginated subscriptions with per-status analytics"""
    try:
        payload = service.list_subscriptions(
            page=request.args.get('page'),
            limit=request.args.get('limit'),
            status=request.args.get('status'),
        )
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except QueryError:
        return jsonify({'error': 'Failed to fetch subscriptions'}), 500
    except Exception as e:
        logger.error(f"Error fetching subscriptions: {e}")
        LoggingService.log_error_with_traceback('subscribers', e)
        return jsonify({'error': 'Failed to fetch subscriptions'}), 500

    return jsonify(payload), 200
