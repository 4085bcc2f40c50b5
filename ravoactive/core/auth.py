import hmac
from functools import wraps

from flask import current_app, jsonify, request


def require_admin_key(f):
    """Decorator to require the dashboard API key when ADMIN_API_KEY is set"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get('ADMIN_API_KEY')
        if not expected:
            return f(*args, **kwargs)

        api_key = request.headers.get('X-API-Key')
        if not api_key:
            return jsonify({
                'error': 'API key required',
                'message': 'Include X-API-Key header with your request'
            }), 401

        if not hmac.compare_digest(api_key.encode(), expected.encode()):
            return jsonify({
                'error': 'Invalid API key',
                'message': 'The provided API key is invalid'
            }), 401

        return f(*args, **kwargs)

    return decorated_function
