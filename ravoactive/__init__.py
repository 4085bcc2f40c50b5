"""
RavoActive - Coming Soon Waitlist Service
=========================================

Flask extension behind the RavoActive pre-launch site:
- Waitlist intake with reactivation of returning subscribers
- Admin alert and welcome emails (Resend first, SMTP fallback), sent in the background
- Paginated subscriptions listing with status analytics for the dashboard

Usage:
    from ravoactive import RavoActive

    app = Flask(__name__)
    RavoActive(app)

or simply:
    from ravoactive import create_app
    app = create_app()
"""

import logging

from flask import Flask
from flask_cors import CORS

from .core.config import Config
from .core.database import init_database
from .modules.email import EmailService, NotificationRunner, email_preview_bp
from .modules.subscribers import subscribers_bp

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'subscribers': True,
    'email_preview': True,
}


class RavoActive:
    """Registers the waitlist modules and shared services on a Flask app"""

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered = []
        self.email_service = None
        self.notification_runner = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        # Explicit app.config wins over environment defaults
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))

        logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

        init_database(app)

        self.email_service = EmailService(app)
        self.notification_runner = NotificationRunner(app)

        self._register_blueprints(app)

        app.extensions['ravoactive'] = self
        logger.info(f"RavoActive initialised with modules: {', '.join(self._registered)}")

    def _feature_enabled(self, name):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        return features.get(name, False)

    def _register_blueprints(self, app):
        prefix = (app.config.get('WAITLIST_URL_PREFIX') or '').rstrip('/')

        if self._feature_enabled('subscribers'):
            app.register_blueprint(subscribers_bp, url_prefix=prefix or None)
            CORS(app, resources={f"{prefix}/*": {"origins": app.config.get('CORS_ORIGINS', [])}})
            self._registered.append('subscribers')

        if self._feature_enabled('email_preview'):
            app.register_blueprint(email_preview_bp)
            self._registered.append('email_preview')

    def get_registered_modules(self):
        return list(self._registered)


def create_app(config=None):
    """Application factory. `config` entries override environment settings."""
    app = Flask(__name__)
    if config:
        app.config.from_mapping(config)

    RavoActive(app)
    return app


__all__ = ['RavoActive', 'create_app', 'Config']
