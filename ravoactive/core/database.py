# Database setup using Flask-SQLAlchemy.
#
# Local development uses a SQLite file under DB_DIR. Set DATABASE_URL to point
# at Postgres (or any SQLAlchemy URL) in production.

import os
import logging
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def utcnow():
    """Naive UTC timestamp, the form SQLite hands back on read"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_database(app):
    """Bind the SQLAlchemy instance to the app and create missing tables."""
    uri = app.config['SQLALCHEMY_DATABASE_URI']

    if uri.startswith('sqlite'):
        # Notification jobs write email logs from worker threads
        options = app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {})
        options.setdefault('connect_args', {}).setdefault('check_same_thread', False)

        if uri.startswith('sqlite:///') and ':memory:' not in uri:
            db_dir = os.path.dirname(uri[len('sqlite:///'):])
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

    db.init_app(app)

    # Models must be imported before create_all() so their tables are registered
    from ravoactive.core.logging_service import AppLog  # noqa: F401
    from ravoactive.modules.email.models import EmailLog  # noqa: F401
    from ravoactive.modules.subscribers.models import Subscription  # noqa: F401

    with app.app_context():
        db.create_all()
        logger.info(f"Tables created/verified: {', '.join(sorted(db.metadata.tables))}")
