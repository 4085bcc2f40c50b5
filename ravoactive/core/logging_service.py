"""
Centralized logging service for the RavoActive waitlist.
Provides structured logging with database storage alongside the standard
module loggers.
"""

import json
import logging
import traceback
from datetime import timedelta

from flask import request, has_request_context, has_app_context
from sqlalchemy import insert, delete

from .database import db, utcnow

logger = logging.getLogger(__name__)


class AppLog(db.Model):
    __tablename__ = 'app_logs'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    level = db.Column(db.String(10), nullable=False, index=True)
    source = db.Column(db.String(50), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(45))
    user_agent = db.Column(db.String(500))
    request_path = db.Column(db.String(255))


class LoggingService:
    """Persists significant events to app_logs, falling back to stdout"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')[:500]
        return ip_address, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (subscribers, email, ...)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        if not has_app_context():
            print(f"[{utcnow().isoformat()}] [{level.upper()}] [{source}] {message}")
            return

        ip_address, user_agent, request_path = LoggingService._get_request_context()

        try:
            # Own connection, so an open ORM transaction is never committed by a log write
            with db.engine.begin() as conn:
                conn.execute(insert(AppLog).values(
                    timestamp=utcnow(),
                    level=level.upper(),
                    source=source,
                    message=message,
                    details=details,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    request_path=request_path,
                ))
        except Exception as e:
            print(f"[{utcnow().isoformat()}] [{level.upper()}] [{source}] {message}")
            if details:
                print(f"Details: {details}")
            print(f"Logging service error: {e}")

    @staticmethod
    def info(source, message, details=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        cutoff = utcnow() - timedelta(days=days_to_keep)
        try:
            with db.engine.begin() as conn:
                result = conn.execute(delete(AppLog).where(AppLog.timestamp < cutoff))
            deleted_count = result.rowcount
            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
            return deleted_count
        except Exception as e:
            logger.error(f"Failed to cleanup old logs: {e}")
            return 0


def db_log(level, source, message, details=None):
    """Shortcut used by the modules for persistent logging"""
    LoggingService.log(level, source, message, details)
