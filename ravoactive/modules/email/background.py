"""
Background execution for notification jobs.

The intake request hands a job to NotificationRunner.submit() and responds
without waiting. Listeners registered with add_listener() receive the
finished Future, which is the hook used for logging and tests.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

logger = logging.getLogger(__name__)


class NotificationRunner:

    def __init__(self, app=None):
        self.app = None
        self.eager = False
        self._executor = None
        self._listeners = []

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self.eager = bool(app.config.get('NOTIFICATIONS_EAGER', False))
        if not self.eager:
            self._executor = ThreadPoolExecutor(
                max_workers=int(app.config.get('NOTIFICATION_WORKERS', 2)),
                thread_name_prefix='ravoactive-notify',
            )
        logger.info(f"Notification runner ready (eager: {self.eager})")

    def add_listener(self, callback):
        """Register callback(future), called when any job finishes"""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        self._listeners.remove(callback)

    def submit(self, fn, *args, **kwargs) -> Future:
        """Run fn(*args, **kwargs) inside an app context, detached from the caller"""
        if self.eager:
            future = Future()
            try:
                future.set_result(self._run_in_context(fn, args, kwargs))
            except Exception as e:
                future.set_exception(e)
        else:
            future = self._executor.submit(self._run_in_context, fn, args, kwargs)

        future.add_done_callback(self._on_done)
        return future

    def _run_in_context(self, fn, args, kwargs):
        with self.app.app_context():
            return fn(*args, **kwargs)

    def _on_done(self, future):
        error = future.exception()
        if error is not None:
            logger.error(f"Notification job failed: {type(error).__name__}: {error}")

        for callback in list(self._listeners):
            try:
                callback(future)
            except Exception as e:
                logger.error(f"Notification listener {callback!r} raised: {e}")

    def shutdown(self, wait=True):
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
