"""
RavoActive Waitlist Server
==========================

Run with:
    python app.py

Endpoints (default WAITLIST_URL_PREFIX of /api):
    POST /api/subscribe                   - Join the waitlist
    POST /api/unsubscribe                 - Leave the waitlist
    GET  /api/subscriptions               - Dashboard listing
    GET  /admin/email-preview/welcome     - Welcome email preview
    GET  /admin/email-preview/admin-alert - Admin alert preview
"""

from ravoactive import create_app
from ravoactive.core.config import Config

app = create_app()


if __name__ == '__main__':
    prefix = app.config['WAITLIST_URL_PREFIX']
    print("\n" + "=" * 60)
    print("RavoActive Waitlist")
    print("=" * 60)
    print(f"Subscribe:       http://localhost:{Config.port}{prefix}/subscribe")
    print(f"Subscriptions:   http://localhost:{Config.port}{prefix}/subscriptions")
    print(f"Email previews:  http://localhost:{Config.port}/admin/email-preview/welcome")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
