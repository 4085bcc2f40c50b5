import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for the RavoActive waitlist service.
    Values come from the environment (or a .env file); anything already set
    in app.config takes precedence when the extension is initialised.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL', 'sqlite:///' + os.path.join(DB_DIR, 'waitlist.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Resend API settings (primary provider)
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')
    EMAIL_FROM = os.getenv('EMAIL_FROM', 'RavoActive <noreply@ravoactive.com>')

    # Gmail SMTP settings (fallback provider) - needs an app password, not the account password
    EMAIL_USER = os.getenv('EMAIL_USER')
    EMAIL_APP_PASSWORD = os.getenv('EMAIL_APP_PASSWORD')
    EMAIL_HOST = os.getenv('EMAIL_HOST', 'smtp.gmail.com')
    EMAIL_PORT = int(os.getenv('EMAIL_PORT', '587'))

    # Fixed operational mailbox for new-subscriber alerts
    EMAIL_ADMIN_EMAIL = os.getenv('EMAIL_ADMIN_EMAIL', 'waitlist@ravoactive.com')

    EMAIL_PROVIDERS = {
        'primary': {
            'transport': 'resend',
            'credentials': {'api_key': RESEND_API_KEY},
            'sender_address': EMAIL_FROM,
        },
        'secondary': {
            'transport': 'smtp',
            'credentials': {'username': EMAIL_USER, 'password': EMAIL_APP_PASSWORD},
            'sender_address': EMAIL_USER or EMAIL_FROM,
            'options': {'host': EMAIL_HOST, 'port': EMAIL_PORT},
        },
    }

    # Branding
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', 'RavoActive')
    EMAIL_BRAND_TAGLINE = os.getenv(
        'EMAIL_BRAND_TAGLINE', 'Premium activewear for athletes who demand excellence'
    )
    EMAIL_WEBSITE_URL = os.getenv('BASE_URL', 'https://ravoactive.com')
    EMAIL_TIMEZONE = os.getenv('EMAIL_TIMEZONE', 'America/Toronto')

    # Dashboard access - leave unset to keep the listing endpoint open
    ADMIN_API_KEY = os.getenv('ADMIN_API_KEY')

    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGIN', 'http://localhost:3000').split(',') if o.strip()]
    WAITLIST_URL_PREFIX = os.getenv('WAITLIST_URL_PREFIX', '/api')

    # Notification jobs
    NOTIFICATIONS_EAGER = os.getenv('NOTIFICATIONS_EAGER', '0') == '1'
    NOTIFICATION_WORKERS = int(os.getenv('NOTIFICATION_WORKERS', '2'))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Port for local server
    port = int(os.getenv('PORT', '5000'))
