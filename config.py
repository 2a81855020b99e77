import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default='false'):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    """Base configuration shared across environments."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_key_not_for_production')
    DEBUG = False
    TESTING = False
    ENVIRONMENT = os.getenv('FLASK_ENV', 'development')
    PORT = int(os.getenv('PORT', 5000))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///submissions.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CORS
    CORS_ORIGINS = [
        origin for origin in [
            os.getenv('CORS_ORIGIN'),
            'http://localhost:3000',
            'http://localhost:5173',
        ] if origin
    ]

    # Redis / rate limiting
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    RATELIMIT_ENABLED = _env_bool('RATELIMIT_ENABLED', 'true')
    RATE_LIMIT_WINDOW_SECONDS = int(os.getenv('RATE_LIMIT_WINDOW_SECONDS', 15 * 60))
    RATE_LIMIT_MAX = int(os.getenv('RATE_LIMIT_MAX', 100))
    CONTACT_RATE_LIMIT_WINDOW_SECONDS = int(os.getenv('CONTACT_RATE_LIMIT_WINDOW_SECONDS', 60 * 60))
    CONTACT_RATE_LIMIT_MAX = int(os.getenv('CONTACT_RATE_LIMIT_MAX', 5))

    # Email
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'gmail')
    GMAIL_USER = os.getenv('GMAIL_USER')
    GMAIL_PASS = os.getenv('GMAIL_PASS')
    SENDGRID_API_KEY = os.getenv('SENDGRID_API_KEY')
    SMTP_HOST = os.getenv('SMTP_HOST')
    SMTP_PORT = int(os.getenv('SMTP_PORT', 587))
    SMTP_SECURE = _env_bool('SMTP_SECURE')
    SMTP_USER = os.getenv('SMTP_USER')
    SMTP_PASS = os.getenv('SMTP_PASS')
    SMTP_TIMEOUT = float(os.getenv('SMTP_TIMEOUT', 10))
    EMAIL_FROM = os.getenv('EMAIL_FROM', 'noreply@example.com')
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@example.com')

    # Slack
    SLACK_WEBHOOK_URL = os.getenv('SLACK_WEBHOOK_URL')
    SLACK_BOT_TOKEN = os.getenv('SLACK_BOT_TOKEN')
    SLACK_SIGNING_SECRET = os.getenv('SLACK_SIGNING_SECRET')
    SLACK_VERIFY_SIGNATURE = _env_bool('SLACK_VERIFY_SIGNATURE')
    SLACK_TIMEOUT = float(os.getenv('SLACK_TIMEOUT', 10))


class DevelopmentConfig(Config):
    """Configuration for development environment."""
    DEBUG = True
    ENVIRONMENT = 'development'


class ProductionConfig(Config):
    """Configuration for production environment."""
    SECRET_KEY = os.getenv('SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI')
    DEBUG = False
    ENVIRONMENT = 'production'


class TestingConfig(Config):
    """Configuration for the test suite: in-memory database, no outbound channels."""
    TESTING = True
    ENVIRONMENT = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    RATELIMIT_ENABLED = False
    EMAIL_PROVIDER = ''
    SLACK_WEBHOOK_URL = None
    SLACK_BOT_TOKEN = None
    SLACK_SIGNING_SECRET = 'test-signing-secret'
    SLACK_VERIFY_SIGNATURE = False
    EMAIL_FROM = 'test@example.com'
    ADMIN_EMAIL = 'admin@example.com'


# Environment mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'test': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Return the configuration class based on FLASK_ENV."""
    env = config_name or os.getenv('FLASK_ENV', 'default')
    return config.get(env, config['default'])
