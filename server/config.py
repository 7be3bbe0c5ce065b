import os


def _build_database_url():
    """Build a PostgreSQL URL from the DB_* variables when DATABASE_URL is unset."""
    url = os.environ.get('DATABASE_URL')
    if url:
        return url

    user = os.environ.get('DB_USER', 'evtracker')
    password = os.environ.get('DB_PASSWORD', 'changeme')
    host = os.environ.get('DB_HOST', 'localhost')
    port = os.environ.get('DB_PORT', '5432')
    name = os.environ.get('DB_NAME', 'ev_tracker')
    return f'postgresql://{user}:{password}@{host}:{port}/{name}'


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


class Config:
    """Application configuration from environment variables."""

    # Database
    DATABASE_URL = _build_database_url()
    CREATE_TABLES = _env_flag('CREATE_TABLES')
    SLOW_QUERY_THRESHOLD_MS = int(os.environ.get('SLOW_QUERY_THRESHOLD_MS', 500))

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV == 'development'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # API Configuration
    FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    FLASK_PORT = int(os.environ.get('FLASK_PORT', 3001))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    # Rate limiting
    RATELIMIT_ENABLED = _env_flag('RATELIMIT_ENABLED', 'true')
    RATELIMIT_STORAGE_URI = os.environ.get('RATE_LIMIT_STORAGE_URI', 'memory://')

    # Weekly rollups
    DEFAULT_WEEKS = int(os.environ.get('DEFAULT_WEEKS', 8))
    MAX_WEEKS = int(os.environ.get('MAX_WEEKS', 52))
