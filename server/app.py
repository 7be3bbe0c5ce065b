"""
EV Charge Tracker - Flask Application

JSON API over users, vehicles, charge records and preferences, with
consumption and cost statistics computed from charge history.
"""

import logging

import database
from config import Config
from exceptions import ConfigurationError
from extensions import limiter
from flask import Flask
from flask_cors import CORS
from routes import register_blueprints
from sqlalchemy.engine import make_url

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _cors_origins(value):
    if value == '*':
        return value
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def _validate_config(app):
    if not app.config.get('DATABASE_URL'):
        raise ConfigurationError("DATABASE_URL is not set", config_key='DATABASE_URL')

    default_weeks = app.config['DEFAULT_WEEKS']
    max_weeks = app.config['MAX_WEEKS']
    if not 1 <= default_weeks <= max_weeks:
        raise ConfigurationError(
            f"DEFAULT_WEEKS must be between 1 and MAX_WEEKS ({max_weeks})",
            config_key='DEFAULT_WEEKS',
        )


def create_app(config_overrides=None):
    """
    Build the Flask application.

    Args:
        config_overrides: Optional dict applied on top of Config (tests)

    Returns:
        Configured Flask app with the database engine initialized
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _validate_config(app)

    CORS(app, resources={r"/api/*": {"origins": _cors_origins(app.config['CORS_ORIGINS'])}})
    limiter.init_app(app)
    database.init_app(app)
    register_blueprints(app)

    safe_url = make_url(app.config['DATABASE_URL']).render_as_string(hide_password=True)
    logger.info(f"EV charge tracker ready (database: {safe_url})")

    return app


if __name__ == '__main__':
    application = create_app()
    application.run(host=Config.FLASK_HOST, port=Config.FLASK_PORT, debug=Config.DEBUG)
