"""
Routes module for the EV charge tracker Flask blueprints.

Every blueprint is mounted under /api.
"""

from routes.charges import charges_bp
from routes.health import health_bp
from routes.preferences import preferences_bp
from routes.stats import stats_bp
from routes.users import users_bp
from routes.vehicles import vehicles_bp

__all__ = [
    "users_bp",
    "vehicles_bp",
    "charges_bp",
    "preferences_bp",
    "stats_bp",
    "health_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(vehicles_bp, url_prefix="/api")
    app.register_blueprint(charges_bp, url_prefix="/api")
    app.register_blueprint(preferences_bp, url_prefix="/api")
    app.register_blueprint(stats_bp, url_prefix="/api")
    app.register_blueprint(health_bp, url_prefix="/api")
