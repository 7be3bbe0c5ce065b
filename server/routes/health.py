"""
Health check route.
"""

from database import get_db
from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from utils.request_utils import database_error_response

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Report whether the database answers."""
    db = None
    try:
        db = get_db()
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return database_error_response(db, e, "health_check")
    return jsonify({"status": "ok"})
