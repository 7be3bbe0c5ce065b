"""
User routes for the EV charge tracker.

Registration and listing. There is no update or delete.
"""

import logging

from database import get_db
from exceptions import ValidationError
from extensions import RateLimits, limiter
from flask import Blueprint, jsonify
from models import User
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash

from utils.request_utils import (
    database_error_response,
    get_json_body,
    require_text,
    validation_error_response,
)
from utils.wide_events import WideEvent

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__)


@users_bp.route("/users", methods=["POST"])
@limiter.limit(RateLimits.REGISTRATION)
def create_user():
    """
    Register a user.

    Request body:
        name: Display name (required)
        email: Email address (required, unique)
        password: Plain password, stored hashed (required)
    """
    event = WideEvent("user_create")
    db = None

    try:
        data = get_json_body()
        name = require_text(data, "name")
        email = require_text(data, "email")
        password = require_text(data, "password")
    except ValidationError as e:
        return validation_error_response(e, event)

    try:
        db = get_db()
        user = User(name=name, email=email, password_hash=generate_password_hash(password))
        db.add(user)
        with event.timer("db_insert"):
            db.commit()
    except SQLAlchemyError as e:
        return database_error_response(db, e, "user_create", event)

    event.add_context(user_id=user.id)
    event.add_business_metric("user_registered", True)
    event.mark_success().emit()

    logger.info(f"Registered user {user.id}")
    return jsonify(user.to_dict()), 201


@users_bp.route("/users", methods=["GET"])
def list_users():
    """List users (id, name, email)."""
    db = None

    try:
        db = get_db()
        users = db.query(User).order_by(User.id).all()
    except SQLAlchemyError as e:
        return database_error_response(db, e, "user_list")

    return jsonify([{"id": u.id, "name": u.name, "email": u.email} for u in users])
