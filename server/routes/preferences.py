"""
Preference routes for the EV charge tracker.
"""

import logging

from database import get_db
from exceptions import ValidationError
from extensions import RateLimits, limiter
from flask import Blueprint, jsonify, request
from services.preferences_service import get_preference_summary, save_preferences
from sqlalchemy.exc import SQLAlchemyError

from utils.request_utils import (
    database_error_response,
    get_json_body,
    optional_int,
    optional_number,
    require_int,
    validation_error_response,
)
from utils.wide_events import WideEvent

logger = logging.getLogger(__name__)

preferences_bp = Blueprint("preferences", __name__)


@preferences_bp.route("/preferences", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def upsert_preferences():
    """
    Create or update a user's preferences.

    Request body:
        userId: User (required)
        selectedVehicleId: Vehicle shown by default
        electricityPrice: Price per kWh used for estimates
        alertThreshold: Alert threshold

    Omitted fields keep their stored values.
    """
    event = WideEvent("preferences_save")
    db = None

    try:
        data = get_json_body()
        user_id = require_int(data, "userId")
        selected_vehicle_id = optional_int(data, "selectedVehicleId")
        electricity_price = optional_number(data, "electricityPrice")
        alert_threshold = optional_number(data, "alertThreshold")
    except ValidationError as e:
        return validation_error_response(e, event)

    event.add_context(user_id=user_id)

    try:
        db = get_db()
        with event.timer("db_upsert"):
            preference = save_preferences(
                db,
                user_id,
                selected_vehicle_id=selected_vehicle_id,
                electricity_price=electricity_price,
                alert_threshold=alert_threshold,
            )
    except SQLAlchemyError as e:
        return database_error_response(db, e, "preferences_save", event)

    event.add_business_metric("preferences_saved", True)
    event.mark_success().emit()

    return jsonify(preference.to_dict()), 201


@preferences_bp.route("/preferences", methods=["GET"])
def get_latest_preferences():
    """Most recently saved preference with its user and selected vehicle."""
    db = None

    try:
        db = get_db()
        summary = get_preference_summary(db)
    except SQLAlchemyError as e:
        return database_error_response(db, e, "preferences_get")

    return jsonify(summary)


@preferences_bp.route("/preferences/user", methods=["GET"])
def get_user_preferences():
    """
    Preferences of one user.

    Query params:
        userId: User (required)
    """
    db = None

    try:
        user_id = require_int(request.args, "userId")
    except ValidationError as e:
        return validation_error_response(e)

    try:
        db = get_db()
        summary = get_preference_summary(db, user_id)
    except SQLAlchemyError as e:
        return database_error_response(db, e, "preferences_get")

    return jsonify(summary)
