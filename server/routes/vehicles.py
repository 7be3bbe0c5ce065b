"""
Vehicle routes for the EV charge tracker.
"""

import logging

from database import get_db
from exceptions import ValidationError
from extensions import RateLimits, limiter
from flask import Blueprint, jsonify, request
from models import Vehicle
from sqlalchemy.exc import SQLAlchemyError

from utils.request_utils import (
    database_error_response,
    get_json_body,
    optional_number,
    require_int,
    validation_error_response,
)
from utils.wide_events import WideEvent

logger = logging.getLogger(__name__)

vehicles_bp = Blueprint("vehicles", __name__)


@vehicles_bp.route("/vehicles", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def create_vehicle():
    """
    Add a vehicle for a user.

    Request body:
        userId: Owning user (required)
        model: Model name
        batteryCapacity: Usable battery capacity in kWh
        range: Rated range in km
        color: Paint color
    """
    event = WideEvent("vehicle_create")
    db = None

    try:
        data = get_json_body()
        user_id = require_int(data, "userId")
        battery_capacity = optional_number(data, "batteryCapacity")
        vehicle_range = optional_number(data, "range")
    except ValidationError as e:
        return validation_error_response(e, event)

    event.add_context(user_id=user_id)

    try:
        db = get_db()
        vehicle = Vehicle(
            user_id=user_id,
            model=data.get("model"),
            battery_capacity=battery_capacity,
            range=vehicle_range,
            color=data.get("color"),
        )
        db.add(vehicle)
        with event.timer("db_insert"):
            db.commit()
    except SQLAlchemyError as e:
        return database_error_response(db, e, "vehicle_create", event)

    event.add_context(vehicle_id=vehicle.id)
    event.add_business_metric("vehicle_created", True)
    event.mark_success().emit()

    return jsonify(vehicle.to_dict()), 201


@vehicles_bp.route("/vehicles", methods=["GET"])
def list_vehicles():
    """
    List a user's vehicles.

    Query params:
        userId: Owning user (required)
    """
    db = None

    try:
        user_id = require_int(request.args, "userId")
    except ValidationError as e:
        return validation_error_response(e)

    try:
        db = get_db()
        vehicles = db.query(Vehicle).filter(Vehicle.user_id == user_id).order_by(Vehicle.id).all()
    except SQLAlchemyError as e:
        return database_error_response(db, e, "vehicle_list")

    return jsonify([v.to_dict() for v in vehicles])
