"""
Charge routes for the EV charge tracker.

Records charging events and lists them per user and vehicle.
"""

import logging

from calculations import round2
from database import get_db
from exceptions import ValidationError
from extensions import RateLimits, limiter
from flask import Blueprint, jsonify, request
from models import Charge
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError

from utils.request_utils import (
    database_error_response,
    get_json_body,
    optional_datetime,
    optional_number,
    require_int,
    validation_error_response,
)
from utils.time_utils import utc_now_naive
from utils.wide_events import WideEvent

logger = logging.getLogger(__name__)

charges_bp = Blueprint("charges", __name__)


@charges_bp.route("/charges", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def create_charge():
    """
    Record a charge.

    Request body:
        userId: Owning user (required)
        vehicleId: Charged vehicle (required)
        date: ISO date/datetime of the charge (defaults to now)
        kwh: Energy delivered
        cost: Total cost
        mileage: Odometer reading at the time of the charge
        location: Location label

    kwh, cost and mileage are rounded to two decimal places before storage.
    """
    event = WideEvent("charge_create")
    db = None

    try:
        data = get_json_body()
        user_id = require_int(data, "userId")
        vehicle_id = require_int(data, "vehicleId")
        charge_date = optional_datetime(data, "date") or utc_now_naive()
        kwh = round2(optional_number(data, "kwh"))
        cost = round2(optional_number(data, "cost"))
        mileage = round2(optional_number(data, "mileage"))
    except ValidationError as e:
        return validation_error_response(e, event)

    event.add_context(user_id=user_id, vehicle_id=vehicle_id)

    try:
        db = get_db()
        charge = Charge(
            user_id=user_id,
            vehicle_id=vehicle_id,
            date=charge_date,
            kwh=kwh,
            cost=cost,
            mileage=mileage,
            location=data.get("location"),
        )
        db.add(charge)
        with event.timer("db_insert"):
            db.commit()
    except SQLAlchemyError as e:
        return database_error_response(db, e, "charge_create", event)

    event.add_context(charge_id=charge.id)
    event.add_business_metric("charge_recorded", True)
    event.add_business_metric("kwh", kwh)
    event.mark_success().emit()

    return jsonify(charge.to_dict()), 201


@charges_bp.route("/charges", methods=["GET"])
def list_charges():
    """
    List charges for a user and vehicle, newest first.

    Query params:
        userId: Owning user (required)
        vehicleId: Vehicle (required)
    """
    db = None

    try:
        user_id = require_int(request.args, "userId")
        vehicle_id = require_int(request.args, "vehicleId")
    except ValidationError as e:
        return validation_error_response(e)

    try:
        db = get_db()
        charges = (
            db.query(Charge)
            .filter(Charge.user_id == user_id, Charge.vehicle_id == vehicle_id)
            .order_by(desc(Charge.date), desc(Charge.id))
            .all()
        )
    except SQLAlchemyError as e:
        return database_error_response(db, e, "charge_list")

    return jsonify([c.to_dict() for c in charges])
