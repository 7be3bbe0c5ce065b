"""
Statistics routes for the EV charge tracker.

Read-only aggregations over charge history. Each endpoint runs its own
computation and reports its own failure; see services.stats_service for the
calculations.
"""

import logging

from database import get_db
from exceptions import ValidationError
from flask import Blueprint, current_app, jsonify, request
from services import stats_service
from sqlalchemy.exc import SQLAlchemyError

from utils.request_utils import (
    bounded_int,
    database_error_response,
    require_int,
    validation_error_response,
)

logger = logging.getLogger(__name__)

stats_bp = Blueprint("stats", __name__)


def _user_vehicle_args():
    return require_int(request.args, "userId"), require_int(request.args, "vehicleId")


def _weeks_arg():
    return bounded_int(
        request.args,
        "weeks",
        default=current_app.config["DEFAULT_WEEKS"],
        minimum=1,
        maximum=current_app.config["MAX_WEEKS"],
    )


def _stats_response(operation, compute, *args, **kwargs):
    """Run one statistic against the request session and jsonify it."""
    db = None
    try:
        db = get_db()
        result = compute(db, *args, **kwargs)
    except SQLAlchemyError as e:
        return database_error_response(db, e, operation)
    return jsonify(result)


@stats_bp.route("/stats", methods=["GET"])
def get_stats():
    """
    Simple averages for a user's vehicle.

    Query params:
        userId, vehicleId (required)

    Returns:
        avg_consumption (mean kWh per charge), avg_cost_per_km (mean cost
        over total kWh), total_charges
    """
    try:
        user_id, vehicle_id = _user_vehicle_args()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_simple", stats_service.get_simple_averages, user_id, vehicle_id)


@stats_bp.route("/stats/consumption", methods=["GET"])
def get_consumption():
    """
    kWh per 100 km and cost per kWh for a vehicle, across all users.

    Query params:
        vehicleId (required)
    """
    try:
        vehicle_id = require_int(request.args, "vehicleId")
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_consumption", stats_service.get_vehicle_consumption, vehicle_id)


@stats_bp.route("/stats/global", methods=["GET"])
def get_global_stats():
    """
    Averages over consecutive-charge pairs plus the charge count.

    Returns:
        avgConsumption, avgCostPerKwh, avgCostPerKm (null without a valid
        pair), totalCharges
    """
    try:
        user_id, vehicle_id = _user_vehicle_args()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_global", stats_service.get_global_stats, user_id, vehicle_id)


@stats_bp.route("/stats/charges", methods=["GET"])
def get_charge_series():
    """Charges in date order with the previous mileage, for charts."""
    try:
        user_id, vehicle_id = _user_vehicle_args()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_series", stats_service.get_charge_series, user_id, vehicle_id)


@stats_bp.route("/stats/cumulative", methods=["GET"])
def get_cumulative():
    """Lifetime mileage, kWh, cost, distance and charge count (zeros when empty)."""
    try:
        user_id, vehicle_id = _user_vehicle_args()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_cumulative", stats_service.get_cumulative_totals, user_id, vehicle_id)


@stats_bp.route("/stats/monthly-charges", methods=["GET"])
def get_monthly_charges():
    """kWh of the current calendar month against the previous one."""
    try:
        user_id, vehicle_id = _user_vehicle_args()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_monthly", stats_service.get_monthly_totals, user_id, vehicle_id)


@stats_bp.route("/stats/charges-by-location", methods=["GET"])
def get_charges_by_location():
    """kWh and charge count per location, most frequent first."""
    try:
        user_id, vehicle_id = _user_vehicle_args()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response("stats_by_location", stats_service.get_totals_by_location, user_id, vehicle_id)


@stats_bp.route("/stats/weekly-charges", methods=["GET"])
def get_weekly_charges():
    """
    Weekly totals over a trailing window, labelled by date range.

    Query params:
        userId, vehicleId (required)
        weeks: Number of weeks including the current one (default 8)
    """
    try:
        user_id, vehicle_id = _user_vehicle_args()
        weeks = _weeks_arg()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response(
        "stats_weekly", stats_service.get_weekly_totals, user_id, vehicle_id, weeks=weeks
    )


@stats_bp.route("/stats/weekly-charges-numbered", methods=["GET"])
def get_weekly_charges_numbered():
    """Weekly totals over a trailing window, labelled by ISO week number."""
    try:
        user_id, vehicle_id = _user_vehicle_args()
        weeks = _weeks_arg()
    except ValidationError as e:
        return validation_error_response(e)

    return _stats_response(
        "stats_weekly_numbered", stats_service.get_weekly_totals, user_id, vehicle_id, weeks=weeks, numbered=True
    )
