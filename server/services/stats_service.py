"""
Charge statistics service.

Read-only aggregations over a user's (or a vehicle's) charge history. Each
function issues its own query and returns plain dicts ready for jsonify, so
one statistic failing never affects another.

Charges are ordered by date, ties broken by id. The predecessor of a charge is
the previous row of that ordering within the filtered series (LAG window).
Every ratio guards its denominator in SQL: pairs with a zero or negative
mileage delta, and charges with zero kWh, are left out of the averages.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from calculations import (
    UNKNOWN_LOCATION,
    annotate_series,
    bucket_index,
    month_bounds,
    round2,
    round2_or_zero,
    trailing_weeks,
    week_number_label,
    week_range_label,
)
from models import Charge
from sqlalchemy import and_, case, desc, func
from utils.time_utils import utc_now_naive

logger = logging.getLogger(__name__)


def _charge_filter(user_id: Optional[int], vehicle_id: int) -> list:
    criteria = [Charge.vehicle_id == vehicle_id]
    if user_id is not None:
        criteria.append(Charge.user_id == user_id)
    return criteria


def _series_subquery(db, criteria):
    """Charges with the previous charge's mileage attached."""
    prev_mileage = func.lag(Charge.mileage).over(order_by=(Charge.date, Charge.id))
    return (
        db.query(
            Charge.id.label("id"),
            Charge.date.label("date"),
            Charge.kwh.label("kwh"),
            Charge.cost.label("cost"),
            Charge.mileage.label("mileage"),
            prev_mileage.label("prev_mileage"),
        )
        .filter(*criteria)
        .subquery("charge_distances")
    )


def _delta_expressions(series):
    """Guarded per-pair expressions over a series subquery (NULL when invalid)."""
    delta = series.c.mileage - series.c.prev_mileage
    valid_pair = and_(series.c.prev_mileage.isnot(None), delta > 0)

    # 100.0 keeps SQLite from integer division on whole-number values
    consumption = case((valid_pair, series.c.kwh * 100.0 / delta))
    cost_per_kwh = case((and_(valid_pair, series.c.kwh > 0), series.c.cost * 1.0 / series.c.kwh))
    cost_per_km = case((valid_pair, series.c.cost * 100.0 / delta))
    return delta, consumption, cost_per_kwh, cost_per_km


def get_simple_averages(db, user_id: int, vehicle_id: int) -> dict:
    """
    Mean kWh per charge and mean cost divided by total kWh.

    The second figure mixes aggregation levels (AVG over SUM); it is kept
    under its published name.
    """
    row = (
        db.query(
            func.avg(Charge.kwh).label("avg_kwh"),
            (func.avg(Charge.cost) * 1.0 / func.nullif(func.sum(Charge.kwh), 0)).label("avg_cost_ratio"),
            func.count(Charge.id).label("total_charges"),
        )
        .filter(*_charge_filter(user_id, vehicle_id))
        .one()
    )

    return {
        "avg_consumption": round2(row.avg_kwh),
        "avg_cost_per_km": round2(row.avg_cost_ratio),
        "total_charges": int(row.total_charges or 0),
    }


def get_vehicle_consumption(db, vehicle_id: int) -> dict:
    """Delta-based kWh per 100 km and mean cost per kWh for one vehicle."""
    series = _series_subquery(db, [Charge.vehicle_id == vehicle_id, Charge.mileage.isnot(None)])
    _, consumption, _, _ = _delta_expressions(series)
    cost_per_kwh = case((series.c.kwh > 0, series.c.cost * 1.0 / series.c.kwh))

    row = db.query(
        func.avg(consumption).label("avg_consumption"),
        func.avg(cost_per_kwh).label("avg_cost_per_kwh"),
    ).one()

    return {
        "avg_consumption_per_100km": round2(row.avg_consumption),
        "avg_cost_per_kwh": round2(row.avg_cost_per_kwh),
    }


def get_global_stats(db, user_id: int, vehicle_id: int) -> dict:
    """Delta-based averages plus the total number of charges."""
    series = _series_subquery(db, _charge_filter(user_id, vehicle_id))
    _, consumption, cost_per_kwh, cost_per_km = _delta_expressions(series)

    row = db.query(
        func.avg(consumption).label("avg_consumption"),
        func.avg(cost_per_kwh).label("avg_cost_per_kwh"),
        func.avg(cost_per_km).label("avg_cost_per_km"),
        func.count(series.c.id).label("total_charges"),
    ).one()

    return {
        "avgConsumption": round2(row.avg_consumption),
        "avgCostPerKwh": round2(row.avg_cost_per_kwh),
        "avgCostPerKm": round2(row.avg_cost_per_km),
        "totalCharges": int(row.total_charges or 0),
    }


def get_charge_series(db, user_id: int, vehicle_id: int) -> List[dict]:
    """Charges in date order with the previous mileage, for charting."""
    series = _series_subquery(db, _charge_filter(user_id, vehicle_id))
    rows = db.query(series).order_by(series.c.date, series.c.id).all()

    return annotate_series(
        {
            "date": row.date.isoformat() if row.date else None,
            "kwh": round2(row.kwh),
            "cost": round2(row.cost),
            "mileage": round2(row.mileage),
            "prev_mileage": round2(row.prev_mileage),
        }
        for row in rows
    )


def get_cumulative_totals(db, user_id: int, vehicle_id: int) -> dict:
    """
    Lifetime totals for a vehicle.

    One statement, so all five figures come from the same snapshot.
    """
    series = _series_subquery(db, _charge_filter(user_id, vehicle_id))
    delta = series.c.mileage - series.c.prev_mileage

    row = db.query(
        func.max(series.c.mileage).label("total_mileage"),
        func.sum(series.c.kwh).label("total_kwh"),
        func.sum(series.c.cost).label("total_cost"),
        func.sum(case((delta > 0, delta), else_=0)).label("total_distance"),
        func.count(series.c.id).label("total_charges"),
    ).one()

    return {
        "totalMileage": round2_or_zero(row.total_mileage),
        "totalKwh": round2_or_zero(row.total_kwh),
        "totalCost": round2_or_zero(row.total_cost),
        "totalDistance": round2_or_zero(row.total_distance),
        "totalCharges": int(row.total_charges or 0),
    }


def get_monthly_totals(db, user_id: int, vehicle_id: int, now: Optional[datetime] = None) -> dict:
    """kWh charged in the current and previous calendar months."""
    previous_start, current_start, next_start = month_bounds(now or utc_now_naive())

    row = (
        db.query(
            func.sum(case((Charge.date >= current_start, Charge.kwh), else_=0)).label("current_month"),
            func.sum(case((Charge.date < current_start, Charge.kwh), else_=0)).label("previous_month"),
        )
        .filter(
            *_charge_filter(user_id, vehicle_id),
            Charge.date >= previous_start,
            Charge.date < next_start,
        )
        .one()
    )

    return {
        "currentMonth": round2_or_zero(row.current_month),
        "previousMonth": round2_or_zero(row.previous_month),
    }


def get_totals_by_location(db, user_id: int, vehicle_id: int) -> List[dict]:
    """kWh and charge count per location, most frequent first."""
    rows = (
        db.query(
            Charge.location.label("location"),
            func.sum(Charge.kwh).label("total_kwh"),
            func.count(Charge.id).label("charge_count"),
        )
        .filter(*_charge_filter(user_id, vehicle_id))
        .group_by(Charge.location)
        .order_by(desc("charge_count"))
        .all()
    )

    # Charges without a location and ones labelled "Unknown" share a bucket
    grouped = {}
    for row in rows:
        label = row.location or UNKNOWN_LOCATION
        bucket = grouped.setdefault(label, {"location": label, "totalKwh": 0.0, "count": 0})
        bucket["totalKwh"] += float(row.total_kwh or 0)
        bucket["count"] += int(row.charge_count)

    result = sorted(grouped.values(), key=lambda b: (-b["count"], b["location"]))
    for bucket in result:
        bucket["totalKwh"] = round2_or_zero(bucket["totalKwh"])
    return result


def get_weekly_totals(
    db,
    user_id: int,
    vehicle_id: int,
    weeks: int = 8,
    numbered: bool = False,
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Totals per ISO week over the trailing ``weeks`` weeks, oldest first.

    Every week is present, with zeros when nothing was charged. Buckets are
    labelled by date range ("Oct 12 - Oct 18") or, when ``numbered``, by ISO
    week number ("W42 2026").
    """
    periods = trailing_weeks(now or utc_now_naive(), weeks)
    window_start, window_end = periods[0][0], periods[-1][1]

    rows = (
        db.query(Charge.date, Charge.kwh, Charge.cost)
        .filter(
            *_charge_filter(user_id, vehicle_id),
            Charge.date >= window_start,
            Charge.date < window_end,
        )
        .all()
    )

    totals = [{"kwh": 0.0, "cost": 0.0, "count": 0} for _ in periods]
    for row in rows:
        bucket = totals[bucket_index(row.date, window_start)]
        bucket["kwh"] += float(row.kwh or 0)
        bucket["cost"] += float(row.cost or 0)
        bucket["count"] += 1

    result = []
    for (start, end), bucket in zip(periods, totals):
        entry = {
            "weekStart": start.date().isoformat(),
            "weekEnd": (end - timedelta(days=1)).date().isoformat(),
            "totalKwh": round2_or_zero(bucket["kwh"]),
            "totalCost": round2_or_zero(bucket["cost"]),
            "count": bucket["count"],
        }
        if numbered:
            year, week_number, _ = start.isocalendar()
            entry.update(week=week_number_label(start), weekNumber=week_number, year=year)
        else:
            entry["week"] = week_range_label(start)
        result.append(entry)

    logger.debug(f"Weekly totals for vehicle {vehicle_id}: {len(rows)} charges in {weeks} weeks")
    return result
