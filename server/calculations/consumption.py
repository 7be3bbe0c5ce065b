"""
Per-charge consumption calculations.

A charge's distance is the odometer difference from the immediately preceding
charge of the same vehicle. Pairs where that difference is zero or negative
(duplicate entries, odometer resets) carry no sample.
"""

from typing import Iterable, List, Optional

from .constants import DISTANCE_UNIT
from .numbers import round2, safe_divide


def mileage_delta(mileage, prev_mileage) -> Optional[float]:
    """Distance since the previous charge, or None if it is not usable."""
    if mileage is None or prev_mileage is None:
        return None
    delta = float(mileage) - float(prev_mileage)
    return delta if delta > 0 else None


def consumption_per_distance(kwh, delta) -> Optional[float]:
    """kWh per 100 distance units."""
    if kwh is None:
        return None
    return safe_divide(float(kwh) * DISTANCE_UNIT, delta)


def cost_per_kwh(cost, kwh) -> Optional[float]:
    return safe_divide(cost, kwh)


def annotate_series(rows: Iterable[dict]) -> List[dict]:
    """
    Add ``distance``, ``consumption`` and ``cost_per_kwh`` to series rows.

    Rows carry ``prev_mileage`` from the window query. The first row and rows
    whose pair is not usable get None for distance and consumption, so at
    most n - 1 rows carry a consumption value.
    """
    annotated = []
    for row in rows:
        delta = mileage_delta(row.get("mileage"), row.get("prev_mileage"))
        annotated.append({
            **row,
            "distance": round2(delta),
            "consumption": round2(consumption_per_distance(row.get("kwh"), delta)),
            "cost_per_kwh": round2(cost_per_kwh(row.get("cost"), row.get("kwh"))),
        })
    return annotated
