"""
User preference storage.

One row per user, keyed by ``user_id``. Saving is an upsert: fields left out
of the request (or sent as null) keep whatever was stored before.
"""

import logging
from typing import Optional

from models import User, UserPreference, Vehicle
from sqlalchemy import desc, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from utils.time_utils import utc_now_naive

logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = ("selected_vehicle_id", "electricity_price", "alert_threshold")

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _dialect_name(db) -> Optional[str]:
    bind = db.get_bind()
    dialect = getattr(bind, "dialect", None)
    return getattr(dialect, "name", None)


def _upsert_on_conflict(db, insert, user_id: int, values: dict) -> None:
    table = UserPreference.__table__
    now = utc_now_naive()

    stmt = insert(table).values(user_id=user_id, created_at=now, updated_at=now, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.user_id],
        set_={
            **{
                field: func.coalesce(getattr(stmt.excluded, field), table.c[field])
                for field in PREFERENCE_FIELDS
            },
            "updated_at": stmt.excluded.updated_at,
        },
    )
    db.execute(stmt)


def _merge_in_session(db, user_id: int, values: dict) -> None:
    """Read-modify-write fallback for dialects without ON CONFLICT."""
    preference = db.query(UserPreference).filter(UserPreference.user_id == user_id).first()
    if preference is None:
        preference = UserPreference(user_id=user_id)
        db.add(preference)

    for field, value in values.items():
        if value is not None:
            setattr(preference, field, value)
    preference.updated_at = utc_now_naive()


def save_preferences(
    db,
    user_id: int,
    selected_vehicle_id: Optional[int] = None,
    electricity_price: Optional[float] = None,
    alert_threshold: Optional[float] = None,
) -> UserPreference:
    """
    Insert or update the preferences of ``user_id`` and commit.

    Returns:
        The stored UserPreference row
    """
    values = {
        "selected_vehicle_id": selected_vehicle_id,
        "electricity_price": electricity_price,
        "alert_threshold": alert_threshold,
    }

    insert = UPSERT_INSERTS.get(_dialect_name(db))
    if insert is not None:
        _upsert_on_conflict(db, insert, user_id, values)
    else:
        _merge_in_session(db, user_id, values)

    db.commit()
    logger.info(f"Saved preferences for user {user_id}")

    # populate_existing: the upsert bypassed the identity map
    return db.query(UserPreference).filter(UserPreference.user_id == user_id).populate_existing().one()


def get_preference_summary(db, user_id: Optional[int] = None) -> dict:
    """
    Preference joined with its user and selected vehicle.

    Without ``user_id`` the most recently updated preference is returned.
    Returns an empty dict when nothing is stored.
    """
    query = (
        db.query(
            User.id.label("user_id"),
            User.name.label("user_name"),
            Vehicle.id.label("vehicle_id"),
            Vehicle.model.label("vehicle_model"),
            Vehicle.color.label("vehicle_color"),
            UserPreference.electricity_price.label("electricity_price"),
            UserPreference.alert_threshold.label("alert_threshold"),
        )
        .select_from(UserPreference)
        .join(User, UserPreference.user_id == User.id)
        .outerjoin(Vehicle, UserPreference.selected_vehicle_id == Vehicle.id)
    )

    if user_id is not None:
        query = query.filter(UserPreference.user_id == user_id)

    row = query.order_by(desc(UserPreference.updated_at), desc(UserPreference.id)).first()
    return dict(row._mapping) if row else {}
