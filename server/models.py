from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Float, Numeric,
    DateTime, ForeignKey, Index, create_engine
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.pool import StaticPool


Base = declarative_base()


def _as_float(value):
    return float(value) if value is not None else None


def _isoformat(value):
    return value.isoformat() if value else None


class User(Base):
    """Registered tracker user."""

    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    vehicles = relationship('Vehicle', back_populates='owner')

    def to_dict(self):
        # password_hash never leaves the server
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'created_at': _isoformat(self.created_at),
        }


class Vehicle(Base):
    """A vehicle owned by a user."""

    __tablename__ = 'vehicles'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    model = Column(String(120))
    battery_capacity = Column(Float)  # kWh
    range = Column(Float)  # km
    color = Column(String(50))
    created_at = Column(DateTime, default=datetime.utcnow)

    owner = relationship('User', back_populates='vehicles')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'model': self.model,
            'battery_capacity': self.battery_capacity,
            'range': self.range,
            'color': self.color,
            'created_at': _isoformat(self.created_at),
        }


class Charge(Base):
    """One charging event for a vehicle.

    kwh, cost and mileage are stored with two decimal places. Mileage is the
    odometer reading at the time of the charge; successive differences are
    used as the distance driven between charges.
    """

    __tablename__ = 'charges'
    __table_args__ = (
        Index('ix_charges_user_vehicle_date', 'user_id', 'vehicle_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)
    date = Column(DateTime, nullable=False)
    kwh = Column(Numeric(10, 2, asdecimal=False))
    cost = Column(Numeric(10, 2, asdecimal=False))
    mileage = Column(Numeric(12, 2, asdecimal=False))
    location = Column(String(120))
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'vehicle_id': self.vehicle_id,
            'date': _isoformat(self.date),
            'kwh': _as_float(self.kwh),
            'cost': _as_float(self.cost),
            'mileage': _as_float(self.mileage),
            'location': self.location,
            'created_at': _isoformat(self.created_at),
        }


class UserPreference(Base):
    """Per-user preferences, one row per user."""

    __tablename__ = 'user_preferences'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, unique=True)
    selected_vehicle_id = Column(Integer, ForeignKey('vehicles.id'))
    electricity_price = Column(Float)  # per kWh
    alert_threshold = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'selected_vehicle_id': self.selected_vehicle_id,
            'electricity_price': self.electricity_price,
            'alert_threshold': self.alert_threshold,
            'created_at': _isoformat(self.created_at),
            'updated_at': _isoformat(self.updated_at),
        }


def get_engine(database_url):
    """Create database engine."""
    if database_url.startswith('sqlite') and ':memory:' in database_url:
        # One shared connection so every session sees the same in-memory database
        return create_engine(
            database_url,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)
