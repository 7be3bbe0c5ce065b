"""
Pytest fixtures for the EV charge tracker tests.
"""

import os
import sys

import pytest

# Add server to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'server'))

# Set DATABASE_URL BEFORE importing the app to use SQLite for tests
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['RATELIMIT_ENABLED'] = 'false'

import database  # noqa: E402
from app import create_app  # noqa: E402


@pytest.fixture(scope='session')
def flask_app():
    """Application shared by the whole test session."""
    application = create_app({
        'TESTING': True,
        'DATABASE_URL': 'sqlite:///:memory:',
        'RATELIMIT_ENABLED': False,
    })
    # Keep fixture objects readable after the request tears its session down
    database.SessionLocal.configure(expire_on_commit=False)
    yield application
    database.shutdown()


@pytest.fixture
def app(flask_app):
    """Application with a fresh schema for each test."""
    database.create_tables()
    yield flask_app
    database.SessionLocal.remove()
    database.drop_tables()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Provide a database session for tests."""
    session = database.SessionLocal()
    yield session
    session.rollback()
    database.SessionLocal.remove()


@pytest.fixture
def user(db_session):
    from factories import UserFactory
    return UserFactory.create(db_session)


@pytest.fixture
def vehicle(db_session, user):
    from factories import VehicleFactory
    return VehicleFactory.create(db_session, user_id=user.id)


@pytest.fixture
def charge_params(user, vehicle):
    """Query string for the user/vehicle pair."""
    return {'userId': user.id, 'vehicleId': vehicle.id}
