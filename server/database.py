"""
Database resource management for the EV charge tracker.

Holds the single process-wide engine and the scoped session factory. The
engine is created explicitly by ``init_app`` when the application starts and
disposed at process exit; blueprints only ever call ``get_db``.
"""

import atexit
import logging
import time

from flask import g
from models import Base, get_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import scoped_session, sessionmaker

logger = logging.getLogger(__name__)

engine = None
SessionLocal = scoped_session(sessionmaker())

SLOW_QUERY_THRESHOLD_MS = 500

_shutdown_registered = False


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Record query start time."""
    conn.info.setdefault("query_start_time", []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log slow queries."""
    total_time = time.time() - conn.info["query_start_time"].pop(-1)
    duration_ms = total_time * 1000

    if duration_ms > SLOW_QUERY_THRESHOLD_MS:
        truncated_query = statement[:200] + "..." if len(statement) > 200 else statement
        logger.warning(
            f"Slow query detected: {duration_ms:.2f}ms - {truncated_query}", extra={"duration_ms": duration_ms}
        )


def init_engine(database_url):
    """
    Create the process-wide engine and bind the session factory to it.

    Any previously created engine is disposed first, so calling this twice
    never leaves two pools open.
    """
    global engine

    if engine is not None:
        SessionLocal.remove()
        engine.dispose()

    engine = get_engine(database_url)
    SessionLocal.configure(bind=engine)
    return engine


def create_tables():
    """Create any missing tables. Not a migration tool."""
    Base.metadata.create_all(engine)


def drop_tables():
    Base.metadata.drop_all(engine)


def shutdown():
    """Dispose the connection pool at process exit."""
    global engine

    if engine is not None:
        SessionLocal.remove()
        engine.dispose()
        engine = None
        logger.info("Database engine disposed")


def get_db():
    """
    Get database session for the current request.

    Uses Flask's application context to store the session,
    ensuring proper cleanup at the end of each request.
    """
    if "db" not in g:
        g.db = SessionLocal()
    return g.db


def close_db(exception=None):
    """
    Close database session at end of request.

    Call this in teardown_appcontext.
    """
    db = g.pop("db", None)
    if db is not None:
        SessionLocal.remove()


def init_app(app):
    """
    Initialize database with Flask app.

    Creates the engine from ``DATABASE_URL``, registers the teardown function
    and ties engine disposal to process shutdown.
    """
    global SLOW_QUERY_THRESHOLD_MS, _shutdown_registered

    SLOW_QUERY_THRESHOLD_MS = app.config.get("SLOW_QUERY_THRESHOLD_MS", SLOW_QUERY_THRESHOLD_MS)
    init_engine(app.config["DATABASE_URL"])

    if app.config.get("CREATE_TABLES"):
        create_tables()

    app.teardown_appcontext(close_db)

    if not _shutdown_registered:
        atexit.register(shutdown)
        _shutdown_registered = True
