# delivery_analytics/core/database.py
"""Database configuration: engine, sessions and table creation."""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from delivery_analytics.core.config import DATABASE_URL

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement switched on."""
    is_sqlite = url.startswith("sqlite")
    new_engine = create_engine(
        url,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )
    if is_sqlite:
        enable_sqlite_foreign_keys(new_engine)
    return new_engine


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite ignores REFERENCES clauses unless the pragma is set per connection."""

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# ===== SESSION GENERATORS =====


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ===== TABLE CREATION =====


def _import_models() -> None:
    # Models must be imported so they register with Base.metadata
    from delivery_analytics.store.models import Restaurant, Customer, Rider, Order, Delivery  # noqa: F401
    from delivery_analytics.logging.models import Log  # noqa: F401


def create_all_tables(bind: Engine = None) -> None:
    """Create every table that is not there yet."""
    _import_models()
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")


def drop_all_tables(bind: Engine = None) -> None:
    """Drop every table (use with caution!)."""
    _import_models()
    Base.metadata.drop_all(bind=bind or engine)
    logger.info("Database tables dropped")


def init_db(force_recreate: bool = False) -> None:
    """Initialize the database schema."""
    if force_recreate:
        logger.warning("Force recreate mode: dropping existing tables")
        drop_all_tables()
    create_all_tables()


if __name__ == "__main__":
    init_db()
