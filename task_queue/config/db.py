"""
Database sessions for Celery tasks
"""

from delivery_analytics.core import database


def get_db_session():
    """Open a new session on the application database; the caller closes it."""
    return database.SessionLocal()
