# delivery_analytics/core/dependencies.py
"""Shared FastAPI dependencies"""

from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session
from delivery_analytics.core.database import get_db

# Core database dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_store_service(db: SessionDep):
    """Get store service bound to the request session"""
    from delivery_analytics.store.service import StoreService
    return StoreService(db)


def get_report_service(db: SessionDep):
    """Get report service bound to the request session"""
    from delivery_analytics.reporting.service import ReportService
    return ReportService(db)
