# delivery_analytics/logging/router.py
"""API router for the logging module."""

from fastapi import APIRouter, Depends, Query, Response, HTTPException
from typing import List, Optional

from delivery_analytics.core.dependencies import SessionDep
from delivery_analytics.logging.schemas import LogRead, StatusDistribution
from delivery_analytics.logging.service import LogService
from delivery_analytics.logging.dao import LogDAO

router = APIRouter(prefix="/logs", tags=["Logs"])


def get_log_service(session: SessionDep) -> LogService:
    return LogService(LogDAO(session))


@router.get("", response_model=List[LogRead])
def get_logs(
    response: Response,
    limit: int = Query(50, ge=1, le=1000, description="Maximum number of logs to return"),
    offset: int = Query(0, ge=0, description="Number of logs to skip"),
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    status_min: Optional[int] = Query(None, ge=100, le=599, description="Minimum status code"),
    status_max: Optional[int] = Query(None, ge=100, le=599, description="Maximum status code"),
    search: Optional[str] = Query(None, description="Search term for filtering logs"),
    log_service: LogService = Depends(get_log_service),
) -> List[LogRead]:
    """Logged requests, newest first, with the total match count in X-Total-Count."""
    if status_min is not None and status_max is not None and status_min > status_max:
        raise HTTPException(status_code=400, detail="status_min cannot be greater than status_max")

    logs = log_service.get_logs_with_filters(
        limit=limit,
        offset=offset,
        hours=hours,
        status_min=status_min,
        status_max=status_max,
        search=search,
    )
    total_count = log_service.get_logs_count_with_filters(
        hours=hours, status_min=status_min, status_max=status_max, search=search
    )

    response.headers["X-Total-Count"] = str(total_count)
    response.headers["X-Page-Size"] = str(limit)
    response.headers["X-Page-Offset"] = str(offset)
    return logs


@router.get("/errors", response_model=List[LogRead])
def get_error_logs(
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of error logs"),
    log_service: LogService = Depends(get_log_service),
) -> List[LogRead]:
    """Error logs (4xx and 5xx status codes)."""
    return log_service.get_error_logs(hours=hours, limit=limit)


@router.get("/status-distribution", response_model=StatusDistribution)
def get_status_distribution(
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    log_service: LogService = Depends(get_log_service),
) -> StatusDistribution:
    return log_service.get_status_distribution(hours=hours)
