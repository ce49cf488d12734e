# delivery_analytics/logging/service.py
"""Service layer for the logging module."""

import logging
from typing import List, Optional
from datetime import datetime

from delivery_analytics.core import database
from delivery_analytics.core.base_service import BaseService
from delivery_analytics.logging.models import Log
from delivery_analytics.logging.schemas import LogRead, LogCreate, StatusCount, StatusDistribution
from delivery_analytics.logging.dao import LogDAO

logger = logging.getLogger(__name__)


class LogService(BaseService[Log, LogCreate, LogRead]):
    """Records API traffic and answers log queries."""

    response_model = LogRead

    def __init__(self, log_dao: LogDAO):
        super().__init__(log_dao)

    def _validate_create(self, create_data: LogCreate) -> None:
        if not create_data.method or not create_data.path:
            raise ValueError("Method and path are required for log entries")

    def get_logs_with_filters(
        self,
        limit: int = 50,
        offset: int = 0,
        hours: int = 24,
        status_min: Optional[int] = None,
        status_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[LogRead]:
        logs = self.dao.get_logs_with_filters(
            limit=limit,
            offset=offset,
            hours=hours,
            status_min=status_min,
            status_max=status_max,
            search=search,
        )
        return [self._to_response(log) for log in logs]

    def get_logs_count_with_filters(
        self,
        hours: int = 24,
        status_min: Optional[int] = None,
        status_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> int:
        return self.dao.count_logs_with_filters(
            hours=hours, status_min=status_min, status_max=status_max, search=search
        )

    def get_error_logs(self, hours: int = 24, limit: int = 100) -> List[LogRead]:
        """Logs with 4xx and 5xx status codes."""
        return self.get_logs_with_filters(limit=limit, hours=hours, status_min=400, status_max=599)

    def get_status_distribution(self, hours: int = 24) -> StatusDistribution:
        distribution = [
            StatusCount(description=self._get_status_description(item["status_code"]), **item)
            for item in self.dao.get_status_distribution(hours=hours)
        ]
        return StatusDistribution(
            status_distribution=distribution,
            period_hours=hours,
            timestamp=datetime.now(),
        )

    @staticmethod
    def _get_status_description(status_code: int) -> str:
        """Human-readable class of an HTTP status code."""
        if 200 <= status_code < 300:
            return "Success"
        elif 300 <= status_code < 400:
            return "Redirection"
        elif 400 <= status_code < 500:
            return "Client Error"
        elif 500 <= status_code < 600:
            return "Server Error"
        return "Unknown"


def record_log(entry: LogCreate) -> None:
    """Persist one log entry in its own session.

    Runs outside the request's session (background task or exception
    handler), so failures are reported through the logger and not raised.
    """
    with database.SessionLocal() as session:
        try:
            LogService(LogDAO(session)).create(entry)
        except Exception:
            session.rollback()
            logger.exception(f"Could not persist log entry for {entry.method} {entry.path}")
