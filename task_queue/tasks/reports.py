"""
Report execution tasks
"""

import logging
from typing import Any, Dict, List, Optional

from celery import shared_task

from delivery_analytics.reporting.service import ReportService
from task_queue.config.db import get_db_session

logger = logging.getLogger(__name__)


@shared_task(name='task_queue.tasks.reports.run_report')
def run_report(key: str, parameters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Run one report in its own database session

    Args:
        key: Catalog key of the report
        parameters: Overrides for the report's default parameters

    Returns:
        dict: The JSON-serializable report result
    """
    logger.info(f"Running report {key} with params: {parameters}")
    db = get_db_session()
    try:
        result = ReportService(db).run_report(key, parameters)
        return result.model_dump(mode='json')
    except Exception:
        logger.exception(f"Report {key} failed")
        raise
    finally:
        db.close()


@shared_task(name='task_queue.tasks.reports.run_all_reports')
def run_all_reports() -> List[Dict[str, Any]]:
    """Run every report with defaults; returns one result dict per report in catalog order"""
    db = get_db_session()
    try:
        results = ReportService(db).run_all()
        logger.info(f"Completed {len(results)} reports")
        return [result.model_dump(mode='json') for result in results]
    finally:
        db.close()
