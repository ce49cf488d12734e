"""API router for the reporting module."""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from delivery_analytics.core.dependencies import get_report_service
from delivery_analytics.core.exceptions import InvalidReportParameterError, ReportNotFoundError
from delivery_analytics.reporting.formatter import ReportFormatter
from delivery_analytics.reporting.schemas import ReportDefinitionRead, ReportResult, RunReportRequest
from delivery_analytics.reporting.service import ReportService

router = APIRouter(prefix="/reports", tags=["Reporting"])


def _run(service: ReportService, key: str, parameters=None) -> ReportResult:
    """Run a report, translating lookup and parameter failures into HTTP errors."""
    try:
        return service.run_report(key, parameters)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReportParameterError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ===== CATALOG ENDPOINTS =====

@router.get("", response_model=List[ReportDefinitionRead])
def get_reports(service: ReportService = Depends(get_report_service)) -> List[ReportDefinitionRead]:
    """List every available report in catalog order."""
    return service.list_reports()


@router.get("/{key}", response_model=ReportDefinitionRead)
def get_report(key: str, service: ReportService = Depends(get_report_service)) -> ReportDefinitionRead:
    try:
        return service.get_report(key)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ===== EXECUTION ENDPOINTS =====

@router.post("/{key}/run", response_model=ReportResult)
def run_report(
    key: str,
    request: Optional[RunReportRequest] = Body(None),
    service: ReportService = Depends(get_report_service),
) -> ReportResult:
    """Run a report; parameters not given in the body take their defaults."""
    parameters = request.parameters if request else None
    return _run(service, key, parameters)


@router.get("/{key}/table", response_class=PlainTextResponse)
def get_report_table(key: str, service: ReportService = Depends(get_report_service)) -> str:
    """Run a report with defaults and render it as a text table."""
    result = _run(service, key)
    return ReportFormatter().render_table(result)
