# delivery_analytics/logging/exception_handlers.py
"""Exception handlers that record every 4xx/5xx error in the log table."""

import json
import traceback
from datetime import datetime

from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from delivery_analytics.core.exceptions import (
    DatasetLoadError,
    InvalidReportParameterError,
    ReportNotFoundError,
    StoreIntegrityError,
    DuplicateRecordError,
)
from delivery_analytics.logging.middleware import is_excluded_path, request_log_fields
from delivery_analytics.logging.schemas import LogCreate
from delivery_analytics.logging.service import record_log


def safe_json_dumps(obj) -> str:
    return json.dumps(obj, indent=2, default=str)


def _record_error(request: Request, status_code: int, body) -> None:
    if is_excluded_path(request.url.path):
        return
    request.state.error_logged = True
    record_log(
        LogCreate(
            timestamp=datetime.now(),
            status_code=status_code,
            request_body=getattr(request.state, "body", None),
            response_body=safe_json_dumps(body),
            **request_log_fields(request),
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Log 4xx/5xx HTTP errors and return the usual detail payload."""
    if exc.status_code >= 400:
        _record_error(request, exc.status_code, {"detail": exc.detail})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    _record_error(request, 422, errors)
    return JSONResponse(status_code=422, content={"detail": errors})


async def domain_exception_handler(request: Request, exc: Exception):
    """Domain errors that escaped a router map onto 404/409/400."""
    if isinstance(exc, ReportNotFoundError):
        status_code = 404
    elif isinstance(exc, DuplicateRecordError):
        status_code = 409
    else:
        status_code = 400
    _record_error(request, status_code, {"detail": str(exc), "type": type(exc).__name__})
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def general_exception_handler(request: Request, exc: Exception):
    """Unhandled errors: log with traceback, answer with a bare 500."""
    _record_error(
        request,
        500,
        {"error": str(exc), "type": type(exc).__name__, "traceback": traceback.format_exc()},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    for exc_class in (ReportNotFoundError, InvalidReportParameterError, StoreIntegrityError, DatasetLoadError):
        app.add_exception_handler(exc_class, domain_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
