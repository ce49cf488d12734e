"""Service layer for the reporting module."""

import logging
import time
from typing import List, Dict, Any, Optional

from sqlalchemy.orm import Session

from delivery_analytics.core.exceptions import InvalidReportParameterError
from delivery_analytics.query import AnalyticsQueryEngine
from delivery_analytics.reporting.catalog import ReportCatalog, ReportDefinition, ReportParameter, report_catalog
from delivery_analytics.reporting.schemas import (
    ParameterType,
    ReportDefinitionRead,
    ReportParameterRead,
    ReportColumnRead,
    ReportResult,
)

logger = logging.getLogger(__name__)

_COERCERS = {
    ParameterType.STRING: str,
    ParameterType.INTEGER: int,
    ParameterType.NUMBER: float,
}

# SQLite binds integers as signed 64-bit
SQL_INTEGER_MIN = -(2 ** 63)
SQL_INTEGER_MAX = 2 ** 63 - 1


class ReportService:
    """Looks up reports in the catalog and runs them through the query engine."""

    def __init__(self, db_session: Session, catalog: Optional[ReportCatalog] = None):
        self.db = db_session
        self.catalog = catalog or report_catalog
        self.engine = AnalyticsQueryEngine(db_session)

    # ===== CATALOG =====

    def list_reports(self) -> List[ReportDefinitionRead]:
        return [self._to_read(definition) for definition in self.catalog.all()]

    def get_report(self, key: str) -> ReportDefinitionRead:
        return self._to_read(self.catalog.get(key))

    def _to_read(self, definition: ReportDefinition) -> ReportDefinitionRead:
        return ReportDefinitionRead(
            key=definition.key,
            number=definition.number,
            title=definition.title,
            description=definition.description,
            parameters=[ReportParameterRead.model_validate(p) for p in definition.parameters],
            columns=[ReportColumnRead.model_validate(c) for c in definition.columns],
        )

    # ===== EXECUTION =====

    def resolve_parameters(
        self, definition: ReportDefinition, overrides: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Merge overrides onto the defaults, coercing each to its declared type."""
        resolved = definition.defaults
        for name, value in (overrides or {}).items():
            param = definition.get_parameter(name)
            if param is None:
                raise InvalidReportParameterError(
                    f"Report '{definition.key}' has no parameter '{name}'"
                )
            resolved[name] = self._coerce(definition.key, param, value)
        return resolved

    def _coerce(self, key: str, param: ReportParameter, value: Any) -> Any:
        name, param_type = param.name, param.type
        if value is None or isinstance(value, bool):
            raise InvalidReportParameterError(
                f"Parameter '{name}' of report '{key}' must be {param_type.value}, got {value!r}"
            )
        try:
            if param_type == ParameterType.INTEGER and isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            coerced = _COERCERS[param_type](value)
        except (TypeError, ValueError, OverflowError):
            raise InvalidReportParameterError(
                f"Parameter '{name}' of report '{key}' must be {param_type.value}, got {value!r}"
            ) from None
        if param_type == ParameterType.INTEGER and not SQL_INTEGER_MIN <= coerced <= SQL_INTEGER_MAX:
            raise InvalidReportParameterError(
                f"Parameter '{name}' of report '{key}' is out of range: {value!r}"
            )
        if param.min_value is not None and coerced < param.min_value:
            raise InvalidReportParameterError(
                f"Parameter '{name}' of report '{key}' must be at least {param.min_value}"
            )
        return coerced

    def run_report(self, key: str, parameters: Optional[Dict[str, Any]] = None) -> ReportResult:
        """Run one report, returning its rows with the column order of the catalog."""
        definition = self.catalog.get(key)
        resolved = self.resolve_parameters(definition, parameters)

        start_time = time.time()
        rows = getattr(self.engine, definition.method)(**resolved)
        execution_time_ms = (time.time() - start_time) * 1000

        logger.info(
            f"Report {definition.number} '{key}' returned {len(rows)} rows "
            f"in {execution_time_ms:.1f}ms (parameters: {resolved})"
        )
        return ReportResult(
            key=definition.key,
            title=definition.title,
            parameters=resolved,
            columns=definition.column_names,
            rows=rows,
            row_count=len(rows),
            execution_time_ms=execution_time_ms,
        )

    def run_all(self) -> List[ReportResult]:
        """Run every report with its default parameters, in catalog order."""
        results = [self.run_report(definition.key) for definition in self.catalog.all()]
        logger.info(f"Ran {len(results)} reports")
        return results
