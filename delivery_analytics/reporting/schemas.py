"""Pydantic schemas for the reporting module."""

from typing import Optional, List, Dict, Any, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class ColumnFormat(str, Enum):
    """Column formatting options."""
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"


class ParameterType(str, Enum):
    """Types a report parameter can be coerced to."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"


# ===== CATALOG SCHEMAS =====


class ReportParameterRead(BaseModel):
    """A tunable report parameter and its default."""

    name: str
    type: ParameterType
    default: Union[int, float, str]
    description: Optional[str] = None
    min_value: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class ReportColumnRead(BaseModel):
    """An output column and how it is formatted for display."""

    name: str
    format_type: ColumnFormat = ColumnFormat.TEXT

    model_config = ConfigDict(from_attributes=True)


class ReportDefinitionRead(BaseModel):
    """Catalog entry for a report."""

    key: str
    number: int
    title: str
    description: str
    parameters: List[ReportParameterRead] = []
    columns: List[ReportColumnRead] = []

    model_config = ConfigDict(from_attributes=True)


# ===== EXECUTION SCHEMAS =====


class RunReportRequest(BaseModel):
    """Parameter overrides for a report run; anything omitted takes its default."""

    parameters: Dict[str, Any] = Field(default_factory=dict)


class ReportResult(BaseModel):
    """Rows returned by a report run plus run metadata."""

    key: str
    title: str
    parameters: Dict[str, Any] = {}
    columns: List[str]
    rows: List[Dict[str, Any]]
    row_count: int
    execution_time_ms: float
