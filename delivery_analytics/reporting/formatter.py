"""Display formatting of report results as pandas DataFrames and text tables."""

from typing import Any, Dict, Optional

import pandas as pd

from delivery_analytics.reporting.catalog import ReportCatalog, report_catalog
from delivery_analytics.reporting.schemas import ColumnFormat, ReportResult


class ReportFormatter:
    """Applies each report's column formats for display."""

    def __init__(self, catalog: Optional[ReportCatalog] = None):
        self.catalog = catalog or report_catalog

    def column_formats(self, result: ReportResult) -> Dict[str, ColumnFormat]:
        if result.key not in self.catalog:
            return {}
        definition = self.catalog.get(result.key)
        return {column.name: column.format_type for column in definition.columns}

    def to_dataframe(self, result: ReportResult, formatted: bool = True) -> pd.DataFrame:
        """Rows as a DataFrame in report column order, optionally with display formatting."""
        if not formatted:
            return pd.DataFrame(result.rows, columns=result.columns)

        # object dtype keeps the values as plain Python scalars
        df = pd.DataFrame(result.rows, columns=result.columns, dtype=object)

        formats = self.column_formats(result)
        for column in df.columns:
            format_type = formats.get(column, ColumnFormat.TEXT)
            df[column] = df[column].map(lambda value: self.format_value(value, format_type))
        return df

    def render_table(self, result: ReportResult) -> str:
        """Plain-text table with a title line and row count."""
        header = f"{result.title} ({result.row_count} rows)"
        if not result.rows:
            return f"{header}\n(no rows)"
        df = self.to_dataframe(result)
        return f"{header}\n{df.to_string(index=False)}"

    @staticmethod
    def format_value(value: Any, format_type: ColumnFormat) -> str:
        """Format a single value according to the specified format type."""
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return ""

        if format_type == ColumnFormat.CURRENCY and isinstance(value, (int, float)):
            return f"{value:,.2f}"
        if format_type == ColumnFormat.PERCENTAGE and isinstance(value, (int, float)):
            return f"{value:.2f}%"
        if format_type == ColumnFormat.NUMBER:
            if isinstance(value, int):
                return f"{value:,}"
            if isinstance(value, float):
                return f"{value:,.2f}"
        return str(value)
