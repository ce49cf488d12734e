"""Report catalog, run service and display formatting."""

from delivery_analytics.reporting.catalog import ReportCatalog, ReportDefinition, report_catalog
from delivery_analytics.reporting.formatter import ReportFormatter
from delivery_analytics.reporting.service import ReportService

__all__ = ["ReportCatalog", "ReportDefinition", "report_catalog", "ReportFormatter", "ReportService"]
