# delivery_analytics/core/exceptions.py
"""Domain exceptions raised by the store and reporting layers."""


class StoreIntegrityError(Exception):
    """A write would break one of the store's integrity rules."""


class ReferentialIntegrityError(StoreIntegrityError):
    """A foreign key references a row that does not exist."""

    def __init__(self, entity: str, field: str, value):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity}.{field} references missing row {value!r}")


class DuplicateRecordError(StoreIntegrityError):
    """A record with the same identity already exists."""


class DatasetLoadError(Exception):
    """A bulk load failed on a specific record; nothing from the load is kept."""

    def __init__(self, table: str, row: int, reason: str):
        self.table = table
        self.row = row
        self.reason = reason
        super().__init__(f"Failed to load {table} row {row}: {reason}")


class ReportNotFoundError(Exception):
    """No report is registered under the requested key."""


class InvalidReportParameterError(ValueError):
    """A report parameter is unknown or cannot be coerced to its declared type."""
