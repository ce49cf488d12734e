"""Bulk loading of the five store tables, from JSON payloads or a directory of CSV files."""

import logging
from pathlib import Path
from typing import Dict, List, Any, Union

import pandas as pd
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from delivery_analytics.core.exceptions import DatasetLoadError, StoreIntegrityError
from delivery_analytics.store.schemas import (
    RestaurantCreate, CustomerCreate, RiderCreate, OrderCreate, DeliveryCreate, DatasetLoad, StoreSummary,
)
from delivery_analytics.store.service import StoreService

logger = logging.getLogger(__name__)

# Parents before children so every foreign key can be checked on insert
LOAD_ORDER = [
    ("restaurants", RestaurantCreate),
    ("customers", CustomerCreate),
    ("riders", RiderCreate),
    ("orders", OrderCreate),
    ("deliveries", DeliveryCreate),
]


class DatasetLoader:
    """Loads a complete dataset in one transaction. Any bad record aborts the load."""

    def __init__(self, db_session: Session):
        self.db = db_session
        self.store_service = StoreService(db_session)

    def load(self, dataset: Union[DatasetLoad, Dict[str, List[Any]]]) -> StoreSummary:
        """Insert every record, returning how many rows went into each table."""
        if isinstance(dataset, DatasetLoad):
            tables = {name: getattr(dataset, name) for name, _ in LOAD_ORDER}
        else:
            tables = dataset

        loaded = {}
        try:
            for table, schema in LOAD_ORDER:
                service = self.store_service.entity_service(table)
                rows = tables.get(table) or []
                for index, row in enumerate(rows):
                    try:
                        record = row if isinstance(row, schema) else schema.model_validate(row)
                        service.create(record, commit=False)
                    except (ValidationError, StoreIntegrityError, IntegrityError) as e:
                        raise DatasetLoadError(table, index, str(e)) from e
                loaded[table] = len(rows)
                logger.info(f"Staged {len(rows)} {table}")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Dataset loaded: {loaded}")
        return StoreSummary(**loaded)

    def load_csv_directory(self, directory: Union[str, Path]) -> StoreSummary:
        """Load `<table>.csv` files from a directory. Missing files load as empty tables."""
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Dataset directory not found: {directory}")

        tables = {}
        for table, _ in LOAD_ORDER:
            csv_path = directory / f"{table}.csv"
            if not csv_path.exists():
                logger.warning(f"No {csv_path.name} in {directory}, loading no {table}")
                tables[table] = []
                continue
            tables[table] = read_csv_records(csv_path)

        return self.load(tables)


def read_csv_records(csv_path: Path) -> List[Dict[str, Any]]:
    """Read a CSV as string-typed records, with empty cells as None."""
    df = pd.read_csv(csv_path, dtype=str, skipinitialspace=True)
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")
