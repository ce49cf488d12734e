# delivery_analytics/core/base_dao.py
"""Generic base DAO for common database operations."""

from typing import Generic, TypeVar, List, Optional, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy import select, and_, func, inspect
from abc import ABC
from delivery_analytics.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseDAO(Generic[ModelType], ABC):
    """Generic DAO for common database operations."""

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db
        self.pk = inspect(model).primary_key[0]

    def _filter_conditions(self, filters: dict) -> list:
        return [
            getattr(self.model, key) == value
            for key, value in filters.items()
            if hasattr(self.model, key) and value is not None
        ]

    def get_all(self, skip: int = 0, limit: int = 100, **filters) -> List[ModelType]:
        """Get all records with optional filtering, ordered by primary key."""
        query = select(self.model)

        conditions = self._filter_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(self.pk).offset(skip).limit(limit)
        result = self.db.execute(query)
        return list(result.scalars().all())

    def get_by_id(self, id: int) -> Optional[ModelType]:
        """Get record by ID."""
        return self.db.get(self.model, id)

    def get_by_field(self, field_name: str, value: Any) -> Optional[ModelType]:
        """Get single record by field value."""
        if not hasattr(self.model, field_name):
            return None

        query = select(self.model).where(getattr(self.model, field_name) == value)
        result = self.db.execute(query)
        return result.scalars().first()

    def create(self, commit: bool = True, **data) -> ModelType:
        """Create new record. With commit=False the row is only flushed."""
        db_obj = self.model(**data)
        self.db.add(db_obj)
        if commit:
            self.db.commit()
            self.db.refresh(db_obj)
        else:
            self.db.flush()
        return db_obj

    def count(self, **filters) -> int:
        """Count records with optional filtering."""
        query = select(func.count(self.pk))

        conditions = self._filter_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))

        result = self.db.execute(query)
        return result.scalar()

    def exists(self, **filters) -> bool:
        """Check if record exists with given filters."""
        return self.count(**filters) > 0
