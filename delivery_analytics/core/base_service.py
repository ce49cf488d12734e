# delivery_analytics/core/base_service.py
"""Generic base service for business logic orchestration."""

from typing import Generic, TypeVar, List, Optional, Type
from pydantic import BaseModel
from abc import ABC
from delivery_analytics.core.base_dao import BaseDAO

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)


class BaseService(Generic[ModelType, CreateSchemaType, ResponseSchemaType], ABC):
    """Generic service for business logic orchestration.

    Store records are immutable once written, so only the create and read
    paths exist here.
    """

    response_model: Type[ResponseSchemaType]

    def __init__(self, dao: BaseDAO[ModelType]):
        self.dao = dao

    def get_all(self, skip: int = 0, limit: int = 100, **filters) -> List[ResponseSchemaType]:
        """Get all records with business logic applied."""
        records = self.dao.get_all(skip=skip, limit=limit, **filters)
        return [self._to_response(record) for record in records]

    def get_by_id(self, id: int) -> Optional[ResponseSchemaType]:
        """Get record by ID with business logic applied."""
        record = self.dao.get_by_id(id)
        if record:
            return self._to_response(record)
        return None

    def create(self, create_data: CreateSchemaType, commit: bool = True) -> ResponseSchemaType:
        """Create new record with validation and business logic."""
        # Pre-creation validation
        self._validate_create(create_data)

        data = create_data.model_dump()
        record = self.dao.create(commit=commit, **data)

        return self._to_response(record)

    def count(self, **filters) -> int:
        """Count records with filters."""
        return self.dao.count(**filters)

    def exists(self, **filters) -> bool:
        """Check if record exists."""
        return self.dao.exists(**filters)

    # ===== OVERRIDE IN SUBCLASSES =====

    def _to_response(self, record: ModelType) -> ResponseSchemaType:
        """Convert database model to response schema."""
        if hasattr(self, "response_model"):
            return self.response_model.model_validate(record)
        raise NotImplementedError("Must implement _to_response or set response_model")

    def _validate_create(self, create_data: CreateSchemaType) -> None:
        """Validate data before creation. Override for custom validation."""
        pass
