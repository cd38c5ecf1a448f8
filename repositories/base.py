"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Generic, TypeVar, Optional, List, Type, Any
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.

    Write methods take ``commit``: pass ``commit=False`` when the call is one
    step of a larger unit of work and the service commits (or rolls back)
    once at the end.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        """
        Get entity by ID.

        Subclasses override this with their specific ID column
        (company_id, ingredient_id, ...).
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement get_by_id() with specific ID field"
        )

    def get_all(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        """Get all entities with pagination"""
        return self.db.query(self.model).offset(skip).limit(limit).all()

    def create(self, entity: ModelType, commit: bool = True) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        if commit:
            self.db.commit()
            self.db.refresh(entity)
        else:
            self.db.flush()
        return entity

    def update(self, entity: ModelType, commit: bool = True) -> ModelType:
        """Update existing entity"""
        if commit:
            self.db.commit()
            self.db.refresh(entity)
        else:
            self.db.flush()
        return entity

    def delete(self, entity: ModelType, commit: bool = True) -> None:
        """Delete entity"""
        self.db.delete(entity)
        if commit:
            self.db.commit()
        else:
            self.db.flush()

    def exists(self, entity_id: Any) -> bool:
        """Check if entity exists"""
        return self.get_by_id(entity_id) is not None
