from abc import ABC
from typing import TypeVar, Generic, Optional, Any
from sqlalchemy.orm import Session
from sqlalchemy import select
import enum
import uuid

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType")
UpdateSchemaType = TypeVar("UpdateSchemaType")


def enum_value(value: Any) -> Any:
    """Plain value of an Enum column (or the value itself)."""
    return value.value if isinstance(value, enum.Enum) else value


class BaseRepository(ABC, Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Base repository with common CRUD operations."""

    id_prefix = "obj"

    def __init__(self, db: Session, model: type[ModelType]):
        self.db = db
        self.model = model

    def _gen_id(self, prefix: Optional[str] = None) -> str:
        """Generate unique ID with prefix."""
        return f"{prefix or self.id_prefix}_{uuid.uuid4()}"

    def get(self, id: str) -> Optional[ModelType]:
        """Get a single record by ID."""
        return self.db.execute(
            select(self.model).where(self.model.id == id)
        ).scalar_one_or_none()

    def create(self, obj_in: CreateSchemaType, **extra: Any) -> ModelType:
        """Create a new record with a generated ID."""
        obj_data = obj_in.model_dump() if hasattr(obj_in, 'model_dump') else dict(obj_in)
        obj_data.update(extra)
        obj_data.setdefault("id", self._gen_id())
        db_obj = self.model(**obj_data)
        self.db.add(db_obj)
        self.db.flush()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: UpdateSchemaType) -> ModelType:
        """Update an existing record."""
        obj_data = obj_in.model_dump(exclude_unset=True) if hasattr(obj_in, 'model_dump') else obj_in

        for field, value in obj_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.flush()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: str) -> bool:
        """Delete a record by ID."""
        db_obj = self.get(id)
        if db_obj:
            self.db.delete(db_obj)
            return True
        return False
