from abc import ABC
from typing import Any, Dict, Iterable, Optional, TypeVar
from sqlalchemy.orm import Session

from okr_app.core.logging import get_logger
from okr_app.core.progress import validate_measurable_config
from okr_app.exceptions import NotFoundError, ValidationError, InvalidMeasurableError

T = TypeVar("T")


class BaseService(ABC):
    """Base service class with common functionality."""

    def __init__(self, db: Session):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)

    def commit(self):
        """Commit database transaction."""
        try:
            self.db.commit()
            self.logger.debug("Database transaction committed")
        except Exception as e:
            self.logger.error(f"Database commit failed: {str(e)}")
            self.db.rollback()
            raise

    def rollback(self):
        """Rollback database transaction."""
        self.db.rollback()
        self.logger.debug("Database transaction rolled back")

    def require(self, obj: Optional[T], resource: str, resource_id: str) -> T:
        """Return ``obj`` or raise NotFoundError."""
        if obj is None:
            raise NotFoundError(resource, resource_id)
        return obj

    def require_text(self, value: Optional[str], field: str) -> None:
        if value is None or not value.strip():
            raise ValidationError(f"{field} cannot be empty")

    def require_present(self, changes: Dict[str, Any], fields: Iterable[str]) -> None:
        """Refuse explicit nulls for columns that cannot be cleared."""
        cleared = [field for field in fields if field in changes and changes[field] is None]
        if cleared:
            raise ValidationError(
                f"{', '.join(cleared)} cannot be null",
                details={"fields": cleared},
            )

    def check_measurable(self, item_type: Any, target_value: Any, base_value: Any) -> None:
        """Refuse type/base/target combinations that can never produce progress."""
        is_valid, error = validate_measurable_config(item_type, target_value, base_value)
        if not is_valid:
            raise InvalidMeasurableError(error, str(item_type), target_value, base_value)
