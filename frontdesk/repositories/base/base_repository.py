"""
Base repository with common CRUD operations and utilities.

Repositories never commit. They add, mutate and flush inside the caller's
transaction so that a room write and its history write land together;
the service layer owns commit and rollback.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from frontdesk.config.logging import get_logger
from frontdesk.core.exceptions import (
    DuplicateKeyError,
    ErrorCode,
    NotFoundError,
    StateConflictError,
    StorageError,
)
from frontdesk.models.base.base_model import BaseModel

logger = get_logger(__name__)

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base repository providing common database operations.

    Features:
    - CRUD operations that flush but never commit
    - Translation of driver errors into application exceptions
    - Counting
    """

    not_found_code: ErrorCode = ErrorCode.NOT_FOUND
    duplicate_code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(self, model: Type[T], session: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session
        """
        self.model = model
        self.session = session

    # ============================================================================
    # SESSION HELPERS
    # ============================================================================

    def _flush(self) -> None:
        """
        Flush pending changes, translating driver errors.

        Raises:
            StateConflictError: Version check failed (concurrent writer)
            DuplicateKeyError: Unique constraint violated
            StorageError: Any other database failure
        """
        try:
            self.session.flush()
        except StaleDataError as e:
            raise StateConflictError(
                f"{self.model.__name__} was modified by another request",
                ErrorCode.CONCURRENT_MODIFICATION,
            ) from e
        except IntegrityError as e:
            raise DuplicateKeyError(
                f"{self.model.__name__} violates a uniqueness constraint",
                self.duplicate_code,
                {"constraint": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Flush failed for {self.model.__name__}: {e}")
            raise StorageError(f"Database error: {e}") from e

    # ============================================================================
    # CREATE OPERATIONS
    # ============================================================================

    def create(self, data: Dict[str, Any]) -> T:
        """
        Create a new entity and flush it.

        Args:
            data: Entity data

        Returns:
            Created entity with its generated id
        """
        entity = self.model(**data)
        self.session.add(entity)
        self._flush()
        return entity

    # ============================================================================
    # READ OPERATIONS
    # ============================================================================

    def find_by_id(self, id: str) -> Optional[T]:
        """Find entity by ID, None when absent."""
        try:
            return self.session.get(self.model, id)
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

    def get_by_id(self, id: str) -> T:
        """
        Get entity by ID or raise.

        Raises:
            NotFoundError: With the repository's not-found code
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise NotFoundError(self.model.__name__, id, self.not_found_code)
        return entity

    def count(self) -> int:
        try:
            return self.session.execute(
                select(func.count()).select_from(self.model)
            ).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

    # ============================================================================
    # UPDATE OPERATIONS
    # ============================================================================

    def update_fields(self, id: str, data: Dict[str, Any]) -> T:
        """
        Apply a partial update and flush.

        Args:
            id: Entity ID
            data: Column values to set; unknown keys are rejected

        Returns:
            Updated entity
        """
        entity = self.get_by_id(id)
        for key, value in data.items():
            if not hasattr(self.model, key):
                raise AttributeError(f"{self.model.__name__} has no field '{key}'")
            setattr(entity, key, value)
        self._flush()
        return entity

    # ============================================================================
    # DELETE OPERATIONS
    # ============================================================================

    def delete(self, id: str) -> None:
        entity = self.get_by_id(id)
        self.session.delete(entity)
        self._flush()
