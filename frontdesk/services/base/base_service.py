"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from frontdesk.config.logging import get_logger
from frontdesk.core.exceptions import (
    BaseAppException,
    ErrorCode,
    StateConflictError,
    StorageError,
)
from frontdesk.repositories.base.base_repository import BaseRepository
from frontdesk.services.base.service_result import (
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(Generic[TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._logger = get_logger(f"frontdesk.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Application exceptions keep their error code and message; anything
        else is logged with a traceback and reported as an internal error.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, number, etc.)
            additional_context: Extra context for logging

        Returns:
            ServiceResult with failure status and error details
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            level = self._logger.error if isinstance(exception, StorageError) else self._logger.info
            level(f"{operation} rejected: {exception}", extra=context)
            severity = ErrorSeverity.ERROR if isinstance(exception, StorageError) else ErrorSeverity.WARNING
            return ServiceResult.from_app_exception(exception, severity=severity)

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        return ServiceResult.failure(
            ServiceError(
                code=self._map_exception_to_error_code(exception),
                message=f"Failed to {operation}",
                details={"error": str(exception), "entity_ref": context["entity_ref"]},
                severity=ErrorSeverity.CRITICAL,
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """
        Map exception types to appropriate error codes.

        Args:
            exception: The exception to map

        Returns:
            Appropriate ErrorCode for the exception
        """
        exception_mapping = {
            StaleDataError: ErrorCode.CONCURRENT_MODIFICATION,
            SQLAlchemyError: ErrorCode.STORAGE_ERROR,
            ValueError: ErrorCode.VALIDATION_ERROR,
        }

        for exc_type, error_code in exception_mapping.items():
            if isinstance(exception, exc_type):
                return error_code

        return ErrorCode.INTERNAL_ERROR

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self):
        """
        Context manager for database transactions with automatic rollback.

        Yields:
            The database session

        Example:
            with self.transaction():
                self.repository.update_fields(room_id, changes)
                # commit on success, rollback on exception
        """
        try:
            yield self.db
            self._commit()
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction rolled back: {e}")
            raise

    def _commit(self) -> None:
        """Commit the current transaction, translating driver errors."""
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except StaleDataError as e:
            raise StateConflictError(
                "Record was modified by another request",
                ErrorCode.CONCURRENT_MODIFICATION,
            ) from e
        except SQLAlchemyError as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            raise StorageError(f"Commit failed: {e}") from e

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log service operation with standardized format.

        Args:
            operation: Description of the operation
            entity_ref: Reference to the entity involved
            extra: Additional context to log
        """
        context = {"operation": operation, "entity_ref": str(entity_ref) if entity_ref else None}
        if extra:
            context.update(extra)
        self._logger.info(f"{operation}: {entity_ref}", extra=context)
