"""
Exceptions raised by the university journal services.

Usage:
    from app.exceptions import PersistenceError, RecordValidationError

    try:
        GroupService.create(db, record)
    except PersistenceError as e:
        logger.error(f"Saving group failed: {e}")
"""

from typing import Optional, Any, Dict


class JournalError(Exception):
    """Base exception for all journal errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class RecordValidationError(JournalError):
    """Form input failed validation. `errors` maps field name to its first message."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(
            "Record validation failed",
            code="VALIDATION_ERROR",
            details={"errors": errors}
        )
        self.errors = errors


class PersistenceError(JournalError):
    """Opaque storage failure; the cause is logged, never interpreted."""

    def __init__(self, message: str = "Persistence operation failed"):
        super().__init__(message, code="PERSISTENCE_ERROR")


class ExportError(JournalError):
    """A table could not be exported"""

    def __init__(self, message: str = "Export failed"):
        super().__init__(message, code="EXPORT_ERROR")
