# File: app/core/exceptions.py

from typing import Dict, Any, List, Optional
from datetime import datetime


class AppException(Exception):
    """Base exception for all content platform errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize an application exception.

        Args:
            message: Human-readable error message
            code: Optional machine-processable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or "GENERIC_ERROR"
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "timestamp": datetime.now().isoformat(),
        }


# Domain-specific exceptions
class DomainException(AppException):
    """Base exception for domain-related errors."""

    CODE_PREFIX = "DOMAIN_"


class EntityNotFoundException(DomainException):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            f"{self.CODE_PREFIX}001",
            {"entity_type": entity_type, "entity_id": entity_id},
        )


class PersistenceException(DomainException):
    """Raised when a write reports zero affected rows unexpectedly."""

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Any = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        details = {}
        if entity_type is not None:
            details["entity_type"] = entity_type
        if entity_id is not None:
            details["entity_id"] = entity_id
        super().__init__(message, f"{self.CODE_PREFIX}002", details)


# Validation exceptions
class ValidationException(AppException):
    """Raised when input validation fails."""

    def __init__(
        self, message: str, validation_errors: Optional[Dict[str, List[str]]] = None
    ):
        super().__init__(
            message, "VALIDATION_001", {"validation_errors": validation_errors or {}}
        )


# Infrastructure exceptions
class DatabaseException(AppException):
    """Raised when a database operation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_001", details)
