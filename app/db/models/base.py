# File: app/db/models/base.py
"""
Base models and mixins for the tourism guide content platform.

This module provides the foundation for all database models in the system, including:
- Base SQLAlchemy model class
- Timestamp and soft-delete mixins shared by every entity
- Abstract entity classes the domain models derive from
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Type, TypeVar

from sqlalchemy import Boolean, Column, DateTime, MetaData, false
from sqlalchemy.orm import declarative_base

# Create the SQLAlchemy base
Base = declarative_base(metadata=MetaData())

# Type variable for model classes
T = TypeVar("T", bound="BaseEntity")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Mixin providing automatic timestamp functionality.

    Adds created_at and updated_at timestamps that are automatically
    maintained when records are created or updated.
    """

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)


class SoftDeleteMixin:
    """
    Mixin marking an entity as soft-delete capable.

    ``deleted_at`` and ``is_deleted`` are always written together; every
    repository read path excludes rows with ``is_deleted`` set unless it
    explicitly asks for deleted rows.
    """

    deleted_at = Column(DateTime, nullable=True)
    is_deleted = Column(Boolean, default=False, server_default=false(), nullable=False)


class BaseEntity(Base, TimestampMixin):
    """
    Abstract base class for all entities.

    Primary keys are declared by each entity (e.g. ``city_id``) so the
    repository layer discovers them from mapper metadata.
    """

    __abstract__ = True

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the model instance to a dictionary keyed by attribute name.

        Returns:
            Dictionary representation of the model instance
        """
        result = {}
        for attr in self.__mapper__.column_attrs:
            value = getattr(self, attr.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            result[attr.key] = value
        return result

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Create a model instance from a dictionary, ignoring unknown keys.

        Args:
            data: Dictionary containing field values

        Returns:
            New model instance
        """
        keys = {attr.key for attr in cls.__mapper__.column_attrs}
        return cls(**{k: v for k, v in data.items() if k in keys})


class SoftDeleteBaseEntity(BaseEntity, SoftDeleteMixin):
    """Abstract base class for entities that are hidden instead of removed."""

    __abstract__ = True


def supports_soft_delete(model: Type[Any]) -> bool:
    """Return True when ``model`` carries the soft-delete column pair."""
    return isinstance(model, type) and issubclass(model, SoftDeleteMixin)
