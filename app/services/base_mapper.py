# File: app/services/base_mapper.py
"""
Mapping between request payloads, entities and response dictionaries.

The mapper only knows about mapped columns. Localized text handling (turning
``name`` into ``name_text_ref_id`` and back) is done by the service around it.
"""

from datetime import date, datetime
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Set, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect

T = TypeVar("T")


class BaseMapper(Generic[T]):
    """
    Column-aware mapper for one entity class.

    Args:
        model: SQLAlchemy entity class
        exclude_from_write: Attribute names never taken from a payload
            (defaults to the primary key and bookkeeping columns)
    """

    WRITE_PROTECTED = {"created_at", "updated_at", "deleted_at", "is_deleted"}

    def __init__(self, model: Type[T], exclude_from_write: Optional[Iterable[str]] = None):
        self.model = model
        mapper = inspect(model)
        self.columns: List[str] = [attr.key for attr in mapper.column_attrs]
        if exclude_from_write is None:
            pk_keys = {mapper.get_property_by_column(col).key for col in mapper.primary_key}
            exclude_from_write = pk_keys | self.WRITE_PROTECTED
        self.exclude_from_write: Set[str] = set(exclude_from_write)

    @staticmethod
    def _as_dict(dto: Any) -> Dict[str, Any]:
        if dto is None:
            return {}
        if isinstance(dto, BaseModel):
            return dto.model_dump(exclude_unset=True)
        return dict(dto)

    def writable_columns(self) -> List[str]:
        return [c for c in self.columns if c not in self.exclude_from_write]

    def to_entity_data(self, dto: Any) -> Dict[str, Any]:
        """
        Build entity column values from a create payload.

        Unknown keys (including DTO text fields such as ``name``) are dropped.
        """
        data = self._as_dict(dto)
        writable = set(self.writable_columns())
        return {key: value for key, value in data.items() if key in writable}

    def to_entity_data_from_update(self, dto: Any, entity: Any) -> Dict[str, Any]:
        """
        Build the full column values of an entity overlaid with an update payload.

        Payload values that are None do not overwrite stored values.

        Args:
            dto: Update payload
            entity: The stored entity

        Returns:
            Column values after the update
        """
        data = {key: getattr(entity, key) for key in self.writable_columns()}
        for key, value in self.to_entity_data(dto).items():
            if value is not None:
                data[key] = value
        return data

    def to_response(self, entity: Any) -> Dict[str, Any]:
        """
        Shape an entity as a plain dictionary.

        Dates and datetimes are rendered as ISO strings; reference ID columns
        are kept as they are.
        """
        if isinstance(entity, Mapping):
            return dict(entity)
        response = {}
        for key in self.columns:
            value = getattr(entity, key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            response[key] = value
        return response

    def to_response_list(self, entities: Iterable[Any]) -> List[Dict[str, Any]]:
        return [self.to_response(entity) for entity in entities]
