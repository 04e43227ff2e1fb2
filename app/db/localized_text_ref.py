# File: app/db/localized_text_ref.py
"""
Registry of localized text reference fields.

An entity declares which of its integer columns reference rows in the
``localized_texts`` table at the point the class is defined:

    @localized_text_refs("name_text_ref_id", "description_text_ref_id")
    class City(SoftDeleteBaseEntity):
        name_text_ref_id = Column(Integer, nullable=False)
        description_text_ref_id = Column(Integer, nullable=True)

The registry is process-wide and keyed by entity class. It is written while
model modules are imported and only read afterwards.
"""

import threading
from typing import Callable, Dict, List, Type, TypeVar

ModelT = TypeVar("ModelT", bound=type)


class LocalizedTextRefRegistry:
    """
    Ordered, type-keyed registry of localized text reference field names.

    Registering the same field twice keeps both entries; lookups still answer
    correctly and field discovery de-duplicates.
    """

    _refs: Dict[type, List[str]] = {}
    _lock = threading.Lock()

    @classmethod
    def register(cls, model_class: type, *field_names: str) -> None:
        """
        Append field names to the registry entry of a model class.

        Args:
            model_class: The entity class declaring the fields
            *field_names: Attribute names holding reference IDs
        """
        with cls._lock:
            cls._refs.setdefault(model_class, []).extend(field_names)

    @classmethod
    def get(cls, model_class: type) -> List[str]:
        """
        Get the tagged fields of a model class, including inherited ones.

        Args:
            model_class: The entity class

        Returns:
            Field names in declaration order (base classes first)
        """
        fields: List[str] = []
        for klass in reversed(model_class.__mro__):
            fields.extend(cls._refs.get(klass, ()))
        return fields

    @classmethod
    def get_all(cls) -> Dict[type, List[str]]:
        with cls._lock:
            return {k: list(v) for k, v in cls._refs.items()}


def register_localized_text_refs(model_class: type, *field_names: str) -> None:
    LocalizedTextRefRegistry.register(model_class, *field_names)


def localized_text_refs(*field_names: str) -> Callable[[ModelT], ModelT]:
    """Class decorator tagging ``field_names`` as localized text references."""

    def decorator(model_class: ModelT) -> ModelT:
        register_localized_text_refs(model_class, *field_names)
        return model_class

    return decorator


def get_localized_text_refs(model_class: Type) -> List[str]:
    return LocalizedTextRefRegistry.get(model_class)


def is_localized_text_ref(model_class: Type, field_name: str) -> bool:
    return field_name in get_localized_text_refs(model_class)
