# File: app/utils/localized_text_helper.py
"""
Discovery and mapping of localized text reference fields.

Entity attributes ending in ``_text_ref_id`` (or the short ``_ref_id``) hold
a reference ID into ``localized_texts``. The request/response shape exposes
the same slot under the stripped name:

    name_text_ref_id  <->  name
    audio_url_ref_id   ->  audio_url

Only the long suffix is reconstructed when going from a DTO field back to an
entity field.
"""

import logging
import re
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from sqlalchemy import inspect

from app.db.localized_text_ref import get_localized_text_refs

logger = logging.getLogger(__name__)

# Also accepts the camelCase spelling used by external tooling
_REF_SUFFIX = re.compile(r"(_text_ref_id|_ref_id|TextRefId|RefId)$")
ENTITY_FIELD_SUFFIX = "_text_ref_id"


@dataclass(frozen=True)
class LocalizedTextField:
    """A tagged entity column holding a reference ID."""

    property_name: str
    column_name: str
    is_optional: bool

    @property
    def dto_field_name(self) -> str:
        return get_dto_field_name(self.property_name)


@lru_cache(maxsize=None)
def _discover_fields(model: Type) -> Tuple[LocalizedTextField, ...]:
    tagged = get_localized_text_refs(model)
    if not tagged:
        return ()

    column_attrs = inspect(model).column_attrs
    fields = []
    seen = set()
    for name in tagged:
        if name in seen:
            continue
        seen.add(name)
        if name not in column_attrs:
            logger.warning(
                f"{model.__name__}.{name} is tagged as localized text reference "
                f"but is not a mapped column"
            )
            continue
        column = column_attrs[name].columns[0]
        fields.append(
            LocalizedTextField(
                property_name=name,
                column_name=column.name,
                is_optional=bool(column.nullable),
            )
        )
    return tuple(fields)


def get_localized_text_fields(model: Type) -> List[LocalizedTextField]:
    """
    Get all localized text reference fields of an entity class.

    Args:
        model: SQLAlchemy entity class

    Returns:
        Fields in registration order with storage name and optionality
    """
    return list(_discover_fields(model))


def has_localized_text_fields(model: Type) -> bool:
    return bool(_discover_fields(model))


def get_dto_field_name(entity_field_name: str) -> str:
    """
    Get the DTO field name from an entity field name.

    Example: "name_text_ref_id" -> "name", "audio_url_ref_id" -> "audio_url"
    """
    return _REF_SUFFIX.sub("", entity_field_name)


def get_entity_field_name(dto_field_name: str) -> str:
    """
    Get the entity field name from a DTO field name.

    Example: "name" -> "name_text_ref_id"
    """
    return f"{dto_field_name}{ENTITY_FIELD_SUFFIX}"


def extract_localized_fields_from_dto(
    dto: Mapping[str, Any], model: Type
) -> Dict[str, Any]:
    """
    Extract localized text values from a DTO keyed by entity field name.

    Args:
        dto: Request payload
        model: Entity class

    Returns:
        Mapping of entity field name (e.g. "name_text_ref_id") to the DTO value
    """
    localized_fields = {}
    for field in get_localized_text_fields(model):
        value = dto.get(field.dto_field_name)
        if value is not None:
            localized_fields[field.property_name] = value
    return localized_fields


def is_reference_id(value: Any) -> bool:
    """True for a positive integer reference ID (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _get_value(entity: Any, name: str) -> Any:
    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


def collect_reference_ids(entities: Iterable[Any], model: Type) -> List[int]:
    """
    Collect the distinct reference IDs held by a set of entities.

    Args:
        entities: ORM instances or dictionaries of one entity class
        model: Entity class

    Returns:
        Distinct positive reference IDs in first-seen order
    """
    fields = get_localized_text_fields(model)
    reference_ids: Dict[int, None] = {}
    for entity in entities:
        for field in fields:
            ref_id = _get_value(entity, field.property_name)
            if is_reference_id(ref_id):
                reference_ids[ref_id] = None
    return list(reference_ids)


def map_entity_to_dto(
    entity: Mapping[str, Any], localized_texts: Mapping[int, str], model: Type
) -> Dict[str, Any]:
    """
    Fold resolved texts into an entity dictionary.

    Reference ID fields stay as they are; each DTO field gets the resolved
    text, or None when no text exists in the fetched language(s).

    Args:
        entity: Entity dictionary keyed by attribute name
        localized_texts: Mapping of reference ID to text
        model: Entity class

    Returns:
        New dictionary with DTO text fields added
    """
    dto = dict(entity)
    for field in get_localized_text_fields(model):
        ref_id = entity.get(field.property_name)
        dto_field_name = field.dto_field_name

        if is_reference_id(ref_id) and ref_id in localized_texts:
            dto[dto_field_name] = localized_texts[ref_id]
        elif ref_id is not None and not is_reference_id(ref_id):
            logger.warning(
                f"Invalid reference ID for {field.property_name}: {ref_id!r} "
                f"(type: {type(ref_id).__name__})"
            )
        else:
            dto.setdefault(dto_field_name, None)
    return dto


def generate_reference_id(max_value: int, min_value: int = 1) -> int:
    """
    Generate a random reference ID candidate in [min_value, max_value].

    The caller checks the candidate against the store before using it.
    """
    return min_value + secrets.randbelow(max_value - min_value + 1)


def clear_field_cache() -> None:
    """Drop memoized field lists (used when models are registered late)."""
    _discover_fields.cache_clear()


def dto_field_names(model: Type) -> List[str]:
    return [field.dto_field_name for field in get_localized_text_fields(model)]


def field_for_dto_name(model: Type, dto_field_name: str) -> Optional[LocalizedTextField]:
    for field in get_localized_text_fields(model):
        if field.dto_field_name == dto_field_name:
            return field
    return None
