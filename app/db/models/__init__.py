"""
Initializes the models package for SQLAlchemy declarative base.

This file imports all model classes into the `app.db.models` namespace. This
ensures that SQLAlchemy's metadata is populated with all table definitions
and that every entity has registered its localized text reference fields
when `Base.metadata.create_all()` is called.
"""

# Import the Base for declarative models
from app.db.models.base import (
    Base,
    BaseEntity,
    SoftDeleteBaseEntity,
    SoftDeleteMixin,
    TimestampMixin,
    supports_soft_delete,
)

# Translation store
from app.db.models.localized_text import LocalizedText

# Domain entities
from app.db.models.city import City
from app.db.models.location_type import LocationType
from app.db.models.location import Location
from app.db.models.event import Event
from app.db.models.route import Route
from app.db.models.category import Category
from app.db.models.faq import FAQ
from app.db.models.story import (
    StoryBase,
    StoryCity,
    StoryRoute,
    StoryLocation,
    StoryEvent,
)

__all__ = [
    "Base",
    "BaseEntity",
    "SoftDeleteBaseEntity",
    "SoftDeleteMixin",
    "TimestampMixin",
    "supports_soft_delete",
    "LocalizedText",
    "City",
    "LocationType",
    "Location",
    "Event",
    "Route",
    "Category",
    "FAQ",
    "StoryBase",
    "StoryCity",
    "StoryRoute",
    "StoryLocation",
    "StoryEvent",
]
