# File: app/db/models/story.py
"""
Story models.

A story is a narrated text (with an optional audio file per language)
attached to a city, route, location or event. Stories are removed for good
on delete; they carry no soft-delete columns.

The audio URL differs per language, so it is a localized text reference with
the short ``_ref_id`` suffix (``audio_url_ref_id`` -> ``audio_url``).
"""

from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import Mapped, relationship

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import BaseEntity

if TYPE_CHECKING:
    from app.db.models.city import City
    from app.db.models.event import Event
    from app.db.models.location import Location
    from app.db.models.route import Route


@localized_text_refs("name_text_ref_id", "description_text_ref_id", "audio_url_ref_id")
class StoryBase(BaseEntity):
    """Columns shared by every story table."""

    __abstract__ = True

    # Name of the foreign key column pointing at the owning entity
    PARENT_FIELD: ClassVar[str] = ""

    name_text_ref_id = Column(Integer, nullable=False)
    description_text_ref_id = Column(Integer, nullable=True)
    play_count = Column(Integer, nullable=False, default=0)
    audio_url_ref_id = Column(Integer, nullable=True)
    audio_duration = Column(Integer, nullable=True)  # seconds


class StoryCity(StoryBase):
    __tablename__ = "story_cities"
    PARENT_FIELD = "city_id"

    story_city_id = Column(Integer, primary_key=True, autoincrement=True)
    city_id = Column(Integer, ForeignKey("cities.city_id", ondelete="CASCADE"), nullable=False, index=True)

    city: Mapped["City"] = relationship("City", back_populates="stories")


class StoryRoute(StoryBase):
    __tablename__ = "story_routes"
    PARENT_FIELD = "route_id"

    story_route_id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(Integer, ForeignKey("routes.route_id", ondelete="CASCADE"), nullable=False, index=True)

    route: Mapped["Route"] = relationship("Route", back_populates="stories")


class StoryLocation(StoryBase):
    __tablename__ = "story_locations"
    PARENT_FIELD = "location_id"

    story_location_id = Column(Integer, primary_key=True, autoincrement=True)
    location_id = Column(Integer, ForeignKey("locations.location_id", ondelete="CASCADE"), nullable=False, index=True)

    location: Mapped["Location"] = relationship("Location", back_populates="stories")


class StoryEvent(StoryBase):
    __tablename__ = "story_events"
    PARENT_FIELD = "event_id"

    story_event_id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)

    event: Mapped["Event"] = relationship("Event", back_populates="stories")
