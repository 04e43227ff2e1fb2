# File: app/db/models/event.py
"""
Event model.

Events happen in a city on a given date. The event time is free text
("from 8pm", "all day") and is therefore a localized text reference too.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, relationship

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity

if TYPE_CHECKING:
    from app.db.models.city import City
    from app.db.models.story import StoryEvent


@localized_text_refs(
    "name_text_ref_id",
    "description_text_ref_id",
    "location_text_ref_id",
    "time_text_ref_id",
)
class Event(SoftDeleteBaseEntity):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    city_id = Column(Integer, ForeignKey("cities.city_id", ondelete="CASCADE"), nullable=False, index=True)
    name_text_ref_id = Column(Integer, nullable=False)
    description_text_ref_id = Column(Integer, nullable=True)
    location_text_ref_id = Column(Integer, nullable=True)
    event_date = Column(Date, nullable=True)
    time_text_ref_id = Column(Integer, nullable=True)
    image_url = Column(String(255), nullable=True)

    # Relationships
    city: Mapped["City"] = relationship("City", back_populates="events")
    stories: Mapped[List["StoryEvent"]] = relationship("StoryEvent", back_populates="event")
