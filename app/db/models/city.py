# File: app/db/models/city.py
"""
City model.

A city owns locations, events and stories. Its name, description and
"what to observe" texts live in the localized text store.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Column, Float, Integer, String
from sqlalchemy.orm import Mapped, relationship

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity

if TYPE_CHECKING:
    from app.db.models.event import Event
    from app.db.models.location import Location
    from app.db.models.story import StoryCity


@localized_text_refs(
    "name_text_ref_id",
    "description_text_ref_id",
    "what_to_observe_text_ref_id",
)
class City(SoftDeleteBaseEntity):
    """
    City shown in the guide.

    Attributes:
        city_id: Primary key
        name_text_ref_id: Reference to the localized city name
        description_text_ref_id: Reference to the localized description
        what_to_observe_text_ref_id: Reference to the localized highlights text
        latitude, longitude: Coordinates of the city centre
        state: State abbreviation (e.g. 'BA')
        image_url: Cover image
    """

    __tablename__ = "cities"

    city_id = Column(Integer, primary_key=True, autoincrement=True)
    name_text_ref_id = Column(Integer, nullable=False)
    description_text_ref_id = Column(Integer, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    state = Column(String(255), nullable=False)
    image_url = Column(String(255), nullable=True)
    what_to_observe_text_ref_id = Column(Integer, nullable=True)

    # Relationships
    locations: Mapped[List["Location"]] = relationship("Location", back_populates="city")
    events: Mapped[List["Event"]] = relationship("Event", back_populates="city")
    stories: Mapped[List["StoryCity"]] = relationship("StoryCity", back_populates="city")

    def __repr__(self) -> str:
        return f"<City(city_id={self.city_id}, state='{self.state}')>"
