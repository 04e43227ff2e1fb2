# File: app/db/models/location.py
"""
Location model: a point of interest inside a city.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, relationship

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity

if TYPE_CHECKING:
    from app.db.models.city import City
    from app.db.models.location_type import LocationType
    from app.db.models.story import StoryLocation


@localized_text_refs("name_text_ref_id", "description_text_ref_id")
class Location(SoftDeleteBaseEntity):
    __tablename__ = "locations"

    location_id = Column(Integer, primary_key=True, autoincrement=True)
    city_id = Column(Integer, ForeignKey("cities.city_id", ondelete="CASCADE"), nullable=False, index=True)
    name_text_ref_id = Column(Integer, nullable=False)
    description_text_ref_id = Column(Integer, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    type_id = Column(Integer, ForeignKey("types.type_id", ondelete="SET NULL"), nullable=True)
    image_url = Column(String(255), nullable=True)

    # Relationships
    city: Mapped["City"] = relationship("City", back_populates="locations")
    type: Mapped[Optional["LocationType"]] = relationship("LocationType")
    stories: Mapped[List["StoryLocation"]] = relationship("StoryLocation", back_populates="location")
