# File: app/db/models/route.py

from typing import TYPE_CHECKING, List

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import Mapped, relationship

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity

if TYPE_CHECKING:
    from app.db.models.story import StoryRoute


@localized_text_refs(
    "title_text_ref_id",
    "description_text_ref_id",
    "what_to_observe_text_ref_id",
)
class Route(SoftDeleteBaseEntity):
    """Themed route across one or more cities."""

    __tablename__ = "routes"

    route_id = Column(Integer, primary_key=True, autoincrement=True)
    title_text_ref_id = Column(Integer, nullable=False)
    description_text_ref_id = Column(Integer, nullable=True)
    what_to_observe_text_ref_id = Column(Integer, nullable=True)
    image_url = Column(String(255), nullable=True)

    stories: Mapped[List["StoryRoute"]] = relationship("StoryRoute", back_populates="route")
