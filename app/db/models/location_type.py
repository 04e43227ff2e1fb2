# File: app/db/models/location_type.py

from sqlalchemy import Column, Integer

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity


@localized_text_refs("name_text_ref_id")
class LocationType(SoftDeleteBaseEntity):
    """Type of a location (museum, beach, church, ...)."""

    __tablename__ = "types"

    type_id = Column(Integer, primary_key=True, autoincrement=True)
    name_text_ref_id = Column(Integer, nullable=False)
