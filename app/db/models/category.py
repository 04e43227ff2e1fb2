# File: app/db/models/category.py

from sqlalchemy import Column, Integer, String

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity


@localized_text_refs("name_text_ref_id", "description_text_ref_id")
class Category(SoftDeleteBaseEntity):
    """Category used to group cities, routes, locations and events."""

    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name_text_ref_id = Column(Integer, nullable=False)
    description_text_ref_id = Column(Integer, nullable=True)
    image_url = Column(String(255), nullable=True)
