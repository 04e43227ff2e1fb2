# File: app/repositories/location_type_repository.py

from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.location_type import LocationType
from app.repositories.base_repository import BaseRepository


class LocationTypeRepository(BaseRepository[LocationType]):
    """Repository for location types (e.g. beach, museum, church)."""

    def __init__(self, session: Session):
        super().__init__(session, LocationType)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        params = self._search_params(search)
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    LocationType.name_text_ref_id, params["search"], params.get("language")
                )
            )
        return stmt
