# File: app/repositories/location_repository.py
"""
Repository for Location entities.

Locations belong to a city and optionally to a location type; both are
available as search filters next to the localized name.
"""

from typing import Any, List

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.location import Location
from app.repositories.base_repository import BaseRepository


class LocationRepository(BaseRepository[Location]):
    """
    Repository for Location entity operations.
    """

    def __init__(self, session: Session):
        """
        Initialize the repository with a database session.

        Args:
            session: SQLAlchemy database session
        """
        super().__init__(session, Location)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        """
        Filter locations by city, type and localized name.

        Args:
            stmt: The select statement being built
            search: LocationSearchParams or a mapping with the same keys

        Returns:
            The filtered statement
        """
        params = self._search_params(search)

        if params.get("city_id") is not None:
            stmt = stmt.where(Location.city_id == params["city_id"])
        if params.get("type_id") is not None:
            stmt = stmt.where(Location.type_id == params["type_id"])
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    Location.name_text_ref_id, params["search"], params.get("language")
                )
            )

        return stmt

    def find_by_city(self, city_id: int) -> List[Location]:
        return self.find_all(where={"city_id": city_id})
