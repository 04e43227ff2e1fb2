# File: app/repositories/city_repository.py
"""
Repository for City entities.

Cities are searched by a substring of their localized name in one language
and filtered by state abbreviation.
"""

import logging
from typing import Any, List

from sqlalchemy import Select, func
from sqlalchemy.orm import Session

from app.db.models.city import City
from app.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CityRepository(BaseRepository[City]):
    """
    Repository for City entity operations.
    """

    def __init__(self, session: Session):
        """
        Initialize the repository with a database session.

        Args:
            session: SQLAlchemy database session
        """
        super().__init__(session, City)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        """
        Filter cities by localized name and state.

        Args:
            stmt: The select statement being built
            search: CitySearchParams, a mapping with the same keys, or a bare name

        Returns:
            The filtered statement
        """
        params = self._search_params(search)

        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    City.name_text_ref_id, params["search"], params.get("language")
                )
            )
        if params.get("state"):
            stmt = stmt.where(func.upper(City.state) == str(params["state"]).upper())

        return stmt

    def find_by_state(self, state: str) -> List[City]:
        """
        Get the cities of one state.

        Args:
            state: State abbreviation (case-insensitive)

        Returns:
            Cities of that state, soft-deleted ones excluded
        """
        return self.find_all(where=[func.upper(City.state) == state.upper()])
