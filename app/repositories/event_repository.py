# File: app/repositories/event_repository.py

from typing import Any, List

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.event import Event
from app.repositories.base_repository import BaseRepository


class EventRepository(BaseRepository[Event]):
    """
    Repository for Event entity operations.

    Events are listed per city and searched by localized name.
    """

    def __init__(self, session: Session):
        super().__init__(session, Event)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        """
        Filter events by city and localized name.

        Args:
            stmt: The select statement being built
            search: EventSearchParams or a mapping with the same keys

        Returns:
            The filtered statement
        """
        params = self._search_params(search)

        if params.get("city_id") is not None:
            stmt = stmt.where(Event.city_id == params["city_id"])
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    Event.name_text_ref_id, params["search"], params.get("language")
                )
            )

        return stmt

    def find_by_city(self, city_id: int) -> List[Event]:
        """Events of one city, most recent date first."""
        return self.find_all(
            where={"city_id": city_id},
            order=[Event.event_date.desc(), Event.event_id],
        )
