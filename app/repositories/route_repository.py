# File: app/repositories/route_repository.py

from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.route import Route
from app.repositories.base_repository import BaseRepository


class RouteRepository(BaseRepository[Route]):
    """Repository for tourist routes, searched by localized title."""

    def __init__(self, session: Session):
        super().__init__(session, Route)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        params = self._search_params(search)
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    Route.title_text_ref_id, params["search"], params.get("language")
                )
            )
        return stmt
