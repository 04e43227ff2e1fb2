# File: app/repositories/faq_repository.py

from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.faq import FAQ
from app.repositories.base_repository import BaseRepository


class FAQRepository(BaseRepository[FAQ]):
    """Repository for frequently asked questions, searched by localized question."""

    def __init__(self, session: Session):
        super().__init__(session, FAQ)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        params = self._search_params(search)
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    FAQ.question_text_ref_id, params["search"], params.get("language")
                )
            )
        return stmt
