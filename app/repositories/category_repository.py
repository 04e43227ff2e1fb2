# File: app/repositories/category_repository.py

from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.category import Category
from app.repositories.base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for content categories, searched by localized name."""

    def __init__(self, session: Session):
        super().__init__(session, Category)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        params = self._search_params(search)
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    Category.name_text_ref_id, params["search"], params.get("language")
                )
            )
        return stmt
