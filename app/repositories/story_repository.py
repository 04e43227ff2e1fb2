# File: app/repositories/story_repository.py
"""
Repositories for stories.

Each story table hangs off one parent entity through the column named by the
model's ``PARENT_FIELD``. The shared base filters by that column and by the
localized story name; the four concrete repositories only bind the model.
"""

import logging
from typing import Any, List, Type

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.db.models.story import StoryBase, StoryCity, StoryEvent, StoryLocation, StoryRoute
from app.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class StoryRepository(BaseRepository[StoryBase]):
    """
    Base repository for story entities.

    Stories carry no soft-delete columns, so every delete removes the row.
    """

    model: Type[StoryBase]

    def __init__(self, session: Session):
        super().__init__(session)

    @property
    def parent_field(self) -> str:
        return self._get_model().PARENT_FIELD

    def _parent_column(self):
        return getattr(self._get_model(), self.parent_field)

    def apply_search(self, stmt: Select, search: Any) -> Select:
        """
        Filter stories by parent entity and localized name.

        Args:
            stmt: The select statement being built
            search: StorySearchParams or a mapping; ``parent_id`` may also be
                given under the parent column name (e.g. ``city_id``)

        Returns:
            The filtered statement
        """
        params = self._search_params(search)

        parent_id = params.get("parent_id", params.get(self.parent_field))
        if parent_id is not None:
            stmt = stmt.where(self._parent_column() == parent_id)
        if params.get("search"):
            stmt = stmt.where(
                self.localized_text_matches(
                    self._get_model().name_text_ref_id, params["search"], params.get("language")
                )
            )

        return stmt

    def find_by_parent_id(self, parent_id: int) -> List[StoryBase]:
        """
        Get every story of one parent entity, in creation order.

        Args:
            parent_id: ID of the owning city, route, location or event

        Returns:
            The parent's stories
        """
        stories = self.find_all(
            where=[self._parent_column() == parent_id],
            order=[self._pk_attr()],
        )
        logger.debug(
            f"Found {len(stories)} {self._get_model().__name__} rows for {self.parent_field}={parent_id}"
        )
        return stories

    def increment_play_count(self, id: int) -> bool:
        """Add one to the play counter of a story."""
        model_class = self._get_model()
        return self.update(id, {"play_count": model_class.play_count + 1}) is not None


class StoryCityRepository(StoryRepository):
    model = StoryCity


class StoryRouteRepository(StoryRepository):
    model = StoryRoute


class StoryLocationRepository(StoryRepository):
    model = StoryLocation


class StoryEventRepository(StoryRepository):
    model = StoryEvent
