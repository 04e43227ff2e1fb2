# File: app/services/story_service.py
"""
Services for stories.

A story belongs to one city, route, location or event. Creating or moving a
story checks that the parent exists. When an audio duration provider is
configured, the duration of a newly written audio URL is looked up and
stored; a failing provider never blocks the write, it only leaves
``audio_duration`` unset.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Type

from sqlalchemy.orm import Session

from app.core.exceptions import EntityNotFoundException, ValidationException
from app.db.models.story import StoryBase
from app.repositories.base_repository import BaseRepository
from app.repositories.city_repository import CityRepository
from app.repositories.event_repository import EventRepository
from app.repositories.location_repository import LocationRepository
from app.repositories.route_repository import RouteRepository
from app.repositories.story_repository import (
    StoryCityRepository,
    StoryEventRepository,
    StoryLocationRepository,
    StoryRepository,
    StoryRouteRepository,
)
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)

AudioDurationProvider = Callable[[str], Optional[float]]


class StoryService(BaseService[StoryBase]):
    """
    Base service for story entities.

    Subclasses bind the story repository and the repository of the parent
    entity.
    """

    repository_class: Type[StoryRepository]
    parent_repository_class: Type[BaseRepository]
    parent_name: str = "Parent"

    def __init__(
            self,
            session: Session,
            audio_duration_provider: Optional[AudioDurationProvider] = None,
            **kwargs,
    ):
        """
        Initialize service with dependencies.

        Args:
            session: Database session for persistence operations
            audio_duration_provider: Optional callable returning the duration
                in seconds of the audio file at a URL
            **kwargs: Passed through to BaseService
        """
        super().__init__(session, **kwargs)
        self.parent_repository = self.parent_repository_class(session)
        self.audio_duration_provider = audio_duration_provider

    @property
    def parent_field(self) -> str:
        return self.model.PARENT_FIELD

    def _ensure_parent(self, parent_id: Any) -> None:
        if not self.parent_repository.exists(parent_id):
            raise EntityNotFoundException(self.parent_name, parent_id)

    def validate_before_create(self, data: Dict[str, Any]) -> None:
        parent_id = data.get(self.parent_field)
        if parent_id is None:
            raise ValidationException(
                f"{self.entity_name} requires {self.parent_field}",
                {self.parent_field: ["Field is required"]},
            )
        self._ensure_parent(parent_id)

    def validate_before_update(self, id: Any, data: Dict[str, Any], existing: StoryBase) -> None:
        parent_id = data.get(self.parent_field)
        if parent_id is not None and parent_id != getattr(existing, self.parent_field):
            self._ensure_parent(parent_id)

    def after_create(self, entity: StoryBase, data: Dict[str, Any]) -> None:
        self._store_audio_duration(entity, data)

    def after_update(self, entity: StoryBase, data: Dict[str, Any]) -> None:
        self._store_audio_duration(entity, data)

    def _store_audio_duration(self, entity: StoryBase, data: Dict[str, Any]) -> None:
        audio_url = data.get("audio_url")
        if not self.audio_duration_provider or not isinstance(audio_url, str) or not audio_url:
            return

        story_id = self.repository.get_primary_key(entity)
        try:
            duration = self.audio_duration_provider(audio_url)
            if duration is None:
                return
            seconds = int(round(float(duration)))
        except Exception as e:
            logger.warning(f"Could not read audio duration for {self.entity_name} {story_id}: {e}")
            return

        self.repository.update(story_id, {"audio_duration": seconds})
        logger.debug(f"Stored audio duration {duration}s for {self.entity_name} {story_id}")

    def find_by_parent_id(
            self,
            parent_id: int,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List the stories of one parent entity.

        Raises:
            EntityNotFoundException: If the parent does not exist
        """
        self._ensure_parent(parent_id)
        stories = self.repository.find_by_parent_id(parent_id)
        return self._shape(stories, language, fallback_language)

    def register_play(self, id: Any) -> Dict[str, Any]:
        """Increment the play counter of a story."""
        with self.transaction():
            self.get_entity_or_404(id)
            self.repository.increment_play_count(id)
        return self.find_by_id(id)


class StoryCityService(StoryService):
    repository_class = StoryCityRepository
    parent_repository_class = CityRepository
    parent_name = "City"
    entity_name = "StoryCity"


class StoryRouteService(StoryService):
    repository_class = StoryRouteRepository
    parent_repository_class = RouteRepository
    parent_name = "Route"
    entity_name = "StoryRoute"


class StoryLocationService(StoryService):
    repository_class = StoryLocationRepository
    parent_repository_class = LocationRepository
    parent_name = "Location"
    entity_name = "StoryLocation"


class StoryEventService(StoryService):
    repository_class = StoryEventRepository
    parent_repository_class = EventRepository
    parent_name = "Event"
    entity_name = "StoryEvent"
