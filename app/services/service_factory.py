# app/services/service_factory.py
"""
Factory for creating service instances.

This module provides a centralized factory for creating service instances,
ensuring that every service of one unit of work shares the session and the
translation store repository.
"""

from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from app.repositories.repository_factory import RepositoryFactory
from app.services.category_service import CategoryService
from app.services.city_service import CityService
from app.services.event_service import EventService
from app.services.faq_service import FAQService
from app.services.location_service import LocationService
from app.services.location_type_service import LocationTypeService
from app.services.route_service import RouteService
from app.services.story_service import (
    AudioDurationProvider,
    StoryCityService,
    StoryEventService,
    StoryLocationService,
    StoryRouteService,
)


class ServiceFactory:
    """
    Factory for creating service instances with proper dependencies.

    Services are cached per factory, so asking twice for the same service
    returns the same instance.
    """

    def __init__(
        self,
        session: Session,
        audio_duration_provider: Optional[AudioDurationProvider] = None,
    ):
        """
        Initialize the service factory with dependencies.

        Args:
            session: Database session for persistence operations
            audio_duration_provider: Optional callable used by story services
                to look up the duration of an audio URL
        """
        self.session = session
        self.audio_duration_provider = audio_duration_provider
        self.repository_factory = RepositoryFactory(session)

        # Service instance cache for singleton services
        self._service_instances: Dict[str, Any] = {}

    def _get(self, key: str, build: Callable[[], Any]) -> Any:
        if key not in self._service_instances:
            self._service_instances[key] = build()
        return self._service_instances[key]

    def _common(self) -> Dict[str, Any]:
        return {"localized_text_repository": self.repository_factory.create_localized_text_repository()}

    def get_city_service(self) -> CityService:
        """Get a CityService instance."""
        return self._get("city_service", lambda: CityService(self.session, **self._common()))

    def get_location_service(self) -> LocationService:
        """Get a LocationService instance."""
        return self._get("location_service", lambda: LocationService(self.session, **self._common()))

    def get_location_type_service(self) -> LocationTypeService:
        """Get a LocationTypeService instance."""
        return self._get(
            "location_type_service", lambda: LocationTypeService(self.session, **self._common())
        )

    def get_event_service(self) -> EventService:
        """Get an EventService instance."""
        return self._get("event_service", lambda: EventService(self.session, **self._common()))

    def get_route_service(self) -> RouteService:
        """Get a RouteService instance."""
        return self._get("route_service", lambda: RouteService(self.session, **self._common()))

    def get_category_service(self) -> CategoryService:
        """Get a CategoryService instance."""
        return self._get("category_service", lambda: CategoryService(self.session, **self._common()))

    def get_faq_service(self) -> FAQService:
        """Get a FAQService instance."""
        return self._get("faq_service", lambda: FAQService(self.session, **self._common()))

    # Story services
    def get_story_city_service(self) -> StoryCityService:
        return self._get(
            "story_city_service",
            lambda: StoryCityService(
                self.session, audio_duration_provider=self.audio_duration_provider, **self._common()
            ),
        )

    def get_story_route_service(self) -> StoryRouteService:
        return self._get(
            "story_route_service",
            lambda: StoryRouteService(
                self.session, audio_duration_provider=self.audio_duration_provider, **self._common()
            ),
        )

    def get_story_location_service(self) -> StoryLocationService:
        return self._get(
            "story_location_service",
            lambda: StoryLocationService(
                self.session, audio_duration_provider=self.audio_duration_provider, **self._common()
            ),
        )

    def get_story_event_service(self) -> StoryEventService:
        return self._get(
            "story_event_service",
            lambda: StoryEventService(
                self.session, audio_duration_provider=self.audio_duration_provider, **self._common()
            ),
        )
