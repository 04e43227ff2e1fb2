# File: app/repositories/repository_factory.py

from typing import Dict, Optional, Type

from sqlalchemy.orm import Session

from app.repositories.base_repository import BaseRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.city_repository import CityRepository
from app.repositories.event_repository import EventRepository
from app.repositories.faq_repository import FAQRepository
from app.repositories.location_repository import LocationRepository
from app.repositories.location_type_repository import LocationTypeRepository
from app.repositories.route_repository import RouteRepository
from app.repositories.story_repository import (
    StoryCityRepository,
    StoryEventRepository,
    StoryLocationRepository,
    StoryRouteRepository,
)

# Localization System Repository
from app.repositories.localized_text_repository import LocalizedTextRepository


class RepositoryFactory:
    """
    Factory for creating repository instances.

    Centralizes repository creation so that every repository built for one
    unit of work shares the same database session, and therefore the same
    transaction.
    """

    def __init__(self, session: Session):
        """
        Initialize the repository factory.

        Args:
            session (Session): SQLAlchemy database session
        """
        self.session = session

        # Cache for localization repository
        self._localized_text_repository: Optional[LocalizedTextRepository] = None

    def create(self, repository_class: Type[BaseRepository]) -> BaseRepository:
        """Create any repository class bound to this factory's session."""
        return repository_class(self.session)

    # Content repositories
    def create_city_repository(self) -> CityRepository:
        """Create a CityRepository instance."""
        return CityRepository(self.session)

    def create_location_repository(self) -> LocationRepository:
        """Create a LocationRepository instance."""
        return LocationRepository(self.session)

    def create_location_type_repository(self) -> LocationTypeRepository:
        """Create a LocationTypeRepository instance."""
        return LocationTypeRepository(self.session)

    def create_event_repository(self) -> EventRepository:
        """Create an EventRepository instance."""
        return EventRepository(self.session)

    def create_route_repository(self) -> RouteRepository:
        """Create a RouteRepository instance."""
        return RouteRepository(self.session)

    def create_category_repository(self) -> CategoryRepository:
        """Create a CategoryRepository instance."""
        return CategoryRepository(self.session)

    def create_faq_repository(self) -> FAQRepository:
        """Create a FAQRepository instance."""
        return FAQRepository(self.session)

    # Story repositories
    def create_story_city_repository(self) -> StoryCityRepository:
        return StoryCityRepository(self.session)

    def create_story_route_repository(self) -> StoryRouteRepository:
        return StoryRouteRepository(self.session)

    def create_story_location_repository(self) -> StoryLocationRepository:
        return StoryLocationRepository(self.session)

    def create_story_event_repository(self) -> StoryEventRepository:
        return StoryEventRepository(self.session)

    # Localization repository
    def create_localized_text_repository(self) -> LocalizedTextRepository:
        """
        Get the LocalizedTextRepository for this session.

        The instance is cached: every service of one unit of work writes
        translations through the same repository.

        Returns:
            LocalizedTextRepository instance
        """
        if self._localized_text_repository is None:
            self._localized_text_repository = LocalizedTextRepository(self.session)
        return self._localized_text_repository

    def get_all_repositories(self) -> Dict[str, BaseRepository]:
        """Build one instance of every content repository, keyed by entity name."""
        return {
            "city": self.create_city_repository(),
            "location": self.create_location_repository(),
            "location_type": self.create_location_type_repository(),
            "event": self.create_event_repository(),
            "route": self.create_route_repository(),
            "category": self.create_category_repository(),
            "faq": self.create_faq_repository(),
            "story_city": self.create_story_city_repository(),
            "story_route": self.create_story_route_repository(),
            "story_location": self.create_story_location_repository(),
            "story_event": self.create_story_event_repository(),
            "localized_text": self.create_localized_text_repository(),
        }
