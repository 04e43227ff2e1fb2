# File: app/services/event_service.py
"""
Service for events.

Events belong to a city; create and update reject a city that does not exist
(or is soft deleted).
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import EntityNotFoundException, ValidationException
from app.db.models.event import Event
from app.repositories.city_repository import CityRepository
from app.repositories.event_repository import EventRepository
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


class EventService(BaseService[Event]):
    """
    Service for managing Event entities.
    """

    repository_class = EventRepository
    entity_name = "Event"

    def __init__(self, session: Session, **kwargs):
        """
        Initialize service with dependencies.

        Args:
            session: Database session for persistence operations
            **kwargs: Passed through to BaseService
        """
        super().__init__(session, **kwargs)
        self.city_repository = CityRepository(session)

    def _ensure_city(self, city_id: Any) -> None:
        if not self.city_repository.exists(city_id):
            logger.warning(f"Event refers to unknown city {city_id}")
            raise EntityNotFoundException("City", city_id)

    def validate_before_create(self, data: Dict[str, Any]) -> None:
        if data.get("city_id") is None:
            raise ValidationException("Event city is required", {"city_id": ["Field is required"]})
        self._ensure_city(data["city_id"])

    def validate_before_update(self, id: Any, data: Dict[str, Any], existing: Event) -> None:
        if data.get("city_id") is not None and data["city_id"] != existing.city_id:
            self._ensure_city(data["city_id"])

    def find_by_city(
            self,
            city_id: int,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List the events of one city, most recent first.

        Raises:
            EntityNotFoundException: If the city does not exist
        """
        self._ensure_city(city_id)
        return self._shape(self.repository.find_by_city(city_id), language, fallback_language)
