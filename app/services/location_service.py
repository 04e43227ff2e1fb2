# File: app/services/location_service.py

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import EntityNotFoundException, ValidationException
from app.db.models.location import Location
from app.repositories.city_repository import CityRepository
from app.repositories.location_repository import LocationRepository
from app.repositories.location_type_repository import LocationTypeRepository
from app.services.base_service import BaseService


class LocationService(BaseService[Location]):
    """
    Service for managing Location entities.

    A location must point at an existing city, and at an existing location
    type when one is given.
    """

    repository_class = LocationRepository
    entity_name = "Location"

    def __init__(self, session: Session, **kwargs):
        super().__init__(session, **kwargs)
        self.city_repository = CityRepository(session)
        self.location_type_repository = LocationTypeRepository(session)

    def _validate_references(self, data: Dict[str, Any]) -> None:
        city_id = data.get("city_id")
        if city_id is not None and not self.city_repository.exists(city_id):
            raise EntityNotFoundException("City", city_id)
        type_id = data.get("type_id")
        if type_id is not None and not self.location_type_repository.exists(type_id):
            raise EntityNotFoundException("LocationType", type_id)

    def validate_before_create(self, data: Dict[str, Any]) -> None:
        if data.get("city_id") is None:
            raise ValidationException("Location city is required", {"city_id": ["Field is required"]})
        self._validate_references(data)

    def validate_before_update(self, id: Any, data: Dict[str, Any], existing: Location) -> None:
        self._validate_references(data)

    def find_by_city(
            self,
            city_id: int,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return self._shape(self.repository.find_by_city(city_id), language, fallback_language)
