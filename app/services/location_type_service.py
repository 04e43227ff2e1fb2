# File: app/services/location_type_service.py

from app.db.models.location_type import LocationType
from app.repositories.location_type_repository import LocationTypeRepository
from app.services.base_service import BaseService


class LocationTypeService(BaseService[LocationType]):
    """Service for location types."""

    repository_class = LocationTypeRepository
    entity_name = "LocationType"
