# File: app/services/city_service.py
"""
Service for cities.

Besides the generic CRUD pipeline, a city can be looked up by state with its
texts resolved in one batched query.
"""

import logging
from typing import Any, Dict, List, Optional

from app.core.exceptions import ValidationException
from app.db.models.city import City
from app.repositories.city_repository import CityRepository
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


class CityService(BaseService[City]):
    """
    Service for managing City entities.
    """

    repository_class = CityRepository
    entity_name = "City"

    def validate_before_create(self, data: Dict[str, Any]) -> None:
        if not data.get("state"):
            raise ValidationException("City state is required", {"state": ["Field is required"]})
        self._validate_coordinates(data)

    def validate_before_update(self, id: Any, data: Dict[str, Any], existing: City) -> None:
        if "state" in data and data["state"] == "":
            raise ValidationException("City state cannot be empty", {"state": ["Field cannot be empty"]})
        self._validate_coordinates(data)

    @staticmethod
    def _validate_coordinates(data: Dict[str, Any]) -> None:
        errors = {}
        for field, bound in (("latitude", 90), ("longitude", 180)):
            value = data.get(field)
            if value is None:
                continue
            try:
                number = float(value)
            except (TypeError, ValueError):
                errors[field] = [f"{field.capitalize()} must be a number"]
                continue
            if not -bound <= number <= bound:
                errors[field] = [f"{field.capitalize()} must be between -{bound} and {bound}"]
        if errors:
            raise ValidationException("Invalid coordinates", errors)

    def find_by_state(
            self,
            state: str,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List the cities of one state.

        Args:
            state: State abbreviation (e.g. 'BA')
            language: Language of the texts
            fallback_language: Language used for texts missing in ``language``

        Returns:
            Response dictionaries
        """
        cities = self.repository.find_by_state(state)
        logger.debug(f"Found {len(cities)} cities in state {state}")
        return self._shape(cities, language, fallback_language)
