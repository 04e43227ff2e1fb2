# File: app/services/route_service.py

from app.db.models.route import Route
from app.repositories.route_repository import RouteRepository
from app.services.base_service import BaseService


class RouteService(BaseService[Route]):
    """Service for tourist routes."""

    repository_class = RouteRepository
    entity_name = "Route"
