# File: app/services/category_service.py

from app.db.models.category import Category
from app.repositories.category_repository import CategoryRepository
from app.services.base_service import BaseService


class CategoryService(BaseService[Category]):
    """Service for content categories."""

    repository_class = CategoryRepository
    entity_name = "Category"
