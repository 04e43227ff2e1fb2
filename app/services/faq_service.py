# File: app/services/faq_service.py

from app.db.models.faq import FAQ
from app.repositories.faq_repository import FAQRepository
from app.services.base_service import BaseService


class FAQService(BaseService[FAQ]):
    """Service for frequently asked questions."""

    repository_class = FAQRepository
    entity_name = "FAQ"
