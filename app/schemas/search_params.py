# File: app/schemas/search_params.py
"""
Search parameter schemas for the content platform.

This module contains Pydantic models for the search bag carried by
``PaginationRequest.search``. Repositories also accept a plain dictionary
with the same keys.
"""

from typing import Optional
from pydantic import BaseModel, Field


class LocalizedSearchParams(BaseModel):
    """
    Base search parameters: a free-text term matched against a localized
    text slot in one language.
    """
    search: Optional[str] = Field(None, description="Substring matched against the localized name")
    language: Optional[str] = Field(None, description="Language of the text to match (defaults to the read language)")


class CitySearchParams(LocalizedSearchParams):
    """
    Search parameters for filtering city records.
    """
    state: Optional[str] = Field(None, description="Filter by state abbreviation")


class LocationSearchParams(LocalizedSearchParams):
    """
    Search parameters for filtering location records.
    """
    city_id: Optional[int] = Field(None, description="Filter by city ID")
    type_id: Optional[int] = Field(None, description="Filter by location type ID")


class EventSearchParams(LocalizedSearchParams):
    """
    Search parameters for filtering event records.
    """
    city_id: Optional[int] = Field(None, description="Filter by city ID")


class StorySearchParams(LocalizedSearchParams):
    """
    Search parameters for filtering stories of one parent entity.
    """
    parent_id: Optional[int] = Field(None, description="ID of the owning city, route, location or event")
