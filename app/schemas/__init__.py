# File: app/schemas/__init__.py
"""
Schemas package for the content platform.

This module exports the Pydantic models used for pagination and for the
entity specific search parameters.
"""

from .pagination import ListResponse, PaginationRequest, PaginationResponse
from .search_params import (
    CitySearchParams,
    EventSearchParams,
    LocalizedSearchParams,
    LocationSearchParams,
    StorySearchParams,
)

__all__ = [
    # Pagination
    'PaginationRequest', 'PaginationResponse', 'ListResponse',

    # Search
    'LocalizedSearchParams', 'CitySearchParams', 'LocationSearchParams',
    'EventSearchParams', 'StorySearchParams',
]
