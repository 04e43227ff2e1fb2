# File: app/schemas/pagination.py
"""
Pagination schemas shared by every entity.

A request carries the page number, page size, optional sort and an opaque
search bag interpreted by the entity repository. The response metadata
derives ``total_pages``, ``has_next`` and ``has_prev`` from ``page``,
``limit`` and ``total``; they are never stored on their own.
"""

import math
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from app.core.config import settings

ItemT = TypeVar("ItemT")


class PaginationRequest(BaseModel):
    """
    Page request. Out-of-range page/limit values are normalized, not rejected.
    """

    page: int = Field(settings.DEFAULT_PAGE, description="Page number, starting at 1")
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, description="Items per page")
    sort_by: Optional[str] = Field(None, description="Entity attribute to sort by")
    sort_order: str = Field("ASC", description="ASC or DESC")
    search: Optional[Any] = Field(None, description="Entity specific search parameters")

    @field_validator("page", mode="before")
    @classmethod
    def normalize_page(cls, v: Any) -> int:
        try:
            page = int(v)
        except (TypeError, ValueError):
            return 1
        return page if page > 0 else 1

    @field_validator("limit", mode="before")
    @classmethod
    def normalize_limit(cls, v: Any) -> int:
        try:
            limit = int(v)
        except (TypeError, ValueError):
            return settings.DEFAULT_PAGE_SIZE
        if limit <= 0:
            return settings.DEFAULT_PAGE_SIZE
        return min(limit, settings.MAX_PAGE_SIZE)

    @field_validator("sort_order", mode="before")
    @classmethod
    def normalize_sort_order(cls, v: Any) -> str:
        if v is None or v == "":
            return "ASC"
        order = str(v).upper()
        if order not in ("ASC", "DESC"):
            raise ValueError("sort_order must be ASC or DESC")
        return order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationResponse(BaseModel):
    """Pagination metadata returned alongside a page of items."""

    page: int
    limit: int
    total: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @computed_field
    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @classmethod
    def from_request_and_total(cls, request: PaginationRequest, total: int) -> "PaginationResponse":
        return cls(page=request.page, limit=request.limit, total=total)


class ListResponse(BaseModel, Generic[ItemT]):
    """A page of items with its pagination metadata."""

    items: List[ItemT]
    pagination: PaginationResponse

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def total(self) -> int:
        return self.pagination.total
