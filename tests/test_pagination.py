# tests/test_pagination.py
import math

import pytest
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.pagination import ListResponse, PaginationRequest, PaginationResponse


def test_request_defaults():
    request = PaginationRequest()

    assert request.page == 1
    assert request.limit == settings.DEFAULT_PAGE_SIZE
    assert request.sort_order == "ASC"
    assert request.search is None
    assert request.offset == 0


def test_request_normalizes_out_of_range_values():
    assert PaginationRequest(page=0).page == 1
    assert PaginationRequest(page=-3).page == 1
    assert PaginationRequest(page="4").page == 4
    assert PaginationRequest(limit=0).limit == settings.DEFAULT_PAGE_SIZE
    assert PaginationRequest(limit=10_000).limit == settings.MAX_PAGE_SIZE
    assert PaginationRequest(sort_order="desc").sort_order == "DESC"


def test_request_rejects_unknown_sort_order():
    with pytest.raises(ValidationError):
        PaginationRequest(sort_order="sideways")


def test_offset_follows_page_and_limit():
    assert PaginationRequest(page=3, limit=20).offset == 40


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 95])
@pytest.mark.parametrize("limit", [1, 10, 25])
def test_response_metadata_is_derived(total, limit):
    total_pages = math.ceil(total / limit)
    for page in range(1, total_pages + 2):
        meta = PaginationResponse(page=page, limit=limit, total=total)

        assert meta.total_pages == total_pages
        assert meta.has_next == (page < total_pages)
        assert meta.has_prev == (page > 1)


def test_response_serializes_derived_fields():
    meta = PaginationResponse.from_request_and_total(PaginationRequest(page=2, limit=5), 12)

    assert meta.model_dump() == {
        "page": 2,
        "limit": 5,
        "total": 12,
        "total_pages": 3,
        "has_next": True,
        "has_prev": True,
    }


def test_list_response_total():
    response = ListResponse(
        items=[{"id": 1}],
        pagination=PaginationResponse(page=1, limit=10, total=1),
    )

    assert response.total == 1
    assert response.items == [{"id": 1}]
