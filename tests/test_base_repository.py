# tests/test_base_repository.py
import math

import pytest
from sqlalchemy import inspect

from app.db.models import City, StoryCity
from app.repositories.base_repository import BaseRepository
from app.repositories.city_repository import CityRepository
from app.repositories.localized_text_repository import LocalizedTextRepository
from app.repositories.location_repository import LocationRepository
from app.repositories.story_repository import StoryCityRepository
from app.schemas.pagination import PaginationRequest
from app.schemas.search_params import CitySearchParams


@pytest.fixture()
def cities(db):
    return CityRepository(db)


def _make_cities(repo, count, state="BA"):
    created = []
    for i in range(count):
        created.append(repo.create({"name_text_ref_id": 1000 + i, "state": state}))
    return created


def test_primary_key_is_discovered_from_metadata(cities, db):
    assert cities.primary_key_field == "city_id"
    assert StoryCityRepository(db).primary_key_field == "story_city_id"
    assert cities.is_soft_delete()
    assert not StoryCityRepository(db).is_soft_delete()


def test_repository_without_model_fails_loudly(db):
    with pytest.raises(TypeError):
        BaseRepository(db).find_all()


def test_create_ignores_unknown_keys_and_get_by_id(cities):
    city = cities.create({"name_text_ref_id": 1, "state": "BA", "name": "Salvador"})

    assert city.city_id is not None
    assert city.is_deleted is False
    assert cities.get_by_id(city.city_id).state == "BA"
    assert cities.get_by_id(123456) is None


def test_update_by_primary_key(cities):
    city = cities.create({"name_text_ref_id": 1, "state": "BA"})

    updated = cities.update(city.city_id, {"state": "PE", "city_id": 999})

    assert updated.city_id == city.city_id
    assert updated.state == "PE"
    assert cities.update(123456, {"state": "SP"}) is None


@pytest.mark.parametrize("limit", [1, 4, 10, 50])
def test_pagination_invariants_hold_for_every_page(cities, limit):
    _make_cities(cities, 23)
    expected_pages = math.ceil(23 / limit)

    seen = []
    for page in range(1, expected_pages + 2):
        result = cities.find_with_pagination(PaginationRequest(page=page, limit=limit))

        assert len(result.items) <= limit
        assert result.pagination.total >= len(result.items)
        assert result.pagination.total == 23
        assert result.pagination.total_pages == expected_pages
        seen.extend(c.city_id for c in result.items)

    # Pages neither overlap nor skip rows
    assert len(seen) == len(set(seen)) == 23


def test_sorting_and_explicit_order(cities):
    a, b, c = (
        cities.create({"name_text_ref_id": 1, "state": "SP"}),
        cities.create({"name_text_ref_id": 2, "state": "BA"}),
        cities.create({"name_text_ref_id": 3, "state": "RJ"}),
    )

    by_state = cities.find_with_pagination(PaginationRequest(sort_by="state", sort_order="DESC"))
    assert [x.state for x in by_state.items] == ["SP", "RJ", "BA"]

    # Explicit order wins over sort_by
    explicit = cities.find_with_pagination(
        PaginationRequest(sort_by="state"), order=[City.city_id.desc()]
    )
    assert [x.city_id for x in explicit.items] == [c.city_id, b.city_id, a.city_id]

    # Unknown sort field is ignored
    unknown = cities.find_with_pagination(PaginationRequest(sort_by="nope"))
    assert [x.city_id for x in unknown.items] == [a.city_id, b.city_id, c.city_id]


def test_base_filter_is_applied(cities):
    _make_cities(cities, 3, state="BA")
    _make_cities(cities, 2, state="SP")

    result = cities.find_with_pagination(PaginationRequest(), where={"state": "SP"})

    assert result.pagination.total == 2
    assert cities.count({"state": "BA"}) == 3
    assert len(cities.find_all(where=[City.state == "SP"])) == 2


def test_soft_delete_round_trip(cities):
    keep, gone = _make_cities(cities, 2)
    gone_id = gone.city_id

    assert cities.delete(gone_id) is True

    assert cities.get_by_id(gone_id) is None
    assert [c.city_id for c in cities.find_all()] == [keep.city_id]
    assert cities.find_with_pagination(PaginationRequest()).pagination.total == 1
    assert cities.count() == 1
    assert not cities.exists(gone_id)

    hidden = cities.get_by_id(gone_id, include_deleted=True)
    assert hidden.is_deleted is True
    assert hidden.deleted_at is not None
    assert [c.city_id for c in cities.find_deleted()] == [gone_id]

    assert cities.restore(gone_id) is True

    restored = cities.get_by_id(gone_id)
    assert restored is not None
    assert restored.is_deleted is False
    assert restored.deleted_at is None
    assert restored.state == "BA"
    assert restored.name_text_ref_id == gone.name_text_ref_id


def test_delete_of_missing_row_reports_false(cities):
    assert cities.delete(999) is False
    assert cities.delete_many([998, 999]) is False
    assert cities.restore(999) is False


def test_soft_delete_many_and_hard_delete(cities):
    rows = _make_cities(cities, 3)
    ids = [r.city_id for r in rows]

    assert cities.soft_delete_many(ids[:2]) is True
    assert cities.count() == 1

    assert cities.hard_delete(ids[0]) is True
    assert cities.get_by_id(ids[0], include_deleted=True) is None
    assert len(cities.find_deleted()) == 1


def test_entities_without_soft_delete_are_removed(db, cities):
    city = cities.create({"name_text_ref_id": 1, "state": "BA"})
    stories = StoryCityRepository(db)
    story = stories.create({"city_id": city.city_id, "name_text_ref_id": 5})

    with pytest.raises(TypeError):
        stories.soft_delete(story.story_city_id)
    assert stories.restore(story.story_city_id) is False

    assert stories.delete(story.story_city_id) is True
    assert stories.get_by_id(story.story_city_id, include_deleted=True) is None


def test_find_by_ids(cities):
    rows = _make_cities(cities, 3)
    cities.soft_delete(rows[1].city_id)

    found = cities.find_by_ids([r.city_id for r in rows])

    assert sorted(c.city_id for c in found) == [rows[0].city_id, rows[2].city_id]
    assert cities.find_by_ids([]) == []


def test_city_search_by_localized_name_and_state(db, cities):
    texts = LocalizedTextRepository(db)
    texts.create_text(1, "pt", "Salvador")
    texts.create_text(1, "en", "Saviour city")
    texts.create_text(2, "pt", "Recife")
    cities.create({"name_text_ref_id": 1, "state": "BA"})
    cities.create({"name_text_ref_id": 2, "state": "PE"})

    by_name = cities.find_with_pagination(
        PaginationRequest(search=CitySearchParams(search="salv", language="pt"))
    )
    assert [c.name_text_ref_id for c in by_name.items] == [1]

    in_english = cities.find_with_pagination(PaginationRequest(search={"search": "saviour", "language": "en"}))
    assert in_english.pagination.total == 1

    by_state = cities.find_with_pagination(PaginationRequest(search={"state": "pe"}))
    assert [c.state for c in by_state.items] == ["PE"]

    bare_term = cities.find_with_pagination(PaginationRequest(search="rec"))
    assert [c.name_text_ref_id for c in bare_term.items] == [2]


def test_location_search_filters_by_city(db, cities):
    first, second = _make_cities(cities, 2)
    locations = LocationRepository(db)
    locations.create({"city_id": first.city_id, "name_text_ref_id": 1})
    locations.create({"city_id": second.city_id, "name_text_ref_id": 2})
    locations.create({"city_id": second.city_id, "name_text_ref_id": 3})

    result = locations.find_with_pagination(PaginationRequest(search={"city_id": second.city_id}))

    assert result.pagination.total == 2
    assert len(locations.find_by_city(first.city_id)) == 1


def test_story_repository_filters_by_parent(db, cities):
    first, second = _make_cities(cities, 2)
    stories = StoryCityRepository(db)
    for parent in (first, first, second):
        stories.create({"city_id": parent.city_id, "name_text_ref_id": 7})

    assert len(stories.find_by_parent_id(first.city_id)) == 2
    page = stories.find_with_pagination(PaginationRequest(search={"parent_id": second.city_id}))
    assert page.pagination.total == 1
    assert isinstance(page.items[0], StoryCity)
    page = stories.find_with_pagination(PaginationRequest(search={"city_id": first.city_id}))
    assert page.pagination.total == 2


def test_increment_play_count(db, cities):
    city = cities.create({"name_text_ref_id": 1, "state": "BA"})
    stories = StoryCityRepository(db)
    story = stories.create({"city_id": city.city_id, "name_text_ref_id": 7})

    assert story.play_count == 0
    assert stories.increment_play_count(story.story_city_id) is True
    assert stories.increment_play_count(story.story_city_id) is True
    assert stories.get_by_id(story.story_city_id).play_count == 2
    assert stories.increment_play_count(424242) is False


def test_search_wildcards_match_literally(db, cities):
    texts = LocalizedTextRepository(db)
    texts.create_text(1, "pt", "Salvador")
    texts.create_text(2, "pt", "Recife")
    texts.create_text(3, "pt", "100% Bahia")
    for ref_id in (1, 2, 3):
        cities.create({"name_text_ref_id": ref_id, "state": "BA"})

    percent = cities.find_with_pagination(PaginationRequest(search={"search": "%"}))
    assert [c.name_text_ref_id for c in percent.items] == [3]

    for term in ("_", "\\", "Salv_dor"):
        page = cities.find_with_pagination(PaginationRequest(search={"search": term}))
        assert page.pagination.total == 0


def test_relations_are_loaded_eagerly(db, cities, statements):
    city = cities.create({"name_text_ref_id": 1, "state": "BA"})
    locations = LocationRepository(db)
    locations.create({"city_id": city.city_id, "name_text_ref_id": 2})
    locations.create({"city_id": city.city_id, "name_text_ref_id": 3})
    city_id = city.city_id
    db.expunge_all()

    page = cities.find_with_pagination(PaginationRequest(), relations=["locations"])
    loaded = page.items[0]
    assert "locations" not in inspect(loaded).unloaded

    statements.clear()
    assert len(loaded.locations) == 2
    assert statements == []

    db.expunge_all()
    assert "locations" not in inspect(cities.get_by_id(city_id, relations=["locations"])).unloaded
    db.expunge_all()
    assert "locations" not in inspect(cities.find_all(relations=["locations"])[0]).unloaded
    db.expunge_all()
    assert "locations" in inspect(cities.get_by_id(city_id)).unloaded
