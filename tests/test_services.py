# tests/test_services.py
"""
Tests for the entity specific services and the service factory.
"""

import pytest

from app.core.exceptions import EntityNotFoundException, ValidationException
from app.services.service_factory import ServiceFactory
from app.services.story_service import StoryCityService


@pytest.fixture()
def location(services, city):
    location_type = services.get_location_type_service().create({"name": "Praia"})
    return services.get_location_service().create(
        {
            "city_id": city["city_id"],
            "type_id": location_type["type_id"],
            "name": "Porto da Barra",
            "latitude": -13.0,
            "longitude": -38.53,
        },
        language="pt",
    )


def test_factory_caches_services_and_shares_translation_repository(db):
    factory = ServiceFactory(db)

    assert factory.get_city_service() is factory.get_city_service()
    assert (
        factory.get_city_service().localized_text_repository
        is factory.get_story_event_service().localized_text_repository
    )


def test_city_validation(services):
    service = services.get_city_service()

    with pytest.raises(ValidationException):
        service.create({"name": "Nowhere", "state": "BA", "latitude": 123.0})
    with pytest.raises(ValidationException) as exc_info:
        service.create({"name": "Nowhere", "state": "BA", "latitude": "abc", "longitude": [1]})
    assert exc_info.value.details["validation_errors"] == {
        "latitude": ["Latitude must be a number"],
        "longitude": ["Longitude must be a number"],
    }
    assert service.count() == 0


def test_find_by_state(services, city):
    service = services.get_city_service()
    service.create({"name": "Recife", "state": "PE"})

    found = service.find_by_state("ba", language="pt")

    assert [c["name"] for c in found] == ["Salvador"]


def test_location_requires_existing_city_and_type(services, city):
    service = services.get_location_service()

    with pytest.raises(ValidationException):
        service.create({"name": "Farol"})
    with pytest.raises(EntityNotFoundException):
        service.create({"name": "Farol", "city_id": 999})
    with pytest.raises(EntityNotFoundException) as exc_info:
        service.create({"name": "Farol", "city_id": city["city_id"], "type_id": 999})
    assert exc_info.value.entity_type == "LocationType"


def test_location_listing_by_city(services, location, city):
    service = services.get_location_service()

    found = service.find_by_city(city["city_id"], language="en", fallback_language="pt")

    assert [loc["name"] for loc in found] == ["Porto da Barra"]
    assert found[0]["description"] is None


def test_event_requires_existing_city(services, city):
    service = services.get_event_service()

    with pytest.raises(EntityNotFoundException) as exc_info:
        service.create({"name": "Carnaval", "city_id": 999})
    assert exc_info.value.entity_type == "City"

    event = service.create(
        {"name": "Carnaval", "location": "Circuito Dodô", "time": "14h", "city_id": city["city_id"]},
        language="pt",
    )
    assert event["location"] == "Circuito Dodô"
    assert event["time"] == "14h"
    assert [e["event_id"] for e in service.find_by_city(city["city_id"])] == [event["event_id"]]


def test_event_on_deleted_city_is_rejected(services, city):
    services.get_city_service().delete(city["city_id"])

    with pytest.raises(EntityNotFoundException):
        services.get_event_service().create({"name": "Festa", "city_id": city["city_id"]})


def test_story_requires_parent(services, city):
    service = services.get_story_city_service()

    with pytest.raises(ValidationException):
        service.create({"name": "Lenda"})
    with pytest.raises(EntityNotFoundException):
        service.create({"name": "Lenda", "city_id": 999})

    story = service.create({"name": "Lenda", "city_id": city["city_id"]})
    assert story["play_count"] == 0
    assert story["audio_url"] is None


def test_story_location_checks_location(services, location):
    service = services.get_story_location_service()

    story = service.create({"name": "História", "location_id": location["location_id"]})

    assert service.find_by_parent_id(location["location_id"])[0]["story_location_id"] == story["story_location_id"]
    with pytest.raises(EntityNotFoundException) as exc_info:
        service.find_by_parent_id(999)
    assert exc_info.value.entity_type == "Location"


def test_story_audio_url_is_localized(services, city):
    service = services.get_story_city_service()
    story = service.create(
        {"name": "Lenda", "audio_url": "https://cdn.example.com/pt.mp3", "city_id": city["city_id"]},
        language="pt",
    )
    service.set_translation(story["story_city_id"], "audio_url", "en", "https://cdn.example.com/en.mp3")

    assert service.find_by_id(story["story_city_id"], language="en")["audio_url"].endswith("en.mp3")
    assert service.find_by_id(story["story_city_id"], language="pt")["audio_url"].endswith("pt.mp3")


def test_audio_duration_is_stored_when_provider_answers(db, city):
    durations = []

    def provider(url):
        durations.append(url)
        return 125.4

    service = StoryCityService(db, audio_duration_provider=provider)

    story = service.create(
        {"name": "Lenda", "audio_url": "https://cdn.example.com/a.mp3", "city_id": city["city_id"]}
    )

    assert story["audio_duration"] == 125
    assert durations == ["https://cdn.example.com/a.mp3"]


def test_audio_duration_failure_never_blocks_the_write(db, city):
    def provider(url):
        raise IOError("unreachable")

    service = StoryCityService(db, audio_duration_provider=provider)

    story = service.create(
        {"name": "Lenda", "audio_url": "https://cdn.example.com/a.mp3", "city_id": city["city_id"]}
    )

    assert story["story_city_id"] is not None
    assert story["audio_duration"] is None
    assert story["audio_url"] == "https://cdn.example.com/a.mp3"


def test_stories_are_hard_deleted(services, city):
    service = services.get_story_city_service()
    story = service.create({"name": "Lenda", "city_id": city["city_id"]})

    with pytest.raises(ValidationException):
        service.soft_delete(story["story_city_id"])
    with pytest.raises(ValidationException):
        service.restore(story["story_city_id"])

    service.delete(story["story_city_id"])
    assert not service.exists(story["story_city_id"])


def test_register_play(services, city):
    service = services.get_story_city_service()
    story = service.create({"name": "Lenda", "city_id": city["city_id"]})

    service.register_play(story["story_city_id"])
    played = service.register_play(story["story_city_id"])

    assert played["play_count"] == 2
    with pytest.raises(EntityNotFoundException):
        service.register_play(999)


@pytest.mark.parametrize(
    "getter, payload",
    [
        ("get_route_service", {"title": "Rota do Dendê"}),
        ("get_category_service", {"name": "Praias"}),
        ("get_faq_service", {"question": "Onde fica?", "answer": "Na Bahia"}),
        ("get_location_type_service", {"name": "Museu"}),
    ],
)
def test_simple_services_round_trip(services, getter, payload):
    service = getattr(services, getter)()

    created = service.create(payload, language="pt")

    for field, value in payload.items():
        assert created[field] == value
        assert created[f"{field}_text_ref_id"] > 0
