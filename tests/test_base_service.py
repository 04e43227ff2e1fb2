# tests/test_base_service.py
import pytest
from sqlalchemy import func, select

from app.core.config import settings
from app.core.exceptions import (
    EntityNotFoundException,
    PersistenceException,
    ValidationException,
)
from app.db.models import City, LocalizedText
from app.schemas.pagination import PaginationRequest
from app.schemas.search_params import CitySearchParams
from app.services.city_service import CityService


def _text_rows(db, reference_id=None):
    stmt = select(func.count()).select_from(LocalizedText)
    if reference_id is not None:
        stmt = stmt.where(LocalizedText.reference_id == reference_id)
    return db.execute(stmt).scalar_one()


def _translation_queries(statements):
    return [s for s in statements if "FROM localized_texts" in s and s.lstrip().upper().startswith("SELECT")]


def test_salvador_scenario(services):
    service = services.get_city_service()

    created = service.create({"name": "Salvador", "state": "BA"}, language="pt")

    assert created["name"] == "Salvador"
    assert isinstance(created["name_text_ref_id"], int)
    assert created["name_text_ref_id"] > 0
    assert created["state"] == "BA"
    ref_id = created["name_text_ref_id"]

    service.update(created["city_id"], {"name": "Salvador da Bahia"}, language="pt")

    read_pt = service.find_by_id(created["city_id"], language="pt")
    assert read_pt["name"] == "Salvador da Bahia"
    assert read_pt["name_text_ref_id"] == ref_id

    read_en = service.find_by_id(created["city_id"], language="en")
    assert read_en["name"] is None
    assert read_en["name_text_ref_id"] == ref_id


def test_create_then_read_returns_the_same_string(services, db):
    service = services.get_city_service()

    created = service.create(
        {"name": "Lençóis", "description": "Chapada", "what_to_observe": "Cachoeiras", "state": "BA"},
        language="pt",
    )
    read = service.find_by_id(created["city_id"], language="pt")

    assert read["name"] == "Lençóis"
    assert read["description"] == "Chapada"
    assert read["what_to_observe"] == "Cachoeiras"
    refs = {read["name_text_ref_id"], read["description_text_ref_id"], read["what_to_observe_text_ref_id"]}
    assert len(refs) == 3
    assert all(ref > 0 for ref in refs)
    assert _text_rows(db) == 3


def test_update_writes_only_the_current_language(services, db, city):
    service = services.get_city_service()
    service.set_translation(city["city_id"], "name", "en", "Salvador EN")

    service.update(city["city_id"], {"name": "Salvador (BA)"}, language="pt")
    service.update(city["city_id"], {"name": "Salvador (BA)"}, language="pt")

    ref_id = city["name_text_ref_id"]
    assert _text_rows(db, ref_id) == 2
    assert service.find_by_id(city["city_id"], language="en")["name"] == "Salvador EN"
    assert service.get_translations(city["city_id"])["name"] == {
        "en": "Salvador EN",
        "pt": "Salvador (BA)",
    }


def test_update_allocates_reference_for_empty_slot(services, city):
    service = services.get_city_service()
    assert city["what_to_observe_text_ref_id"] is None

    updated = service.update(city["city_id"], {"what_to_observe": "Pelourinho"}, language="en")

    assert updated["what_to_observe"] == "Pelourinho"
    assert updated["what_to_observe_text_ref_id"] > 0
    # Untouched slots keep their reference
    assert updated["name_text_ref_id"] == city["name_text_ref_id"]


def test_update_ignores_none_values(services, city):
    service = services.get_city_service()

    updated = service.update(city["city_id"], {"state": None, "latitude": -12.97}, language="pt")

    assert updated["state"] == "BA"
    assert updated["latitude"] == pytest.approx(-12.97)
    assert updated["name"] == "Salvador"


def test_existing_reference_id_is_used_as_is(services, db, city):
    service = services.get_city_service()

    twin = service.create({"name": city["name_text_ref_id"], "state": "BA"})

    assert twin["name_text_ref_id"] == city["name_text_ref_id"]
    assert twin["name"] == "Salvador"
    assert _text_rows(db, city["name_text_ref_id"]) == 1


def test_fallback_fills_only_missing_texts(services, city):
    service = services.get_city_service()
    service.set_translation(city["city_id"], "description", "en", "First capital")

    plain = service.find_by_id(city["city_id"], language="en")
    assert plain["name"] is None
    assert plain["description"] == "First capital"

    merged = service.find_by_id(city["city_id"], language="en", fallback_language="pt")
    assert merged["name"] == "Salvador"
    assert merged["description"] == "First capital"


def test_fetch_with_fallback_issues_at_most_two_queries(services, city, statements):
    service = services.get_city_service()
    ids = [city["name_text_ref_id"], city["description_text_ref_id"], 987654]
    statements.clear()

    texts = service.fetch_with_fallback(ids, "en", "pt")

    assert texts == {city["name_text_ref_id"]: "Salvador", city["description_text_ref_id"]: "Primeira capital"}
    assert len(_translation_queries(statements)) == 2

    statements.clear()
    service.fetch_with_fallback(ids, "pt", "pt")
    assert len(_translation_queries(statements)) == 1


def test_batched_fetch_equals_individual_fetches(services, db):
    service = services.get_city_service()
    created = [
        service.create({"name": f"Cidade {i}", "description": f"Descricao {i}", "state": "BA"})
        for i in range(5)
    ]
    ids = [c["name_text_ref_id"] for c in created] + [c["description_text_ref_id"] for c in created]

    batched = service.fetch_localized_texts(ids, "pt")
    naive = {}
    for ref_id in ids:
        naive.update(service.fetch_localized_texts([ref_id], "pt"))

    assert batched == naive
    assert len(batched) == 10


def test_page_resolves_texts_with_one_translation_query(services, statements):
    service = services.get_city_service()
    for i in range(7):
        service.create({"name": f"Cidade {i}", "state": "BA"})
    statements.clear()

    page = service.find_with_pagination(PaginationRequest(page=2, limit=3), language="pt")

    assert [item["name"] for item in page.items] == ["Cidade 3", "Cidade 4", "Cidade 5"]
    assert page.pagination.total == 7
    assert page.pagination.total_pages == 3
    assert page.pagination.has_next and page.pagination.has_prev
    assert len(_translation_queries(statements)) == 1


def test_search_through_service(services, city):
    service = services.get_city_service()
    service.create({"name": "Recife", "state": "PE"})

    page = service.find_with_pagination(
        PaginationRequest(search=CitySearchParams(search="salv")), language="pt"
    )

    assert [item["name"] for item in page.items] == ["Salvador"]


def test_search_matches_in_the_read_language(services, city):
    service = services.get_city_service()
    service.set_translation(city["city_id"], "name", "en", "Bay City")

    in_english = service.find_with_pagination(PaginationRequest(search={"search": "bay"}), language="en")
    assert in_english.pagination.total == 1
    assert in_english.items[0]["name"] == "Bay City"

    assert service.find_with_pagination(
        PaginationRequest(search=CitySearchParams(search="salv")), language="EN-us"
    ).pagination.total == 0

    named = service.find_with_pagination(
        PaginationRequest(search={"search": "salv", "language": "PT-BR"}), language="en"
    )
    assert [item["name"] for item in named.items] == ["Bay City"]


def test_find_all_and_count(services, city):
    service = services.get_city_service()
    service.create({"name": "Ilhéus", "state": "BA"})

    names = [item["name"] for item in service.find_all(language="pt")]

    assert names == ["Salvador", "Ilhéus"]
    assert service.count() == 2
    assert service.exists(city["city_id"])


def test_not_found_errors_carry_entity_name_and_id(services):
    service = services.get_city_service()

    with pytest.raises(EntityNotFoundException) as exc_info:
        service.update(404, {"name": "x"})
    assert exc_info.value.entity_type == "City"
    assert exc_info.value.entity_id == 404

    for call in (
        lambda: service.find_by_id(404),
        lambda: service.delete(404),
        lambda: service.hard_delete(404),
        lambda: service.restore(404),
        lambda: service.get_translations(404),
    ):
        with pytest.raises(EntityNotFoundException):
            call()


def test_update_with_zero_affected_rows_is_a_persistence_error(services, city, monkeypatch):
    service = services.get_city_service()
    monkeypatch.setattr(service.repository, "update", lambda id, data: None)

    with pytest.raises(PersistenceException) as exc_info:
        service.update(city["city_id"], {"state": "SE"})

    assert not isinstance(exc_info.value, EntityNotFoundException)
    assert exc_info.value.entity_id == city["city_id"]


def test_create_validates_text_fields(services, db):
    service = services.get_city_service()

    with pytest.raises(ValidationException) as exc_info:
        service.create({"state": "BA"})
    assert "name" in exc_info.value.details["validation_errors"]

    with pytest.raises(ValidationException):
        service.create({"name": 3.5, "state": "BA"})

    with pytest.raises(ValidationException):
        service.create({"name": "Sem estado"})

    assert _text_rows(db) == 0
    assert service.count() == 0


def test_failed_write_rolls_back_translations(db):
    class BrokenCityService(CityService):
        def after_create(self, entity, data):
            raise RuntimeError("boom")

    service = BrokenCityService(db)

    with pytest.raises(RuntimeError):
        service.create({"name": "Salvador", "description": "x", "state": "BA"})

    assert _text_rows(db) == 0
    assert db.execute(select(func.count()).select_from(City)).scalar_one() == 0


def test_soft_delete_and_restore_keep_texts(services, db, city):
    service = services.get_city_service()

    service.delete(city["city_id"])

    with pytest.raises(EntityNotFoundException):
        service.find_by_id(city["city_id"])
    assert service.find_all() == []
    assert _text_rows(db) == 2

    restored = service.restore(city["city_id"], language="pt")
    assert restored["name"] == "Salvador"
    assert restored["state"] == "BA"


def test_delete_many_is_all_or_nothing(services, city):
    service = services.get_city_service()
    other = service.create({"name": "Feira de Santana", "state": "BA"})

    with pytest.raises(EntityNotFoundException):
        service.delete_many([city["city_id"], 9999])
    assert service.count() == 2

    service.delete_many([city["city_id"], other["city_id"]])
    assert service.count() == 0


def test_hard_delete_keeps_translations_by_default(services, db, city):
    service = services.get_city_service()

    service.hard_delete(city["city_id"])

    assert not service.exists(city["city_id"])
    assert _text_rows(db, city["name_text_ref_id"]) == 1


def test_hard_delete_removes_translations_when_cleanup_enabled(services, db, city, monkeypatch):
    monkeypatch.setattr(settings, "AUTO_CLEANUP_ORPHANED_TRANSLATIONS", True)
    service = services.get_city_service()
    survivor = service.create({"name": "Ilhéus", "state": "BA"})

    service.soft_delete(survivor["city_id"])
    assert _text_rows(db, survivor["name_text_ref_id"]) == 1

    service.hard_delete(city["city_id"])

    assert _text_rows(db, city["name_text_ref_id"]) == 0
    assert _text_rows(db, city["description_text_ref_id"]) == 0
    assert _text_rows(db, survivor["name_text_ref_id"]) == 1


def test_set_translation_and_get_translations(services, city):
    service = services.get_city_service()

    response = service.set_translation(city["city_id"], "what_to_observe", "es", "Pelourinho")

    assert response["what_to_observe"] == "Pelourinho"
    translations = service.get_translations(city["city_id"])
    assert translations["name"] == {"pt": "Salvador"}
    assert translations["what_to_observe"] == {"es": "Pelourinho"}

    with pytest.raises(ValidationException):
        service.set_translation(city["city_id"], "state", "en", "Bahia")


def test_unsupported_language_falls_back_to_default(services, city):
    service = services.get_city_service()

    assert service.find_by_id(city["city_id"], language="fr")["name"] == "Salvador"
    assert service.find_by_id(city["city_id"], language="pt-BR,pt;q=0.9")["name"] == "Salvador"
