# File: app/services/base_service.py

from typing import TypeVar, Generic, List, Optional, Type, Dict, Any, Iterable, Sequence
from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
import logging

from app.core.config import settings
from app.core.exceptions import (
    AppException,
    DatabaseException,
    EntityNotFoundException,
    PersistenceException,
    ValidationException,
)
from app.core.language import normalize_language
from app.repositories.base_repository import BaseRepository, WhereClause
from app.repositories.localized_text_repository import LocalizedTextRepository
from app.schemas.pagination import ListResponse, PaginationRequest
from app.services.base_mapper import BaseMapper
from app.utils.localized_text_helper import (
    LocalizedTextField,
    collect_reference_ids,
    field_for_dto_name,
    get_localized_text_fields,
    is_reference_id,
    map_entity_to_dto,
)

T = TypeVar("T")
logger = logging.getLogger(__name__)


class BaseService(Generic[T]):
    """
    Base service for all content entities.

    Provides common functionality including:
    - Transaction management (one transaction per write)
    - Translation of plain-string text fields into localized text references
    - Batched resolution of reference IDs on reads, with optional fallback
    - Error handling and standardization
    - Lifecycle hooks for entity specific validation and side effects

    Responses are plain dictionaries holding every column (reference IDs
    included) plus one resolved text field per reference field.
    """

    repository_class: Optional[Type[BaseRepository]] = None
    entity_name: Optional[str] = None

    def __init__(
            self,
            session: Session,
            repository_class: Optional[Type[BaseRepository]] = None,
            repository: Optional[BaseRepository] = None,
            localized_text_repository: Optional[LocalizedTextRepository] = None,
            mapper: Optional[BaseMapper] = None,
    ):
        """
        Initialize service with dependencies.

        Args:
            session: Database session for persistence operations
            repository_class: Repository class to instantiate (optional if repository is provided)
            repository: Repository instance (optional if repository_class is provided)
            localized_text_repository: Translation store repository sharing the session
            mapper: Mapper for the entity class (built from the model if omitted)
        """
        self.session = session

        # Allow either repository instance or class to be provided
        if repository is not None:
            self.repository = repository
        elif repository_class is not None:
            self.repository = repository_class(session)
        elif self.repository_class is not None:
            self.repository = self.repository_class(session)
        else:
            raise TypeError(f"{self.__class__.__name__} needs a repository or repository_class")

        self.model = self.repository._get_model()
        self.entity_name = self.entity_name or self.model.__name__
        self.localized_text_repository = localized_text_repository or LocalizedTextRepository(session)
        self.mapper = mapper or BaseMapper(self.model)

    @contextmanager
    def transaction(self):
        """
        Provide a transactional scope around operations.

        Reference ID allocation, translation rows and the entity row of one
        write are committed together or not at all.

        Yields:
            None

        Raises:
            Exception: Any exception that occurs during transaction execution
        """
        try:
            yield
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(f"Transaction failed: {str(e)}", exc_info=True)

            # Transform database errors to domain exceptions if needed
            transformed = self._transform_error(e)
            if transformed:
                raise transformed from e
            raise

    def _transform_error(self, error: Exception) -> Optional[AppException]:
        """
        Transform generic exceptions to specific domain exceptions.

        Override this method in service subclasses to handle
        specific error cases.

        Args:
            error: The original exception

        Returns:
            Transformed domain exception, or None to re-raise original
        """
        if isinstance(error, SQLAlchemyError):
            return DatabaseException(
                f"{self.entity_name} operation failed: {str(error)}",
                {"entity_type": self.entity_name},
            )
        return None

    # --- Helpers ---

    @staticmethod
    def _language(language: Optional[str]) -> str:
        if not language:
            return settings.DEFAULT_LANGUAGE
        return normalize_language(language)

    @staticmethod
    def _payload(data: Any) -> Dict[str, Any]:
        if data is None:
            return {}
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_unset=True)
        return dict(data)

    @property
    def localized_fields(self) -> List[LocalizedTextField]:
        return get_localized_text_fields(self.model)

    def get_entity_or_404(self, id: Any, include_deleted: bool = False) -> T:
        """
        Get an entity by ID or raise EntityNotFoundException.

        Args:
            id: Entity ID to retrieve
            include_deleted: Also accept soft-deleted rows

        Returns:
            Entity if found

        Raises:
            EntityNotFoundException: If entity is not found
        """
        entity = self.repository.get_by_id(id, include_deleted=include_deleted)
        if entity is None:
            raise EntityNotFoundException(self.entity_name, id)
        return entity

    # --- Localized text resolution ---

    def fetch_localized_texts(self, reference_ids: Iterable[int], language: str) -> Dict[int, str]:
        """
        Resolve reference IDs in one language with a single batched query.

        Args:
            reference_ids: Reference IDs to resolve
            language: Language code

        Returns:
            Mapping of reference ID to text; unresolved IDs are absent
        """
        return self.localized_text_repository.find_text_map(reference_ids, language)

    def fetch_with_fallback(
            self,
            reference_ids: Iterable[int],
            primary_language: str,
            fallback_language: Optional[str],
    ) -> Dict[int, str]:
        """
        Resolve reference IDs in a primary language, filling gaps from a fallback.

        Issues at most two batched queries: the second one only asks for the
        IDs the primary language left unresolved. A primary text always wins.

        Args:
            reference_ids: Reference IDs to resolve
            primary_language: Requested language
            fallback_language: Language used for IDs missing in the primary one

        Returns:
            Mapping of reference ID to text
        """
        ids = list(dict.fromkeys(reference_ids))
        texts = self.fetch_localized_texts(ids, primary_language)
        if not fallback_language or fallback_language == primary_language:
            return texts

        missing = [ref_id for ref_id in ids if ref_id not in texts]
        if not missing:
            return texts

        fallback_texts = self.fetch_localized_texts(missing, fallback_language)
        if fallback_texts:
            logger.debug(
                f"Resolved {len(fallback_texts)} of {len(missing)} missing '{primary_language}' "
                f"texts from '{fallback_language}'"
            )
        merged = dict(fallback_texts)
        merged.update(texts)
        return merged

    def _shape(
            self,
            entities: Sequence[T],
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Shape entities as responses, resolving all their texts in one pass."""
        if not entities:
            return []
        language = self._language(language)
        responses = self.mapper.to_response_list(entities)
        reference_ids = collect_reference_ids(responses, self.model)

        if fallback_language:
            texts = self.fetch_with_fallback(reference_ids, language, self._language(fallback_language))
        else:
            texts = self.fetch_localized_texts(reference_ids, language)

        return [map_entity_to_dto(response, texts, self.model) for response in responses]

    def to_response(
            self,
            entity: T,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._shape([entity], language, fallback_language)[0]

    # --- Localized text writes ---

    def _write_localized_fields(
            self,
            payload: Dict[str, Any],
            entity_data: Dict[str, Any],
            language: str,
            require_all: bool,
    ) -> Dict[str, Any]:
        """
        Turn the DTO text fields of a payload into reference IDs on ``entity_data``.

        A positive integer is taken as an already resolved reference ID. A
        string is written to the translation store in ``language``: into the
        slot's existing reference ID when there is one, otherwise into a newly
        allocated one.

        Raises:
            ValidationException: On a value of another type, or, when
                ``require_all`` is set, on a required slot left empty
        """
        errors: Dict[str, List[str]] = {}
        allocated: List[int] = []

        for field in self.localized_fields:
            value = payload.get(field.dto_field_name)

            if value is None:
                if require_all and not field.is_optional and not is_reference_id(
                        entity_data.get(field.property_name)
                ):
                    errors.setdefault(field.dto_field_name, []).append("Field is required")
                continue

            if is_reference_id(value):
                entity_data[field.property_name] = value
                continue

            if not isinstance(value, str):
                errors.setdefault(field.dto_field_name, []).append(
                    f"Expected a string or a reference ID, got {type(value).__name__}"
                )
                continue

            reference_id = entity_data.get(field.property_name)
            if is_reference_id(reference_id):
                self.localized_text_repository.upsert_text(reference_id, language, value)
            else:
                reference_id = self.localized_text_repository.allocate_reference_id(exclude=allocated)
                allocated.append(reference_id)
                self.localized_text_repository.create_text(reference_id, language, value)
                entity_data[field.property_name] = reference_id

        if errors:
            raise ValidationException(f"Invalid {self.entity_name} data", errors)

        if allocated:
            logger.debug(f"Allocated {len(allocated)} reference IDs for {self.entity_name}")
        return entity_data

    # --- Reads ---

    def find_by_id(
            self,
            id: Any,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get one entity with its texts resolved.

        Args:
            id: Entity ID
            language: Language of the texts (defaults to the configured language)
            fallback_language: Language used for texts missing in ``language``

        Returns:
            Response dictionary

        Raises:
            EntityNotFoundException: If entity is not found
        """
        entity = self.get_entity_or_404(id)
        return self.to_response(entity, language, fallback_language)

    def find_all(
            self,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
            where: WhereClause = None,
            order=None,
    ) -> List[Dict[str, Any]]:
        """
        List every (non-deleted) entity with texts resolved in one batched lookup.
        """
        entities = self.repository.find_all(where=where, order=order)
        return self._shape(entities, language, fallback_language)

    def find_with_pagination(
            self,
            pagination: PaginationRequest,
            language: Optional[str] = None,
            fallback_language: Optional[str] = None,
            where: WhereClause = None,
            order=None,
    ) -> ListResponse:
        """
        Get one page of entities with texts resolved.

        The whole page costs one count query, one page query and one (or,
        with a fallback language, at most two) translation queries.

        Text searches match in ``language`` unless the search bag names its own.

        Args:
            pagination: Page request (its ``search`` bag goes to the repository)
            language: Language of the texts
            fallback_language: Language used for texts missing in ``language``
            where: Base filter
            order: Explicit ORDER BY expressions

        Returns:
            ListResponse of response dictionaries
        """
        language = self._language(language)
        pagination = self._search_in_language(pagination, language)
        page = self.repository.find_with_pagination(pagination, where=where, order=order)
        return ListResponse(
            items=self._shape(page.items, language, fallback_language),
            pagination=page.pagination,
        )

    def _search_in_language(self, pagination: PaginationRequest, language: str) -> PaginationRequest:
        params = self.repository._search_params(pagination.search)
        if not params or params.get("language"):
            return pagination
        return pagination.model_copy(update={"search": {**params, "language": language}})

    def exists(self, id: Any) -> bool:
        return self.repository.exists(id)

    def count(self, where: WhereClause = None) -> int:
        return self.repository.count(where)

    # --- Writes ---

    def create(self, data: Any, language: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a new entity.

        Plain-string text fields (e.g. ``name``) are stored in the translation
        store under newly allocated reference IDs; only the IDs are written to
        the entity row. Everything happens in one transaction.

        Args:
            data: Payload (dictionary or schema)
            language: Language of the supplied texts

        Returns:
            The created entity as a response dictionary, texts resolved in ``language``
        """
        language = self._language(language)
        payload = self._payload(data)
        self.validate_before_create(payload)

        with self.transaction():
            entity_data = self.mapper.to_entity_data(payload)
            entity_data = self._write_localized_fields(payload, entity_data, language, require_all=True)
            entity = self.repository.create(entity_data)
            self.after_create(entity, payload)
            entity_id = self.repository.get_primary_key(entity)

        logger.info(f"Created {self.entity_name} {entity_id} [{language}]")
        return self.find_by_id(entity_id, language)

    def update(self, id: Any, data: Any, language: Optional[str] = None) -> Dict[str, Any]:
        """
        Update an existing entity.

        Text fields are written for ``language`` only; other languages of the
        same slots are left untouched.

        Args:
            id: Entity ID to update
            data: Payload (dictionary or schema); None values are ignored
            language: Language of the supplied texts

        Returns:
            The updated entity as a response dictionary

        Raises:
            EntityNotFoundException: If entity is not found
            PersistenceException: If the row vanished before the update was written
        """
        language = self._language(language)
        payload = self._payload(data)

        with self.transaction():
            existing = self.get_entity_or_404(id)
            self.validate_before_update(id, payload, existing)

            entity_data = self.mapper.to_entity_data_from_update(payload, existing)
            entity_data = self._write_localized_fields(payload, entity_data, language, require_all=False)

            updated = self.repository.update(id, entity_data)
            if updated is None:
                raise PersistenceException(
                    f"Failed to update {self.entity_name} with ID {id}", self.entity_name, id
                )
            self.after_update(updated, payload)

        logger.info(f"Updated {self.entity_name} {id} [{language}]")
        return self.find_by_id(id, language)

    def set_translation(
            self,
            id: Any,
            field_name: str,
            language: str,
            text: str,
    ) -> Dict[str, Any]:
        """
        Write the text of one field in one language.

        Args:
            id: Entity ID
            field_name: DTO field name (e.g. 'name')
            language: Language code of the text
            text: The text

        Returns:
            The entity as a response dictionary in ``language``
        """
        language = self._language(language)
        field = field_for_dto_name(self.model, field_name)
        if field is None:
            raise ValidationException(
                f"{self.entity_name} has no localized field '{field_name}'",
                {field_name: ["Unknown localized field"]},
            )
        if not isinstance(text, str):
            raise ValidationException(
                f"Translation of '{field_name}' must be a string",
                {field_name: ["Expected a string"]},
            )

        with self.transaction():
            entity = self.get_entity_or_404(id)
            reference_id = getattr(entity, field.property_name)
            if is_reference_id(reference_id):
                self.localized_text_repository.upsert_text(reference_id, language, text)
            else:
                reference_id = self.localized_text_repository.allocate_reference_id()
                self.localized_text_repository.create_text(reference_id, language, text)
                if self.repository.update(id, {field.property_name: reference_id}) is None:
                    raise PersistenceException(
                        f"Failed to update {self.entity_name} with ID {id}", self.entity_name, id
                    )

        return self.find_by_id(id, language)

    def get_translations(self, id: Any) -> Dict[str, Dict[str, str]]:
        """
        Get every language variant of every text field of one entity.

        Returns:
            {dto_field: {language_code: text}}; fields without a reference are empty
        """
        entity = self.get_entity_or_404(id)
        translations: Dict[str, Dict[str, str]] = {}
        for field in self.localized_fields:
            reference_id = getattr(entity, field.property_name)
            if is_reference_id(reference_id):
                translations[field.dto_field_name] = self.localized_text_repository.find_all_languages(reference_id)
            else:
                translations[field.dto_field_name] = {}
        return translations

    # --- Deletes ---

    def _cleanup_translations(self, entities: Iterable[T]) -> None:
        if not settings.AUTO_CLEANUP_ORPHANED_TRANSLATIONS:
            return
        reference_ids = collect_reference_ids(entities, self.model)
        if reference_ids:
            removed = self.localized_text_repository.delete_by_reference_ids(reference_ids)
            logger.info(f"Removed {removed} orphaned translations of {self.entity_name}")

    def _delete(self, ids: Sequence[Any], mode: str) -> None:
        entities = [self.get_entity_or_404(id) for id in ids]
        for id, entity in zip(ids, entities):
            self.validate_before_delete(id, entity)

        hard = mode == "hard" or (mode == "auto" and not self.repository.is_soft_delete())
        if mode == "soft" and not self.repository.is_soft_delete():
            raise ValidationException(f"{self.entity_name} does not support soft delete")

        if hard:
            # Reference IDs are read before the rows disappear
            reference_sources = [self.mapper.to_response(entity) for entity in entities]
            done = self.repository.hard_delete_many(ids)
        else:
            reference_sources = []
            done = self.repository.soft_delete_many(ids)

        if not done:
            target = ids[0] if len(ids) == 1 else list(ids)
            raise PersistenceException(
                f"Failed to delete {self.entity_name} with ID {target}", self.entity_name, target
            )

        if hard:
            self._cleanup_translations(reference_sources)
        for id, entity in zip(ids, entities):
            self.after_delete(id, entity)

    def delete(self, id: Any) -> None:
        """
        Delete an entity: soft delete when supported, hard delete otherwise.

        Raises:
            EntityNotFoundException: If entity is not found
            PersistenceException: If no row was affected
        """
        with self.transaction():
            self._delete([id], "auto")
        logger.info(f"Deleted {self.entity_name} {id}")

    def soft_delete(self, id: Any) -> None:
        with self.transaction():
            self._delete([id], "soft")
        logger.info(f"Soft deleted {self.entity_name} {id}")

    def hard_delete(self, id: Any) -> None:
        with self.transaction():
            self._delete([id], "hard")
        logger.info(f"Hard deleted {self.entity_name} {id}")

    def delete_many(self, ids: Sequence[Any]) -> None:
        """
        Delete several entities in one transaction.

        Every ID must exist; otherwise nothing is deleted.
        """
        if not ids:
            return
        with self.transaction():
            self._delete(list(ids), "auto")
        logger.info(f"Deleted {len(ids)} {self.entity_name} rows")

    def soft_delete_many(self, ids: Sequence[Any]) -> None:
        if not ids:
            return
        with self.transaction():
            self._delete(list(ids), "soft")

    def hard_delete_many(self, ids: Sequence[Any]) -> None:
        if not ids:
            return
        with self.transaction():
            self._delete(list(ids), "hard")

    def restore(self, id: Any, language: Optional[str] = None) -> Dict[str, Any]:
        """
        Restore a soft-deleted entity.

        Returns:
            The restored entity as a response dictionary
        """
        if not self.repository.is_soft_delete():
            raise ValidationException(f"{self.entity_name} does not support restore")

        with self.transaction():
            self.get_entity_or_404(id, include_deleted=True)
            if not self.repository.restore(id):
                raise PersistenceException(
                    f"Failed to restore {self.entity_name} with ID {id}", self.entity_name, id
                )

        logger.info(f"Restored {self.entity_name} {id}")
        return self.find_by_id(id, language)

    # --- Hooks ---

    def validate_before_create(self, data: Dict[str, Any]) -> None:
        """Entity specific checks on a create payload. Raise to reject."""

    def validate_before_update(self, id: Any, data: Dict[str, Any], existing: T) -> None:
        """Entity specific checks on an update payload. Raise to reject."""

    def validate_before_delete(self, id: Any, existing: T) -> None:
        """Entity specific checks before a delete. Raise to reject."""

    def after_create(self, entity: T, data: Dict[str, Any]) -> None:
        """Runs inside the create transaction once the row exists."""

    def after_update(self, entity: T, data: Dict[str, Any]) -> None:
        """Runs inside the update transaction after the row was written."""

    def after_delete(self, id: Any, entity: T) -> None:
        """Runs inside the delete transaction after the row was removed or hidden."""
