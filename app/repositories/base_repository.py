# File: app/repositories/base_repository.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import ColumnElement, Select, asc, delete, desc, false, func, inspect, select, true, update
from sqlalchemy.orm import Session, selectinload

from app.core.language import normalize_language
from app.db.models.base import supports_soft_delete
from app.db.models.localized_text import LocalizedText
from app.schemas.pagination import ListResponse, PaginationRequest, PaginationResponse

T = TypeVar("T")

WhereClause = Union[Mapping[str, Any], Sequence[ColumnElement], ColumnElement, None]

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Base repository class providing common CRUD operations for all entities using
    modern SQLAlchemy select() syntax.

    Reads on soft-delete capable entities exclude rows flagged ``is_deleted``
    unless deleted rows are asked for explicitly. Writes are flushed but never
    committed; the calling service owns the transaction.

    "Not found" is reported as None/False, never raised.

    Attributes:
        session (Session): The SQLAlchemy session for database operations
        model (Type[T]): The SQLAlchemy model class this repository manages
    """

    def __init__(self, session: Session, model: Optional[Type[T]] = None):
        """
        Initialize the repository with a database session and the specific model.

        Args:
            session (Session): SQLAlchemy database session
            model (Type[T]): The SQLAlchemy model class this repository manages.
                             Subclasses may set ``model`` as a class attribute instead.
        """
        self.session = session
        if model is not None:
            self.model = model
        elif not hasattr(self, "model"):
            self.model = None

    def _get_model(self) -> Type[T]:
        """Ensures the model is set before use."""
        if self.model is None:
            raise TypeError(f"Repository model is not set for {self.__class__.__name__}")
        return self.model

    # --- Metadata helpers ---

    @property
    def primary_key_column(self):
        return inspect(self._get_model()).primary_key[0]

    @property
    def primary_key_field(self) -> str:
        """Attribute name of the primary key (e.g. 'city_id')."""
        mapper = inspect(self._get_model())
        return mapper.get_property_by_column(self.primary_key_column).key

    def get_primary_key(self, entity: T) -> Any:
        return getattr(entity, self.primary_key_field)

    def is_soft_delete(self) -> bool:
        return supports_soft_delete(self._get_model())

    def column_keys(self) -> List[str]:
        return [attr.key for attr in inspect(self._get_model()).column_attrs]

    def _pk_attr(self):
        return getattr(self._get_model(), self.primary_key_field)

    def _exclude_deleted(self, stmt: Select) -> Select:
        if self.is_soft_delete():
            stmt = stmt.where(self._get_model().is_deleted == false())
        return stmt

    def _apply_where(self, stmt: Select, where: WhereClause) -> Select:
        """Apply a base filter given as {attribute: value} or SQL expressions."""
        if where is None:
            return stmt
        model_class = self._get_model()
        if isinstance(where, Mapping):
            for key, value in where.items():
                if hasattr(model_class, key):
                    stmt = stmt.where(getattr(model_class, key) == value)
                else:
                    logger.warning(f"Ignoring unknown filter '{key}' for {model_class.__name__}")
            return stmt
        if isinstance(where, ColumnElement):
            return stmt.where(where)
        for clause in where:
            stmt = stmt.where(clause)
        return stmt

    def _apply_relations(self, stmt: Select, relations: Optional[Iterable[str]]) -> Select:
        if not relations:
            return stmt
        model_class = self._get_model()
        for relation in relations:
            stmt = stmt.options(selectinload(getattr(model_class, relation)))
        return stmt

    # --- Reads ---

    def get_by_id(
        self,
        id: Any,
        relations: Optional[Iterable[str]] = None,
        include_deleted: bool = False,
    ) -> Optional[T]:
        """
        Retrieve an entity by its primary key using modern select().

        Args:
            id: The primary key of the entity
            relations: Relationship names to load eagerly
            include_deleted: Also return soft-deleted rows

        Returns:
            Optional[T]: The entity if found, None otherwise
        """
        stmt = select(self._get_model()).where(self._pk_attr() == id)
        if not include_deleted:
            stmt = self._exclude_deleted(stmt)
        stmt = self._apply_relations(stmt, relations)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_all(
        self,
        where: WhereClause = None,
        order: Optional[Sequence[ColumnElement]] = None,
        relations: Optional[Iterable[str]] = None,
    ) -> List[T]:
        """
        Retrieve all entities matching an optional base filter.

        Args:
            where: Base filter ({attribute: value} or SQL expressions)
            order: Explicit ORDER BY expressions
            relations: Relationship names to load eagerly

        Returns:
            List[T]: Matching entities (soft-deleted rows excluded)
        """
        stmt = self._exclude_deleted(select(self._get_model()))
        stmt = self._apply_where(stmt, where)
        stmt = stmt.order_by(*order) if order else stmt.order_by(self._pk_attr())
        stmt = self._apply_relations(stmt, relations)
        return list(self.session.execute(stmt).scalars().all())

    def find_by_ids(self, ids: Sequence[Any]) -> List[T]:
        if not ids:
            return []
        stmt = self._exclude_deleted(select(self._get_model()).where(self._pk_attr().in_(list(ids))))
        return list(self.session.execute(stmt).scalars().all())

    def find_deleted(self, where: WhereClause = None) -> List[T]:
        """Retrieve soft-deleted entities, used by restore flows."""
        if not self.is_soft_delete():
            return []
        model_class = self._get_model()
        stmt = select(model_class).where(model_class.is_deleted == true())
        stmt = self._apply_where(stmt, where)
        return list(self.session.execute(stmt).scalars().all())

    def find_with_pagination(
        self,
        pagination: PaginationRequest,
        where: WhereClause = None,
        order: Optional[Sequence[ColumnElement]] = None,
        relations: Optional[Iterable[str]] = None,
    ) -> ListResponse:
        """
        Retrieve one page of entities.

        The query is built from the base filter, the soft-delete filter and
        the entity specific search predicate (``apply_search``). An explicit
        ``order`` wins over ``pagination.sort_by``.

        Args:
            pagination: Page request
            where: Base filter ({attribute: value} or SQL expressions)
            order: Explicit ORDER BY expressions
            relations: Relationship names to load eagerly

        Returns:
            ListResponse with the page items and derived pagination metadata
        """
        model_class = self._get_model()
        stmt = self._apply_where(select(model_class), where)
        stmt = self._exclude_deleted(stmt)
        if pagination.search:
            stmt = self.apply_search(stmt, pagination.search)

        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = self.session.execute(count_stmt).scalar_one()

        if order:
            stmt = stmt.order_by(*order)
        elif pagination.sort_by:
            if pagination.sort_by in self.column_keys():
                column = getattr(model_class, pagination.sort_by)
                direction = desc if pagination.sort_order == "DESC" else asc
                stmt = stmt.order_by(direction(column))
            else:
                logger.warning(
                    f"Ignoring unknown sort field '{pagination.sort_by}' for {model_class.__name__}"
                )
        # Stable page boundaries
        stmt = stmt.order_by(self._pk_attr())

        stmt = stmt.offset(pagination.offset).limit(pagination.limit)
        stmt = self._apply_relations(stmt, relations)
        items = list(self.session.execute(stmt).scalars().all())

        logger.debug(
            f"{model_class.__name__} page {pagination.page}: {len(items)} of {total} items"
        )
        return ListResponse(
            items=items,
            pagination=PaginationResponse.from_request_and_total(pagination, total),
        )

    # --- Search hook ---

    def apply_search(self, stmt: Select, search: Any) -> Select:
        """
        Apply entity specific search criteria. The base implementation does nothing.

        Args:
            stmt: The select statement being built
            search: The opaque search bag from the page request

        Returns:
            The (possibly) filtered statement
        """
        return stmt

    @staticmethod
    def _search_params(search: Any) -> Dict[str, Any]:
        """Normalize a search bag (schema, mapping or bare term) to a dict."""
        if search is None:
            return {}
        if isinstance(search, BaseModel):
            return search.model_dump(exclude_none=True)
        if isinstance(search, Mapping):
            return {k: v for k, v in search.items() if v is not None and v != ""}
        if isinstance(search, str):
            return {"search": search} if search.strip() else {}
        return {}

    @staticmethod
    def localized_text_matches(
        ref_column, term: str, language: Optional[str] = None
    ) -> ColumnElement:
        """
        Build a predicate matching rows whose text slot contains ``term``.

        LIKE wildcards in ``term`` match literally.

        Args:
            ref_column: Entity column holding the reference ID
            term: Substring to match (case-insensitive)
            language: Language of the text; defaults to the configured language

        Returns:
            SQL expression usable in ``where()``
        """
        escaped = str(term).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        matching_refs = select(LocalizedText.reference_id).where(
            LocalizedText.language_code == normalize_language(language),
            LocalizedText.text_content.ilike(f"%{escaped}%", escape="\\"),
        )
        return ref_column.in_(matching_refs)

    # --- Writes ---

    def _filter_columns(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        keys = set(self.column_keys())
        return {k: v for k, v in data.items() if k in keys}

    def create(self, data: Dict[str, Any]) -> T:
        """
        Create a new entity.

        Args:
            data (Dict[str, Any]): Dictionary containing entity field values

        Returns:
            T: The created entity (flushed, primary key assigned)
        """
        model_class = self._get_model()
        # Ensure only columns present in the model are passed to constructor
        entity = model_class(**self._filter_columns(data))
        self.session.add(entity)
        self.session.flush()
        self.session.refresh(entity)
        logger.info(f"Created {model_class.__name__} {self.get_primary_key(entity)}")
        return entity

    def update(self, id: Any, data: Dict[str, Any]) -> Optional[T]:
        """
        Update an existing entity.

        Args:
            id: The primary key of the entity to update
            data (Dict[str, Any]): Dictionary containing the fields to update

        Returns:
            Optional[T]: The updated entity, or None if no row was affected
        """
        model_class = self._get_model()
        values = self._filter_columns(data)
        values.pop(self.primary_key_field, None)
        if not values:
            return self.get_by_id(id)

        stmt = (
            update(model_class)
            .where(self._pk_attr() == id)
            .values(**values)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            logger.warning(f"Update of {model_class.__name__} {id} affected no rows")
            return None

        logger.info(f"Updated {model_class.__name__} {id}: {sorted(values)}")
        return self.get_by_id(id)

    def delete(self, id: Any) -> bool:
        """
        Delete an entity by ID: soft delete when supported, hard delete otherwise.

        Returns:
            bool: True if a row was affected, False if not found
        """
        if self.is_soft_delete():
            return self.soft_delete(id)
        return self.hard_delete(id)

    def soft_delete(self, id: Any) -> bool:
        """Flag an entity as deleted, setting ``deleted_at`` and ``is_deleted`` together."""
        return self.soft_delete_many([id])

    def hard_delete(self, id: Any) -> bool:
        """Remove an entity row permanently."""
        return self.hard_delete_many([id])

    def delete_many(self, ids: Sequence[Any]) -> bool:
        if self.is_soft_delete():
            return self.soft_delete_many(ids)
        return self.hard_delete_many(ids)

    def soft_delete_many(self, ids: Sequence[Any]) -> bool:
        model_class = self._get_model()
        if not self.is_soft_delete():
            raise TypeError(f"{model_class.__name__} does not support soft delete")
        if not ids:
            return False
        stmt = (
            update(model_class)
            .where(self._pk_attr().in_(list(ids)))
            .values(deleted_at=datetime.now(timezone.utc), is_deleted=True)
        )
        result = self.session.execute(stmt)
        logger.info(f"Soft deleted {result.rowcount} {model_class.__name__} rows: {list(ids)}")
        return result.rowcount != 0

    def hard_delete_many(self, ids: Sequence[Any]) -> bool:
        model_class = self._get_model()
        if not ids:
            return False
        stmt = (
            delete(model_class)
            .where(self._pk_attr().in_(list(ids)))
        )
        result = self.session.execute(stmt)
        logger.info(f"Hard deleted {result.rowcount} {model_class.__name__} rows: {list(ids)}")
        return result.rowcount != 0

    def restore(self, id: Any) -> bool:
        """
        Clear the soft-delete flags of an entity.

        Returns:
            bool: True if a row was restored
        """
        model_class = self._get_model()
        if not self.is_soft_delete():
            logger.warning(f"Restore requested for {model_class.__name__}, which is never soft deleted")
            return False
        stmt = (
            update(model_class)
            .where(self._pk_attr() == id)
            .values(deleted_at=None, is_deleted=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount != 0

    # --- Aggregates ---

    def count(self, where: WhereClause = None) -> int:
        """
        Count entities matching the given filter (soft-deleted rows excluded).

        Returns:
            int: Count of matching entities
        """
        stmt = select(func.count()).select_from(self._get_model())
        stmt = self._exclude_deleted(self._apply_where(stmt, where))
        return self.session.execute(stmt).scalar_one()

    def exists(self, id: Any) -> bool:
        stmt = select(func.count()).select_from(self._get_model()).where(self._pk_attr() == id)
        stmt = self._exclude_deleted(stmt)
        return self.session.execute(stmt).scalar_one() > 0
