# File: app/repositories/localized_text_repository.py

"""
Localized Text Repository

This repository owns the ``localized_texts`` table: one row per
(reference_id, language_code) pair. It provides batched lookups so that a
page of entities resolves its texts with a single query, and upsert
semantics that keep the pair unique under repeated and concurrent writes
(last write wins).
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import DatabaseException, PersistenceException, ValidationException
from app.db.models.localized_text import LocalizedText
from app.repositories.base_repository import BaseRepository
from app.utils.localized_text_helper import generate_reference_id


class LocalizedTextRepository(BaseRepository[LocalizedText]):
    """
    Repository for translation rows.

    Every method wraps SQLAlchemy failures in DatabaseException so the service
    layer handles a single error type.
    """

    def __init__(self, session: Session):
        """
        Initialize the translation repository.

        Args:
            session: SQLAlchemy database session
        """
        super().__init__(session, LocalizedText)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def _clean_language(language_code: str) -> str:
        if not language_code or not language_code.strip():
            raise ValidationException("Language code cannot be empty")
        return language_code.strip().lower()

    def create_text(
            self,
            reference_id: int,
            language_code: str,
            text_content: str,
    ) -> LocalizedText:
        """
        Insert a translation row.

        Args:
            reference_id: Reference ID of the text slot
            language_code: Language code (e.g., 'pt', 'en')
            text_content: The text

        Returns:
            The created LocalizedText row

        Raises:
            ValidationException: If input validation fails
            DatabaseException: If database operation fails (including a duplicate pair)
        """
        if reference_id is None or reference_id <= 0:
            raise ValidationException("Reference ID must be positive")
        language_code = self._clean_language(language_code)
        if text_content is None:
            raise ValidationException("Text content cannot be empty")

        try:
            created = self.create({
                "reference_id": reference_id,
                "language_code": language_code,
                "text_content": text_content,
            })
            self.logger.debug(
                f"Created text ID {created.text_id} for reference {reference_id} [{language_code}]"
            )
            return created
        except SQLAlchemyError as e:
            self.logger.error(f"Database error creating text: {e}", exc_info=True)
            raise DatabaseException(f"Failed to create localized text: {str(e)}")

    def find_text(self, reference_id: int, language_code: str) -> Optional[LocalizedText]:
        """
        Find the translation row of one text slot in one language.

        Returns:
            LocalizedText if found, None otherwise
        """
        try:
            stmt = select(LocalizedText).where(
                LocalizedText.reference_id == reference_id,
                LocalizedText.language_code == self._clean_language(language_code),
            )
            return self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Database error finding text: {e}", exc_info=True)
            raise DatabaseException(f"Failed to find localized text: {str(e)}")

    def find_many(
            self,
            reference_ids: Iterable[int],
            language_code: str,
    ) -> List[LocalizedText]:
        """
        Find the rows of many text slots in one language with a single query.

        Args:
            reference_ids: Reference IDs to resolve
            language_code: Language code

        Returns:
            Matching rows (slots without a row in that language are absent)
        """
        ids = sorted({ref_id for ref_id in reference_ids if ref_id is not None})
        if not ids:
            return []

        try:
            stmt = select(LocalizedText).where(
                LocalizedText.reference_id.in_(ids),
                LocalizedText.language_code == self._clean_language(language_code),
            )
            rows = list(self.session.execute(stmt).scalars().all())
            self.logger.debug(
                f"Resolved {len(rows)} of {len(ids)} references in '{language_code}'"
            )
            return rows
        except SQLAlchemyError as e:
            self.logger.error(f"Database error in find_many: {e}", exc_info=True)
            raise DatabaseException(f"Failed to fetch localized texts: {str(e)}")

    def find_text_map(self, reference_ids: Iterable[int], language_code: str) -> Dict[int, str]:
        """Batched lookup returned as {reference_id: text_content}."""
        return {row.reference_id: row.text_content for row in self.find_many(reference_ids, language_code)}

    def find_all_languages(self, reference_id: int) -> Dict[str, str]:
        """
        Get every language variant of one text slot.

        Returns:
            Mapping of language code to text
        """
        try:
            stmt = (
                select(LocalizedText)
                .where(LocalizedText.reference_id == reference_id)
                .order_by(LocalizedText.language_code)
            )
            return {row.language_code: row.text_content for row in self.session.execute(stmt).scalars()}
        except SQLAlchemyError as e:
            self.logger.error(f"Database error finding text languages: {e}", exc_info=True)
            raise DatabaseException(f"Failed to find localized text languages: {str(e)}")

    def update_text(self, text_id: int, text_content: str) -> Optional[LocalizedText]:
        """
        Replace the content of a translation row.

        Returns:
            The updated row, or None if the row does not exist
        """
        try:
            return self.update(text_id, {"text_content": text_content})
        except SQLAlchemyError as e:
            self.logger.error(f"Database error updating text {text_id}: {e}", exc_info=True)
            raise DatabaseException(f"Failed to update localized text: {str(e)}")

    def upsert_text(
            self,
            reference_id: int,
            language_code: str,
            text_content: str,
    ) -> LocalizedText:
        """
        Update the row of (reference_id, language_code) in place, or insert it.

        Concurrent writers are not merged: whoever writes last wins. An insert
        racing another insert of the same pair falls back to an update.

        Returns:
            The created or updated row
        """
        language_code = self._clean_language(language_code)
        existing = self.find_text(reference_id, language_code)
        if existing:
            updated = self.update_text(existing.text_id, text_content)
            if updated is None:
                raise PersistenceException(
                    f"Failed to update localized text {existing.text_id}",
                    "LocalizedText",
                    existing.text_id,
                )
            return updated

        try:
            with self.session.begin_nested():
                return self.create({
                    "reference_id": reference_id,
                    "language_code": language_code,
                    "text_content": text_content,
                })
        except IntegrityError as e:
            # Another writer created the pair between our find and insert
            self.logger.warning(
                f"Concurrent insert for reference {reference_id} [{language_code}], updating instead: {e}"
            )
            existing = self.find_text(reference_id, language_code)
            if existing is None:
                raise DatabaseException(f"Database integrity error: {str(e)}")
            return self.update_text(existing.text_id, text_content)
        except SQLAlchemyError as e:
            self.logger.error(f"Database error in upsert_text: {e}", exc_info=True)
            raise DatabaseException(f"Failed to upsert localized text: {str(e)}")

    def reference_id_exists(self, reference_id: int) -> bool:
        stmt = select(func.count()).select_from(LocalizedText).where(
            LocalizedText.reference_id == reference_id
        )
        return self.session.execute(stmt).scalar_one() > 0

    def allocate_reference_id(self, exclude: Sequence[int] = ()) -> int:
        """
        Allocate an unused reference ID.

        Candidates are random integers below ``REFERENCE_ID_MAX``; each one is
        checked against the store (and against ``exclude``, the IDs already
        handed out in the current write) before it is returned.

        Raises:
            PersistenceException: If no free ID was found within the attempt limit
        """
        for attempt in range(settings.REFERENCE_ID_MAX_ATTEMPTS):
            candidate = generate_reference_id(settings.REFERENCE_ID_MAX)
            if candidate in exclude:
                continue
            if not self.reference_id_exists(candidate):
                return candidate
            self.logger.warning(f"Reference ID collision on {candidate} (attempt {attempt + 1})")

        raise PersistenceException(
            f"Could not allocate a reference ID after {settings.REFERENCE_ID_MAX_ATTEMPTS} attempts"
        )

    def delete_by_reference_ids(self, reference_ids: Iterable[int]) -> int:
        """
        Delete every language variant of the given text slots.

        Returns:
            Number of rows deleted
        """
        ids = sorted({ref_id for ref_id in reference_ids if ref_id is not None})
        if not ids:
            return 0
        try:
            result = self.session.execute(
                delete(LocalizedText).where(LocalizedText.reference_id.in_(ids))
            )
            self.logger.info(f"Deleted {result.rowcount} localized texts for references {ids}")
            return result.rowcount
        except SQLAlchemyError as e:
            self.logger.error(f"Database error deleting localized texts: {e}", exc_info=True)
            raise DatabaseException(f"Failed to delete localized texts: {str(e)}")
