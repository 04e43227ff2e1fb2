# File: app/db/models/localized_text.py

"""
Localized Text Model

One row holds the text of one logical text slot in one language. All language
variants of a slot share a ``reference_id``; entities store only that integer.
The (reference_id, language_code) pair is unique.
"""

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LocalizedText(Base):
    """
    Translation row for a text slot.

    Attributes:
        text_id: Primary key for the translation row
        reference_id: Groups all language variants of one text slot
        language_code: Language code (e.g. 'pt', 'en', 'es')
        text_content: The text in that language
    """
    __tablename__ = "localized_texts"

    text_id: Mapped[int] = mapped_column(
        "text_id",
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    reference_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Reference ID shared by all language variants of a text slot"
    )

    language_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Language code (e.g., 'pt', 'en', 'es')"
    )

    text_content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "reference_id", "language_code",
            name="uq_localized_text_reference_language",
        ),
        Index("idx_localized_text_language", "language_code"),
    )

    def __repr__(self) -> str:
        return (
            f"<LocalizedText("
            f"text_id={self.text_id}, "
            f"reference_id={self.reference_id}, "
            f"language_code='{self.language_code}', "
            f"value_length={len(self.text_content or '')}"
            f")>"
        )

    def to_dict(self) -> dict:
        return {
            "text_id": self.text_id,
            "reference_id": self.reference_id,
            "language_code": self.language_code,
            "text_content": self.text_content,
        }
