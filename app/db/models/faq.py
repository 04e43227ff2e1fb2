# File: app/db/models/faq.py

from sqlalchemy import Column, Integer

from app.db.localized_text_ref import localized_text_refs
from app.db.models.base import SoftDeleteBaseEntity


@localized_text_refs("question_text_ref_id", "answer_text_ref_id")
class FAQ(SoftDeleteBaseEntity):
    __tablename__ = "faq"

    faq_id = Column(Integer, primary_key=True, autoincrement=True)
    question_text_ref_id = Column(Integer, nullable=False)
    answer_text_ref_id = Column(Integer, nullable=False)
