"""Vocabulary dictionary and learner progress model definitions."""

import enum
import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from backend.database import Base, utcnow


class VocabularyKind(str, enum.Enum):
    WORD = "WORD"
    PHRASE = "PHRASE"
    SENTENCE = "SENTENCE"


class LearnerVocabularyStatus(str, enum.Enum):
    NEW = "NEW"
    REVIEWING = "REVIEWING"
    MASTERED = "MASTERED"


def _new_id() -> str:
    return str(uuid.uuid4())


class VocabularyEntry(Base):
    """An English word, phrase or sentence with its translations."""
    __tablename__ = "vocabulary_entries"

    id = Column(String(36), primary_key=True, default=_new_id)
    english_text = Column(String, nullable=False)
    kind = Column(String, nullable=False, default=VocabularyKind.WORD.value)
    notes = Column(Text)
    tags = Column(JSON, nullable=False, default=list)
    created_by_id = Column(String(36), ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    translations = relationship(
        "VocabularyTranslation",
        back_populates="entry",
        cascade="all, delete-orphan",
    )
    learners = relationship(
        "LearnerVocabulary",
        back_populates="entry",
        cascade="all, delete-orphan",
    )


class VocabularyTranslation(Base):
    """A translation of a vocabulary entry into one language."""
    __tablename__ = "vocabulary_translations"

    id = Column(String(36), primary_key=True, default=_new_id)
    entry_id = Column(
        String(36),
        ForeignKey("vocabulary_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    language_code = Column(String, nullable=False)
    translation = Column(String, nullable=False)
    usage_example = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    entry = relationship("VocabularyEntry", back_populates="translations")


class LearnerVocabulary(Base):
    """A learner's progress on one vocabulary entry."""
    __tablename__ = "learner_vocabulary"
    __table_args__ = (UniqueConstraint("user_id", "entry_id", name="uq_learner_vocabulary_user_entry"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    entry_id = Column(
        String(36),
        ForeignKey("vocabulary_entries.id", ondelete="CASCADE"),
        nullable=False,
    )
    status = Column(String, nullable=False, default=LearnerVocabularyStatus.NEW.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    entry = relationship("VocabularyEntry", back_populates="learners")
