from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.database import database_unavailable, get_db, utcnow
from backend.models.user import User
from backend.models.vocabulary import VocabularyEntry, VocabularyKind, VocabularyTranslation

router = APIRouter(tags=['vocabulary'])


class TranslationPayload(BaseModel):
    language_code: str = Field(min_length=2)
    translation: str = Field(min_length=1)
    usage_example: str | None = None


class UpdateTranslationRequest(BaseModel):
    language_code: str | None = Field(default=None, min_length=2)
    translation: str | None = Field(default=None, min_length=1)
    usage_example: str | None = None


class CreateEntryRequest(BaseModel):
    english_text: str = Field(min_length=1)
    kind: VocabularyKind | None = None
    notes: str | None = None
    tags: list[str] | None = None
    translations: list[TranslationPayload] | None = None


class UpdateEntryRequest(BaseModel):
    english_text: str | None = Field(default=None, min_length=1)
    kind: VocabularyKind | None = None
    notes: str | None = None
    tags: list[str] | None = None


class TranslationResponse(BaseModel):
    id: str
    entry_id: str
    language_code: str
    translation: str
    usage_example: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EntryResponse(BaseModel):
    id: str
    english_text: str
    kind: str
    notes: str | None = None
    tags: list[str]
    created_by_id: str | None = None
    created_at: datetime
    updated_at: datetime
    translations: list[TranslationResponse]

    class Config:
        from_attributes = True


class EntryEnvelope(BaseModel):
    entry: EntryResponse


class EntryListEnvelope(BaseModel):
    entries: list[EntryResponse]


class TranslationEnvelope(BaseModel):
    translation: TranslationResponse


def get_entry_or_404(entry_id: str, db: Session) -> VocabularyEntry:
    entry = db.get(VocabularyEntry, entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Vocabulary entry not found')
    return entry


def get_translation_or_404(entry_id: str, translation_id: str, db: Session) -> VocabularyTranslation:
    translation = db.query(VocabularyTranslation).filter(
        VocabularyTranslation.id == translation_id,
        VocabularyTranslation.entry_id == entry_id,
    ).first()
    if translation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Translation not found')
    return translation


@router.get('/vocabulary', response_model=EntryListEnvelope)
def list_entries(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entries = db.query(VocabularyEntry).order_by(VocabularyEntry.updated_at.desc()).all()
    return {'entries': entries}


@router.get('/vocabulary/{entry_id}', response_model=EntryEnvelope)
def get_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {'entry': get_entry_or_404(entry_id, db)}


@router.post('/vocabulary', response_model=EntryEnvelope, status_code=status.HTTP_201_CREATED)
def create_entry(
    data: CreateEntryRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = VocabularyEntry(
        english_text=data.english_text,
        kind=(data.kind or VocabularyKind.WORD).value,
        notes=data.notes,
        tags=data.tags or [],
        created_by_id=current_user.id,
        translations=[
            VocabularyTranslation(**translation.model_dump())
            for translation in data.translations or []
        ],
    )

    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(entry)
    return {'entry': entry}


@router.patch('/vocabulary/{entry_id}', response_model=EntryEnvelope)
def update_entry(
    entry_id: str,
    data: UpdateEntryRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = get_entry_or_404(entry_id, db)

    if data.english_text is not None:
        entry.english_text = data.english_text
    if data.notes is not None:
        entry.notes = data.notes
    if data.tags is not None:
        entry.tags = data.tags
    if data.kind is not None:
        entry.kind = data.kind.value
    entry.updated_at = utcnow()

    try:
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(entry)
    return {'entry': entry}


@router.delete('/vocabulary/{entry_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = get_entry_or_404(entry_id, db)
    try:
        db.delete(entry)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc


@router.post(
    '/vocabulary/{entry_id}/translations',
    response_model=TranslationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_translation(
    entry_id: str,
    data: TranslationPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = get_entry_or_404(entry_id, db)
    translation = VocabularyTranslation(entry_id=entry.id, **data.model_dump())

    try:
        db.add(translation)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(translation)
    return {'translation': translation}


@router.patch('/vocabulary/{entry_id}/translations/{translation_id}', response_model=TranslationEnvelope)
def update_translation(
    entry_id: str,
    translation_id: str,
    data: UpdateTranslationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    translation = get_translation_or_404(entry_id, translation_id, db)

    for field, value in data.model_dump(exclude_none=True).items():
        setattr(translation, field, value)
    translation.updated_at = utcnow()

    try:
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(translation)
    return {'translation': translation}


@router.delete('/vocabulary/{entry_id}/translations/{translation_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_translation(
    entry_id: str,
    translation_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    translation = get_translation_or_404(entry_id, translation_id, db)
    try:
        db.delete(translation)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc
