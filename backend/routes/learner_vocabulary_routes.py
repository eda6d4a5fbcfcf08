from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.database import database_unavailable, get_db, utcnow
from backend.models.user import User
from backend.models.vocabulary import LearnerVocabulary, LearnerVocabularyStatus, VocabularyEntry
from backend.routes.vocabulary_routes import EntryResponse, get_entry_or_404

router = APIRouter(tags=['learner-vocabulary'])


class UpdateStatusRequest(BaseModel):
    status: LearnerVocabularyStatus


class LearnerVocabularyResponse(BaseModel):
    id: str
    user_id: str
    entry_id: str
    status: str
    created_at: datetime
    updated_at: datetime
    entry: EntryResponse

    class Config:
        from_attributes = True


class LearnerVocabularyEnvelope(BaseModel):
    vocabulary: LearnerVocabularyResponse


class LearnerVocabularyListEnvelope(BaseModel):
    vocabulary: list[LearnerVocabularyResponse]


def find_learner_word(user_id: str, entry_id: str, db: Session) -> LearnerVocabulary | None:
    return db.query(LearnerVocabulary).filter(
        LearnerVocabulary.user_id == user_id,
        LearnerVocabulary.entry_id == entry_id,
    ).first()


def get_learner_word_or_404(user_id: str, entry_id: str, db: Session) -> LearnerVocabulary:
    learner_word = find_learner_word(user_id, entry_id, db)
    if learner_word is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Learner vocabulary entry not found',
        )
    return learner_word


@router.get('/me/vocabulary', response_model=LearnerVocabularyListEnvelope)
def list_my_vocabulary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    learner_words = (
        db.query(LearnerVocabulary)
        .filter(LearnerVocabulary.user_id == current_user.id)
        .order_by(LearnerVocabulary.updated_at.desc())
        .all()
    )
    return {'vocabulary': learner_words}


@router.post(
    '/me/vocabulary/{entry_id}',
    response_model=LearnerVocabularyEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def add_my_vocabulary(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry: VocabularyEntry = get_entry_or_404(entry_id, db)

    learner_word = find_learner_word(current_user.id, entry.id, db)
    if learner_word is not None:
        return {'vocabulary': learner_word}

    learner_word = LearnerVocabulary(
        user_id=current_user.id,
        entry_id=entry.id,
        status=LearnerVocabularyStatus.NEW.value,
    )
    try:
        db.add(learner_word)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(learner_word)
    return {'vocabulary': learner_word}


@router.patch('/me/vocabulary/{entry_id}', response_model=LearnerVocabularyEnvelope)
def update_my_vocabulary(
    entry_id: str,
    data: UpdateStatusRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    learner_word = get_learner_word_or_404(current_user.id, entry_id, db)
    learner_word.status = data.status.value
    learner_word.updated_at = utcnow()

    try:
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(learner_word)
    return {'vocabulary': learner_word}


@router.delete('/me/vocabulary/{entry_id}', status_code=status.HTTP_204_NO_CONTENT)
def remove_my_vocabulary(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    learner_word = get_learner_word_or_404(current_user.id, entry_id, db)
    try:
        db.delete(learner_word)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc
