from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.database import database_unavailable, get_db, utcnow
from backend.models.lesson import Lesson, LessonStatus, Task, TaskOption, TaskType
from backend.models.user import User

router = APIRouter(tags=['lessons'])


class TaskOptionPayload(BaseModel):
    id: str | None = None
    label: str = Field(min_length=1)
    is_correct: bool = False


class TaskPayload(BaseModel):
    id: str | None = None
    prompt: str = Field(min_length=4)
    type: TaskType
    order: int | None = Field(default=None, ge=0)
    config: dict[str, Any] = Field(default_factory=dict)
    options: list[TaskOptionPayload] | None = None


class CreateLessonRequest(BaseModel):
    title: str = Field(min_length=2)
    description: str | None = None
    status: LessonStatus | None = None
    tasks: list[TaskPayload] | None = None


class UpdateLessonRequest(BaseModel):
    title: str | None = Field(default=None, min_length=2)
    description: str | None = None
    status: LessonStatus | None = None
    tasks: list[TaskPayload] | None = None


class TaskOptionResponse(BaseModel):
    id: str
    label: str
    is_correct: bool

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    id: str
    lesson_id: str
    prompt: str
    type: str
    order: int
    config: dict[str, Any]
    options: list[TaskOptionResponse]

    class Config:
        from_attributes = True


class LessonResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    status: str
    published_at: datetime | None = None
    author_id: str
    created_at: datetime
    updated_at: datetime
    tasks: list[TaskResponse]

    class Config:
        from_attributes = True


class LessonEnvelope(BaseModel):
    lesson: LessonResponse


class LessonListEnvelope(BaseModel):
    lessons: list[LessonResponse]


class TaskEnvelope(BaseModel):
    task: TaskResponse


def build_options(options: list[TaskOptionPayload] | None) -> list[TaskOption]:
    return [TaskOption(label=option.label, is_correct=option.is_correct) for option in options or []]


def build_task(payload: TaskPayload, default_order: int) -> Task:
    return Task(
        prompt=payload.prompt,
        type=payload.type.value,
        order=payload.order if payload.order is not None else default_order,
        config=payload.config,
        options=build_options(payload.options),
    )


def resolve_published_at(requested: LessonStatus | None, current: datetime | None) -> datetime | None:
    if requested is LessonStatus.PUBLISHED:
        return current or utcnow()
    if requested is LessonStatus.DRAFT:
        return None
    return current


def reconcile_task_options(task: Task, options: list[TaskOptionPayload]) -> None:
    """Update options that carry an id, create the rest and delete the ones not listed."""
    existing = {option.id: option for option in task.options}
    keep: list[TaskOption] = []

    for payload in options:
        if payload.id:
            option = existing.get(payload.id)
            if option is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Option not found')
            option.label = payload.label
            option.is_correct = payload.is_correct
        else:
            option = TaskOption(label=payload.label, is_correct=payload.is_correct)
        keep.append(option)

    # delete-orphan cascade removes options dropped from the collection
    task.options = keep


def apply_task_updates(lesson: Lesson, tasks: list[TaskPayload]) -> None:
    existing = {task.id: task for task in lesson.tasks}

    for payload in tasks:
        if not payload.id:
            lesson.tasks.append(build_task(payload, default_order=0))
            continue

        task = existing.get(payload.id)
        if task is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Task not found')
        task.prompt = payload.prompt
        task.type = payload.type.value
        task.order = payload.order or 0
        task.config = payload.config
        if payload.options is not None:
            reconcile_task_options(task, payload.options)


def get_lesson_or_404(lesson_id: str, db: Session) -> Lesson:
    lesson = db.get(Lesson, lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Lesson not found')
    return lesson


@router.get('/lessons', response_model=LessonListEnvelope)
def list_lessons(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lessons = db.query(Lesson).order_by(Lesson.updated_at.desc()).all()
    return {'lessons': lessons}


@router.get('/lessons/{lesson_id}', response_model=LessonEnvelope)
def get_lesson(
    lesson_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {'lesson': get_lesson_or_404(lesson_id, db)}


@router.post('/lessons', response_model=LessonEnvelope, status_code=status.HTTP_201_CREATED)
def create_lesson(
    data: CreateLessonRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lesson_status = data.status or LessonStatus.DRAFT
    lesson = Lesson(
        title=data.title,
        description=data.description,
        status=lesson_status.value,
        published_at=resolve_published_at(lesson_status, None),
        author_id=current_user.id,
        tasks=[build_task(task, default_order=index) for index, task in enumerate(data.tasks or [])],
    )

    try:
        db.add(lesson)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(lesson)
    return {'lesson': lesson}


@router.patch('/lessons/{lesson_id}', response_model=LessonEnvelope)
def update_lesson(
    lesson_id: str,
    data: UpdateLessonRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lesson = get_lesson_or_404(lesson_id, db)

    try:
        if data.title is not None:
            lesson.title = data.title
        if data.description is not None:
            lesson.description = data.description
        lesson.published_at = resolve_published_at(data.status, lesson.published_at)
        if data.status is not None:
            lesson.status = data.status.value
        if data.tasks is not None:
            apply_task_updates(lesson, data.tasks)
        lesson.updated_at = utcnow()
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.expire_all()
    return {'lesson': get_lesson_or_404(lesson_id, db)}


@router.delete('/lessons/{lesson_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_lesson(
    lesson_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lesson = get_lesson_or_404(lesson_id, db)
    try:
        db.delete(lesson)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc


@router.post('/lessons/{lesson_id}/tasks', response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    lesson_id: str,
    data: TaskPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lesson = get_lesson_or_404(lesson_id, db)
    task_count = db.query(Task).filter(Task.lesson_id == lesson.id).count()
    task = build_task(data, default_order=task_count)
    task.lesson_id = lesson.id

    try:
        db.add(task)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc

    db.refresh(task)
    return {'task': task}


@router.delete('/lessons/{lesson_id}/tasks/{task_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    lesson_id: str,
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = db.query(Task).filter(Task.id == task_id, Task.lesson_id == lesson_id).first()
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Task not found')

    try:
        db.delete(task)
        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(db, exc) from exc
