from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.database import get_db
from backend.models.lesson import Lesson, LessonStatus, Task
from backend.models.user import User

router = APIRouter(tags=['analytics'])


class LatestLessonResponse(BaseModel):
    title: str
    published_at: datetime | None = None


class OverviewStats(BaseModel):
    total_lessons: int
    published_lessons: int
    draft_lessons: int
    total_tasks: int
    avg_tasks_per_lesson: float
    latest_published_lesson: LatestLessonResponse | None = None


class OverviewResponse(BaseModel):
    stats: OverviewStats


def compute_overview(db: Session) -> OverviewStats:
    total_lessons = db.query(Lesson).count()
    published_lessons = db.query(Lesson).filter(Lesson.status == LessonStatus.PUBLISHED.value).count()
    total_tasks = db.query(Task).count()
    latest = (
        db.query(Lesson.title, Lesson.published_at)
        .filter(Lesson.status == LessonStatus.PUBLISHED.value)
        .order_by(Lesson.published_at.desc())
        .first()
    )

    avg_tasks = round(total_tasks / total_lessons, 1) if total_lessons else 0

    return OverviewStats(
        total_lessons=total_lessons,
        published_lessons=published_lessons,
        draft_lessons=total_lessons - published_lessons,
        total_tasks=total_tasks,
        avg_tasks_per_lesson=avg_tasks,
        latest_published_lesson=(
            LatestLessonResponse(title=latest.title, published_at=latest.published_at) if latest else None
        ),
    )


@router.get('/analytics/overview', response_model=OverviewResponse)
def analytics_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {'stats': compute_overview(db)}
