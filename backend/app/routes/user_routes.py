"""Endpoints for standard users: browsing lessons and practising words.

Mounted under `/api/user`; the session gate only admits the `standard`
role here.
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..errors import service_errors

router = APIRouter(tags=["user"])


@router.get('/lessons')
def list_lessons(db: Session = Depends(get_session)):
    with service_errors("Failed to fetch lessons."):
        lessons = services.LessonService(db).list_lessons()
    return {'lessons': lessons}


@router.get('/lessons/{lesson_number}')
def get_lesson(lesson_number: str, db: Session = Depends(get_session)):
    """Return one lesson together with all of its words."""
    with service_errors("Failed to fetch lesson."):
        lesson = services.LessonService(db).get_lesson_with_words(services.parse_lesson_number(lesson_number))
    return {'lesson': lesson}


@router.get('/lessons/{lesson_number}/practice')
def practice_card(lesson_number: str, page: int = 1, db: Session = Depends(get_session)):
    """Return the flashcard at `page` (1-based) plus the pager state.

    `previousPage`/`nextPage` are null at the edges; `isLast` tells the
    client to offer completion instead of "next".
    """
    with service_errors("Failed to fetch lesson."):
        lesson, session = services.LessonService(db).practice(services.parse_lesson_number(lesson_number), page)
    word = session.current
    return {
        'lesson': services.lesson_payload(lesson, session.total),
        'page': session.page,
        'total': session.total,
        'word': services.word_payload(word) if word is not None else None,
        'previousPage': session.previous_page,
        'nextPage': session.next_page,
        'isLast': session.is_last,
    }


@router.post('/lessons/{lesson_number}/practice/complete')
def complete_practice(lesson_number: str, db: Session = Depends(get_session)):
    """Finish a practice run; the client celebrates then follows `redirect`."""
    with service_errors("Failed to complete lesson."):
        lesson, session = services.LessonService(db).practice(services.parse_lesson_number(lesson_number))
    celebration = session.complete(lesson.name)
    return {
        'message': celebration.message,
        'redirect': celebration.redirect,
        'redirectAfterSeconds': celebration.delay_seconds,
    }


@router.get('/tutorials')
def list_tutorials(db: Session = Depends(get_session)):
    with service_errors("Failed to fetch tutorials."):
        tutorials = services.TutorialService(db).list_tutorials()
    return {'tutorials': [services.tutorial_payload(t) for t in tutorials]}
