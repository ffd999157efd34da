"""Admin endpoints for lessons, words, tutorials and users.

Mounted under `/api/admin`; the session gate only lets `admin` callers
through, so handlers here do not re-check the role.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlmodel import Session

from .. import services
from ..auth import Identity, get_identity
from ..database import get_session
from ..errors import service_errors
from ..schemas import MAX_INT, LessonIn, LessonUpdate, RoleUpdate, TutorialIn, TutorialUpdate, WordIn

router = APIRouter(tags=["admin"])

# Store-assigned ids are positive and fit an INTEGER column.
RecordId = Annotated[int, Path(ge=1, le=MAX_INT)]


# ---------- lessons ----------

@router.get('/lessons')
def list_lessons(db: Session = Depends(get_session)):
    """List all lessons with their vocabulary counts."""
    with service_errors("Failed to fetch lessons."):
        lessons = services.LessonService(db).list_lessons()
    return {'lessons': lessons}


@router.post('/lessons')
def create_lesson(payload: LessonIn, db: Session = Depends(get_session)):
    with service_errors("Failed to add lesson."):
        lesson = services.LessonService(db).create(payload)
    return {'message': 'Successfully added the lesson.', 'lesson': services.lesson_payload(lesson)}


@router.get('/lessons/{lesson_number}')
def get_lesson(lesson_number: str, db: Session = Depends(get_session)):
    with service_errors("Failed to fetch lesson."):
        lesson = services.LessonService(db).get_lesson(services.parse_lesson_number(lesson_number))
    return {'lesson': lesson}


@router.patch('/lessons/{lesson_number}')
def update_lesson(lesson_number: str, payload: LessonUpdate, db: Session = Depends(get_session)):
    """Rename and/or renumber a lesson; words follow a renumbered lesson."""
    with service_errors("Failed to update lesson."):
        lesson = services.LessonService(db).update(services.parse_lesson_number(lesson_number), payload)
    return {'message': 'Lesson Successfully Updated.', 'lesson': services.lesson_payload(lesson)}


@router.delete('/lessons/{lesson_number}')
def delete_lesson(lesson_number: str, db: Session = Depends(get_session)):
    with service_errors("Failed to delete lesson."):
        services.LessonService(db).delete(services.parse_lesson_number(lesson_number))
    return {'message': 'Lesson Successfully Deleted.'}


# ---------- words ----------

@router.get('/words')
def list_words(db: Session = Depends(get_session)):
    with service_errors("Failed to fetch words."):
        words = services.WordService(db).list_words()
    return {'words': [services.word_payload(w) for w in words]}


@router.post('/words')
def create_word(payload: WordIn, db: Session = Depends(get_session), identity: Identity = Depends(get_identity)):
    """Add a word to a lesson; the creating admin's email is recorded."""
    with service_errors("Failed to add word."):
        word = services.WordService(db).create(payload, admin_email=identity.email)
    return {'message': 'Successfully added the word.', 'word': services.word_payload(word)}


@router.get('/words/{word_id}')
def get_word(word_id: RecordId, db: Session = Depends(get_session)):
    with service_errors("Failed to fetch word."):
        word = services.WordService(db).get(word_id)
    return {'word': services.word_payload(word)}


@router.patch('/words/{word_id}')
def update_word(word_id: RecordId, payload: WordIn, db: Session = Depends(get_session)):
    with service_errors("Failed to update word."):
        word = services.WordService(db).update(word_id, payload)
    return {'message': 'Word Successfully Updated.', 'word': services.word_payload(word)}


@router.delete('/words/{word_id}')
def delete_word(word_id: RecordId, db: Session = Depends(get_session)):
    with service_errors("Failed to delete word."):
        services.WordService(db).delete(word_id)
    return {'message': 'Word Successfully deleted.'}


# ---------- tutorials ----------

@router.get('/tutorials')
def list_tutorials(db: Session = Depends(get_session)):
    with service_errors("Failed to fetch tutorials."):
        tutorials = services.TutorialService(db).list_tutorials()
    return {'tutorials': [services.tutorial_payload(t) for t in tutorials]}


@router.post('/tutorials')
def create_tutorial(payload: TutorialIn, db: Session = Depends(get_session)):
    with service_errors("Failed to add tutorial."):
        tutorial = services.TutorialService(db).create(payload)
    return {'message': 'Successfully added the tutorial.', 'tutorial': services.tutorial_payload(tutorial)}


@router.get('/tutorials/{tutorial_id}')
def get_tutorial(tutorial_id: RecordId, db: Session = Depends(get_session)):
    with service_errors("Failed to fetch tutorial."):
        tutorial = services.TutorialService(db).get(tutorial_id)
    return {'tutorial': services.tutorial_payload(tutorial)}


@router.patch('/tutorials/{tutorial_id}')
def update_tutorial(tutorial_id: RecordId, payload: TutorialUpdate, db: Session = Depends(get_session)):
    with service_errors("Failed to update tutorial."):
        tutorial = services.TutorialService(db).update(tutorial_id, payload)
    return {'message': 'Tutorial Successfully Updated.', 'tutorial': services.tutorial_payload(tutorial)}


@router.delete('/tutorials/{tutorial_id}')
def delete_tutorial(tutorial_id: RecordId, db: Session = Depends(get_session)):
    with service_errors("Failed to delete tutorial."):
        services.TutorialService(db).delete(tutorial_id)
    return {'message': 'Tutorial Successfully Deleted.'}


# ---------- users ----------

@router.get('/users')
def list_users(db: Session = Depends(get_session)):
    """List registered users. Password hashes are never part of the payload."""
    with service_errors("Failed to fetch users."):
        users = services.UserService(db).list_users()
    return {'users': [services.user_payload(u) for u in users]}


@router.get('/users/{user_id}')
def get_user(user_id: RecordId, db: Session = Depends(get_session)):
    with service_errors("Failed to fetch user."):
        user = services.UserService(db).get(user_id)
    return {'user': services.user_payload(user)}


@router.patch('/users/{user_id}')
def update_user_role(user_id: RecordId, payload: RoleUpdate, db: Session = Depends(get_session),
                     identity: Identity = Depends(get_identity)):
    """Promote a user to admin or demote back to standard."""
    with service_errors("Failed to update user."):
        user = services.UserService(db).set_role(identity, user_id, payload.role)
    return {'message': 'User Role Successfully Updated.', 'user': services.user_payload(user)}


@router.delete('/users/{user_id}')
def delete_user(user_id: RecordId, db: Session = Depends(get_session), identity: Identity = Depends(get_identity)):
    with service_errors("Failed to delete user."):
        services.UserService(db).delete(identity, user_id)
    return {'message': 'User Successfully Deleted.'}
