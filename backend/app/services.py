"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories,
token helpers and the image host. Services are intentionally thin: they
perform validation, check uniqueness against the store and persist via
repositories. Any rule violation (bad input, conflict, missing record)
is raised as `ValueError` with a message fit for the client; store
errors propagate unchanged.
"""

import logging
from typing import Callable, List, Optional

from email_validator import EmailNotValidError, validate_email
from sqlmodel import Session

from . import models, repositories
from .auth import Identity, create_token, decode_token, hash_password, verify_password
from .config import settings
from .practice import PracticeSession
from .schemas import LessonIn, LessonUpdate, TutorialIn, TutorialUpdate, WordIn, coerce_int
from .utils.imgbb import upload_image

logger = logging.getLogger("app.services")

MIN_PASSWORD_LENGTH = 6


def parse_lesson_number(raw) -> int:
    """Validate a lesson number taken from a URL segment."""
    number = coerce_int(raw, "Lesson Number must be an integer.", "Lesson Number is too large.")
    if number is None:
        raise ValueError("Lesson Number must be an integer.")
    if number < 1:
        raise ValueError("Lesson Number must be a positive integer.")
    return number


def normalize_email(email: Optional[str]) -> str:
    """Return the canonical (lower-cased) form of `email` or raise ValueError."""
    try:
        result = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Email is Invalid.") from exc
    return result.normalized.lower()


def user_payload(user: models.User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "photoUrl": user.photo_url,
    }


def lesson_payload(lesson: models.Lesson, vocabulary_count: Optional[int] = None) -> dict:
    out = {"id": lesson.id, "number": lesson.number, "name": lesson.name}
    if vocabulary_count is not None:
        out["vocabularyCount"] = vocabulary_count
    return out


def word_payload(word: models.Word) -> dict:
    return {
        "id": word.id,
        "word": word.word,
        "meaning": word.meaning,
        "pronunciation": word.pronunciation,
        "whenToSay": word.when_to_say,
        "lessonNumber": word.lesson_number,
        "adminEmail": word.admin_email,
    }


def tutorial_payload(tutorial: models.Tutorial) -> dict:
    return {"id": tutorial.id, "title": tutorial.title, "link": tutorial.link}


class AuthService:
    """Registration, login and token verification."""
    def __init__(self, session: Session, uploader: Optional[Callable[[bytes, str], str]] = None):
        self.session = session
        self.user_repo = repositories.UserRepository(session)
        self.uploader = uploader or upload_image

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str],
                 photo: Optional[bytes], photo_filename: Optional[str] = None) -> models.User:
        """Validate the form, upload the photo and create a `standard` user.

        Checks run cheapest first so a bad form never reaches the image host.
        """
        if not name or not name.strip():
            raise ValueError("Name is invalid.")
        email = normalize_email(email)
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        if not photo:
            raise ValueError("Upload a Photo.")
        if len(photo) > settings.MAX_UPLOAD_BYTES:
            raise ValueError(f"Photo must be {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB or smaller.")
        if self.user_repo.get_by_email(email):
            raise ValueError("A user with this email already exists.")

        photo_url = self.uploader(photo, photo_filename or "photo")
        user = models.User(
            name=name.strip(),
            email=email,
            role=models.ROLE_STANDARD,
            password_hash=hash_password(password),
            photo_url=photo_url,
        )
        created = self.user_repo.create(user)
        logger.info("user registered id=%s", created.id)
        return created

    def authenticate(self, email: Optional[str], password: Optional[str]):
        """Verify credentials and return `(user, token)`.

        Raises ValueError with the reason when authentication fails.
        """
        try:
            email = normalize_email(email)
        except ValueError:
            raise ValueError("Email Format is Invalid.")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        user = self.user_repo.get_by_email(email)
        if not user:
            raise ValueError("No User with this email.")
        if not verify_password(password, user.password_hash):
            raise ValueError("Wrong Password.")
        return user, create_token(user)

    def verify_token(self, token: Optional[str]) -> models.User:
        """Exchange a session token for the stored user it names."""
        if not token or not token.strip():
            raise ValueError("Token not found.")
        payload = decode_token(token.strip())
        if not payload or not payload.get("email"):
            raise ValueError("No Payload in JWT Token.")
        user = self.user_repo.get_by_email(payload["email"])
        if not user:
            raise ValueError("No User corresponding to this JWT Token exists.")
        return user

    def resolve_identity(self, token: Optional[str]) -> Optional[Identity]:
        """Like `verify_token` but returns `None` instead of raising."""
        try:
            return Identity.from_user(self.verify_token(token))
        except ValueError:
            return None


class LessonService:
    """Lessons addressed by their user-facing number."""
    def __init__(self, session: Session):
        self.session = session
        self.lesson_repo = repositories.LessonRepository(session)
        self.word_repo = repositories.WordRepository(session)

    def _get(self, number: int) -> models.Lesson:
        lesson = self.lesson_repo.get_by_number(number)
        if not lesson:
            raise ValueError("No Lesson with this lesson number exists.")
        return lesson

    def list_lessons(self) -> List[dict]:
        counts = self.word_repo.count_by_lesson()
        return [lesson_payload(lesson, counts.get(lesson.number, 0)) for lesson in self.lesson_repo.list_all()]

    def get_lesson(self, number: int) -> dict:
        lesson = self._get(number)
        return lesson_payload(lesson, len(self.word_repo.list_for_lesson(number)))

    def get_lesson_with_words(self, number: int) -> dict:
        lesson = self._get(number)
        words = [word_payload(w) for w in self.word_repo.list_for_lesson(number)]
        out = lesson_payload(lesson, len(words))
        out["words"] = words
        return out

    def create(self, data: LessonIn) -> models.Lesson:
        if self.lesson_repo.exists_by_number(data.number):
            raise ValueError("A lesson with this lesson number already exists.")
        return self.lesson_repo.create(models.Lesson(number=data.number, name=data.name))

    def update(self, number: int, data: LessonUpdate) -> models.Lesson:
        lesson = self._get(number)
        if data.number is not None and data.number != lesson.number:
            if self.lesson_repo.exists_by_number(data.number):
                raise ValueError("A lesson with desired lesson number already exists.")
        return self.lesson_repo.update(lesson, name=data.name, number=data.number)

    def delete(self, number: int) -> None:
        self.lesson_repo.delete(self._get(number))

    def practice(self, number: int, page: int = 1):
        """Return `(lesson, session)` positioned at `page`.

        An empty lesson yields a session with no current word; any page
        outside `1..total` raises ValueError.
        """
        lesson = self._get(number)
        words = self.word_repo.list_for_lesson(number)
        if words:
            if not 1 <= page <= len(words):
                raise ValueError(f"Page must be between 1 and {len(words)}.")
        elif page != 1:
            raise ValueError("This lesson has no words to practice.")
        return lesson, PracticeSession(words, page)


class WordService:
    """Vocabulary words; the word text is unique across all lessons."""
    def __init__(self, session: Session):
        self.session = session
        self.word_repo = repositories.WordRepository(session)
        self.lesson_repo = repositories.LessonRepository(session)

    def _get(self, word_id: int) -> models.Word:
        word = self.word_repo.get(word_id)
        if not word:
            raise ValueError("No Word with this ID exists.")
        return word

    def list_words(self) -> List[models.Word]:
        return self.word_repo.list_all()

    def get(self, word_id: int) -> models.Word:
        return self._get(word_id)

    def create(self, data: WordIn, admin_email: Optional[str] = None) -> models.Word:
        if self.word_repo.get_by_text(data.word):
            raise ValueError("This word already exists.")
        # checked, not enforced: the lesson may still be removed later
        if not self.lesson_repo.exists_by_number(data.lesson_number):
            raise ValueError("No Lesson with this lesson number exists.")
        word = models.Word(
            word=data.word,
            meaning=data.meaning,
            pronunciation=data.pronunciation,
            when_to_say=data.when_to_say,
            lesson_number=data.lesson_number,
            admin_email=admin_email,
        )
        return self.word_repo.create(word)

    def update(self, word_id: int, data: WordIn) -> models.Word:
        word = self._get(word_id)
        clash = self.word_repo.get_by_text(data.word)
        if clash and clash.id != word.id:
            raise ValueError("This word already exists.")
        if data.lesson_number != word.lesson_number and not self.lesson_repo.exists_by_number(data.lesson_number):
            raise ValueError("No Lesson with this lesson number exists.")
        return self.word_repo.update(word, {
            "word": data.word,
            "meaning": data.meaning,
            "pronunciation": data.pronunciation,
            "when_to_say": data.when_to_say,
            "lesson_number": data.lesson_number,
        })

    def delete(self, word_id: int) -> None:
        self.word_repo.delete(self._get(word_id))


class TutorialService:
    """Video tutorials; links are unique."""
    def __init__(self, session: Session):
        self.session = session
        self.tutorial_repo = repositories.TutorialRepository(session)

    def _get(self, tutorial_id: int) -> models.Tutorial:
        tutorial = self.tutorial_repo.get(tutorial_id)
        if not tutorial:
            raise ValueError("No Tutorial with this ID exists.")
        return tutorial

    def list_tutorials(self) -> List[models.Tutorial]:
        return self.tutorial_repo.list_all()

    def get(self, tutorial_id: int) -> models.Tutorial:
        return self._get(tutorial_id)

    def create(self, data: TutorialIn) -> models.Tutorial:
        if self.tutorial_repo.get_by_link(data.link):
            raise ValueError("A tutorial with this link already exists.")
        return self.tutorial_repo.create(models.Tutorial(title=data.title, link=data.link))

    def update(self, tutorial_id: int, data: TutorialUpdate) -> models.Tutorial:
        tutorial = self._get(tutorial_id)
        values = {}
        if data.title is not None:
            values["title"] = data.title
        if data.link is not None:
            clash = self.tutorial_repo.get_by_link(data.link)
            if clash and clash.id != tutorial.id:
                raise ValueError("A tutorial with this link already exists.")
            values["link"] = data.link
        return self.tutorial_repo.update(tutorial, values)

    def delete(self, tutorial_id: int) -> None:
        self.tutorial_repo.delete(self._get(tutorial_id))


class UserService:
    """Admin-side user management (listing, role changes, removal)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def _get(self, user_id: int) -> models.User:
        user = self.user_repo.get(user_id)
        if not user:
            raise ValueError("No User with this ID exists.")
        return user

    def list_users(self) -> List[models.User]:
        return self.user_repo.list_all()

    def get(self, user_id: int) -> models.User:
        return self._get(user_id)

    def set_role(self, actor: Identity, user_id: int, role: str) -> models.User:
        """Promote or demote a user. Admins cannot change their own role."""
        if role not in models.ROLES:
            raise ValueError("Role must be either 'standard' or 'admin'.")
        user = self._get(user_id)
        if user.id == actor.user_id:
            raise ValueError("You cannot change your own role.")
        updated = self.user_repo.set_role(user, role)
        logger.info("role changed user_id=%s role=%s by=%s", user.id, role, actor.email)
        return updated

    def delete(self, actor: Identity, user_id: int) -> None:
        user = self._get(user_id)
        if user.id == actor.user_id:
            raise ValueError("You cannot delete your own account.")
        self.user_repo.delete(user)
        logger.info("user deleted user_id=%s by=%s", user_id, actor.email)
