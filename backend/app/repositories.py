"""Repository classes encapsulating database operations.

Each repository is small and focused on a single collection (users,
lessons, words, tutorials). Repositories return SQLModel objects and
perform commits/refreshes where appropriate; they never validate.
"""

from typing import Dict, List, Optional
from sqlmodel import Session, select
from sqlalchemy import func
from . import models


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by email or `None` if not found."""
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def list_all(self) -> List[models.User]:
        stmt = select(models.User).order_by(models.User.id)
        return self.session.exec(stmt).all()

    def set_role(self, user: models.User, role: str) -> models.User:
        user.role = role
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def delete(self, user: models.User) -> None:
        self.session.delete(user)
        self.session.commit()


class LessonRepository:
    """CRUD operations for `Lesson` records, keyed by lesson number."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, lesson: models.Lesson) -> models.Lesson:
        self.session.add(lesson)
        self.session.commit()
        self.session.refresh(lesson)
        return lesson

    def get_by_number(self, number: int) -> Optional[models.Lesson]:
        """Return the lesson with `number` or `None`."""
        stmt = select(models.Lesson).where(models.Lesson.number == number)
        return self.session.exec(stmt).first()

    def exists_by_number(self, number: int) -> bool:
        stmt = select(models.Lesson.id).where(models.Lesson.number == number)
        return self.session.exec(stmt).first() is not None

    def list_all(self) -> List[models.Lesson]:
        """Return every lesson ordered by its number."""
        stmt = select(models.Lesson).order_by(models.Lesson.number)
        return self.session.exec(stmt).all()

    def update(self, lesson: models.Lesson, name: Optional[str] = None, number: Optional[int] = None) -> models.Lesson:
        """Apply a partial update; a renumbered lesson takes its words along.

        The lesson row and the word rows are changed in one commit.
        """
        if name is not None:
            lesson.name = name
        if number is not None and number != lesson.number:
            words = self.session.exec(
                select(models.Word).where(models.Word.lesson_number == lesson.number)
            ).all()
            for w in words:
                w.lesson_number = number
                self.session.add(w)
            lesson.number = number
        self.session.add(lesson)
        self.session.commit()
        self.session.refresh(lesson)
        return lesson

    def delete(self, lesson: models.Lesson) -> None:
        self.session.delete(lesson)
        self.session.commit()


class WordRepository:
    """CRUD and lookup helpers for `Word` records."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, word: models.Word) -> models.Word:
        self.session.add(word)
        self.session.commit()
        self.session.refresh(word)
        return word

    def get(self, word_id: int) -> Optional[models.Word]:
        return self.session.get(models.Word, word_id)

    def list_all(self) -> List[models.Word]:
        stmt = select(models.Word).order_by(models.Word.id)
        return self.session.exec(stmt).all()

    def list_for_lesson(self, lesson_number: int) -> List[models.Word]:
        """List the words of a lesson in insertion order."""
        stmt = select(models.Word).where(models.Word.lesson_number == lesson_number).order_by(models.Word.id)
        return self.session.exec(stmt).all()

    def get_by_text(self, text: str) -> Optional[models.Word]:
        """Return the word whose text equals `text` exactly, if any."""
        stmt = select(models.Word).where(models.Word.word == text)
        return self.session.exec(stmt).first()

    def count_by_lesson(self) -> Dict[int, int]:
        """Return `{lesson_number: word_count}` in a single grouped query."""
        stmt = select(models.Word.lesson_number, func.count(models.Word.id)).group_by(models.Word.lesson_number)
        return {number: count for number, count in self.session.exec(stmt).all()}

    def update(self, word: models.Word, values: dict) -> models.Word:
        for key, value in values.items():
            setattr(word, key, value)
        self.session.add(word)
        self.session.commit()
        self.session.refresh(word)
        return word

    def delete(self, word: models.Word) -> None:
        self.session.delete(word)
        self.session.commit()


class TutorialRepository:
    """CRUD operations for `Tutorial` records."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, tutorial: models.Tutorial) -> models.Tutorial:
        self.session.add(tutorial)
        self.session.commit()
        self.session.refresh(tutorial)
        return tutorial

    def get(self, tutorial_id: int) -> Optional[models.Tutorial]:
        return self.session.get(models.Tutorial, tutorial_id)

    def get_by_link(self, link: str) -> Optional[models.Tutorial]:
        stmt = select(models.Tutorial).where(models.Tutorial.link == link)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.Tutorial]:
        stmt = select(models.Tutorial).order_by(models.Tutorial.id)
        return self.session.exec(stmt).all()

    def update(self, tutorial: models.Tutorial, values: dict) -> models.Tutorial:
        for key, value in values.items():
            setattr(tutorial, key, value)
        self.session.add(tutorial)
        self.session.commit()
        self.session.refresh(tutorial)
        return tutorial

    def delete(self, tutorial: models.Tutorial) -> None:
        self.session.delete(tutorial)
        self.session.commit()
