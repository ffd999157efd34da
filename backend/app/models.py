"""SQLModel data models.

Each class maps to one collection of the store. Lessons are addressed
by their user-facing `number` rather than the internal id, and words
point at a lesson through `lesson_number` (not a foreign key, so a
word may briefly outlive its lesson).
"""

from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

ROLE_STANDARD = "standard"
ROLE_ADMIN = "admin"
ROLES = (ROLE_STANDARD, ROLE_ADMIN)


def _now():
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `email`: unique, stored lower-cased
    - `role`: `standard` or `admin`
    - `password_hash`: hashed password string (never store plaintext)
    - `photo_url`: link to the profile image on the image host
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, nullable=False, unique=True)
    role: str = Field(default=ROLE_STANDARD, index=True)
    password_hash: str
    photo_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)


class Lesson(SQLModel, table=True):
    """A numbered unit grouping vocabulary words."""
    __tablename__ = "lessons"

    id: Optional[int] = Field(default=None, primary_key=True)
    number: int = Field(index=True, nullable=False, unique=True)
    name: str


class Word(SQLModel, table=True):
    """A vocabulary entry belonging to one lesson."""
    __tablename__ = "words"

    id: Optional[int] = Field(default=None, primary_key=True)
    word: str = Field(index=True)
    meaning: str
    pronunciation: str
    when_to_say: str
    lesson_number: int = Field(index=True)
    admin_email: Optional[str] = None


class Tutorial(SQLModel, table=True):
    """A video tutorial; `link` is unique across tutorials."""
    __tablename__ = "tutorials"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    link: str = Field(index=True, unique=True)
