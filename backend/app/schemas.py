"""Pydantic request schemas used by the API.

Schemas keep API input shapes stable and carry the field rules for
each resource. Validators collect every problem before failing so a
client sees all messages at once; the application turns the resulting
validation error into a 400 response.

Wire names follow the frontend's camelCase (`lessonNumber`,
`whenToSay`); the Python attributes are snake_case.
"""

import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import ROLES

YOUTUBE_LINK_RE = re.compile(
    r"^https?://(www\.)?(youtube\.com/watch\?v=|youtu\.be/)[a-zA-Z0-9_-]{11}$"
)

# Largest value an INTEGER column of the store can hold.
MAX_INT = 2**63 - 1


def coerce_int(value: Any, message: str, too_large: str = "Number is too large.") -> Any:
    """Accept ints, integral floats and digit strings; reject everything else.

    `None` passes through so "missing" can be reported separately. Values
    beyond `MAX_INT` either way raise `too_large`.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and re.fullmatch(r"\s*[+-]?\d+\s*", value):
        number = int(value)
    else:
        raise ValueError(message)
    if abs(number) > MAX_INT:
        raise ValueError(too_large)
    return number


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


def _fail(errors: List[str]):
    if errors:
        raise ValueError("\n".join(errors))


class LessonIn(BaseModel):
    """Payload for creating a lesson."""
    name: Optional[str] = None
    number: Optional[int] = None

    @field_validator("number", mode="before")
    @classmethod
    def validate_number(cls, value):
        return coerce_int(value, "Lesson Number must be an integer.", "Lesson Number is too large.")

    @model_validator(mode="after")
    def check_required(self):
        errors = []
        if _blank(self.name):
            errors.append("Lesson Name cannot be empty.")
        if self.number is None:
            errors.append("Lesson Number is required.")
        elif self.number < 1:
            errors.append("Lesson Number must be a positive integer.")
        _fail(errors)
        self.name = _strip(self.name)
        return self


class LessonUpdate(BaseModel):
    """Partial update for a lesson; at least one field must be present."""
    name: Optional[str] = None
    number: Optional[int] = None

    @field_validator("number", mode="before")
    @classmethod
    def validate_number(cls, value):
        return coerce_int(value, "Lesson Number must be an integer.", "Lesson Number is too large.")

    @model_validator(mode="after")
    def check_fields(self):
        if self.name is None and self.number is None:
            raise ValueError("Either Lesson Name or Lesson Number must be specified.")
        errors = []
        if self.name is not None and _blank(self.name):
            errors.append("Lesson Name cannot be empty.")
        if self.number is not None and self.number < 1:
            errors.append("Lesson Number must be a positive integer.")
        _fail(errors)
        self.name = _strip(self.name)
        return self


class WordIn(BaseModel):
    """Payload for creating or replacing a vocabulary word."""
    model_config = ConfigDict(populate_by_name=True)

    word: Optional[str] = None
    meaning: Optional[str] = None
    pronunciation: Optional[str] = None
    when_to_say: Optional[str] = Field(default=None, alias="whenToSay")
    lesson_number: Optional[int] = Field(default=None, alias="lessonNumber")

    @field_validator("lesson_number", mode="before")
    @classmethod
    def validate_lesson_number(cls, value):
        return coerce_int(value, "Lesson Number must be an integer.", "Lesson Number is too large.")

    @model_validator(mode="after")
    def check_required(self):
        errors = []
        if _blank(self.word):
            errors.append("Word is required.")
        if _blank(self.meaning):
            errors.append("Meaning is required.")
        if _blank(self.pronunciation):
            errors.append("Pronunciation is required.")
        if _blank(self.when_to_say):
            errors.append("'When To Say' is required.")
        if self.lesson_number is None:
            errors.append("Lesson Number is required.")
        elif self.lesson_number < 1:
            errors.append("Lesson Number must be a positive integer.")
        _fail(errors)
        self.word = _strip(self.word)
        self.meaning = _strip(self.meaning)
        self.pronunciation = _strip(self.pronunciation)
        self.when_to_say = _strip(self.when_to_say)
        return self


class TutorialIn(BaseModel):
    """Payload for creating a tutorial."""
    title: Optional[str] = None
    link: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self):
        errors = []
        if _blank(self.title):
            errors.append("Title is required.")
        if _blank(self.link):
            errors.append("Link is required.")
        elif not YOUTUBE_LINK_RE.match(self.link.strip()):
            errors.append("Invalid YouTube URL.")
        _fail(errors)
        self.title = _strip(self.title)
        self.link = _strip(self.link)
        return self


class TutorialUpdate(BaseModel):
    """Partial update for a tutorial."""
    title: Optional[str] = None
    link: Optional[str] = None

    @model_validator(mode="after")
    def check_fields(self):
        if self.title is None and self.link is None:
            raise ValueError("Either Title or Link must be specified.")
        errors = []
        if self.title is not None and _blank(self.title):
            errors.append("Title cannot be empty.")
        if self.link is not None and not YOUTUBE_LINK_RE.match(self.link.strip()):
            errors.append("Invalid YouTube URL.")
        _fail(errors)
        self.title = _strip(self.title)
        self.link = _strip(self.link)
        return self


class RoleUpdate(BaseModel):
    """Role change request used for promotion/demotion."""
    role: Optional[str] = None

    @field_validator("role")
    @classmethod
    def validate_role(cls, value):
        normalized = (value or "").strip().lower()
        if normalized not in ROLES:
            raise ValueError("Role must be either 'standard' or 'admin'.")
        return normalized

    @model_validator(mode="after")
    def check_required(self):
        if self.role is None:
            raise ValueError("Role is required.")
        return self


class TokenIn(BaseModel):
    """Body of the token verification endpoint."""
    token: Optional[str] = None
