"""Flashcard practice over the words of one lesson.

A `PracticeSession` shows one word per page. Pages are 1-based like the
frontend's pager; `previous()` and `next()` stop at the edges instead of
wrapping, and nothing here ever indexes outside the word list.
"""

from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

COMPLETION_REDIRECT = "/user/lessons"
COMPLETION_DELAY_SECONDS = 5


@dataclass(frozen=True)
class Celebration:
    message: str
    redirect: str = COMPLETION_REDIRECT
    delay_seconds: int = COMPLETION_DELAY_SECONDS


class PracticeSession(Generic[T]):
    """Sequential reveal of `items`, one at a time."""

    def __init__(self, items: Sequence[T], page: int = 1):
        self._items: List[T] = list(items)
        self._page = 0
        if self._items:
            self.go_to(page)

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def page(self) -> Optional[int]:
        """Current 1-based page, or `None` when there is nothing to show."""
        return self._page or None

    @property
    def current(self) -> Optional[T]:
        if not self._page:
            return None
        return self._items[self._page - 1]

    @property
    def previous_page(self) -> Optional[int]:
        return self._page - 1 if self._page > 1 else None

    @property
    def next_page(self) -> Optional[int]:
        return self._page + 1 if 0 < self._page < self.total else None

    @property
    def is_last(self) -> bool:
        return self._page != 0 and self._page == self.total

    def go_to(self, page: int) -> T:
        if not 1 <= page <= self.total:
            raise ValueError(f"page must be between 1 and {self.total}")
        self._page = page
        return self._items[page - 1]

    def previous(self) -> Optional[T]:
        if self.previous_page is not None:
            self._page -= 1
        return self.current

    def next(self) -> Optional[T]:
        if self.next_page is not None:
            self._page += 1
        return self.current

    def complete(self, lesson_name: Optional[str] = None) -> Celebration:
        if lesson_name:
            return Celebration(message=f"Congratulations! You completed {lesson_name}.")
        return Celebration(message="Congratulations! You completed the lesson.")
