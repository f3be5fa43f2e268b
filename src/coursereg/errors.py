"""Exceptions raised by the catalog, engine, and stores."""

from __future__ import annotations


class CourseRegError(Exception):
    """Base class for coursereg errors."""


class MalformedDraft(CourseRegError, ValueError):
    """A draft blob did not decode to a JSON array of course codes."""


class UnknownCourseCode(CourseRegError, KeyError):
    """A course code has no matching catalog record."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"Unknown course code: {self.code!r}"


class StorageError(CourseRegError):
    """The key-value store could not complete an operation."""
