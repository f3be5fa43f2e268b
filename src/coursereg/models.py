"""Core domain models for course selection."""

from __future__ import annotations

from dataclasses import dataclass

STATUS_UNDER = "under"
STATUS_VALID = "valid"
STATUS_OVER = "over"
CREDIT_STATUSES = (STATUS_UNDER, STATUS_VALID, STATUS_OVER)


@dataclass(frozen=True)
class CourseRecord:
    """One catalog course offering."""

    code: str
    title: str
    credits: int
    domain: str

    def to_dict(self) -> dict[str, object]:
        """Return the JSON shape used by exported selections."""
        return {"code": self.code, "title": self.title, "credits": self.credits, "domain": self.domain}
