"""Engine configuration: credit range and storage keys."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_MIN_CREDITS = 16
DEFAULT_MAX_CREDITS = 27
DEFAULT_KEY_PREFIX = "course_reg"
DEFAULT_DB_PATH = Path(".coursereg") / "drafts.db"
DEFAULT_EXPORT_NAME = "course_selection.json"
ALL_DOMAINS = "All"


@dataclass(frozen=True)
class EngineConfig:
    """Credit range and storage keys for one selection session.

    The defaults reproduce the registration rules: a submission must carry
    between 16 and 27 credits inclusive, and drafts live under
    ``course_reg_draft_v1`` with the submission snapshot beside it.
    """

    min_credits: int = DEFAULT_MIN_CREDITS
    max_credits: int = DEFAULT_MAX_CREDITS
    key_prefix: str = DEFAULT_KEY_PREFIX

    def __post_init__(self) -> None:
        if self.min_credits < 0:
            raise ValueError(f"min_credits must be non-negative, got {self.min_credits}.")
        if self.max_credits < self.min_credits:
            raise ValueError(
                f"max_credits ({self.max_credits}) must be at least min_credits ({self.min_credits})."
            )
        if not self.key_prefix.strip():
            raise ValueError("key_prefix must not be empty.")

    @property
    def draft_key(self) -> str:
        """Storage key of the editable draft."""
        return f"{self.key_prefix}_draft_v1"

    @property
    def submission_key(self) -> str:
        """Storage key of the last accepted submission snapshot."""
        return f"{self.draft_key}_submitted"
