"""Selection engine: credit totals, range validation, drafts, and submission."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .catalog import Catalog
from .config import EngineConfig
from .errors import MalformedDraft, StorageError
from .models import STATUS_OVER, STATUS_UNDER, STATUS_VALID, CourseRecord
from .storage import KeyValueStore, MemoryStore

Clock = Callable[[], datetime]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageReport:
    """Outcome of one storage side effect."""

    ok: bool
    message: str


@dataclass(frozen=True)
class DraftSaved:
    """Encoded draft plus whether it reached the store."""

    blob: str
    stored: bool
    message: str


@dataclass(frozen=True)
class DraftLoaded:
    """Selection after a load attempt plus whether the draft was read."""

    codes: tuple[str, ...]
    loaded: bool
    message: str


@dataclass(frozen=True)
class SelectionSummary:
    """Derived selection state for display."""

    codes: tuple[str, ...]
    courses: tuple[CourseRecord, ...]
    total: int
    status: str
    min_credits: int
    max_credits: int
    can_submit: bool
    hint: str


@dataclass(frozen=True)
class Accepted:
    """Submission passed validation and was recorded."""

    total: int
    submitted_at: int
    recorded: bool = True


@dataclass(frozen=True)
class Rejected:
    """Submission failed credit-range validation."""

    reasons: tuple[str, ...]


SubmitResult = Accepted | Rejected


def total_credits(codes: Iterable[str], catalog: Catalog) -> int:
    """Sum credits of the given codes; unknown codes contribute zero."""
    total = 0
    for code in codes:
        record = catalog.lookup(code)
        if record is not None:
            total += record.credits
    return total


def classify(total: int, min_credits: int, max_credits: int) -> str:
    """Classify a credit total against the inclusive range."""
    if total < min_credits:
        return STATUS_UNDER
    if total > max_credits:
        return STATUS_OVER
    return STATUS_VALID


def validation_reasons(total: int, min_credits: int, max_credits: int) -> list[str]:
    """Return the corrective messages for an out-of-range total (at most one)."""
    reasons: list[str] = []
    if total < min_credits:
        reasons.append(f"add {min_credits - total} more credit(s) to reach minimum {min_credits}")
    if total > max_credits:
        reasons.append(f"remove {total - max_credits} credit(s) to be at most {max_credits}")
    return reasons


def range_hint(total: int, min_credits: int, max_credits: int) -> str:
    """Return the short status line shown next to the credit counter."""
    if total < min_credits:
        return f"Under minimum: add {min_credits - total} credit(s)."
    if total > max_credits:
        return f"Over maximum: remove {total - max_credits} credit(s)."
    return "Within allowed range."


def encode_draft(codes: Iterable[str]) -> str:
    """Serialize an ordered selection to a JSON array blob."""
    return json.dumps(list(codes))


def decode_draft(blob: object) -> list[str]:
    """Parse a draft blob into an ordered list of course codes.

    Raises MalformedDraft unless the blob is JSON text holding an array of
    strings.
    """
    if not isinstance(blob, str | bytes | bytearray):
        raise MalformedDraft(f"Draft must be JSON text, got {type(blob).__name__}.")
    try:
        parsed: object = json.loads(blob)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedDraft(f"Draft is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedDraft("Draft nesting is too deep.") from exc
    if not isinstance(parsed, list):
        raise MalformedDraft(f"Draft must be a JSON array, got {type(parsed).__name__}.")
    codes: list[str] = []
    for item in parsed:
        if not isinstance(item, str):
            raise MalformedDraft(f"Draft entries must be strings, got {item!r}.")
        codes.append(item)
    return codes


def _dedupe(codes: Iterable[str]) -> list[str]:
    """Drop repeated codes, keeping first-seen order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for code in codes:
        if code not in seen:
            seen.add(code)
            ordered.append(code)
    return ordered


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SelectionEngine:
    """Owns one session's selected course codes and gates submission."""

    def __init__(
        self,
        catalog: Catalog,
        store: KeyValueStore | None = None,
        config: EngineConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Create an empty selection bound to a catalog and a store."""
        self.catalog = catalog
        self.store: KeyValueStore = store if store is not None else MemoryStore()
        self.config = config if config is not None else EngineConfig()
        self._clock = clock or _utc_now
        self._selected: list[str] = []

    @property
    def selected_codes(self) -> tuple[str, ...]:
        """Snapshot of the current selection in toggle order."""
        return tuple(self._selected)

    def is_selected(self, code: str) -> bool:
        """Return whether a code is currently selected."""
        return code in self._selected

    def toggle(self, code: str) -> bool:
        """Remove the code if selected, otherwise append it; return the new membership.

        No range check is applied here, so the total may leave the allowed range.
        """
        if code in self._selected:
            self._selected.remove(code)
            return False
        self._selected.append(code)
        return True

    def total_credits(self) -> int:
        """Return credits of the current selection."""
        return total_credits(self._selected, self.catalog)

    def classify(self, total: int | None = None) -> str:
        """Classify a total (default: the current one) against the configured range."""
        if total is None:
            total = self.total_credits()
        return classify(total, self.config.min_credits, self.config.max_credits)

    def status(self) -> str:
        """Return the range status of the current selection."""
        return self.classify()

    def summary(self) -> SelectionSummary:
        """Return derived selection state for display."""
        total = self.total_credits()
        status = self.classify(total)
        return SelectionSummary(
            codes=self.selected_codes,
            courses=tuple(self.export_selection()),
            total=total,
            status=status,
            min_credits=self.config.min_credits,
            max_credits=self.config.max_credits,
            can_submit=status == STATUS_VALID,
            hint=range_hint(total, self.config.min_credits, self.config.max_credits),
        )

    def save_draft(self) -> DraftSaved:
        """Encode the selection and persist it under the draft key."""
        blob = encode_draft(self._selected)
        try:
            self.store.set(self.config.draft_key, blob)
        except StorageError as exc:
            logger.warning("Draft not saved: %s", exc)
            return DraftSaved(blob=blob, stored=False, message=f"Draft could not be saved: {exc}")
        logger.info("Saved draft with %d course(s)", len(self._selected))
        return DraftSaved(blob=blob, stored=True, message="Draft saved.")

    def load_draft(self, blob: str | bytes | None = None) -> DraftLoaded:
        """Replace the selection with a decoded draft.

        With no blob, the persisted draft is read; a missing draft loads as an
        empty selection. A store read failure is logged and reported with the
        selection left untouched. MalformedDraft propagates and also leaves
        the selection untouched.
        """
        if blob is None:
            try:
                blob = self.store.get(self.config.draft_key)
            except StorageError as exc:
                logger.warning("Draft not loaded: %s", exc)
                return DraftLoaded(
                    codes=self.selected_codes, loaded=False, message=f"Saved draft could not be read: {exc}"
                )
            if blob is None:
                self._selected = []
                return DraftLoaded(codes=(), loaded=True, message="No saved draft; selection is empty.")
        codes = _dedupe(decode_draft(blob))
        for code in codes:
            if code not in self.catalog:
                logger.debug("Draft references unknown course code %r", code)
        self._selected = codes
        return DraftLoaded(codes=tuple(codes), loaded=True, message=f"Loaded draft with {len(codes)} course(s).")

    def restore_draft(self) -> bool:
        """Restore the persisted draft at session start; never raises."""
        try:
            blob = self.store.get(self.config.draft_key)
        except StorageError as exc:
            logger.warning("Draft store unavailable, starting empty: %s", exc)
            self._selected = []
            return False
        if blob is None:
            self._selected = []
            return False
        try:
            self.load_draft(blob)
        except MalformedDraft as exc:
            logger.warning("Ignoring malformed saved draft: %s", exc)
            self._selected = []
            return False
        return True

    def clear_draft(self) -> StorageReport:
        """Empty the selection and erase the persisted draft."""
        self._selected = []
        try:
            self.store.delete(self.config.draft_key)
        except StorageError as exc:
            logger.warning("Draft not erased: %s", exc)
            return StorageReport(ok=False, message=f"Selection cleared, but saved draft could not be erased: {exc}")
        logger.info("Cleared draft")
        return StorageReport(ok=True, message="Draft cleared.")

    def export_selection(self) -> list[CourseRecord]:
        """Resolve the selection to catalog records in selection order."""
        records: list[CourseRecord] = []
        for code in self._selected:
            record = self.catalog.lookup(code)
            if record is None:
                logger.debug("Skipping unknown course code %r in export", code)
                continue
            records.append(record)
        return records

    def export_document(self) -> str:
        """Return the exported selection as a pretty-printed JSON array."""
        return json.dumps([record.to_dict() for record in self.export_selection()], indent=2)

    def write_export(self, export_path: Path | str) -> int:
        """Write the exported selection to a JSON file and return the course count."""
        path = Path(export_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_document(), encoding="utf-8")
        return len(self.export_selection())

    def submit(self) -> SubmitResult:
        """Validate the credit total and record a submission snapshot on success.

        The selection stays editable afterwards and may be submitted again.
        """
        total = self.total_credits()
        reasons = validation_reasons(total, self.config.min_credits, self.config.max_credits)
        if reasons:
            return Rejected(reasons=tuple(reasons))

        submitted_at = int(self._clock().timestamp() * 1000)
        snapshot = json.dumps({"ts": submitted_at, "selection": list(self._selected)})
        try:
            self.store.set(self.config.submission_key, snapshot)
        except StorageError as exc:
            logger.warning("Submission snapshot not recorded: %s", exc)
            return Accepted(total=total, submitted_at=submitted_at, recorded=False)
        logger.info("Accepted submission of %d course(s), %d credits", len(self._selected), total)
        return Accepted(total=total, submitted_at=submitted_at)

    def close(self) -> None:
        """Close resources."""
        self.store.close()
