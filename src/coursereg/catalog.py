"""Read-only course catalog with lookup and filtering."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .config import ALL_DOMAINS
from .errors import UnknownCourseCode
from .models import CourseRecord


class Catalog:
    """Fixed, ordered set of course records keyed by code."""

    def __init__(self, records: Iterable[CourseRecord]) -> None:
        """Index records, rejecting duplicate codes and non-positive credits."""
        self._records: tuple[CourseRecord, ...] = tuple(records)
        self._by_code: dict[str, CourseRecord] = {}
        for record in self._records:
            if record.code in self._by_code:
                raise ValueError(f"Duplicate course code: {record.code}")
            if record.credits <= 0:
                raise ValueError(f"Course '{record.code}' must have positive credits.")
            self._by_code[record.code] = record

    def __iter__(self) -> Iterator[CourseRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def lookup(self, code: str) -> CourseRecord | None:
        """Return the record for a code, or None when absent."""
        if not code:
            return None
        return self._by_code.get(code)

    def require(self, code: str) -> CourseRecord:
        """Return the record for a code or raise UnknownCourseCode."""
        record = self.lookup(code)
        if record is None:
            raise UnknownCourseCode(code)
        return record

    def filter(self, domain: str = ALL_DOMAINS, search_text: str = "") -> list[CourseRecord]:
        """Return records matching a domain and a case-insensitive code/title search.

        ``domain`` is either ``"All"`` or an exact domain label. An empty
        ``search_text`` matches every record. Catalog order is preserved.
        """
        needle = search_text.lower()
        return [
            record
            for record in self._records
            if (domain == ALL_DOMAINS or record.domain == domain)
            and (not needle or needle in record.code.lower() or needle in record.title.lower())
        ]

    def domain_list(self) -> list[str]:
        """Return "All" followed by each domain in order of first appearance."""
        domains = [ALL_DOMAINS]
        for record in self._records:
            if record.domain not in domains:
                domains.append(record.domain)
        return domains
