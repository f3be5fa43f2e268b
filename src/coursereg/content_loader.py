"""Load the course catalog from bundled JSON resources."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from .catalog import Catalog
from .models import CourseRecord

CONTENT_PACKAGE = "coursereg.content"
CATALOG_RESOURCE = "catalog.json"

logger = logging.getLogger(__name__)


def _course_from_dict(raw: dict[str, Any]) -> CourseRecord:
    """Build a course record from raw JSON content."""
    code = str(raw.get("code", "")).strip()
    if not code:
        raise ValueError(f"Course entry has no code: {raw!r}")
    for field in ("title", "credits", "domain"):
        if field not in raw:
            raise ValueError(f"Course '{code}' is missing '{field}'.")

    credits_raw = raw["credits"]
    if isinstance(credits_raw, bool) or not isinstance(credits_raw, int):
        raise ValueError(f"Course '{code}' has non-integer credits: {credits_raw!r}")
    if credits_raw <= 0:
        raise ValueError(f"Course '{code}' must have positive credits, got {credits_raw}.")

    return CourseRecord(
        code=code,
        title=str(raw["title"]).strip(),
        credits=credits_raw,
        domain=str(raw["domain"]).strip(),
    )


def _catalog_from_dict(raw: object) -> Catalog:
    """Build a catalog from the parsed JSON document."""
    if not isinstance(raw, dict) or not isinstance(raw.get("courses"), list):
        raise ValueError("Catalog root must be a JSON object with a 'courses' list.")
    records: list[CourseRecord] = []
    for item in raw["courses"]:
        if not isinstance(item, dict):
            raise ValueError(f"Course entry must be an object, got {item!r}")
        records.append(_course_from_dict(item))
    return Catalog(records)


def load_catalog() -> Catalog:
    """Load the bundled catalog."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(CATALOG_RESOURCE)
    catalog = _catalog_from_dict(json.loads(entry.read_text(encoding="utf-8-sig")))
    logger.info("Loaded %d courses from bundled catalog", len(catalog))
    return catalog


def load_catalog_from_file(path: Path | str) -> Catalog:
    """Load a catalog from a JSON file for tests/tools."""
    file_path = Path(path)
    catalog = _catalog_from_dict(json.loads(file_path.read_text(encoding="utf-8-sig")))
    logger.info("Loaded %d courses from %s", len(catalog), file_path)
    return catalog
