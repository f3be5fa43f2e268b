from __future__ import annotations

import shutil
import sys
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from coursereg.catalog import Catalog  # noqa: E402
from coursereg.content_loader import load_catalog  # noqa: E402
from coursereg.engine import SelectionEngine  # noqa: E402
from coursereg.storage import MemoryStore  # noqa: E402

FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


def _tmp_path_fixture() -> Iterator[Path]:
    """Provide a per-test directory under ``.tmp_pytest/`` in the project root.

    Overrides pytest's builtin ``tmp_path`` so export files and draft
    databases written by tests stay inside the working tree.
    """
    base = ROOT / ".tmp_pytest"
    base.mkdir(parents=True, exist_ok=True)
    path = base / str(uuid4())
    path.mkdir(parents=True, exist_ok=False)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        try:
            next(base.iterdir())
        except StopIteration:
            base.rmdir()
        except FileNotFoundError:
            pass


tmp_path = pytest.fixture(name="tmp_path")(_tmp_path_fixture)


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine(catalog: Catalog, store: MemoryStore) -> SelectionEngine:
    return SelectionEngine(catalog, store=store, clock=lambda: FIXED_NOW)
