from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def tmp_path() -> Iterator[Path]:
    """Scratch directory inside the checkout for SQLite cache files."""
    with TemporaryDirectory(prefix=".tmp_pytest_", dir=ROOT) as name:
        yield Path(name)
