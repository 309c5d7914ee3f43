from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def bulletin_path() -> Path:
    return FIXTURES / "bulletin.html"


@pytest.fixture
def bulletin_html(bulletin_path: Path) -> str:
    return bulletin_path.read_text(encoding="utf-8")
