from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixture_path():
    """Return the path of a named file under tests/fixtures."""
    def _path(name: str) -> Path:
        return FIXTURES / name
    return _path


@pytest.fixture
def uso_style(fixture_path) -> str:
    return fixture_path("uso_dropdown.user.css").read_text(encoding="utf-8")


@pytest.fixture
def less_style(fixture_path) -> str:
    return fixture_path("less_theme.user.css").read_text(encoding="utf-8")


@pytest.fixture
def legacy_style(fixture_path) -> str:
    return fixture_path("legacy_document.user.css").read_text(encoding="utf-8")
