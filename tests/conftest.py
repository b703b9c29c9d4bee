"""Shared test fixtures for the price engine."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.price_engine.currency import find_locale
from src.price_engine.document import DocumentTree


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir):
    """Parse an HTML fixture into a DocumentTree."""
    def _load(name: str) -> DocumentTree:
        return DocumentTree((fixtures_dir / name).read_bytes())
    return _load


@pytest.fixture
def make_tree():
    """Build a DocumentTree from a body snippet and optional head markup."""
    def _make(body: str, head: str = "", html_attrs: str = "") -> DocumentTree:
        return DocumentTree(
            f"<html {html_attrs}><head>{head}</head><body>{body}</body></html>"
        )
    return _make


@pytest.fixture
def en_us():
    return find_locale("en-US")


@pytest.fixture
def de_de():
    return find_locale("de-DE")


@pytest.fixture
def fr_fr():
    return find_locale("fr-FR")
