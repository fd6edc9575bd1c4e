"""Pytest configuration for eqrewrite tests.

Shared fixtures for all test suites.
"""

import logging
import pathlib
import sys

import pytest

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Add project root to path so the tests run from a plain checkout too
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from eqrewrite.testing import EGraph, Pattern  # noqa: E402


@pytest.fixture
def egraph() -> EGraph:
    """A fresh, empty reference e-graph."""
    return EGraph()


@pytest.fixture
def parse():
    """The reference s-expression pattern parser."""
    return Pattern.parse


@pytest.fixture
def eqrewrite_home(tmp_path, monkeypatch) -> pathlib.Path:
    """Point ``$EQREWRITE_HOME`` at a temporary directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("EQREWRITE_HOME", str(home))
    return home


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
