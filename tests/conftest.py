"""
Pytest configuration and shared fixtures for hashtree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures import make_blocks, make_tree  # noqa: E402

from hashtree.config.runtime import set_default_config  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def abc_blocks():
    """The three-block example: odd count, one padding duplicate."""
    return ["a", "b", "c"]


@pytest.fixture
def abc_tree(abc_blocks):
    """Tree over the three-block example, built with SHA-256."""
    return make_tree(abc_blocks)


@pytest.fixture
def many_blocks():
    """Nine blocks: enough levels for padding above the leaf level."""
    return make_blocks(9)


@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Isolate tests from HASHTREE_* variables and cached configuration."""
    monkeypatch.delenv("HASHTREE_HASH_ALGORITHM", raising=False)
    monkeypatch.delenv("HASHTREE_LOG_LEVEL", raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
