"""
Pytest configuration and shared fixtures for merked tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Keeps MERKED_* environment variables and config files from leaking in
4. Configures pytest markers and settings
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

GOLDEN_BUFFER = _common.GOLDEN_BUFFER
make_golden_dag = _common.make_golden_dag
make_leaves = _common.make_leaves
make_shards = _common.make_shards


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_merked_env(monkeypatch):
    """Remove MERKED_* variables so tests see only what they set."""
    for key in list(os.environ):
        if key.startswith("MERKED_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run the test from an empty directory (no merked.yaml/.json around)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def golden_buffer():
    """The 20-byte golden input."""
    return GOLDEN_BUFFER


@pytest.fixture
def golden_dag():
    """DAG built from the golden input with slice size 2."""
    return make_golden_dag()


@pytest.fixture
def leaves():
    """Five distinct SHA-256 leaves."""
    return make_leaves(5)


@pytest.fixture
def shards():
    """Four uniform 4-byte shards."""
    return make_shards(4)


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
