"""
Pytest configuration for the modelfactory test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- An isolated HOME so the global config never leaks into tests
- Temporary project fixtures built from tests/test_files
"""

import os
import shutil
from pathlib import Path

import pytest

from modelfactory.cli.config import CLIConfig
from modelfactory.logging_config import setup_logging

TEST_FILES_DIR = Path(__file__).parent / "test_files"


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet, machine-mode operation."""
    os.environ.setdefault("MODELFACTORY_MACHINE_MODE", "1")
    config.addinivalue_line("markers", "fast: quick unit tests")
    config.addinivalue_line("markers", "integration: tests touching the filesystem end to end")


# ============================================================================
# LOGGING / ENVIRONMENT FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """Point HOME at an empty directory so ~/.modelfactory is never read."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("MODELFACTORY_HUMAN_MODE", raising=False)
    yield home
    CLIConfig.set_machine_mode(None)


# ============================================================================
# TEMPORARY PROJECT FIXTURES
# ============================================================================

@pytest.fixture
def temp_project(tmp_path):
    """
    Create a temporary Dart project with the sample models under lib/.

    Returns:
        Path to the project root.
    """
    lib_dir = tmp_path / "lib"
    lib_dir.mkdir()
    for source in TEST_FILES_DIR.glob("*.dart"):
        shutil.copy(source, lib_dir / source.name)
    return tmp_path
