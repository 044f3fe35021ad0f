"""
Shared test fixtures for the logic circuit editor test suite.

All fixtures build pure-Python model objects and plain project documents
(no Qt dependencies).
"""

import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, controllers, cli)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
# tests/ itself is added so test modules can import builders.py.
_tests_dir = Path(__file__).resolve().parent
for _path in (str(_tests_dir.parent), str(_tests_dir)):
    if _path not in sys.path:
        sys.path.insert(0, _path)

import pytest
from controllers.collaborators import BackupScheduler, SimulationTrigger
from models.project import ProjectSession


@pytest.fixture
def session():
    return ProjectSession()


@pytest.fixture
def simulation():
    return SimulationTrigger()


@pytest.fixture
def backup():
    return BackupScheduler()


@pytest.fixture
def events():
    """Collects observer events as (event, data) tuples."""
    received = []

    def observer(event, data):
        received.append((event, data))

    observer.received = received
    return observer
