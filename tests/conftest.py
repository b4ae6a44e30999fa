"""
Pytest configuration and shared fixtures for the UR5e PMP test suite.

Provides markers, a fresh session registry, and an in-process HTTP client
for the planning app.
"""

import os
import sys
import logging
from typing import Generator

import numpy as np
import pytest

# Add the parent directory to Python path so we can import the package modules
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from ur5e_pmp.server.state import SessionManager

logger = logging.getLogger(__name__)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def sessions() -> SessionManager:
    """Fresh session registry so tests never share a tracked pose."""
    return SessionManager()


@pytest.fixture
def app(sessions):
    from ur5e_pmp.server.app import create_app

    return create_app(sessions=sessions, max_workers=0)


@pytest.fixture
def http_client(app) -> Generator:
    """In-process HTTP client bound to the planning app."""
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


# ============================================================================
# PYTEST HOOKS
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that drive the HTTP app in-process"
    )
    config.addinivalue_line(
        "markers", "slow: Slow-running tests"
    )


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory."""
    for item in items:
        path = str(item.fspath)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)
        elif f"{os.sep}integration{os.sep}" in path:
            item.add_marker(pytest.mark.integration)
