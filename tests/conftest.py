"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import os

# Set SDL_VIDEODRIVER before importing pygame to avoid display errors in CI
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pytest
import pygame

from tests.fakes import InlineExecutor, make_state


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    # Register custom markers if needed
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(scope='session', autouse=True)
def pygame_session():
    """Headless pygame for fonts, surfaces and events."""
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def inline_executor():
    """Executor that runs submitted work on the calling thread."""
    return InlineExecutor()


@pytest.fixture
def xor_state():
    """A 2-4-1 snapshot with deterministic weights."""
    return make_state([2, 4, 1], epoch=10, error=0.25)
