"""Pytest configuration and fixtures for the test suite."""

import pytest

from tests.test_utils import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a clock whose timers fire only when the test advances it."""
    return FakeClock()
