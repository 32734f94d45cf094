"""
Shared pytest fixtures and configuration for all tests.
"""

import pytest

from kafka_producer_tui.config import ConnectionSettings
from kafka_producer_tui.ui.events import Resize
from kafka_producer_tui.ui.model import InteractionState, View
from tests.utils.helpers import FIXED_TIME, press, run_command
from tests.utils.mocks import SessionFactory


# ============= Settings Fixtures =============


@pytest.fixture
def default_settings():
    """Settings as loaded when no configuration file exists."""
    return ConnectionSettings()


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "kafka-producer.json"


# ============= State Fixtures =============


@pytest.fixture
def session_factory():
    return SessionFactory()


@pytest.fixture
def state(default_settings, settings_path, session_factory):
    """Fresh interaction state with a known viewport and fixed clock."""
    state = InteractionState(
        default_settings,
        config_path=settings_path,
        session_factory=session_factory,
        clock=lambda: FIXED_TIME,
    )
    state.update(Resize(120, 40))
    return state


@pytest.fixture
def connected_state(state):
    """State with an open fake session, switched to the message view."""
    command = press(state, "f5")
    assert run_command(state, command) is None
    assert state.connected
    press(state, "f2")
    assert state.view is View.MESSAGE
    return state


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test (no external dependencies)")
