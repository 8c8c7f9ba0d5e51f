import os

import pytest

# Set test environment variables before the app module builds its settings
os.environ.update({
    "ENVIRONMENT": "testing",
    "LOG_LEVEL": "debug",
    "AUTH_TOKEN": "",
    "RETRY_PAUSE_MS": "600",
})

from render_api.core.config import Settings
from fakes import FakeBrowserEnv


@pytest.fixture
def settings():
    """Settings for tests, independent of the process environment."""
    return Settings(environment="testing", log_level="debug", auth_token=None)


@pytest.fixture
def fake_env():
    return FakeBrowserEnv()


@pytest.fixture
def sleeps():
    """Records requested pauses without actually sleeping."""
    recorded = []

    async def sleep(seconds):
        recorded.append(seconds)

    sleep.recorded = recorded
    return sleep


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to tests that aren't integration tests."""
    for item in items:
        if "integration" not in item.keywords:
            item.add_marker(pytest.mark.unit)
