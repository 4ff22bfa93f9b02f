# Pytest configuration for the nullcode test suite
#
# Timeout strategy:
# - FAST tests: 10s (pure unit tests, no I/O)
# - MEDIUM tests: 30s (file I/O, mocked provider calls)

from __future__ import annotations

import pytest
from loguru import logger

# ---------------------------------------------------------------------------
# Timeout configuration by test file
# ---------------------------------------------------------------------------
# Maps test file patterns to timeout values (seconds)
# More specific patterns should come first

TIMEOUT_MAP = {
    # MEDIUM tests (30s) - File I/O, mocked provider calls
    "test_cli": 30,
    "test_config": 30,
    "test_completion_client": 30,

    # FAST tests (10s) - Pure unit tests
    "test_rule_engine": 10,
    "test_duplication_resolver": 10,
    "test_context_window": 10,
    "test_post_processor": 10,
}


def pytest_collection_modifyitems(config, items):
    """Apply timeout markers based on test file names."""
    for item in items:
        test_name = item.path.stem

        timeout = 30  # default
        for pattern, t in TIMEOUT_MAP.items():
            if pattern in test_name:
                timeout = t
                break

        if item.get_closest_marker('timeout') is None:
            item.add_marker(pytest.mark.timeout(timeout))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks added by CLI tests so they never write to a closed capture stream."""
    yield
    logger.remove()
