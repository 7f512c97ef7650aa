"""Root conftest: route structlog through stdlib logging so caplog sees events."""

import pytest
import structlog

from shared.logging import configure_structlog

configure_structlog()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Prevent context leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
