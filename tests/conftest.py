"""Shared test configuration for the mediator tests."""

import pytest

from mediator.core.logging import setup_logging


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    # Route dispatcher debug events through the real structlog pipeline
    setup_logging(json_logs=False, log_level_name="DEBUG")
