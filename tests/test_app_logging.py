"""Tests for logging configuration."""

import logging

from mama_chef.api.app import create_app
from mama_chef.app_logging import configure_logging
from mama_chef.containers import AppContainer


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("mama_chef")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.propagate is False


def test_configure_logging_accepts_level_names() -> None:
    logger = logging.getLogger("mama_chef")

    configure_logging("debug")
    assert logger.level == logging.DEBUG

    configure_logging("not-a-level")
    assert logger.level == logging.INFO


def test_create_app_uses_configured_level(container: AppContainer) -> None:
    container.settings.log_level = "WARNING"

    create_app(container)

    assert logging.getLogger("mama_chef").level == logging.WARNING
    configure_logging()
