"""
Tests for SDK logging helpers.
"""

import logging

import pytest

from swisstronik.utils.logging import (
    ROOT_LOGGER_NAME,
    configure_logging,
    disable_logging,
    get_logger,
    set_level,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogger:
    """Tests for get_logger."""

    def test_module_names_stay_in_namespace(self) -> None:
        assert get_logger("swisstronik.actions.fees").name == "swisstronik.actions.fees"

    def test_foreign_names_are_prefixed(self) -> None:
        assert get_logger("myapp").name == "swisstronik.myapp"

    def test_null_handler_installed(self) -> None:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in root.handlers)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_attaches_handler(self) -> None:
        handler = logging.StreamHandler()

        root = configure_logging(logging.DEBUG, handler=handler)

        assert handler in root.handlers
        assert root.level == logging.DEBUG

    def test_reconfiguring_replaces_handler(self) -> None:
        first, second = logging.StreamHandler(), logging.StreamHandler()

        configure_logging(handler=first)
        root = configure_logging(handler=second)

        assert first not in root.handlers
        assert second in root.handlers

    def test_set_level_and_disable(self) -> None:
        root = logging.getLogger(ROOT_LOGGER_NAME)

        set_level("WARNING")
        assert root.level == logging.WARNING

        disable_logging()
        assert not get_logger("swisstronik.client").isEnabledFor(logging.CRITICAL)
