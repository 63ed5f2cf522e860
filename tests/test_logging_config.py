"""Tests for logger naming and setup."""

import logging

from logging_config import APP_LOGGER_NAME, get_logger, get_print_logger, setup_logging
from modules import auth, catalog, datafile, i18n, label_renderer, patients


class TestLoggerNames:
    """Loggers live under the application namespace."""

    def test_module_logger(self):
        assert get_logger("services.audit_ledger").name == "label_print_web.services.audit_ledger"
        assert get_logger("label_print_web.app").name == "label_print_web.app"

    def test_print_logger(self):
        assert get_print_logger("1700000000000").name == "label_print_web.print.1700000000000"

    def test_collaborator_modules_log_under_app_namespace(self):
        for module in (auth, catalog, datafile, i18n, label_renderer, patients):
            assert module.logger.name.startswith(f"{APP_LOGGER_NAME}.")


class TestSetup:

    def test_console_only(self):
        logger = setup_logging(log_level=logging.DEBUG, enable_file_logging=False)
        assert logger.name == APP_LOGGER_NAME
        assert len(logger.handlers) == 1

    def test_file_logging(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path, enable_file_logging=True)
        assert len(logger.handlers) == 3
        assert (tmp_path / f"{APP_LOGGER_NAME}.log").exists()
        setup_logging(enable_file_logging=False)
