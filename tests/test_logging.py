import logging
from unittest.mock import patch

from rentroll.logging import TEXT_FORMAT, configure_logging, reconfigure


class TestConfigureLogging:
    def test_text_format(self):
        with patch("rentroll.logging.settings") as mock_settings:
            mock_settings.log_level = "DEBUG"
            mock_settings.log_json = False
            configure_logging()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == TEXT_FORMAT

    def test_json_format(self):
        with patch("rentroll.logging.settings") as mock_settings:
            mock_settings.log_level = "INFO"
            mock_settings.log_json = True
            configure_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        from pythonjsonlogger.json import JsonFormatter

        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        with patch("rentroll.logging.settings") as mock_settings:
            mock_settings.log_level = "chatty"
            mock_settings.log_json = False
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_quiets_noisy_loggers(self):
        with patch("rentroll.logging.settings") as mock_settings:
            mock_settings.log_level = "DEBUG"
            mock_settings.log_json = False
            reconfigure()
        assert logging.getLogger("alembic").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
