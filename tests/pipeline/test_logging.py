# SPDX-License-Identifier: MIT
"""Tests for the loguru setup."""

from loguru import logger

from heatmap.config import settings
from heatmap.utils.logging import setup_logging


class TestSetupLogging:
    """Test the console and file sinks."""

    def teardown_method(self):
        logger.remove()

    def test_console_only_by_default(self, mocker):
        mocker.patch.object(settings.pipeline, "log_file", None)
        assert len(setup_logging()) == 1

    def test_file_sink_from_argument(self, tmp_path):
        log_file = tmp_path / "logs" / "heatmap.log"
        handlers = setup_logging(level="info", log_file=log_file)
        assert len(handlers) == 2

        logger.info("load cycle finished")
        logger.remove()

        assert "load cycle finished" in log_file.read_text(encoding="utf-8")

    def test_file_sink_from_settings(self, mocker, tmp_path):
        log_file = tmp_path / "heatmap.log"
        mocker.patch.object(settings.pipeline, "log_file", log_file)

        setup_logging(level="WARNING")
        logger.info("not written")
        logger.warning("written")
        logger.remove()

        text = log_file.read_text(encoding="utf-8")
        assert "written" in text
        assert "not written" not in text
