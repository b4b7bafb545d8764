"""
Unit tests for the loguru logging setup.
"""

import os
import sys
import pytest
from loguru import logger

from neatris.utils.logger_setup import setup_logger


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogger:

    def test_creates_run_log(self, tmp_path, restore_logger):
        log_dir  = str(tmp_path / "logs")
        log_file = setup_logger(log_dir=log_dir)

        assert os.path.isdir(log_dir)
        assert os.path.dirname(log_file) == log_dir
        assert os.path.basename(log_file).startswith("neatris_")
        assert log_file.endswith(".log")
        assert os.path.exists(log_file)

    def test_console_only(self, restore_logger):
        assert setup_logger(log_dir=None) is None

    def test_console_level(self, tmp_path, capsys, restore_logger):
        setup_logger(log_dir=None, level="INFO")

        logger.info("generation report")
        logger.debug("evaluation pass")

        err = capsys.readouterr().err
        assert "generation report" in err
        assert "evaluation pass" not in err

    def test_run_log_keeps_debug_detail(self, tmp_path, restore_logger):
        log_file = setup_logger(log_dir=str(tmp_path), level="WARNING")

        logger.debug("evaluation pass")
        logger.remove()

        with open(log_file, encoding="utf-8") as f:
            assert "evaluation pass" in f.read()
