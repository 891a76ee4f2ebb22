import logging

import pytest
import structlog

from borecad.log import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()


def _flush():
    for handler in logging.getLogger().handlers:
        handler.flush()


def test_log_file_receives_debug(tmp_path):
    path = tmp_path / "build.log"
    configure_logging(level="WARNING", log_file=path)
    get_logger("borecad.test").debug("segment cut", pieces=2)
    _flush()
    text = path.read_text(encoding="utf-8")
    assert "segment cut" in text
    assert "pieces=2" in text
    assert "borecad.test" in text


def test_json_rendering(tmp_path):
    path = tmp_path / "build.log"
    configure_logging(log_file=path, json=True)
    get_logger("borecad.test").info("realizing model", quality=64)
    _flush()
    text = path.read_text(encoding="utf-8")
    assert '"event": "realizing model"' in text
    assert '"quality": 64' in text


def test_get_logger_without_configuration():
    structlog.reset_defaults()
    logger = get_logger("borecad.test")
    assert structlog.is_configured()
    logger.debug("quiet")
