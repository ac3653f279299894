import logging

import pytest

from plyground import config


@pytest.fixture(autouse=True)
def restore_config():
    yield
    config.reset()
    config.set_log_format("simple")
    config.disable_debug()


def test_defaults():
    assert config.get_preview_rows() == 10
    assert config.get_display_max_rows() == 20


def test_set_rows():
    config.set_preview_rows(3)
    config.set_display_max_rows(5)
    assert config.get_preview_rows() == 3
    assert config.get_display_max_rows() == 5

    config.reset()
    assert config.get_preview_rows() == 10
    assert config.get_display_max_rows() == 20


@pytest.mark.parametrize("value", [0, -1, 2.5, True, "10"])
@pytest.mark.parametrize("setter", [config.set_preview_rows, config.set_display_max_rows])
def test_invalid_rows(setter, value):
    with pytest.raises(ValueError, match="must be a positive integer"):
        setter(value)


def test_logger_is_shared():
    logger = config.get_logger()
    assert logger is config.get_logger()
    assert logger.name == "plyground"
    assert len(logger.handlers) == 1


def test_log_level():
    logger = config.get_logger()
    config.enable_debug()
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)
    config.disable_debug()
    assert logger.level == logging.WARNING
    config.set_log_level(logging.INFO)
    assert logger.level == logging.INFO


def test_log_format():
    logger = config.get_logger()
    config.set_log_format("verbose")
    assert logger.handlers[0].formatter._fmt == config.LOG_FORMATS["verbose"]
    config.set_log_format("simple")
    assert logger.handlers[0].formatter._fmt == config.LOG_FORMATS["simple"]
    with pytest.raises(ValueError, match="Unknown format"):
        config.set_log_format("json")
