import logging
from unittest.mock import patch

import structlog

from quiet_hn import logging_config


def _configure(level, tty):
    with patch("quiet_hn.logging_config.structlog.configure") as mock_configure, patch(
        "quiet_hn.logging_config.logging.basicConfig"
    ) as mock_basic, patch(
        "quiet_hn.logging_config._is_json_mode", return_value=not tty
    ):
        renderer = logging_config.configure_logging(level)
    return renderer, mock_configure.call_args.kwargs, mock_basic.call_args.kwargs


def test_json_renderer_when_not_a_tty():
    renderer, kwargs, basic = _configure("debug", tty=False)
    assert renderer == "json"
    assert isinstance(kwargs["processors"][-1], structlog.processors.JSONRenderer)
    assert basic["level"] == logging.DEBUG


def test_console_renderer_on_a_tty():
    renderer, kwargs, _ = _configure("INFO", tty=True)
    assert renderer == "console"
    assert isinstance(kwargs["processors"][-1], structlog.dev.ConsoleRenderer)
    assert kwargs["logger_factory"].__class__ is structlog.stdlib.LoggerFactory


def test_unknown_level_falls_back_to_info():
    _, _, basic = _configure("chatty", tty=False)
    assert basic["level"] == logging.INFO
