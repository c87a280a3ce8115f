"""
Tests for the structured category logger
"""

import io

import pytest

from models.enums import LogCategory, LogLevel
from utils.logger import configure_logger, get_category_logger, get_logger


@pytest.fixture(autouse=True)
def plain_logger():
    configure_logger(min_level=LogLevel.INFO, use_colors=False)
    yield
    configure_logger(min_level=LogLevel.INFO, use_colors=True)


def test_message_with_details(capsys):
    log = get_category_logger(LogCategory.STAGE)

    log.info("Performance ended", silence="10.00s", tick=10)

    lines = capsys.readouterr().out.splitlines()
    assert "STAGE" in lines[0]
    assert lines[0].endswith("✓ Performance ended")
    assert lines[1].strip() == "├─ silence: 10.00s"
    assert lines[2].strip() == "└─ tick: 10"


def test_debug_hidden_by_default(capsys):
    log = get_category_logger(LogCategory.TASK)

    log.debug("Scheduled")
    assert capsys.readouterr().out == ""

    configure_logger(min_level=LogLevel.DEBUG, use_colors=False)
    log.debug("Scheduled")
    assert "Scheduled" in capsys.readouterr().out


def test_category_override(capsys):
    log = get_category_logger(LogCategory.AUDIENCE)

    log.log("Light ramp complete", LogLevel.WARN, category=LogCategory.LIGHTING)

    out = capsys.readouterr().out
    assert "LIGHTING" in out
    assert "⚠" in out


def test_configure_keeps_singleton():
    original = get_logger()
    configure_logger(min_level=LogLevel.ERROR)

    assert get_logger() is original
    assert get_logger().min_level == LogLevel.ERROR


def test_no_color_codes_when_disabled(capsys):
    get_category_logger(LogCategory.EVENT).error("Event handler failed")

    assert "\033[" not in capsys.readouterr().out


def test_custom_stream():
    stream = io.StringIO()
    configure_logger(min_level=LogLevel.INFO, use_colors=False, stream=stream)

    get_category_logger(LogCategory.CONFIG).warn("Falling back to factory defaults")

    assert "⚠ Falling back to factory defaults" in stream.getvalue()


def test_event_middleware_logs_payload(capsys):
    from models.events import PerformanceEndedEvent
    from services.middleware import log_middleware

    event = PerformanceEndedEvent(tick=12, silence=10.0)
    assert log_middleware(event) is event

    out = capsys.readouterr().out
    assert "PERFORMANCE_ENDED (STAGE)" in out
    assert "silence: 10.0" in out
