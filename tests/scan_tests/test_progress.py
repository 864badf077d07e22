"""
Tests for the progress sinks.
"""
import logging

from assetrefs.scan import CallbackProgressSink, LoggingProgressSink, NullProgressSink


def test_null_sink_accepts_everything():
    sink = NullProgressSink()
    sink.report("a", 0.5)
    sink.close()


def test_logging_sink_format(caplog):
    sink = LoggingProgressSink()
    with caplog.at_level(logging.INFO, logger="ScanProgress"):
        sink.report("Assets/Prefabs/Hero.prefab", 0.0)
        sink.report("Assets/Levels/Main.unity", 2 / 3)
        sink.close()

    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["0% - Hero.prefab", "66% - Main.unity", "Scan finished after 2 assets"]


def test_callback_sink():
    seen = []
    closed = []
    sink = CallbackProgressSink(lambda p, f: seen.append((p, f)), lambda: closed.append(True))
    sink.report("x", 0.25)
    sink.close()
    assert seen == [("x", 0.25)]
    assert closed == [True]


def test_callback_sink_without_close():
    sink = CallbackProgressSink(lambda p, f: None)
    sink.close()
