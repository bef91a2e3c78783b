from __future__ import annotations

from pathlib import Path

import rateshare.runtime_logging as runtime_logging


def test_runtime_logging_append_and_read():
    runtime_logging.append_runtime_event(
        level="warning",
        event="storage_write_failed",
        message="Snapshot write failed.",
        context={"key": "rs_customers"},
    )
    events = runtime_logging.read_runtime_events(limit=10)
    assert len(events) == 1
    assert events[0]["event"] == "storage_write_failed"
    assert events[0]["level"] == "WARNING"
    assert events[0]["context"]["key"] == "rs_customers"


def test_runtime_logging_records_exception_details():
    try:
        raise OSError("disk full")
    except OSError as exc:
        runtime_logging.append_runtime_event("error", "write", "boom", exc=exc)
    event = runtime_logging.read_runtime_events(limit=1)[0]
    assert event["exception_type"] == "OSError"
    assert "disk full" in event["traceback"]


def test_runtime_logging_handles_malformed_lines(store_root):
    log_file = Path(runtime_logging.RUNTIME_EVENTS_LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    log_file.write_text(
        '{"event":"ok","level":"INFO","timestamp_utc":"2026-01-01T00:00:00+00:00","message":"ok","context":{}}\nnot-json\n',
        encoding="utf-8",
    )
    events = runtime_logging.read_runtime_events(limit=10)
    assert len(events) == 2
    assert events[0]["event"] == "ok"
    assert events[1]["event"] == "log_parse_error"


def test_logging_failure_never_raises(tmp_path, monkeypatch):
    blocker = tmp_path / "blocked"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr(runtime_logging, "LOG_DIR", blocker)
    monkeypatch.setattr(runtime_logging, "RUNTIME_EVENTS_LOG_FILE", blocker / "runtime_events.jsonl")
    runtime_logging.append_runtime_event("info", "noop", "ignored")
    assert runtime_logging.read_runtime_events(limit=5) == []
