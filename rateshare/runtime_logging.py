"""Append-only JSONL event log behind the sidebar Diagnostics panel.

The log lives in the storage root next to the collection snapshots; the
persistence layer moves it whenever the storage root is reconfigured. Writing
an event never raises.
"""

from __future__ import annotations

import json
import sys
import traceback
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from streamlit.runtime.scriptrunner import get_script_run_ctx


LOG_FILE_NAME = "runtime_events.jsonl"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LOG_DIR = Path(".local_store")
RUNTIME_EVENTS_LOG_FILE = LOG_DIR / LOG_FILE_NAME

_hook_installed = False


def configure_log_root(root: str | Path) -> Path:
    global LOG_DIR, RUNTIME_EVENTS_LOG_FILE
    LOG_DIR = Path(root)
    RUNTIME_EVENTS_LOG_FILE = LOG_DIR / LOG_FILE_NAME
    return RUNTIME_EVENTS_LOG_FILE


def runtime_log_path() -> str:
    return str(RUNTIME_EVENTS_LOG_FILE.resolve())


def _jsonable(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, tuple):
        return list(value)
    return str(value)


def _session_id() -> str | None:
    ctx = get_script_run_ctx(suppress_warning=True)
    return None if ctx is None else ctx.session_id


def _event_record(
    level: str,
    event: str,
    message: str,
    context: Mapping[str, Any] | None,
    exc: BaseException | None,
) -> dict[str, Any]:
    level_name = str(level).upper()
    record: dict[str, Any] = {
        "timestamp_utc": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "level": level_name if level_name in LEVELS else "INFO",
        "event": str(event),
        "message": str(message),
        "context": dict(context or {}),
    }
    session = _session_id()
    if session:
        record["session_id"] = session
    if exc is not None:
        record["exception_type"] = type(exc).__name__
        record["traceback"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return record


def append_runtime_event(
    level: str,
    event: str,
    message: str,
    context: Mapping[str, Any] | None = None,
    exc: BaseException | None = None,
) -> None:
    """Write one event line; an unwritable log is ignored."""
    line = json.dumps(_event_record(level, event, message, context, exc), default=_jsonable, ensure_ascii=False)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        with RUNTIME_EVENTS_LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        return


def read_runtime_events(limit: int = 200) -> list[dict[str, Any]]:
    """Return the newest ``limit`` events, oldest first.

    Lines that are not valid JSON come back as ``log_parse_error`` events so a
    damaged log still renders in the Diagnostics panel.
    """
    if limit <= 0:
        return []
    try:
        with RUNTIME_EVENTS_LOG_FILE.open(encoding="utf-8") as f:
            tail = deque((line.rstrip("\n") for line in f if line.strip()), maxlen=int(limit))
    except (OSError, UnicodeDecodeError):
        return []

    events: list[dict[str, Any]] = []
    for line in tail:
        try:
            events.append(json.loads(line))
        except json.JSONDecodeError:
            events.append(
                {
                    "timestamp_utc": None,
                    "level": "ERROR",
                    "event": "log_parse_error",
                    "message": "Unreadable line in runtime log.",
                    "context": {"line": line[:500]},
                }
            )
    return events


def install_global_exception_logging() -> None:
    """Record uncaught exceptions from Streamlit script runs, then defer to the previous hook."""
    global _hook_installed
    if _hook_installed:
        return
    previous = sys.excepthook

    def _log_and_forward(exc_type, exc, exc_tb):
        if get_script_run_ctx(suppress_warning=True) is not None:
            append_runtime_event("ERROR", "uncaught_exception", str(exc), exc=exc)
        previous(exc_type, exc, exc_tb)

    sys.excepthook = _log_and_forward
    _hook_installed = True
