"""Durable key-value adapter backing the entity collections.

Each key maps to one JSON file under the storage root. Reads fall back to the
caller's default on any problem and writes are best-effort.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from rateshare.runtime_logging import append_runtime_event, configure_log_root


_DEFAULT_STORE_DIR = Path(".local_store")
STORE_DIR = _DEFAULT_STORE_DIR

_STORAGE_ENV_VAR = "RATESHARE_STORAGE_ROOT"


def _expand_storage_root(path_value: str | Path | None) -> Path:
    if path_value is None:
        return _DEFAULT_STORE_DIR
    text = str(path_value).strip()
    if not text:
        return _DEFAULT_STORE_DIR
    expanded = os.path.expandvars(os.path.expanduser(text))
    return Path(expanded)


def configure_storage_root(path_value: str | Path | None) -> Path:
    """Configure the directory holding the collection snapshots."""

    global STORE_DIR
    STORE_DIR = _expand_storage_root(path_value)
    configure_log_root(STORE_DIR)
    return STORE_DIR


def storage_root_path() -> str:
    return str(STORE_DIR.resolve())


def storage_root_from_env() -> Path:
    return _expand_storage_root(os.getenv(_STORAGE_ENV_VAR, ""))


def path_for_key(key: str) -> Path:
    if not key or "/" in key or "\\" in key:
        raise ValueError(f"Unsupported storage key: {key!r}")
    return STORE_DIR / f"{key}.json"


def load(key: str, fallback: Any) -> Any:
    """Return the value stored under ``key``, or ``fallback``.

    Absent, empty, unreadable or unparsable snapshots yield ``fallback``
    unchanged. A list fallback also rejects any parsed value that is not a list.
    """
    p = path_for_key(key)
    if not p.exists():
        return fallback
    try:
        raw = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        append_runtime_event(
            level="WARNING",
            event="storage_load_fallback",
            message="Stored snapshot could not be read; using defaults.",
            context={"key": key},
            exc=exc,
        )
        return fallback
    if not raw.strip():
        return fallback
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        append_runtime_event(
            level="WARNING",
            event="storage_load_fallback",
            message="Stored snapshot is not valid JSON; using defaults.",
            context={"key": key},
            exc=exc,
        )
        return fallback
    if isinstance(fallback, list) and not isinstance(data, list):
        append_runtime_event(
            level="WARNING",
            event="storage_load_fallback",
            message="Stored snapshot has the wrong shape; using defaults.",
            context={"key": key, "found_type": type(data).__name__},
        )
        return fallback
    return data


def save(key: str, value: Any) -> bool:
    """Write ``value`` under ``key``. Failures are logged and reported as False."""
    try:
        payload = json.dumps(value, indent=2, ensure_ascii=False)
        STORE_DIR.mkdir(parents=True, exist_ok=True)
        p = path_for_key(key)
        tmp = p.with_suffix(f"{p.suffix}.tmp")
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(p)
    except (OSError, TypeError, ValueError) as exc:
        append_runtime_event(
            level="WARNING",
            event="storage_write_failed",
            message="Snapshot write failed; changes are kept in memory only.",
            context={"key": key},
            exc=exc,
        )
        return False
    return True


configure_storage_root(storage_root_from_env())
