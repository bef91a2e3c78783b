from __future__ import annotations

from pathlib import Path

import pytest

import rateshare.persistence as persistence
import rateshare.runtime_logging as runtime_logging
from rateshare.entity_store import EntityStore
from rateshare.schema import CALCULATORS


@pytest.fixture(autouse=True)
def store_root(tmp_path, monkeypatch) -> Path:
    root = Path(tmp_path) / ".local_store"
    monkeypatch.setattr(persistence, "STORE_DIR", root)
    monkeypatch.setattr(runtime_logging, "LOG_DIR", root)
    monkeypatch.setattr(runtime_logging, "RUNTIME_EVENTS_LOG_FILE", root / "runtime_events.jsonl")
    return root


@pytest.fixture
def calculator_x1() -> dict:
    return {
        "id": "x1",
        "customerName": "Acme Logistics",
        "customerCode": "ACM001",
        "quoteNumber": "Q-2025-0001",
        "validFrom": "2025-10-01",
        "validTo": "2026-03-31",
        "zip": "2100",
        "city": "Copenhagen",
        "country": "DK",
        "salesContact": "M. Jensen",
        "salesOffice": "Copenhagen",
    }


@pytest.fixture
def calculator_store(calculator_x1) -> EntityStore:
    persistence.save("rs_calculators", [calculator_x1])
    return EntityStore(CALCULATORS)
