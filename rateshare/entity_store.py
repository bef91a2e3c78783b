"""Persistent record collections, one store per entity kind."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable

import rateshare.persistence as persistence
from rateshare.defaults import DEFAULT_SEEDS
from rateshare.ids import new_id
from rateshare.runtime_logging import append_runtime_event
from rateshare.schema import CUSTOMERS, ENTITY_KINDS, STORAGE_KEYS, require_kind, shape_record


def seed_records(kind: str) -> list[dict[str, Any]]:
    """Return a fresh copy of the kind's seed snapshot with newly assigned ids."""
    return [shape_record(kind, fields, new_id()) for fields in DEFAULT_SEEDS[require_kind(kind)]]


class EntityStore:
    """Ordered, id-keyed collection of one entity kind, written through on every mutation."""

    def __init__(
        self,
        kind: str,
        seed_factory: Callable[[], list[dict[str, Any]]] | None = None,
        reseed_if_empty: bool = False,
    ) -> None:
        self.kind = require_kind(kind)
        self.key = STORAGE_KEYS[kind]
        self._seed_factory = seed_factory or (lambda: seed_records(kind))
        self._records = self._sanitize(persistence.load(self.key, self._seed_factory()))
        if reseed_if_empty and not self._records:
            self._mutate(self._seed_factory)
            append_runtime_event(
                level="INFO",
                event=f"{self.kind}_reseeded",
                message="Loaded collection was empty; restored the seed records.",
                context={"key": self.key, "count": len(self._records)},
            )
        else:
            # Snapshot the loaded state so seeded ids survive the next session.
            persistence.save(self.key, self._records)

    def _sanitize(self, loaded: list[Any]) -> list[dict[str, Any]]:
        records: list[dict[str, Any]] = []
        seen: set[str] = set()
        dropped = 0
        for item in loaded:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str) or item["id"] in seen:
                dropped += 1
                continue
            seen.add(item["id"])
            records.append(item)
        if dropped:
            append_runtime_event(
                level="WARNING",
                event="store_records_dropped",
                message="Ignored malformed or duplicate records in stored snapshot.",
                context={"key": self.key, "dropped": dropped},
            )
        return records

    def _mutate(self, change: Callable[[], list[dict[str, Any]]]) -> None:
        # In-memory state is authoritative; the write that follows is best-effort.
        self._records = change()
        persistence.save(self.key, self._records)

    def _index_of(self, record_id: str) -> int | None:
        for i, record in enumerate(self._records):
            if record["id"] == record_id:
                return i
        return None

    def __len__(self) -> int:
        return len(self._records)

    def list(self) -> list[dict[str, Any]]:
        return deepcopy(self._records)

    def get(self, record_id: str) -> dict[str, Any] | None:
        idx = self._index_of(record_id)
        return None if idx is None else deepcopy(self._records[idx])

    def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        record = shape_record(self.kind, fields, new_id())
        self._mutate(lambda: [*self._records, record])
        return deepcopy(record)

    def update(self, record_id: str, record: dict[str, Any]) -> bool:
        """Merge ``record`` over the stored fields; the id and field set stay fixed."""
        idx = self._index_of(record_id)
        if idx is None:
            return False
        replacement = shape_record(self.kind, {**self._records[idx], **dict(record)}, record_id)
        self._mutate(lambda: [*self._records[:idx], replacement, *self._records[idx + 1 :]])
        return True

    def delete(self, record_id: str) -> bool:
        if self._index_of(record_id) is None:
            return False
        self._mutate(lambda: [r for r in self._records if r["id"] != record_id])
        return True

    def reset(self) -> None:
        self._mutate(self._seed_factory)


def build_stores() -> dict[str, EntityStore]:
    """Load all five collections; only Customers is reseeded when empty."""
    return {kind: EntityStore(kind, reseed_if_empty=(kind == CUSTOMERS)) for kind in ENTITY_KINDS}


def filter_records(records: list[dict[str, Any]], query: str) -> list[dict[str, Any]]:
    """Case-insensitive substring match over every non-id field value."""
    needle = str(query or "").strip().lower()
    if not needle:
        return list(records)
    return [
        r for r in records if any(needle in str(v).lower() for k, v in r.items() if k != "id" and v is not None)
    ]
