"""Identifier generation for stored records."""

from __future__ import annotations

from uuid import uuid4


ID_LENGTH = 16


def new_id() -> str:
    """Return an opaque lowercase hex id (64 random bits, no collision check)."""
    return uuid4().hex[:ID_LENGTH]
