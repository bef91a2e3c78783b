"""Application state owner wiring stores, navigation, and editing sessions.

One ``AppController`` instance is created per browser session and handed to
the views; views read from it and report user actions back to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from rateshare.editor import CalculatorEditorSession
from rateshare.entity_store import EntityStore, build_stores
from rateshare.navigation import NavigationState
from rateshare.runtime_logging import append_runtime_event
from rateshare.schema import CALCULATORS, CUSTOMERS, ENTITY_LABELS, missing_required_fields, require_kind
from rateshare.wizard import AddCalculatorWizard


@dataclass(frozen=True)
class Notice:
    level: str
    message: str


@dataclass(frozen=True)
class PendingConfirmation:
    kind: str
    record_id: str
    prompt: str


def _display_name(kind: str, record: Mapping[str, Any]) -> str:
    if kind in (CALCULATORS, CUSTOMERS):
        return str(record.get("customerName", ""))
    return str(record.get("name") or record.get("text") or record.get("id", ""))


@dataclass
class AppController:
    stores: dict[str, EntityStore] = field(default_factory=build_stores)
    nav: NavigationState = field(default_factory=NavigationState)
    wizard: AddCalculatorWizard = field(default_factory=AddCalculatorWizard)
    editor: CalculatorEditorSession | None = None
    pending: PendingConfirmation | None = None
    notices: list[Notice] = field(default_factory=list)

    def store(self, kind: str) -> EntityStore:
        return self.stores[require_kind(kind)]

    def notify(self, message: str, level: str = "info") -> None:
        self.notices.append(Notice(level, message))

    def drain_notices(self) -> list[Notice]:
        out, self.notices = self.notices, []
        return out

    # Navigation

    def navigate(self, view: str) -> None:
        self.nav.navigate(view)

    def select_master_tool(self, tool: str) -> bool:
        return self.nav.select_master_tool(tool)

    def back_from_master_tool(self) -> None:
        self.nav.back_from_master_tool()

    # Calculator editor

    def open_calculator(self, record: dict[str, Any]) -> None:
        self.nav.open_calculator(record)
        self.editor = CalculatorEditorSession(record)

    edit_calculator = open_calculator

    def save_calculator_edit(self) -> dict[str, Any] | None:
        if self.editor is None:
            return None
        updated = self.editor.save(self.nav, self.store(CALCULATORS))
        self.editor = None
        return updated

    def cancel_calculator_edit(self) -> None:
        if self.editor is not None:
            self.editor.cancel(self.nav)
        else:
            self.nav.cancel_edit()
        self.editor = None

    # Create / delete

    def create_record(self, kind: str, fields: dict[str, Any]) -> tuple[bool, str, dict[str, Any] | None]:
        missing = missing_required_fields(kind, fields)
        if missing:
            append_runtime_event(
                level="WARNING",
                event="create_rejected",
                message="Required fields missing.",
                context={"kind": kind, "missing": missing},
            )
            return False, "Please fill required fields", None
        record = self.store(kind).create(fields)
        message = f"{ENTITY_LABELS[kind].capitalize()} created"
        self.notify(message, "success")
        return True, message, record

    def request_delete(self, kind: str, record_id: str) -> PendingConfirmation | None:
        record = self.store(kind).get(record_id)
        if record is None:
            self.pending = None
            return None
        prompt = f"Delete {ENTITY_LABELS[kind]} for {_display_name(kind, record)}?"
        self.pending = PendingConfirmation(kind, record_id, prompt)
        return self.pending

    def confirm_pending(self) -> bool:
        pending, self.pending = self.pending, None
        if pending is None:
            return False
        deleted = self.store(pending.kind).delete(pending.record_id)
        if deleted:
            append_runtime_event(
                level="INFO",
                event="record_deleted",
                message=f"Deleted {ENTITY_LABELS[pending.kind]}.",
                context={"kind": pending.kind, "id": pending.record_id},
            )
        return deleted

    def dismiss_pending(self) -> None:
        self.pending = None

    def reset_collection(self, kind: str) -> None:
        self.store(kind).reset()
        self.notify(f"Restored default {ENTITY_LABELS[kind]} records.", "success")

    # Acknowledgments; access is not modelled as state

    def grant_access(self, record: Mapping[str, Any]) -> str:
        message = f"Grant Customer Access → {record.get('customerName', '')}"
        self.notify(message)
        return message

    def revoke_access(self, record: Mapping[str, Any]) -> str:
        message = f"Revoke Customer Access → {record.get('customerName', '')}"
        self.notify(message)
        return message

    def acknowledge_edit(self, kind: str, record: Mapping[str, Any]) -> str:
        message = f"Edit {ENTITY_LABELS[require_kind(kind)]} {_display_name(kind, record)}"
        self.notify(message)
        return message

    def revoke_customer_access(self, record: Mapping[str, Any]) -> str:
        message = f"Revoke access for {record.get('customerName', '')}"
        self.notify(message)
        return message

    def new_access_details(self, record: Mapping[str, Any]) -> str:
        message = f"New access details for {record.get('customerName', '')}"
        self.notify(message)
        return message

    # Wizard

    def submit_wizard(self) -> tuple[bool, str, Mapping[str, Any] | None]:
        ok, message, payload = self.wizard.submit()
        if not ok:
            append_runtime_event(
                level="WARNING",
                event="wizard_rejected",
                message=message,
                context={"customer_mode": self.wizard.customer_mode},
            )
            self.notify(message, "warning")
        else:
            self.notify(message, "success")
        return ok, message, payload
