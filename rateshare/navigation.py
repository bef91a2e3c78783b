"""Navigation state machine for the admin tool's views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


VIEW_ADD = "add"
VIEW_CALCULATORS = "calculators"
VIEW_MASTER = "master"
VIEW_CALC_EDITOR = "calcEditor"

NAVIGABLE_VIEWS = (VIEW_ADD, VIEW_CALCULATORS, VIEW_MASTER)

MASTER_CUSTOMERS = "customers"
MASTER_CHARGES = "charges"
MASTER_SERVICES = "services"
MASTER_INSURANCE = "insurance"

MASTER_TOOLS = (MASTER_CUSTOMERS, MASTER_CHARGES, MASTER_SERVICES, MASTER_INSURANCE)


class CalculatorUpdater(Protocol):
    def update(self, record_id: str, record: dict[str, Any]) -> bool: ...


@dataclass
class NavigationState:
    """Active view, master-data sub-view, and the calculator selected for editing."""

    view: str = VIEW_ADD
    master_view: str | None = None
    editing_calc: dict[str, Any] | None = None

    def navigate(self, view: str) -> None:
        if view not in NAVIGABLE_VIEWS:
            raise ValueError(f"Unsupported view: {view}")
        self.view = view
        if view == VIEW_MASTER:
            self.master_view = None

    def select_master_tool(self, tool: str) -> bool:
        if tool not in MASTER_TOOLS:
            raise ValueError(f"Unsupported master data tool: {tool}")
        if self.view != VIEW_MASTER:
            return False
        self.master_view = tool
        return True

    def back_from_master_tool(self) -> None:
        self.master_view = None

    def open_calculator(self, record: dict[str, Any]) -> None:
        self.editing_calc = record
        self.view = VIEW_CALC_EDITOR

    # Opening and editing a calculator land on the same editor surface.
    edit_calculator = open_calculator

    def cancel_edit(self) -> None:
        self.editing_calc = None
        self.view = VIEW_CALCULATORS

    def commit_edit(self, updated: dict[str, Any], store: CalculatorUpdater) -> None:
        store.update(updated["id"], updated)
        self.editing_calc = None
        self.view = VIEW_CALCULATORS
