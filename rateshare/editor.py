"""Calculator editor session holding an isolated working copy."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from rateshare.navigation import CalculatorUpdater, NavigationState
from rateshare.schema import CALCULATORS, field_names


class CalculatorEditorSession:
    """Edits one calculator in isolation until :meth:`save` or :meth:`cancel`."""

    def __init__(self, record: dict[str, Any]) -> None:
        self.record_id = record["id"]
        self._original = deepcopy(record)
        self._model = deepcopy(record)

    def set_field(self, name: str, value: Any) -> None:
        if name == "id" or name not in field_names(CALCULATORS):
            raise KeyError(f"Calculator field cannot be edited: {name}")
        self._model[name] = value

    def get_field(self, name: str) -> Any:
        return self._model.get(name, "")

    def working_copy(self) -> dict[str, Any]:
        return deepcopy(self._model)

    def is_dirty(self) -> bool:
        return self._model != self._original

    def save(self, nav: NavigationState, store: CalculatorUpdater) -> dict[str, Any]:
        updated = self.working_copy()
        nav.commit_edit(updated, store)
        return updated

    def cancel(self, nav: NavigationState) -> None:
        nav.cancel_edit()
