"""Two-step Add Calculator wizard session."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from rateshare.defaults import CUSTOMER_SUGGESTIONS


FUEL_STANDARD = "standard"
FUEL_CUSTOM = "custom"
FUEL_TYPES = (FUEL_STANDARD, FUEL_CUSTOM)

CUSTOMER_MAP = "map"
CUSTOMER_CREATE = "create"
CUSTOMER_MODES = (CUSTOMER_MAP, CUSTOMER_CREATE)


def _empty_contact() -> dict[str, str]:
    return {"name": "", "phone": "", "email": ""}


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    return value


def build_submit_message(payload: Mapping[str, Any]) -> str:
    return "Submitted!\n\n" + json.dumps(_plain(payload), indent=2, ensure_ascii=False)


@dataclass
class AddCalculatorWizard:
    """Accumulates wizard input in memory; nothing is persisted."""

    # Step 1
    rate_file_name: str | None = None
    advantage_active: bool = True
    fuel_type: str = FUEL_STANDARD
    custom_fuel_note: str = ""
    # Step 2
    customer_mode: str = CUSTOMER_MAP
    existing_customer: str = ""
    new_contact: dict[str, str] = field(default_factory=_empty_contact)

    def set_fuel_type(self, fuel_type: str) -> None:
        if fuel_type not in FUEL_TYPES:
            raise ValueError(f"Unsupported fuel type: {fuel_type}")
        self.fuel_type = fuel_type

    def set_customer_mode(self, mode: str) -> None:
        if mode not in CUSTOMER_MODES:
            raise ValueError(f"Unsupported customer mode: {mode}")
        self.customer_mode = mode

    def set_contact(self, *, name: str | None = None, phone: str | None = None, email: str | None = None) -> None:
        updates = {"name": name, "phone": phone, "email": email}
        self.new_contact = {**self.new_contact, **{k: v for k, v in updates.items() if v is not None}}

    def suggestions(self, query: str | None = None) -> list[str]:
        needle = str(self.existing_customer if query is None else query).strip().lower()
        if not needle:
            return list(CUSTOMER_SUGGESTIONS)
        return [name for name in CUSTOMER_SUGGESTIONS if needle in name.lower()]

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.customer_mode == CUSTOMER_CREATE:
            labels = {"name": "Contact Name", "phone": "Telephone", "email": "Email"}
            for key, label in labels.items():
                if not str(self.new_contact.get(key, "")).strip():
                    errors.append(f"{label} is required.")
        return errors

    def build_payload(self) -> Mapping[str, Any]:
        step1: dict[str, Any] = {"advantageActive": self.advantage_active, "fuelType": self.fuel_type}
        if self.fuel_type == FUEL_CUSTOM:
            step1["customFuelNote"] = self.custom_fuel_note
        step1["rateFile"] = self.rate_file_name or None
        if self.customer_mode == CUSTOMER_MAP:
            step2: dict[str, Any] = {"mode": CUSTOMER_MAP, "existingCustomer": self.existing_customer}
        else:
            step2 = {"mode": CUSTOMER_CREATE, **self.new_contact}
        return _freeze({"step1": step1, "step2": step2})

    def submit(self) -> tuple[bool, str, Mapping[str, Any] | None]:
        """Assemble the submission payload. Display-only: no calculator is stored."""
        errors = self.validate()
        if errors:
            return False, " ".join(errors), None
        payload = self.build_payload()
        return True, build_submit_message(payload), payload

    def reset(self) -> None:
        self.rate_file_name = None
        self.advantage_active = True
        self.fuel_type = FUEL_STANDARD
        self.custom_fuel_note = ""
        self.customer_mode = CUSTOMER_MAP
        self.existing_customer = ""
        self.new_contact = _empty_contact()
