"""Entity kinds, storage keys, record field specs, and record shaping helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import pandas as pd


CALCULATORS = "calculators"
CUSTOMERS = "customers"
CHARGES = "charges"
RESTRICTIONS = "restrictions"
INSURANCES = "insurances"

ENTITY_KINDS = (CALCULATORS, CUSTOMERS, CHARGES, RESTRICTIONS, INSURANCES)

STORAGE_KEYS = {
    CALCULATORS: "rs_calculators",
    CUSTOMERS: "rs_customers",
    CHARGES: "rs_charges",
    RESTRICTIONS: "rs_restrictions",
    INSURANCES: "rs_insurances",
}

ENTITY_LABELS = {
    CALCULATORS: "calculator",
    CUSTOMERS: "customer",
    CHARGES: "charge",
    RESTRICTIONS: "restriction",
    INSURANCES: "insurance option",
}

FIELD_TYPES = {"text", "date", "number", "int", "bool"}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    type: str = "text"
    default: Any = ""


FIELD_SPECS: dict[str, tuple[FieldSpec, ...]] = {
    CALCULATORS: (
        FieldSpec("customerName", "Customer name"),
        FieldSpec("customerCode", "Customer Code"),
        FieldSpec("quoteNumber", "Quote number"),
        FieldSpec("validFrom", "Valid from", "date"),
        FieldSpec("validTo", "Valid to", "date"),
        FieldSpec("zip", "Customer Zip code"),
        FieldSpec("city", "Customer City"),
        FieldSpec("country", "Customer Country"),
        FieldSpec("salesContact", "Sales Contact"),
        FieldSpec("salesOffice", "Sales Office"),
    ),
    CUSTOMERS: (
        FieldSpec("customerName", "Customer Name"),
        FieldSpec("contactName", "Contact Name"),
        FieldSpec("telephone", "Telephone"),
        FieldSpec("email", "Email"),
        FieldSpec("refs", "Customer references"),
    ),
    CHARGES: (
        FieldSpec("name", "Charge Name"),
        FieldSpec("originCountry", "Origin country"),
        FieldSpec("originZip", "Origin zip"),
        FieldSpec("destCountry", "Destination country"),
        FieldSpec("destZip", "Destination zip"),
        FieldSpec("currency", "Currency"),
        FieldSpec("calcType", "Calculation Type", default="Percentage"),
        FieldSpec("amount", "Amount", "number", 0),
        FieldSpec("minCharge", "Min Charge"),
        FieldSpec("maxCharge", "Max Charge"),
        FieldSpec("validFrom", "Valid From", "date"),
        FieldSpec("validTo", "Valid to", "date"),
        FieldSpec("isService", "Is service?", "bool", False),
    ),
    RESTRICTIONS: (
        FieldSpec("text", "Restriction text"),
        FieldSpec("unitType", "Unit type"),
        FieldSpec("unitsMax", "Units max (if not kg)", "int", 0),
        FieldSpec("weightMax", "Weight max", "number", 0),
    ),
    INSURANCES: (
        FieldSpec("name", "Name*"),
        FieldSpec("order", "order", "int", 0),
        FieldSpec("infoText", "Info text"),
        FieldSpec("chargeText", "Charge text"),
        FieldSpec("currency", "Charge currency"),
        FieldSpec("amount", "Charge amount", "number", 0),
        FieldSpec("link", "Link"),
    ),
}

REQUIRED_FIELDS = {
    CALCULATORS: ("customerName",),
    CUSTOMERS: ("customerName", "contactName", "email"),
    CHARGES: ("name",),
    RESTRICTIONS: ("text", "unitType"),
    INSURANCES: ("name",),
}


def require_kind(kind: str) -> str:
    if kind not in FIELD_SPECS:
        raise ValueError(f"Unsupported entity kind: {kind}")
    return kind


def field_specs(kind: str) -> tuple[FieldSpec, ...]:
    return FIELD_SPECS[require_kind(kind)]


def field_names(kind: str) -> list[str]:
    return [spec.name for spec in field_specs(kind)]


def _coerce_number(value: Any, default: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text:
        return default
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return default


def coerce_value(spec: FieldSpec, value: Any) -> Any:
    """Coerce a form value to the field's stored representation."""
    if value is None:
        return spec.default
    if spec.type == "bool":
        return bool(value)
    if spec.type == "int":
        number = _coerce_number(value, spec.default)
        return int(number) if isinstance(number, (int, float)) else spec.default
    if spec.type == "number":
        return _coerce_number(value, spec.default)
    if spec.type == "date" and isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)


def shape_record(kind: str, fields: dict[str, Any], record_id: str) -> dict[str, Any]:
    """Build a record with exactly the kind's field set, ``id`` first."""
    record: dict[str, Any] = {"id": record_id}
    for spec in field_specs(kind):
        record[spec.name] = coerce_value(spec, fields.get(spec.name))
    return record


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_required_fields(kind: str, fields: dict[str, Any]) -> list[str]:
    labels = {spec.name: spec.label for spec in field_specs(kind)}
    return [labels[name] for name in REQUIRED_FIELDS[kind] if _is_blank(fields.get(name))]


def _display_value(spec: FieldSpec, value: Any) -> Any:
    if spec.type == "bool":
        return "Yes" if value else "No"
    if _is_blank(value):
        return "-"
    return value


def display_order(kind: str, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Insurance options are listed by their ``order`` value; other kinds keep insertion order."""
    if require_kind(kind) != INSURANCES:
        return list(records)
    order_spec = next(spec for spec in field_specs(INSURANCES) if spec.name == "order")
    return sorted(records, key=lambda r: coerce_value(order_spec, r.get("order")))


def records_frame(kind: str, records: list[dict[str, Any]]) -> pd.DataFrame:
    """Return the table view of a collection, one labelled column per field."""
    specs = field_specs(kind)
    rows = [{spec.label: _display_value(spec, r.get(spec.name)) for spec in specs} for r in records]
    return pd.DataFrame(rows, columns=[spec.label for spec in specs])


def parse_iso_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def validity_window_ok(record: dict[str, Any]) -> bool | None:
    """Report whether validFrom <= validTo; None when either date is unusable.

    Informational only: saves are never blocked on the window order.
    """
    start = parse_iso_date(record.get("validFrom"))
    end = parse_iso_date(record.get("validTo"))
    if start is None or end is None:
        return None
    return start <= end
