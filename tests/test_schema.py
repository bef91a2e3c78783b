from __future__ import annotations

from datetime import date

import pytest

from rateshare.schema import (
    CALCULATORS,
    CHARGES,
    CUSTOMERS,
    INSURANCES,
    RESTRICTIONS,
    display_order,
    field_names,
    missing_required_fields,
    records_frame,
    shape_record,
    validity_window_ok,
)


def test_shape_record_fills_defaults_and_coerces_types():
    record = shape_record(
        CHARGES,
        {"name": "Toll", "amount": "12.5", "isService": 1, "validFrom": date(2026, 1, 1)},
        "abc",
    )
    assert record["id"] == "abc"
    assert list(record)[0] == "id"
    assert record["amount"] == 12.5
    assert record["isService"] is True
    assert record["validFrom"] == "2026-01-01"
    assert record["calcType"] == "Percentage"
    assert record["minCharge"] == ""


def test_int_fields_fall_back_to_default_on_garbage():
    record = shape_record(RESTRICTIONS, {"text": "Cap", "unitsMax": "many", "weightMax": "800"}, "r1")
    assert record["unitsMax"] == 0
    assert record["weightMax"] == 800


def test_missing_required_fields_reports_labels():
    assert missing_required_fields(CUSTOMERS, {"customerName": "X", "contactName": "  "}) == ["Contact Name", "Email"]
    assert missing_required_fields(CUSTOMERS, {"customerName": "X", "contactName": "Y", "email": "y@x.dk"}) == []


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        field_names("quotes")


def test_records_frame_uses_table_labels():
    frame = records_frame(CHARGES, [shape_record(CHARGES, {"name": "Toll", "isService": False}, "c1")])
    assert list(frame.columns)[:2] == ["Charge Name", "Origin country"]
    assert frame.loc[0, "Is service?"] == "No"
    assert frame.loc[0, "Origin zip"] == "-"
    assert records_frame(CALCULATORS, []).empty


def test_validity_window_ok_is_informational():
    assert validity_window_ok({"validFrom": "2025-01-01", "validTo": "2025-12-31"}) is True
    assert validity_window_ok({"validFrom": "2026-01-01", "validTo": "2025-12-31"}) is False
    assert validity_window_ok({"validFrom": "", "validTo": "2025-12-31"}) is None


def test_insurance_options_listed_by_order():
    rows = [
        {"id": "a", "name": "Premium", "order": 2},
        {"id": "b", "name": "Basic", "order": 1},
        {"id": "c", "name": "Legacy", "order": ""},
    ]
    assert [r["name"] for r in display_order(INSURANCES, rows)] == ["Legacy", "Basic", "Premium"]
    assert display_order(CHARGES, rows) == rows
