from __future__ import annotations

import rateshare.persistence as persistence
from rateshare.controller import AppController
from rateshare.navigation import VIEW_CALC_EDITOR, VIEW_CALCULATORS
from rateshare.schema import CALCULATORS, CHARGES, CUSTOMERS
from rateshare.wizard import CUSTOMER_CREATE


def test_open_edit_save_cycle(calculator_store):
    ctrl = AppController()
    record = ctrl.store(CALCULATORS).get("x1")
    ctrl.open_calculator(record)
    assert ctrl.nav.view == VIEW_CALC_EDITOR
    ctrl.editor.set_field("quoteNumber", "Q-NEW")
    assert ctrl.store(CALCULATORS).get("x1")["quoteNumber"] == "Q-2025-0001"

    updated = ctrl.save_calculator_edit()
    assert updated["quoteNumber"] == "Q-NEW"
    assert ctrl.store(CALCULATORS).get("x1")["quoteNumber"] == "Q-NEW"
    assert ctrl.editor is None
    assert ctrl.nav.view == VIEW_CALCULATORS
    assert ctrl.nav.editing_calc is None


def test_edit_then_cancel_discards_working_copy(calculator_store):
    ctrl = AppController()
    ctrl.edit_calculator(ctrl.store(CALCULATORS).get("x1"))
    ctrl.editor.set_field("quoteNumber", "Q-NEW")
    ctrl.cancel_calculator_edit()
    assert ctrl.store(CALCULATORS).get("x1")["quoteNumber"] == "Q-2025-0001"
    assert ctrl.editor is None
    assert ctrl.nav.view == VIEW_CALCULATORS


def test_delete_requires_confirmation(calculator_store):
    ctrl = AppController()
    pending = ctrl.request_delete(CALCULATORS, "x1")
    assert pending.prompt == "Delete calculator for Acme Logistics?"
    assert len(ctrl.store(CALCULATORS)) == 1

    ctrl.dismiss_pending()
    assert ctrl.pending is None
    assert len(ctrl.store(CALCULATORS)) == 1

    ctrl.request_delete(CALCULATORS, "x1")
    assert ctrl.confirm_pending()
    assert ctrl.store(CALCULATORS).list() == []
    assert persistence.load("rs_calculators", None) == []
    assert ctrl.confirm_pending() is False


def test_request_delete_of_unknown_id_is_ignored():
    ctrl = AppController()
    assert ctrl.request_delete(CHARGES, "missing") is None
    assert ctrl.pending is None


def test_create_customer_validates_required_fields():
    ctrl = AppController()
    before = ctrl.store(CUSTOMERS).list()
    ok, message, record = ctrl.create_record(CUSTOMERS, {"customerName": "Test Co", "contactName": "", "email": "a@b.com"})
    assert not ok
    assert message == "Please fill required fields"
    assert record is None
    assert ctrl.store(CUSTOMERS).list() == before

    ok, message, record = ctrl.create_record(
        CUSTOMERS, {"customerName": "Test Co", "contactName": "A B", "email": "a@b.com", "telephone": ""}
    )
    assert ok
    assert message == "Customer created"
    assert record["refs"] == ""
    assert len(ctrl.store(CUSTOMERS)) == len(before) + 1
    assert [n.message for n in ctrl.drain_notices()] == ["Customer created"]
    assert ctrl.notices == []


def test_acknowledgments_do_not_touch_state(calculator_store, calculator_x1):
    ctrl = AppController()
    before = {kind: store.list() for kind, store in ctrl.stores.items()}
    assert ctrl.grant_access(calculator_x1) == "Grant Customer Access → Acme Logistics"
    assert ctrl.revoke_access(calculator_x1) == "Revoke Customer Access → Acme Logistics"
    customer = ctrl.store(CUSTOMERS).list()[0]
    assert ctrl.acknowledge_edit(CUSTOMERS, customer) == "Edit customer Acme Logistics"
    assert ctrl.revoke_customer_access(customer) == "Revoke access for Acme Logistics"
    assert ctrl.new_access_details(customer) == "New access details for Acme Logistics"
    assert {kind: store.list() for kind, store in ctrl.stores.items()} == before
    assert len(ctrl.drain_notices()) == 5


def test_wizard_submission_is_display_only():
    ctrl = AppController()
    before = ctrl.store(CALCULATORS).list()
    ctrl.wizard.existing_customer = "Polar Express Co."
    ok, message, payload = ctrl.submit_wizard()
    assert ok
    assert payload["step2"]["existingCustomer"] == "Polar Express Co."
    assert ctrl.store(CALCULATORS).list() == before
    notice = ctrl.drain_notices()[0]
    assert notice.level == "success"
    assert notice.message.startswith("Submitted!")


def test_wizard_rejection_is_reported_as_warning():
    ctrl = AppController()
    ctrl.wizard.set_customer_mode(CUSTOMER_CREATE)
    ok, _, payload = ctrl.submit_wizard()
    assert not ok
    assert payload is None
    assert ctrl.drain_notices()[0].level == "warning"


def test_reset_collection_restores_seed():
    ctrl = AppController()
    for row in ctrl.store(CHARGES).list():
        ctrl.store(CHARGES).delete(row["id"])
    ctrl.reset_collection(CHARGES)
    assert [r["name"] for r in ctrl.store(CHARGES).list()] == ["Energitillæg"]
