from __future__ import annotations

from pathlib import Path

from streamlit.testing.v1 import AppTest

import rateshare.persistence as persistence
from rateshare.navigation import VIEW_ADD, VIEW_CALC_EDITOR, VIEW_CALCULATORS, VIEW_MASTER


APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def _app() -> AppTest:
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    return at


def _assert_no_app_exceptions(at: AppTest) -> None:
    assert len(at.exception) == 0


def _controller(at: AppTest):
    return at.session_state["app_controller"]


def test_app_initial_run_shows_add_calculator():
    at = _app()
    assert _controller(at).nav.view == VIEW_ADD
    assert any(h.value == "Add Calculator" for h in at.header)


def test_manage_calculators_open_edit_and_save(calculator_store):
    at = _app()
    at.button(key="nav_calculators").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert _controller(at).nav.view == VIEW_CALCULATORS

    at.button(key="calc_open").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert _controller(at).nav.view == VIEW_CALC_EDITOR

    at.text_input(key="calc_editor_field_quoteNumber").set_value("Q-NEW")
    at.run(timeout=60)
    assert persistence.load("rs_calculators", [])[0]["quoteNumber"] == "Q-2025-0001"

    at.button(key="calc_editor_save").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert _controller(at).nav.view == VIEW_CALCULATORS
    assert persistence.load("rs_calculators", [])[0]["quoteNumber"] == "Q-NEW"


def test_delete_calculator_after_confirmation(calculator_store):
    at = _app()
    at.button(key="nav_calculators").click()
    at.run(timeout=60)
    at.button(key="calc_delete").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert any("Delete calculator for Acme Logistics?" in w.value for w in at.warning)
    assert len(persistence.load("rs_calculators", [])) == 1

    at.button(key="confirm_delete").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert persistence.load("rs_calculators", None) == []


def test_master_data_customer_creation():
    at = _app()
    at.button(key="nav_master").click()
    at.run(timeout=60)
    assert _controller(at).nav.view == VIEW_MASTER
    at.button(key="open_master_customers").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)

    at.text_input(key="create_customers_field_customerName").set_value("Test Co")
    at.text_input(key="create_customers_field_contactName").set_value("A B")
    at.text_input(key="create_customers_field_email").set_value("a@b.com")
    at.button(key="create_customers_submit").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)

    customers = persistence.load("rs_customers", [])
    assert customers[-1]["customerName"] == "Test Co"
    assert customers[-1]["refs"] == ""
    assert any(s.value == "Customer created" for s in at.success)


def test_wizard_submission_shows_payload_without_storing():
    at = _app()
    at.text_input(key="wizard_existing_customer").set_value("Acme Logistics")
    at.button(key="wizard_submit").click()
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert any(s.value == "Submitted!" for s in at.success)
    assert "Acme Logistics" in at.session_state["wizard_last_submission"]
    assert len(_controller(at).store("calculators")) == 2
    assert persistence.load("rs_calculators", None) == _controller(at).store("calculators").list()
