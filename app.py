from datetime import datetime

import pandas as pd
import streamlit as st

from rateshare.charts import build_validity_timeline
from rateshare.controller import AppController, Notice
from rateshare.entity_store import filter_records
from rateshare.navigation import (
    MASTER_CHARGES,
    MASTER_CUSTOMERS,
    MASTER_INSURANCE,
    MASTER_SERVICES,
    MASTER_TOOLS,
    VIEW_ADD,
    VIEW_CALC_EDITOR,
    VIEW_CALCULATORS,
    VIEW_MASTER,
)
from rateshare.persistence import storage_root_path
from rateshare.runtime_logging import install_global_exception_logging, read_runtime_events, runtime_log_path
from rateshare.schema import (
    CALCULATORS,
    CHARGES,
    CUSTOMERS,
    ENTITY_LABELS,
    INSURANCES,
    RESTRICTIONS,
    display_order,
    field_specs,
    records_frame,
    validity_window_ok,
)
from rateshare.wizard import CUSTOMER_CREATE, CUSTOMER_MAP, FUEL_CUSTOM, FUEL_STANDARD


install_global_exception_logging()


MASTER_TOOL_KINDS = {
    MASTER_CUSTOMERS: CUSTOMERS,
    MASTER_CHARGES: CHARGES,
    MASTER_SERVICES: RESTRICTIONS,
    MASTER_INSURANCE: INSURANCES,
}

MASTER_TOOL_TITLES = {
    MASTER_CUSTOMERS: "Manage Customers",
    MASTER_CHARGES: "Manage Variable Charges",
    MASTER_SERVICES: "Service Management",
    MASTER_INSURANCE: "Insurance Management",
}

MASTER_TOOL_CAPTIONS = {
    MASTER_CUSTOMERS: "Create, edit, and remove customers.",
    MASTER_CHARGES: "Create, edit, and remove variable charges.",
    MASTER_SERVICES: "Unit type restrictions.",
    MASTER_INSURANCE: "Insurance options.",
}

LIST_TITLES = {
    CUSTOMERS: "Customer list",
    CHARGES: "Charge list",
    RESTRICTIONS: "Restrictions",
    INSURANCES: "Insurance options",
}

# Fields that exist on the record but are not asked for on the create form.
CREATE_FORM_EXCLUDES = {CUSTOMERS: {"refs"}}

FUEL_OPTIONS = {"Standard": FUEL_STANDARD, "Custom": FUEL_CUSTOM}
CUSTOMER_MODE_OPTIONS = {"Map to existing": CUSTOMER_MAP, "Create new": CUSTOMER_CREATE}

EDITOR_KEY_PREFIX = "calc_editor_field_"
WIZARD_KEYS = (
    "wizard_rate_file",
    "wizard_advantage_active",
    "wizard_fuel_type",
    "wizard_custom_fuel_note",
    "wizard_customer_mode",
    "wizard_existing_customer",
    "wizard_contact_name",
    "wizard_contact_phone",
    "wizard_contact_email",
)


def _controller() -> AppController:
    ctrl = st.session_state.get("app_controller")
    if not isinstance(ctrl, AppController):
        ctrl = AppController()
        st.session_state["app_controller"] = ctrl
    return ctrl


def _clear_keys(prefix: str) -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def _selected_record(kind: str) -> dict | None:
    record_id = st.session_state.get(f"select_{kind}")
    if not record_id:
        return None
    return _controller().store(kind).get(record_id)


# Callbacks run before the script body, so every view renders post-action state.


def _navigate(view: str) -> None:
    _controller().navigate(view)


def _select_master_tool(tool: str) -> None:
    _controller().select_master_tool(tool)


def _back_from_master_tool() -> None:
    _controller().back_from_master_tool()


def _open_selected_calculator(mode: str) -> None:
    record = _selected_record(CALCULATORS)
    if record is None:
        return
    _clear_keys(EDITOR_KEY_PREFIX)
    ctrl = _controller()
    if mode == "edit":
        ctrl.edit_calculator(record)
    else:
        ctrl.open_calculator(record)


def _sync_editor_field(field_name: str, key: str) -> None:
    editor = _controller().editor
    if editor is not None:
        editor.set_field(field_name, st.session_state.get(key, ""))


def _save_calculator_edit() -> None:
    ctrl = _controller()
    updated = ctrl.save_calculator_edit()
    _clear_keys(EDITOR_KEY_PREFIX)
    if updated is not None:
        ctrl.notify(f"Saved calculator {updated.get('quoteNumber', '')}.", "success")


def _cancel_calculator_edit() -> None:
    _controller().cancel_calculator_edit()
    _clear_keys(EDITOR_KEY_PREFIX)


def _row_acknowledgment(kind: str, action: str) -> None:
    record = _selected_record(kind)
    if record is None:
        return
    ctrl = _controller()
    if action == "grant":
        ctrl.grant_access(record)
    elif action == "revoke":
        ctrl.revoke_access(record)
    elif action == "revoke_customer":
        ctrl.revoke_customer_access(record)
    elif action == "access_details":
        ctrl.new_access_details(record)
    else:
        ctrl.acknowledge_edit(kind, record)


def _request_delete(kind: str) -> None:
    record = _selected_record(kind)
    if record is not None:
        _controller().request_delete(kind, record["id"])


def _confirm_delete() -> None:
    ctrl = _controller()
    pending = ctrl.pending
    if ctrl.confirm_pending() and pending is not None:
        ctrl.notify(f"Deleted {ENTITY_LABELS[pending.kind]}.", "success")


def _dismiss_delete() -> None:
    _controller().dismiss_pending()


def _form_key(kind: str, field_name: str) -> str:
    return f"create_{kind}_field_{field_name}"


def _create_from_form(kind: str) -> None:
    fields = {
        spec.name: st.session_state.get(_form_key(kind, spec.name))
        for spec in field_specs(kind)
        if spec.name not in CREATE_FORM_EXCLUDES.get(kind, set())
    }
    ctrl = _controller()
    ok, message, _ = ctrl.create_record(kind, fields)
    if ok:
        _clear_keys(f"create_{kind}_field_")
    else:
        ctrl.notify(message, "warning")


def _reset_collection(kind: str) -> None:
    _controller().reset_collection(kind)


def _sync_wizard_from_widgets() -> None:
    wizard = _controller().wizard
    ss = st.session_state
    wizard.rate_file_name = getattr(ss.get("wizard_rate_file"), "name", None)
    wizard.advantage_active = bool(ss.get("wizard_advantage_active", True))
    wizard.set_fuel_type(FUEL_OPTIONS.get(ss.get("wizard_fuel_type"), FUEL_STANDARD))
    wizard.custom_fuel_note = str(ss.get("wizard_custom_fuel_note") or "")
    wizard.set_customer_mode(CUSTOMER_MODE_OPTIONS.get(ss.get("wizard_customer_mode"), CUSTOMER_MAP))
    wizard.existing_customer = str(ss.get("wizard_existing_customer") or "")
    wizard.set_contact(
        name=str(ss.get("wizard_contact_name") or ""),
        phone=str(ss.get("wizard_contact_phone") or ""),
        email=str(ss.get("wizard_contact_email") or ""),
    )


def _submit_wizard() -> None:
    _sync_wizard_from_widgets()
    ok, message, _ = _controller().submit_wizard()
    if ok:
        st.session_state["wizard_last_submission"] = message


def _reset_wizard() -> None:
    _controller().wizard.reset()
    for key in WIZARD_KEYS:
        st.session_state.pop(key, None)
    st.session_state.pop("wizard_last_submission", None)


# Rendering


def _render_notice(notice: Notice) -> None:
    head, _, body = notice.message.partition("\n\n")
    render = {"success": st.success, "warning": st.warning, "error": st.error}.get(notice.level, st.info)
    render(head)
    if body:
        st.code(body, language="json")


def _render_pending_confirmation(ctrl: AppController) -> None:
    if ctrl.pending is None:
        return
    with st.container(border=True):
        st.warning(ctrl.pending.prompt)
        c1, c2, _ = st.columns([1, 1, 4])
        c1.button("Confirm delete", key="confirm_delete", type="primary", on_click=_confirm_delete)
        c2.button("Keep", key="dismiss_delete", on_click=_dismiss_delete)


def _record_picker(kind: str, records: list[dict], label_fields: tuple[str, ...]) -> None:
    labels = {r["id"]: " · ".join(str(r.get(f, "")) for f in label_fields if r.get(f) not in (None, "")) for r in records}
    if st.session_state.get(f"select_{kind}") not in labels:
        st.session_state.pop(f"select_{kind}", None)
    st.selectbox(
        f"Selected {ENTITY_LABELS[kind]}",
        options=list(labels.keys()),
        format_func=lambda record_id: labels.get(record_id, record_id),
        key=f"select_{kind}",
    )


def _render_add_calculator(ctrl: AppController) -> None:
    st.header("Add Calculator")
    st.caption("Create a pricing calculation and attach it to a customer.")
    step1, step2, review = st.columns([1.2, 1.2, 0.8])

    with step1:
        with st.container(border=True):
            st.subheader("Step 1: Inputs")
            uploaded = st.file_uploader("Rate file", key="wizard_rate_file")
            st.caption(uploaded.name if uploaded is not None else "No file selected")
            st.checkbox("Advantage calculation active?", value=True, key="wizard_advantage_active")
            fuel_label = st.radio("Fuel type", list(FUEL_OPTIONS.keys()), key="wizard_fuel_type", horizontal=True)
            if FUEL_OPTIONS[fuel_label] == FUEL_CUSTOM:
                st.text_input(
                    "Additional details (if custom)",
                    key="wizard_custom_fuel_note",
                    placeholder="Describe your custom fuel calculation…",
                )

    with step2:
        with st.container(border=True):
            st.subheader("Step 2: Customer")
            mode_label = st.radio(
                "a) Map to existing or b) Create new",
                list(CUSTOMER_MODE_OPTIONS.keys()),
                key="wizard_customer_mode",
                horizontal=True,
            )
            if CUSTOMER_MODE_OPTIONS[mode_label] == CUSTOMER_MAP:
                query = st.text_input(
                    "a) Map to existing customer name",
                    key="wizard_existing_customer",
                    placeholder="Start typing to search…",
                )
                matches = ctrl.wizard.suggestions(query)
                st.caption("Suggestions: " + ", ".join(matches) if matches else "No matching customers.")
            else:
                st.text_input("b) Contact Name", key="wizard_contact_name", placeholder="Full name")
                st.text_input("b) Telephone", key="wizard_contact_phone", placeholder="e.g. +45 12 34 56 78")
                st.text_input("b) Email", key="wizard_contact_email", placeholder="name@company.com")

    _sync_wizard_from_widgets()

    with review:
        with st.container(border=True):
            st.subheader("Review & Submit")
            st.button("Save Calculator", key="wizard_submit", type="primary", width="stretch", on_click=_submit_wizard)
            st.button("Start over", key="wizard_reset", width="stretch", on_click=_reset_wizard)
            last_submission = st.session_state.get("wizard_last_submission")
            if last_submission:
                with st.expander("Last submission", expanded=False):
                    st.code(last_submission)


def _render_manage_calculators(ctrl: AppController, search: str) -> None:
    st.header("Manage Calculators")
    st.caption("Edit / delete calculators, manage customer access.")
    rows = filter_records(ctrl.store(CALCULATORS).list(), search)
    with st.container(border=True):
        st.subheader("Calculators")
        if not rows:
            st.info("No calculators match." if search else "No calculators yet.")
            return
        st.dataframe(records_frame(CALCULATORS, rows), width="stretch", hide_index=True)
        _record_picker(CALCULATORS, rows, ("customerName", "quoteNumber"))
        a1, a2, a3, a4, a5 = st.columns(5)
        a1.button("Open calculator", key="calc_open", on_click=_open_selected_calculator, args=("open",))
        a2.button("Grant Customer Access", key="calc_grant", on_click=_row_acknowledgment, args=(CALCULATORS, "grant"))
        a3.button("Revoke Customer Access", key="calc_revoke", on_click=_row_acknowledgment, args=(CALCULATORS, "revoke"))
        a4.button("Edit", key="calc_edit", on_click=_open_selected_calculator, args=("edit",))
        a5.button("Delete", key="calc_delete", on_click=_request_delete, args=(CALCULATORS,))
    fig = build_validity_timeline(rows)
    if fig is not None:
        st.plotly_chart(fig, width="stretch")


def _render_calculator_editor(ctrl: AppController) -> None:
    editor = ctrl.editor
    st.button("← Back", key="calc_editor_back", on_click=_cancel_calculator_edit)
    st.header("Edit Calculator")
    if editor is None or ctrl.nav.editing_calc is None:
        st.info("No calculator selected.")
        return
    st.caption("Open and Edit share this editor; changes are stored when you save.")
    with st.container(border=True):
        cols = st.columns(2)
        for i, spec in enumerate(field_specs(CALCULATORS)):
            key = f"{EDITOR_KEY_PREFIX}{spec.name}"
            st.session_state.setdefault(key, str(editor.get_field(spec.name) or ""))
            cols[i % 2].text_input(
                spec.label,
                key=key,
                placeholder="YYYY-MM-DD" if spec.type == "date" else None,
                on_change=_sync_editor_field,
                args=(spec.name, key),
            )
        working = editor.working_copy()
        if validity_window_ok(working) is False:
            st.warning("Valid from is later than Valid to.")
        if editor.is_dirty():
            st.caption("Unsaved changes.")
        b1, b2, _ = st.columns([1, 1, 4])
        b1.button("Save", key="calc_editor_save", type="primary", on_click=_save_calculator_edit)
        b2.button("Cancel", key="calc_editor_cancel", on_click=_cancel_calculator_edit)


def _render_master_hub() -> None:
    st.header("Master Data")
    st.caption("Select a master data tool.")
    grid = [st.columns(2), st.columns(2)]
    for i, tool in enumerate(MASTER_TOOLS):
        with grid[i // 2][i % 2]:
            with st.container(border=True):
                st.subheader(MASTER_TOOL_TITLES[tool])
                st.caption("Open to manage this dataset")
                st.button("Open", key=f"open_master_{tool}", on_click=_select_master_tool, args=(tool,))


def _render_create_form(kind: str) -> None:
    label = ENTITY_LABELS[kind]
    with st.container(border=True):
        st.subheader(f"Create {label}")
        specs = [s for s in field_specs(kind) if s.name not in CREATE_FORM_EXCLUDES.get(kind, set())]
        cols = st.columns(2)
        for i, spec in enumerate(specs):
            key = _form_key(kind, spec.name)
            col = cols[i % 2]
            if spec.type == "bool":
                col.checkbox(spec.label, value=bool(spec.default), key=key)
            elif spec.type == "int":
                col.number_input(spec.label, value=int(spec.default), step=1, key=key)
            elif spec.type == "number":
                col.number_input(spec.label, value=float(spec.default), step=1.0, key=key)
            else:
                col.text_input(spec.label, key=key, placeholder="YYYY-MM-DD" if spec.type == "date" else "")
        st.button(f"Create {label}", key=f"create_{kind}_submit", type="primary", on_click=_create_from_form, args=(kind,))


def _render_master_tool(ctrl: AppController, tool: str, search: str) -> None:
    kind = MASTER_TOOL_KINDS[tool]
    st.button("← Back", key="master_back", on_click=_back_from_master_tool)
    st.header(MASTER_TOOL_TITLES[tool])
    st.caption(MASTER_TOOL_CAPTIONS[tool])
    rows = display_order(kind, filter_records(ctrl.store(kind).list(), search))
    with st.container(border=True):
        st.subheader(LIST_TITLES[kind])
        if rows:
            st.dataframe(records_frame(kind, rows), width="stretch", hide_index=True)
            label_fields = ("customerName", "contactName") if kind == CUSTOMERS else ("name", "text", "unitType")
            _record_picker(kind, rows, label_fields)
            if kind == CUSTOMERS:
                a1, a2, a3, a4 = st.columns(4)
                a1.button("Edit customer", key="customer_edit", on_click=_row_acknowledgment, args=(kind, "edit"))
                a2.button("Remove customer", key="customer_remove", on_click=_request_delete, args=(kind,))
                a3.button("Revoke access", key="customer_revoke", on_click=_row_acknowledgment, args=(kind, "revoke_customer"))
                a4.button("New access details", key="customer_access", on_click=_row_acknowledgment, args=(kind, "access_details"))
            else:
                a1, a2, _ = st.columns([1, 1, 2])
                a1.button("Edit", key=f"{kind}_edit", on_click=_row_acknowledgment, args=(kind, "edit"))
                a2.button("Remove", key=f"{kind}_remove", on_click=_request_delete, args=(kind,))
        else:
            st.info("No records match." if search else "No records yet.")
    _render_create_form(kind)
    with st.expander("Maintenance", expanded=False):
        st.caption("Replace this collection with the built-in default records.")
        st.button("Restore defaults", key=f"{kind}_reset", on_click=_reset_collection, args=(kind,))


st.set_page_config(page_title="RateShare", layout="wide")

ctrl = _controller()

with st.sidebar:
    st.title("RateShare")
    search = st.text_input("Search…", key="global_search", placeholder="Filter lists")
    st.caption("Forwarder Operations")
    st.button("Dashboard", key="nav_dashboard", disabled=True, width="stretch")
    st.caption("Tools")
    st.button(
        "Add Calculator",
        key="nav_add",
        type="primary" if ctrl.nav.view == VIEW_ADD else "secondary",
        width="stretch",
        on_click=_navigate,
        args=(VIEW_ADD,),
    )
    st.button(
        "Manage Calculators",
        key="nav_calculators",
        type="primary" if ctrl.nav.view == VIEW_CALCULATORS else "secondary",
        width="stretch",
        on_click=_navigate,
        args=(VIEW_CALCULATORS,),
    )
    st.divider()
    st.button(
        "Master Data",
        key="nav_master",
        type="primary" if ctrl.nav.view == VIEW_MASTER else "secondary",
        width="stretch",
        on_click=_navigate,
        args=(VIEW_MASTER,),
    )

    with st.expander("Diagnostics", expanded=False):
        st.caption(f"Storage root: `{storage_root_path()}`")
        st.caption(f"Runtime log: `{runtime_log_path()}`")
        events = read_runtime_events(limit=50)
        if events:
            runtime_df = pd.DataFrame(events)
            runtime_cols = [c for c in ["timestamp_utc", "level", "event", "message"] if c in runtime_df.columns]
            st.dataframe(runtime_df[runtime_cols].iloc[::-1], width="stretch", hide_index=True)
        else:
            st.caption("No runtime events logged.")

for notice in ctrl.drain_notices():
    _render_notice(notice)
_render_pending_confirmation(ctrl)

if ctrl.nav.view == VIEW_ADD:
    _render_add_calculator(ctrl)
elif ctrl.nav.view == VIEW_CALCULATORS:
    _render_manage_calculators(ctrl, search)
elif ctrl.nav.view == VIEW_MASTER:
    if ctrl.nav.master_view in MASTER_TOOL_KINDS:
        _render_master_tool(ctrl, ctrl.nav.master_view, search)
    else:
        _render_master_hub()
elif ctrl.nav.view == VIEW_CALC_EDITOR:
    _render_calculator_editor(ctrl)

st.caption(f"© {datetime.now().year} RateShare · Demo UI")
