"""Create/edit view for Letters of Intent, driven by ``LOIWizard``."""

from __future__ import annotations

from typing import Optional

import streamlit as st

from leasedesk.forms.steps import INTENDED_USES, LEASE_DURATIONS, PROPERTY_TYPES
from leasedesk.forms.transform import CONTINGENCY_LABELS, UTILITY_LABELS
from leasedesk.forms.wizard import LOIWizard, WizardOutcome
from leasedesk.state import LOISlice
from leasedesk_app.components.fields import (
    checkbox_field,
    date_field,
    select_field,
    text_field,
    textarea_field,
)
from leasedesk_app.components.stepper import render_stepper
from leasedesk_app.views.common import ViewContext, navigate


def get_wizard(ctx: ViewContext, loi_id: Optional[str] = None) -> LOIWizard:
    key = f"loi-wizard-{loi_id or 'new'}"
    ss = st.session_state
    if key not in ss:
        slice_ = ctx.state.loi

        def submit(payload):
            return slice_.run(LOISlice.Action.SUBMIT, ctx.client.submit_loi, payload)

        wizard = LOIWizard(submit, mode="edit" if loi_id else "create", loi_id=loi_id)
        if loi_id:
            wizard.load(lambda: slice_.run(LOISlice.Action.GET, ctx.client.get_loi, loi_id))
        ss[key] = wizard
    return ss[key]


def _basic_information(w: LOIWizard) -> None:
    text_field(w, "title", "LOI Title")
    text_field(w, "property_address", "Property Address")
    left, right = st.columns(2)
    with left:
        text_field(w, "landlord_name", "Landlord Name")
        text_field(w, "tenant_name", "Tenant Name")
    with right:
        text_field(w, "landlord_email", "Landlord Email")
        text_field(w, "tenant_email", "Tenant Email")


def _lease_terms(w: LOIWizard) -> None:
    left, right = st.columns(2)
    with left:
        text_field(w, "rent_amount", "Monthly Rent ($)")
        select_field(w, "property_type", "Property Type", PROPERTY_TYPES)
        date_field(w, "start_date", "Start Date")
    with right:
        text_field(w, "security_deposit", "Security Deposit ($)")
        select_field(w, "lease_duration", "Lease Duration", LEASE_DURATIONS)


def _property_details(w: LOIWizard) -> None:
    left, right = st.columns(2)
    with left:
        text_field(w, "property_size", "Property Size (sq ft)")
        text_field(w, "parking_spaces", "Parking Spaces")
    with right:
        select_field(w, "intended_use", "Intended Use", INTENDED_USES)
    st.markdown("**Utilities included**")
    columns = st.columns(3)
    for idx, (field, label) in enumerate(UTILITY_LABELS):
        with columns[idx % 3]:
            checkbox_field(w, f"utilities.{field}", label)


def _additional_terms(w: LOIWizard) -> None:
    checkbox_field(w, "renewal_option", "Include renewal option")
    textarea_field(w, "improvement_allowance", "Tenant Improvement Allowance", max_chars=1000)
    textarea_field(w, "special_conditions", "Special Conditions")
    st.markdown("**Contingencies**")
    columns = st.columns(2)
    for idx, (field, label) in enumerate(CONTINGENCY_LABELS):
        with columns[idx % 2]:
            checkbox_field(w, field, label)


def _review_submit(w: LOIWizard) -> None:
    summary = w.summary()
    st.markdown(f"### {summary['title']}")
    st.caption(summary["propertyAddress"])
    for section, label in (
        ("partyInfo", "Parties"),
        ("leaseTerms", "Lease Terms"),
        ("propertyDetails", "Property Details"),
        ("additionalDetails", "Additional Terms"),
    ):
        with st.expander(label, expanded=True):
            for name, value in summary[section].items():
                shown = ", ".join(value) if isinstance(value, list) else value
                st.markdown(f"- **{name}:** {shown if shown not in ('', None) else '—'}")
    checkbox_field(w, "terms", "I confirm these details and accept the terms and conditions")


STEP_RENDERERS = {
    1: _basic_information,
    2: _lease_terms,
    3: _property_details,
    4: _additional_terms,
    5: _review_submit,
}


def render_loi_form(ctx: ViewContext, loi_id: Optional[str] = None) -> None:
    wizard = get_wizard(ctx, loi_id)
    st.title("Edit Letter of Intent" if wizard.is_editing else "Create Letter of Intent")

    if wizard.loading:
        st.info("Loading LOI...")
        return
    if wizard.load_error:
        st.error(wizard.load_error)
        if st.button("Back to LOIs"):
            navigate("lois")
        return

    render_stepper(wizard.steps, wizard.stepper)
    step = wizard.active_step
    st.subheader(step.title)
    st.caption(step.subtitle)
    STEP_RENDERERS[step.id](wizard)

    if wizard.submit_error:
        st.error(wizard.submit_error)
    if wizard.last_saved:
        st.caption(f"Last saved {wizard.last_saved.astimezone().strftime('%Y-%m-%d %H:%M')}")

    back_col, draft_col, next_col = st.columns(3)
    busy = wizard.submitting or wizard.saving
    if back_col.button("Back", disabled=wizard.current_step == 1 or busy):
        wizard.prev_step()
        st.rerun()
    if draft_col.button("Save draft", disabled=busy):
        if wizard.on_save_draft() is WizardOutcome.SAVED:
            st.toast("Draft saved")
        st.rerun()
    label = "Submit LOI" if wizard.stepper.is_last_step else "Next"
    if next_col.button(label, type="primary", disabled=busy):
        outcome = wizard.on_advance()
        if outcome is WizardOutcome.SUBMITTED:
            saved_id = wizard.loi_id
            st.session_state.pop(f"loi-wizard-{loi_id or 'new'}", None)
            st.toast("LOI submitted")
            navigate("loi", id=saved_id)
        st.rerun()
