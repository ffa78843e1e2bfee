"""Exchange API credentials: list, connect, rotate, revoke, remove."""

from __future__ import annotations

import streamlit as st

from leasedesk.models.credential import EXCHANGE_NAMES, CredentialStatus
from leasedesk.services.listing import CREDENTIAL_LIST, stale_credentials
from leasedesk.state import CredentialSlice, Fulfilled
from leasedesk_app.components.cards import render_stat_card, status_badge
from leasedesk_app.components.tables import credential_frame, render_table
from leasedesk_app.views.common import ViewContext, list_page


def _connect_form(ctx: ViewContext) -> None:
    credentials = ctx.state.credentials
    with st.expander("Connect a new exchange key"):
        with st.form("credential-create", clear_on_submit=True):
            exchange = st.selectbox(
                "Exchange",
                list(EXCHANGE_NAMES),
                format_func=lambda e: EXCHANGE_NAMES[e],
            )
            label = st.text_input("Label", max_chars=80)
            api_key = st.text_input("API key", type="password")
            notes = st.text_area("Notes")
            submitted = st.form_submit_button("Connect", disabled=credentials.is_loading)
        if not submitted:
            return
        if not label.strip() or len(api_key.strip()) < 8:
            st.error("A label and an API key of at least 8 characters are required.")
            return
        result = credentials.run(
            CredentialSlice.Action.CREATE,
            ctx.client.create_credential,
            {"exchange": exchange.value, "label": label, "api_key": api_key, "notes": notes},
        )
        if isinstance(result, Fulfilled):
            st.success("Credential connected")
        else:
            st.error(result.message)


def render_credentials(ctx: ViewContext) -> None:
    st.title("API Credentials")
    credentials = ctx.state.credentials
    if credentials.last_action is None:
        credentials.run(CredentialSlice.Action.LIST, ctx.client.list_credentials)
    if st.button("Refresh"):
        credentials.run(CredentialSlice.Action.LIST, ctx.client.list_credentials)

    items = credentials.items
    active = [c for c in items if c.get("status") == CredentialStatus.ACTIVE.value]
    total_col, active_col, stale_col = st.columns(3)
    with total_col:
        render_stat_card("Connected", len(items))
    with active_col:
        render_stat_card("Active", len(active))
    with stale_col:
        render_stat_card("Unused 90+ days", stale_credentials(items), caption="Rotate or revoke stale keys")

    if credentials.revealed_key:
        st.warning("New API key (shown once, copy it now):")
        st.code(credentials.revealed_key)
        if st.button("I have copied the key"):
            credentials.revealed_key = None
            st.rerun()
    if credentials.error:
        st.error(credentials.error)

    _connect_form(ctx)

    page = list_page(ctx, CREDENTIAL_LIST, items, [s.value for s in CredentialStatus], key="credentials")
    render_table(credential_frame(page.rows), "No credentials match your filters.")
    for row in page.rows:
        label_col, rotate_col, revoke_col, remove_col = st.columns([5, 1, 1, 1])
        label_col.markdown(f"{row['label']} · {row['api_key_masked']} {status_badge(row['status'])}", unsafe_allow_html=True)
        is_active = row["status"] == CredentialStatus.ACTIVE.value
        if rotate_col.button("Rotate", key=f"rotate-{row['id']}", disabled=not is_active):
            credentials.run(CredentialSlice.Action.ROTATE, ctx.client.rotate_credential, row["id"])
            st.rerun()
        if revoke_col.button("Revoke", key=f"revoke-{row['id']}", disabled=not is_active):
            credentials.run(CredentialSlice.Action.REVOKE, ctx.client.revoke_credential, row["id"])
            st.rerun()
        if remove_col.button("Remove", key=f"remove-{row['id']}"):
            credentials.run(CredentialSlice.Action.REMOVE, ctx.client.remove_credential, row["id"])
            st.rerun()
