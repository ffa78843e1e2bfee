"""Dashboard home: counters, status breakdowns and recent LOIs."""

from __future__ import annotations

import streamlit as st

from leasedesk.models.lease import LeaseStatus
from leasedesk.models.loi import SubmitStatus
from leasedesk.state import DashboardSlice
from leasedesk_app.components.cards import render_loi_card, render_stat_card
from leasedesk_app.components.charts import render_status_chart
from leasedesk_app.views.common import ViewContext, navigate, set_view


def render_dashboard(ctx: ViewContext) -> None:
    st.title("Dashboard")
    dashboard = ctx.state.dashboard
    with st.spinner("Loading dashboard..."):
        dashboard.run(DashboardSlice.Action.STATS, ctx.client.dashboard)
    if dashboard.error:
        st.error(dashboard.error)
        return

    cols = st.columns(4)
    with cols[0]:
        render_stat_card("LOIs", dashboard.loi_total)
    with cols[1]:
        render_stat_card("Leases", dashboard.lease_total)
    with cols[2]:
        render_stat_card("Credentials", dashboard.credentials_total)
    with cols[3]:
        render_stat_card("Valid credentials", dashboard.credentials_valid)

    action_cols = st.columns(3)
    if action_cols[0].button("Create LOI", type="primary"):
        navigate("loi-new")
    if action_cols[1].button("Upload lease"):
        navigate("lease-upload")
    if action_cols[2].button("Manage credentials"):
        navigate("credentials")

    chart_col1, chart_col2 = st.columns(2)
    with chart_col1:
        st.plotly_chart(
            render_status_chart(dashboard.loi_by_status, "LOIs by status", [s.value for s in SubmitStatus]),
            use_container_width=True,
        )
    with chart_col2:
        st.plotly_chart(
            render_status_chart(dashboard.lease_by_status, "Leases by status", [s.value for s in LeaseStatus]),
            use_container_width=True,
        )

    st.subheader("Recent LOIs")
    if not dashboard.recent_lois:
        st.info("No LOIs yet. Create your first one to get started.")
        return
    columns = st.columns(3)
    for idx, loi in enumerate(dashboard.recent_lois):
        with columns[idx % 3]:
            render_loi_card(loi, on_click=lambda lid=loi["id"]: set_view("loi", id=lid), key=loi["id"])
