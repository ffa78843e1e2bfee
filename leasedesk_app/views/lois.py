"""LOI list and detail views."""

from __future__ import annotations

import streamlit as st

from leasedesk.errors import ApiError
from leasedesk.models.loi import SubmitStatus
from leasedesk.services.listing import LOI_LIST
from leasedesk.state import Fulfilled, LOISlice
from leasedesk_app.components.cards import status_badge
from leasedesk_app.components.tables import loi_frame, render_table
from leasedesk_app.views.common import ViewContext, list_page, navigate


def render_loi_list(ctx: ViewContext) -> None:
    st.title("Letters of Intent")
    lois = ctx.state.loi
    if st.button("New LOI", type="primary"):
        navigate("loi-new")

    with st.spinner("Loading LOIs..."):
        lois.run(LOISlice.Action.LIST, ctx.client.list_lois)
    if lois.error:
        st.error(lois.error)
        return

    page = list_page(ctx, LOI_LIST, lois.items, [s.value for s in SubmitStatus], key="lois")
    render_table(loi_frame(page.rows), "No LOIs match your filters.")
    for row in page.rows:
        open_col, edit_col, label_col = st.columns([1, 1, 6])
        if open_col.button("View", key=f"view-{row['id']}"):
            navigate("loi", id=row["id"])
        if row["submit_status"] in (SubmitStatus.DRAFT.value, SubmitStatus.SUBMITTED.value):
            if edit_col.button("Edit", key=f"edit-{row['id']}"):
                navigate("loi-edit", id=row["id"])
        label_col.markdown(f"{row['title']} {status_badge(row['submit_status'])}", unsafe_allow_html=True)


def render_loi_detail(ctx: ViewContext, loi_id: str) -> None:
    lois = ctx.state.loi
    result = lois.run(LOISlice.Action.GET, ctx.client.get_loi, loi_id)
    if st.button("← Back to LOIs"):
        navigate("lois")
    if not isinstance(result, Fulfilled):
        st.error(result.message or "LOI not found")
        return

    loi = result.payload
    st.title(loi["title"])
    st.markdown(f"{loi['propertyAddress']} · {status_badge(loi['submit_status'])}", unsafe_allow_html=True)

    party, terms = loi["partyInfo"], loi["leaseTerms"]
    details, extra = loi["propertyDetails"], loi["additionalDetails"]
    left, right = st.columns(2)
    with left:
        st.subheader("Parties")
        st.markdown(f"**Landlord:** {party['landlord_name']} ({party['landlord_email']})")
        st.markdown(f"**Tenant:** {party['tenant_name']} ({party['tenant_email']})")
        st.subheader("Lease Terms")
        st.markdown(f"**Monthly Rent:** {terms['monthlyRent']}")
        st.markdown(f"**Security Deposit:** {terms['securityDeposit']}")
        st.markdown(f"**Lease Type:** {terms['leaseType']} · **Duration:** {terms['leaseDuration']}")
        st.markdown(f"**Start Date:** {(terms.get('startDate') or '—').split('T')[0]}")
    with right:
        st.subheader("Property")
        st.markdown(f"**Size:** {details['propertySize']} sq ft · **Use:** {details['intendedUse']}")
        st.markdown(f"**Amenities:** {', '.join(details['amenities']) or '—'}")
        st.markdown(f"**Utilities:** {', '.join(details['utilities']) or '—'}")
        st.subheader("Additional Terms")
        st.markdown(f"**Renewal Option:** {'Yes' if extra['renewalOption'] else 'No'}")
        st.markdown(f"**Tenant Improvement:** {extra['tenantImprovement'] or '—'}")
        st.markdown(f"**Contingencies:** {extra['contingencies'] or '—'}")
    if extra.get("specialConditions"):
        st.subheader("Special Conditions")
        st.write(extra["specialConditions"])

    pdf_key = f"loi-pdf-{loi_id}-{loi['updated_at']}"
    if pdf_key not in st.session_state:
        try:
            st.session_state[pdf_key] = ctx.client.loi_pdf(loi_id)
        except ApiError as exc:
            st.warning(f"PDF export unavailable: {exc.message}")
    if pdf_key in st.session_state:
        st.download_button(
            "Download PDF",
            data=st.session_state[pdf_key],
            file_name=f"loi-{loi_id}.pdf",
            mime="application/pdf",
            width="content",
        )
    if loi["submit_status"] in (SubmitStatus.DRAFT.value, SubmitStatus.SUBMITTED.value):
        if st.button("Edit LOI"):
            navigate("loi-edit", id=loi_id)
