"""Lease list, detail, upload, clause review and termination views."""

from __future__ import annotations

import streamlit as st

from leasedesk.forms.account import LEASE_DOCUMENT_SUFFIXES, ClauseEditSchema, LeaseUploadSchema, TerminationSchema
from leasedesk.models.lease import ClauseReview, LeaseStatus
from leasedesk.services.clause_service import CATEGORY_KEYWORDS, DEFAULT_CATEGORY, risk_band, summary_csv, summary_filename
from leasedesk.services.listing import LEASE_LIST
from leasedesk.state import Fulfilled, LeaseSlice, LOISlice
from leasedesk_app.components.cards import render_stat_card, risk_badge, status_badge
from leasedesk_app.components.fields import DictForm, date_field, select_field, text_field, textarea_field
from leasedesk_app.components.tables import lease_frame, render_table
from leasedesk_app.views.common import ViewContext, list_page, navigate


def render_lease_list(ctx: ViewContext) -> None:
    st.title("Leases")
    leases = ctx.state.lease
    if st.button("Upload lease", type="primary"):
        navigate("lease-upload")

    with st.spinner("Loading leases..."):
        leases.run(LeaseSlice.Action.LIST, ctx.client.list_leases)
    if leases.error:
        st.error(leases.error)
        return

    page = list_page(ctx, LEASE_LIST, leases.items, [s.value for s in LeaseStatus], key="leases")
    render_table(lease_frame(page.rows), "No leases match your filters.")
    for row in page.rows:
        open_col, label_col = st.columns([1, 7])
        if open_col.button("View", key=f"lease-{row['id']}"):
            navigate("lease", id=row["id"])
        label_col.markdown(f"{row['lease_title']} {status_badge(row['status'])}", unsafe_allow_html=True)


def render_lease_detail(ctx: ViewContext, lease_id: str) -> None:
    leases = ctx.state.lease
    result = leases.run(LeaseSlice.Action.GET, ctx.client.get_lease, lease_id)
    if st.button("← Back to leases"):
        navigate("leases")
    if not isinstance(result, Fulfilled):
        st.error(result.message or "Lease not found")
        return

    lease = result.payload
    st.title(lease["lease_title"])
    st.markdown(f"{lease['property_address']} · {status_badge(lease['status'])}", unsafe_allow_html=True)
    left, right = st.columns(2)
    with left:
        st.markdown(f"**Start:** {lease['start_date']}")
        st.markdown(f"**End:** {lease['end_date']}")
        if lease.get("loi_id"):
            if st.button("Open linked LOI"):
                navigate("loi", id=lease["loi_id"])
    with right:
        document = lease.get("document") or {}
        st.markdown(f"**Document:** {document.get('filename', '—')}")
        st.caption(f"{document.get('size', 0):,} bytes · sha256 {str(document.get('sha256', ''))[:12]}")
    if st.button("Review clauses", type="primary"):
        navigate("lease-clauses", id=lease_id)
    if lease.get("notes"):
        st.subheader("Notes")
        st.write(lease["notes"])

    termination = lease.get("termination")
    if termination:
        st.subheader("Termination")
        st.markdown(f"**Effective:** {termination['effective_date']}")
        st.write(termination["reason"])
    elif st.button("Terminate lease"):
        navigate("lease-terminate", id=lease_id)


def _upload_form() -> DictForm:
    ss = st.session_state
    if "lease-upload-form" not in ss:
        ss["lease-upload-form"] = DictForm(LeaseUploadSchema)
    return ss["lease-upload-form"]


def render_lease_upload(ctx: ViewContext) -> None:
    st.title("Upload lease")
    form = _upload_form()
    lois = ctx.state.loi
    if lois.last_action is not LOISlice.Action.FOR_LEASE:
        lois.run(LOISlice.Action.FOR_LEASE, ctx.client.lois_for_lease)

    text_field(form, "lease_title", "Lease title")
    text_field(form, "property_address", "Property address")
    start_col, end_col = st.columns(2)
    with start_col:
        date_field(form, "start_date", "Start date")
    with end_col:
        date_field(form, "end_date", "End date")
    loi_labels = {row["id"]: f"{row['title']} · {row['propertyAddress']}" for row in lois.for_lease}
    select_field(form, "loi_id", "Link to LOI (optional)", list(loi_labels), placeholder="No linked LOI", labels=loi_labels)
    textarea_field(form, "notes", "Notes")

    uploaded = st.file_uploader(
        "Lease document",
        type=[suffix.lstrip(".") for suffix in LEASE_DOCUMENT_SUFFIXES],
        key="lease-upload-file",
    )
    document_name = uploaded.name if uploaded else ""
    if document_name != form.values["document_name"]:
        form.set_field("document_name", document_name)
    if "document_name" in form.errors:
        st.error(form.errors["document_name"])

    leases = ctx.state.lease
    if st.button("Upload", type="primary", disabled=leases.is_loading) and form.validate():
        fields = {k: form.values.get(k, "") for k in ("lease_title", "property_address", "start_date", "end_date", "notes", "loi_id")}
        result = leases.run(
            LeaseSlice.Action.UPLOAD,
            ctx.client.upload_lease,
            fields,
            uploaded.name,
            uploaded.getvalue(),
            uploaded.type,
        )
        if isinstance(result, Fulfilled):
            st.session_state.pop("lease-upload-form", None)
            st.toast("Lease uploaded")
            navigate("lease", id=result.payload["id"])
        else:
            st.error(result.message)


def render_terminate(ctx: ViewContext, lease_id: str) -> None:
    st.title("Terminate lease")
    key = f"terminate-form-{lease_id}"
    if key not in st.session_state:
        st.session_state[key] = DictForm(TerminationSchema)
    form: DictForm = st.session_state[key]

    textarea_field(form, "reason", "Reason for termination", max_chars=1000)
    date_field(form, "effective_date", "Effective date")

    leases = ctx.state.lease
    cancel_col, submit_col = st.columns(2)
    if cancel_col.button("Cancel"):
        navigate("lease", id=lease_id)
    if submit_col.button("Terminate", type="primary", disabled=leases.is_loading) and form.validate():
        result = leases.run(
            LeaseSlice.Action.TERMINATE,
            ctx.client.terminate_lease,
            lease_id,
            form.values["reason"],
            form.values["effective_date"],
        )
        if isinstance(result, Fulfilled):
            st.session_state.pop(key, None)
            st.toast("Lease terminated")
            navigate("lease", id=lease_id)
        else:
            st.error(result.message)


CLAUSE_CATEGORIES = [category for _, category in CATEGORY_KEYWORDS] + [DEFAULT_CATEGORY]
RISK_BANDS = ["high", "medium", "low"]
REVIEW_TOASTS = {"accept": "Clause accepted", "reject": "Clause rejected", "edit": "Clause updated"}


def _clause_form(lease_id: str, clause: dict) -> DictForm:
    key = f"clause-form-{lease_id}-{clause['key']}"
    if key not in st.session_state:
        st.session_state[key] = DictForm(ClauseEditSchema, {"current_version": clause.get("current_version", "")})
    return st.session_state[key]


def _review_action(ctx: ViewContext, lease_id: str, clause_key: str, action: str, **body) -> None:
    leases = ctx.state.lease
    result = leases.run(LeaseSlice.Action.REVIEW_CLAUSE, ctx.client.review_clause, lease_id, clause_key, action, **body)
    if isinstance(result, Fulfilled):
        st.session_state.pop(f"clause-form-{lease_id}-{clause_key}", None)
        st.toast(REVIEW_TOASTS[action])
        st.rerun()
    else:
        st.error(result.message)


def _render_clause(ctx: ViewContext, lease_id: str, clause: dict, locked: bool) -> None:
    band = risk_band(clause.get("risk"))
    header = f"{clause['name']} · {clause.get('risk') or 'Unrated'} · {clause.get('status', '')}"
    with st.expander(header, expanded=band == "high" and clause.get("status") == "pending"):
        st.markdown(f"{risk_badge(clause.get('risk'), band)} {status_badge(clause.get('status'))}", unsafe_allow_html=True)
        found_col, suggested_col = st.columns(2)
        with found_col:
            st.markdown("**Current version**")
            st.write(clause.get("current_version") or "_Not stated in the lease_")
        with suggested_col:
            st.markdown("**Suggested version**")
            st.write(clause.get("suggested_version") or "—")
        for comment in clause.get("comments") or []:
            st.caption(f"{comment['author']}: {comment['text']}")
        if locked:
            return

        accept_col, reject_col, _ = st.columns([1, 1, 4])
        if accept_col.button("Accept", key=f"accept-{clause['key']}", type="primary"):
            _review_action(ctx, lease_id, clause["key"], "accept")
        if reject_col.button("Reject", key=f"reject-{clause['key']}"):
            _review_action(ctx, lease_id, clause["key"], "reject")

        form = _clause_form(lease_id, clause)
        textarea_field(form, "current_version", "Edit clause", max_chars=5000)
        text_field(form, "comment", "Comment (optional)")
        if st.button("Save edit", key=f"edit-{clause['key']}") and form.validate():
            _review_action(
                ctx,
                lease_id,
                clause["key"],
                "edit",
                current_version=form.values["current_version"],
                comment=form.values.get("comment", ""),
            )


def render_clause_review(ctx: ViewContext, lease_id: str) -> None:
    leases = ctx.state.lease
    if st.button("← Back to lease"):
        navigate("lease", id=lease_id)
    with st.spinner("Loading clauses..."):
        result = leases.run(LeaseSlice.Action.CLAUSES, ctx.client.lease_clauses, lease_id)
    if not isinstance(result, Fulfilled):
        st.error(result.message or "Lease not found")
        return

    review = leases.review or {}
    summary = review.get("summary") or {}
    st.title(f"Clause review · {review.get('lease_title', '')}")

    stat_cols = st.columns(4)
    with stat_cols[0]:
        render_stat_card("Clauses", summary.get("total", 0))
    with stat_cols[1]:
        render_stat_card("High risk", summary.get("high_risk", 0), f"{summary.get('medium_risk', 0)} medium")
    with stat_cols[2]:
        render_stat_card("Approved", summary.get("approved", 0), f"{summary.get('rejected', 0)} rejected")
    with stat_cols[3]:
        render_stat_card("Pending", summary.get("pending", 0))

    st.download_button(
        "Export summary (CSV)",
        data=summary_csv(ClauseReview.model_validate(review)),
        file_name=summary_filename(lease_id),
        mime="text/csv",
    )

    category_col, risk_col = st.columns(2)
    category = category_col.selectbox("Category", ["All"] + CLAUSE_CATEGORIES, key=f"clause-category-{lease_id}")
    band = risk_col.selectbox("Risk", ["All"] + RISK_BANDS, key=f"clause-risk-{lease_id}", format_func=str.capitalize)
    clauses = leases.clauses(None if category == "All" else category, None if band == "All" else band)
    if not clauses:
        st.info("No clauses match your filters.")
        return

    locked = review.get("lease_status") == LeaseStatus.TERMINATED.value
    if locked:
        st.caption("This lease is terminated; its clauses are read-only.")
    for name in CLAUSE_CATEGORIES:
        group = [clause for clause in clauses if clause.get("category") == name]
        if not group:
            continue
        st.subheader(name)
        for clause in group:
            _render_clause(ctx, lease_id, clause, locked)
