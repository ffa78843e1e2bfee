"""Tabular components for the LOI, lease and credential lists."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

import pandas as pd
import streamlit as st

from leasedesk.services.listing import ListQuery, ListSpec, Page


def _fmt_date(value: Optional[str]) -> str:
    if not value:
        return "—"
    return str(value).split("T")[0]


def _fmt_currency(value: Optional[str]) -> str:
    try:
        return f"${float(str(value).replace(',', '')):,.0f}"
    except ValueError:
        return "—"


LOI_COLUMNS = {
    "title": "Title",
    "propertyAddress": "Property Address",
    "submit_status": "Status",
    "rent": "Monthly Rent",
    "updated_at": "Updated",
}

LEASE_COLUMNS = {
    "lease_title": "Lease",
    "property_address": "Property Address",
    "status": "Status",
    "start_date": "Start",
    "end_date": "End",
}

CREDENTIAL_COLUMNS = {
    "label": "Label",
    "exchange": "Exchange",
    "api_key_masked": "API Key",
    "status": "Status",
    "created_at": "Created",
    "last_used_at": "Last Used",
}


def loi_frame(rows: List[Dict]) -> pd.DataFrame:
    records = [
        {
            "title": row.get("title"),
            "propertyAddress": row.get("propertyAddress"),
            "submit_status": row.get("submit_status"),
            "rent": _fmt_currency((row.get("leaseTerms") or {}).get("monthlyRent")),
            "updated_at": _fmt_date(row.get("updated_at")),
        }
        for row in rows
    ]
    return pd.DataFrame(records, columns=list(LOI_COLUMNS)).rename(columns=LOI_COLUMNS)


def lease_frame(rows: List[Dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=list(LEASE_COLUMNS))
    return df.fillna("—").rename(columns=LEASE_COLUMNS)


def credential_frame(rows: List[Dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=list(CREDENTIAL_COLUMNS))
    for column in ("created_at", "last_used_at"):
        df[column] = df[column].apply(_fmt_date)
    return df.rename(columns=CREDENTIAL_COLUMNS)


def render_table(frame: pd.DataFrame, empty_message: str) -> None:
    if frame.empty:
        st.info(empty_message)
        return
    st.dataframe(frame, hide_index=True, width="stretch")


def render_list_controls(
    spec: ListSpec,
    query: ListQuery,
    statuses: List[str],
    key: str,
    on_change: Callable[[ListQuery], None],
) -> str:
    """Search box, status select, sort buttons and page size. Returns the raw search text."""

    search_col, status_col, size_col = st.columns([3, 2, 1])
    with search_col:
        text = st.text_input("Search", value=query.query, key=f"{key}-search", placeholder="Search...")
    with status_col:
        options = [""] + statuses
        current = query.status if query.status in options else ""
        status = st.selectbox(
            "Status",
            options,
            index=options.index(current),
            key=f"{key}-status",
            format_func=lambda v: v or "All statuses",
        )
        if status != query.status:
            on_change(query.with_status(status))
    with size_col:
        sizes = [5, 10, 25, 50]
        if query.page_size not in sizes:
            sizes.append(query.page_size)
        size = st.selectbox("Per page", sizes, index=sizes.index(query.page_size), key=f"{key}-size")
        if size != query.page_size:
            on_change(query.with_page_size(size))

    sort_cols = st.columns(len(spec.sort_fields) + 1)
    sort_cols[0].caption("Sort by")
    for col, sort_field in zip(sort_cols[1:], spec.sort_fields):
        arrow = ""
        if query.sort_by == sort_field.name:
            arrow = " ↑" if query.sort_dir == "asc" else " ↓"
        if col.button(f"{sort_field.name}{arrow}", key=f"{key}-sort-{sort_field.name}"):
            on_change(query.with_sort(sort_field.name))
    return text


def render_pager(page: Page, query: ListQuery, key: str, on_change: Callable[[ListQuery], None]) -> None:
    prev_col, info_col, next_col = st.columns([1, 3, 1])
    if prev_col.button("Previous", key=f"{key}-prev", disabled=not page.has_prev):
        on_change(query.with_page(page.page - 1))
    info_col.caption(
        f"Showing {page.first_index}-{page.last_index} of {page.total} · page {page.page} of {page.total_pages}"
    )
    if next_col.button("Next", key=f"{key}-next", disabled=not page.has_next):
        on_change(query.with_page(page.page + 1))
