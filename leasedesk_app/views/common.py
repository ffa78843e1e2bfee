"""Navigation and list-state helpers shared by the views."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List

import streamlit as st

from leasedesk.services.listing import Debouncer, ListQuery, ListSpec, Page, apply_query
from leasedesk.state import AppState
from leasedesk_app.backend_client import BackendClient
from leasedesk_app.components.tables import render_list_controls, render_pager
from leasedesk_app.config import Settings

ROUTING_PARAMS = ("view", "id")


@dataclass
class ViewContext:
    client: BackendClient
    state: AppState
    settings: Settings


def set_view(view: str, **params: Any) -> None:
    """Point the URL at ``view``; safe inside widget callbacks."""
    st.query_params.clear()
    st.query_params["view"] = view
    for name, value in params.items():
        if value not in (None, ""):
            st.query_params[name] = str(value)


def navigate(view: str, **params: Any) -> None:
    set_view(view, **params)
    st.rerun()


def _mirror(spec: ListSpec, query: ListQuery) -> None:
    routing = {name: st.query_params.get(name) for name in ROUTING_PARAMS}
    st.query_params.clear()
    for name, value in routing.items():
        if value:
            st.query_params[name] = value
    for name, value in query.to_query_params(spec).items():
        st.query_params[name] = value


def list_page(ctx: ViewContext, spec: ListSpec, rows: List[Dict[str, Any]], statuses: List[str], key: str) -> Page:
    """Render list controls, apply the query to ``rows`` and render the pager.

    The query lives in session state and is mirrored into the URL; the search
    box only applies after the debounce window passes without new input.
    """

    ss = st.session_state
    query_key = f"{key}-list-query"
    debounce_key = f"{key}-debouncer"
    if query_key not in ss:
        defaults = spec.default_query().model_copy(update={"page_size": ctx.settings.default_page_size})
        ss[query_key] = ListQuery.from_query_params(dict(st.query_params), spec) if st.query_params.get("view") else defaults
    if debounce_key not in ss:
        ss[debounce_key] = Debouncer(delay=ctx.settings.search_debounce_ms / 1000)

    def update(query: ListQuery) -> None:
        ss[query_key] = query
        _mirror(spec, query)
        st.rerun()

    query: ListQuery = ss[query_key]
    debouncer: Debouncer = ss[debounce_key]
    text = render_list_controls(spec, query, statuses, key, update)
    if text != query.query:
        debouncer.push(text)
        time.sleep(debouncer.remaining())
        fired = debouncer.poll()
        if fired is not None:
            update(query.with_search(fired))
    if st.button("Clear filters", key=f"{key}-clear"):
        debouncer.cancel()
        ss.pop(f"{key}-search", None)
        update(spec.default_query())

    page = apply_query(rows, spec, query)
    render_pager(page, query, key, update)
    return page
