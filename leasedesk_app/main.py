"""Streamlit UI for LeaseDesk."""

from __future__ import annotations

from pathlib import Path

import sys

import streamlit as st
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

load_dotenv(dotenv_path=ROOT_DIR / ".env", override=False)

from leasedesk.utils.logging import get_logger, quiet_libraries
from leasedesk_app import auth
from leasedesk_app.backend_client import BackendClient
from leasedesk_app.config import Settings, load_settings
from leasedesk_app.views.account import render_forgot_password, render_login, render_register, render_settings
from leasedesk_app.views.common import ViewContext, navigate
from leasedesk_app.views.credentials import render_credentials
from leasedesk_app.views.dashboard import render_dashboard
from leasedesk_app.views.leases import (
    render_clause_review,
    render_lease_detail,
    render_lease_list,
    render_lease_upload,
    render_terminate,
)
from leasedesk_app.views.loi_form import render_loi_form
from leasedesk_app.views.lois import render_loi_detail, render_loi_list

LOGGER = get_logger("app")
quiet_libraries()

st.set_page_config(page_title="LeaseDesk", layout="wide", page_icon="🏢")

PUBLIC_VIEWS = {"login", "register", "forgot-password"}

NAV_ITEMS = [
    ("dashboard", "Dashboard"),
    ("lois", "Letters of Intent"),
    ("loi-new", "Create LOI"),
    ("leases", "Leases"),
    ("lease-upload", "Upload Lease"),
    ("credentials", "API Credentials"),
    ("settings", "Settings"),
]


@st.cache_resource(show_spinner=False)
def get_settings() -> Settings:
    settings = load_settings()
    LOGGER.info("app_started stage=%s api=%s", settings.stage, settings.api_base_url)
    return settings


def get_backend_client(settings: Settings) -> BackendClient:
    # One client per browser session so in-flight request keys never collide across users.
    ss = st.session_state
    if "backend_client" not in ss:
        ss["backend_client"] = BackendClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
            token_getter=auth.get_token,
            on_unauthorized=auth.clear_auth,
        )
    return ss["backend_client"]


def load_styles() -> None:
    css_path = Path(__file__).resolve().parent / "assets" / "styles.css"
    if css_path.exists():
        st.markdown(f"<style>{css_path.read_text()}</style>", unsafe_allow_html=True)


def render_sidebar(ctx: ViewContext, current: str) -> None:
    with st.sidebar:
        st.markdown("## LeaseDesk")
        profile = auth.current_user() or {}
        if profile:
            st.caption(f"{profile.get('first_name', '')} {profile.get('last_name', '')} · {profile.get('email', '')}")
        for view, label in NAV_ITEMS:
            if st.button(label, key=f"nav-{view}", width="stretch", type="primary" if view == current else "secondary"):
                navigate(view)
        if ctx.settings.debug:
            st.caption(f"stage={ctx.settings.stage}")


def route(ctx: ViewContext, view: str, record_id: str | None) -> None:
    if view == "register":
        render_register(ctx)
    elif view == "login":
        render_login(ctx)
    elif view == "forgot-password":
        render_forgot_password(ctx)
    elif view == "lois":
        render_loi_list(ctx)
    elif view == "loi-new":
        render_loi_form(ctx)
    elif view == "loi-edit" and record_id:
        render_loi_form(ctx, record_id)
    elif view == "loi" and record_id:
        render_loi_detail(ctx, record_id)
    elif view == "leases":
        render_lease_list(ctx)
    elif view == "lease-upload":
        render_lease_upload(ctx)
    elif view == "lease" and record_id:
        render_lease_detail(ctx, record_id)
    elif view == "lease-terminate" and record_id:
        render_terminate(ctx, record_id)
    elif view == "lease-clauses" and record_id:
        render_clause_review(ctx, record_id)
    elif view == "credentials":
        render_credentials(ctx)
    elif view == "settings":
        render_settings(ctx)
    else:
        render_dashboard(ctx)


def main() -> None:
    load_styles()
    state = auth.init_session()
    settings = get_settings()
    ctx = ViewContext(client=get_backend_client(settings), state=state, settings=settings)

    view = st.query_params.get("view") or ("dashboard" if auth.is_authenticated() else "login")
    record_id = st.query_params.get("id")

    if view in PUBLIC_VIEWS:
        if auth.is_authenticated():
            navigate("dashboard")
        route(ctx, view, None)
        return

    if not auth.is_authenticated():
        auth.redirect_to_login()
        render_login(ctx)
        return

    render_sidebar(ctx, view)
    route(ctx, view, record_id)


main()
