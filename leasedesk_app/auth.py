"""Session-scoped sign-in state for the dashboard.

The access token and profile live in ``st.session_state`` next to the
per-session :class:`~leasedesk.state.AppState`. A protected view
requested without a token is replaced by the login view.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from leasedesk.state import AppState


def init_session() -> AppState:
    ss = st.session_state
    ss.setdefault("app_state", AppState())
    ss.setdefault("auth_token", None)
    ss.setdefault("current_user", None)
    return ss["app_state"]


def app_state() -> AppState:
    return init_session()


def get_token() -> Optional[str]:
    return st.session_state.get("auth_token")


def set_auth(token: str, profile: Dict[str, Any]) -> None:
    st.session_state["auth_token"] = token
    st.session_state["current_user"] = profile


def clear_auth() -> None:
    st.session_state["auth_token"] = None
    st.session_state["current_user"] = None
    app_state().reset()


def is_authenticated() -> bool:
    return bool(get_token())


def current_user() -> Optional[Dict[str, Any]]:
    return st.session_state.get("current_user")


def redirect_to_login() -> None:
    st.query_params.clear()
    st.query_params["view"] = "login"
    st.warning("Please sign in to continue.")
