"""Streamlit components for summary cards and status badges."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import streamlit as st

STATUS_TONES = {
    "draft": "neutral",
    "submitted": "info",
    "sent": "warning",
    "approved": "success",
    "active": "success",
    "available": "success",
    "pending": "warning",
    "in review": "info",
    "terminated": "danger",
    "revoked": "danger",
    "rejected": "danger",
}

RISK_TONES = {"high": "danger", "medium": "warning", "low": "success"}


def status_badge(status: Optional[str]) -> str:
    label = (status or "unknown").strip()
    tone = STATUS_TONES.get(label.lower(), "neutral")
    return f"<span class='status-badge status-{tone}'>{label}</span>"


def risk_badge(risk: Optional[str], band: str) -> str:
    return f"<span class='status-badge status-{RISK_TONES.get(band, 'neutral')}'>{risk or 'Unrated'}</span>"


def render_stat_card(label: str, value: int, caption: Optional[str] = None) -> None:
    with st.container(border=True):
        st.metric(label, value)
        if caption:
            st.caption(caption)


def render_loi_card(loi: Dict, on_click: Callable[[], None], key: Optional[str] = None) -> None:
    key = key or loi.get("id")
    card_html = f"""
        <div class="loi-card">
            <div class="loi-card__header">{status_badge(loi.get('submit_status'))}</div>
            <h4>{loi.get('title') or 'Untitled LOI'}</h4>
            <p class="loi-card__meta">{loi.get('propertyAddress') or '-'}</p>
        </div>
    """
    with st.container():
        st.markdown(card_html, unsafe_allow_html=True)
        st.button("Open", key=f"open-{key}", on_click=on_click)
