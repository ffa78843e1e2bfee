"""Plotly chart helpers for the dashboard."""

from __future__ import annotations

from typing import Dict, Optional

import plotly.graph_objects as go

STATUS_COLORS = {
    "Draft": "#9CA3AF",
    "Submitted": "#1565C0",
    "Sent": "#F59E0B",
    "Approved": "#22C55E",
    "In Review": "#42A5F5",
    "Active": "#16A34A",
    "Pending": "#F97316",
    "Available": "#0EA5E9",
    "Terminated": "#EF4444",
}


def render_status_chart(counts: Dict[str, int], title: str, order: Optional[list] = None) -> go.Figure:
    labels = [label for label in (order or sorted(counts)) if counts.get(label)]
    values = [counts[label] for label in labels]
    fig = go.Figure(
        go.Bar(
            x=labels,
            y=values,
            marker_color=[STATUS_COLORS.get(label, "#64748B") for label in labels],
            text=values,
            textposition="outside",
        )
    )
    fig.update_layout(
        title=title,
        margin=dict(l=10, r=10, t=40, b=30),
        height=300,
        yaxis_title="Count",
        template="plotly_white",
        showlegend=False,
    )
    return fig
