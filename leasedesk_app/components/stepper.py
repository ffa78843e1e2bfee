"""Step header for the LOI wizard."""

from __future__ import annotations

from typing import List

import streamlit as st

from leasedesk.forms.stepper import FormStepper
from leasedesk.models.loi import Step


def step_marker(stepper: FormStepper, step: Step) -> str:
    if stepper.is_step_complete(step.id):
        return "✓"
    if step.id == stepper.current_step:
        return "●"
    return "○"


def render_stepper(steps: List[Step], stepper: FormStepper) -> None:
    columns = st.columns(len(steps))
    for col, step in zip(columns, steps):
        with col:
            weight = "**" if step.id == stepper.current_step else ""
            st.markdown(f"{step_marker(stepper, step)} {weight}{step.id}. {step.title}{weight}")
            st.caption(step.subtitle)
    st.progress(stepper.current_step / stepper.total_steps)
