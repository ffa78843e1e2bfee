"""Form inputs bound to a form object's values and inline errors.

A bound form exposes ``field_value(name)``, ``set_field(name, value)`` and an
``errors`` dict. :class:`~leasedesk.forms.wizard.LOIWizard` satisfies this, and
:class:`DictForm` does for the small single-page forms.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Protocol, Type

import streamlit as st

from leasedesk.forms.validation import FieldErrors, validate_form


class BoundForm(Protocol):
    errors: FieldErrors

    def field_value(self, name: str) -> Any: ...

    def set_field(self, name: str, value: Any) -> None: ...


class DictForm:
    """Values plus errors for a one-page form validated by a single schema."""

    def __init__(self, schema: Type, initial: Optional[Mapping[str, Any]] = None) -> None:
        self.schema = schema
        self.initial = dict(initial or {})
        self.values: Dict[str, Any] = self._defaults()
        self.errors: FieldErrors = {}

    def _defaults(self) -> Dict[str, Any]:
        values = {name: False if info.annotation is bool else "" for name, info in self.schema.model_fields.items()}
        values.update(self.initial)
        return values

    def field_value(self, name: str) -> Any:
        return self.values.get(name, "")

    def set_field(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.errors.pop(name, None)

    def validate(self) -> bool:
        self.errors = validate_form(self.schema, self.values)
        return not self.errors

    def reset(self) -> None:
        self.values = self._defaults()
        self.errors = {}


def _key(form: BoundForm, name: str) -> str:
    return f"field-{id(form)}-{name}"


def field_error(form: BoundForm, name: str) -> None:
    message = form.errors.get(name)
    if message:
        st.markdown(f"<span class='field-error'>{message}</span>", unsafe_allow_html=True)


def text_field(form: BoundForm, name: str, label: str, placeholder: str = "", password: bool = False) -> None:
    value = st.text_input(
        label,
        value=str(form.field_value(name) or ""),
        key=_key(form, name),
        placeholder=placeholder,
        type="password" if password else "default",
    )
    if value != (form.field_value(name) or ""):
        form.set_field(name, value)
    field_error(form, name)


def password_field(form: BoundForm, name: str, label: str) -> None:
    text_field(form, name, label, password=True)


def textarea_field(form: BoundForm, name: str, label: str, max_chars: Optional[int] = None) -> None:
    value = st.text_area(label, value=str(form.field_value(name) or ""), key=_key(form, name), max_chars=max_chars)
    if value != (form.field_value(name) or ""):
        form.set_field(name, value)
    field_error(form, name)


def select_field(
    form: BoundForm,
    name: str,
    label: str,
    options: List[str],
    placeholder: str = "Select...",
    labels: Optional[Mapping[str, str]] = None,
) -> None:
    choices = [""] + list(options)
    current = form.field_value(name) or ""
    if current not in choices:
        choices.append(current)
    value = st.selectbox(
        label,
        choices,
        index=choices.index(current),
        key=_key(form, name),
        format_func=lambda v: (labels or {}).get(v, v) or placeholder,
    )
    if value != current:
        form.set_field(name, value)
    field_error(form, name)


def checkbox_field(form: BoundForm, name: str, label: str) -> None:
    value = st.checkbox(label, value=bool(form.field_value(name)), key=_key(form, name))
    if value != bool(form.field_value(name)):
        form.set_field(name, value)
    field_error(form, name)


def date_field(form: BoundForm, name: str, label: str) -> None:
    """Date picker storing an ISO ``YYYY-MM-DD`` string (empty until chosen)."""

    raw = form.field_value(name) or ""
    try:
        current: Optional[date] = date.fromisoformat(raw[:10]) if raw else None
    except ValueError:
        current = None
    value = st.date_input(label, value=current, key=_key(form, name), format="YYYY-MM-DD")
    text = value.isoformat() if isinstance(value, date) else ""
    if text != raw:
        form.set_field(name, text)
    field_error(form, name)
