"""Declarative field rules for form schemas and a helper that turns failures into messages.

Form schemas are pydantic models whose fields carry ``AfterValidator`` rules.
Rules run in declaration order and the first failing rule supplies the
field's message, so ``Annotated[str, required(...), email(...)]`` reports the
"required" message for a blank value and the "email" message otherwise.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Mapping, Type

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")

FieldErrors = Dict[str, str]


class FormSchema(BaseModel):
    """Base for form schemas: unknown keys are ignored so callers can pass whole forms."""

    model_config = ConfigDict(extra="ignore")


def required(message: str) -> AfterValidator:
    def check(value: Any) -> Any:
        if value is None or not str(value).strip():
            raise ValueError(message)
        return value

    return AfterValidator(check)


def email(message: str = "Invalid email") -> AfterValidator:
    def check(value: str) -> str:
        if not EMAIL_REGEX.match(value.strip()):
            raise ValueError(message)
        return value

    return AfterValidator(check)


def iso_date(message: str) -> AfterValidator:
    def check(value: str) -> str:
        try:
            date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise ValueError(message) from None
        return value

    return AfterValidator(check)


def max_length(limit: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) > limit:
            raise ValueError(message)
        return value

    return AfterValidator(check)


def min_length(limit: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) < limit:
            raise ValueError(message)
        return value

    return AfterValidator(check)


def must_be_true(message: str) -> AfterValidator:
    def check(value: bool) -> bool:
        if value is not True:
            raise ValueError(message)
        return value

    return AfterValidator(check)


def digits(length: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        code = value.strip()
        if not (code.isascii() and code.isdigit() and len(code) == length):
            raise ValueError(message)
        return value

    return AfterValidator(check)


def allowed_suffix(suffixes: tuple, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if not value.lower().endswith(suffixes):
            raise ValueError(message)
        return value

    return AfterValidator(check)


def _message(error: Dict[str, Any]) -> str:
    ctx = error.get("ctx") or {}
    if isinstance(ctx.get("error"), Exception):
        return str(ctx["error"])
    return str(error.get("msg", "Invalid value"))


def validate_form(schema: Type[BaseModel], values: Mapping[str, Any]) -> FieldErrors:
    """Run ``schema`` over ``values`` and return ``{field: message}``; empty means valid."""

    try:
        schema.model_validate(dict(values))
    except ValidationError as exc:
        errors: FieldErrors = {}
        for error in exc.errors():
            loc = error.get("loc") or ("__root__",)
            field = str(loc[0])
            errors.setdefault(field, _message(error))
        return errors
    return {}


__all__ = [
    "FieldErrors",
    "FormSchema",
    "allowed_suffix",
    "digits",
    "email",
    "iso_date",
    "max_length",
    "min_length",
    "must_be_true",
    "required",
    "validate_form",
]
