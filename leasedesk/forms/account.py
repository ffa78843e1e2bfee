"""Schemas for the smaller forms: sign-in, registration, passwords, lease upload, termination and clause edits."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import ValidationInfo, field_validator

from .validation import (
    FormSchema,
    allowed_suffix,
    digits,
    email,
    iso_date,
    max_length,
    min_length,
    must_be_true,
    required,
)

LEASE_DOCUMENT_SUFFIXES = (".pdf", ".doc", ".docx")
ROLES = ["tenant", "landlord", "broker"]


class LoginSchema(FormSchema):
    email: Annotated[str, required("Email is required"), email()]
    password: Annotated[str, required("Password is required")]


class RegisterSchema(FormSchema):
    first_name: Annotated[str, required("First name is required")]
    last_name: Annotated[str, required("Last name is required")]
    email: Annotated[str, required("Email is required"), email()]
    password: Annotated[
        str,
        required("Password is required"),
        min_length(8, "Password must be at least 8 characters"),
    ]
    confirm_password: Annotated[str, required("Confirm your password")]
    role: Annotated[str, required("Role is required")]
    conditions: Annotated[bool, must_be_true("You must accept the terms and conditions")]

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords must match")
        return value


class ChangePasswordSchema(FormSchema):
    current_password: Annotated[str, required("Current password is required")]
    new_password: Annotated[
        str,
        required("New password is required"),
        min_length(8, "Password must be at least 8 characters"),
    ]
    confirm_password: Annotated[str, required("Confirm your new password")]

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "new_password" in info.data and value != info.data["new_password"]:
            raise ValueError("Passwords must match")
        return value


class ForgotPasswordSchema(FormSchema):
    email: Annotated[str, required("Email is required"), email()]


class VerifyOTPSchema(FormSchema):
    otp: Annotated[str, required("Enter the code we sent you"), digits(6, "The code has 6 digits")]


class ResetPasswordSchema(FormSchema):
    new_password: Annotated[
        str,
        required("New password is required"),
        min_length(8, "Password must be at least 8 characters"),
    ]
    confirm_password: Annotated[str, required("Confirm your new password")]

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "new_password" in info.data and value != info.data["new_password"]:
            raise ValueError("Passwords must match")
        return value


class LeaseUploadSchema(FormSchema):
    lease_title: Annotated[str, required("Lease title is required"), max_length(200, "Too long")]
    property_address: Annotated[str, required("Property address is required")]
    start_date: Annotated[str, required("Start date is required"), iso_date("Start date must be a valid date")]
    end_date: Annotated[str, required("End date is required"), iso_date("End date must be a valid date")]
    document_name: Annotated[
        str,
        required("Lease document is required"),
        allowed_suffix(LEASE_DOCUMENT_SUFFIXES, "Upload a PDF, DOC or DOCX file"),
    ]
    notes: str = ""
    loi_id: str = ""

    @field_validator("end_date")
    @classmethod
    def ends_after_start(cls, value: str, info: ValidationInfo) -> str:
        start = info.data.get("start_date")
        if start and date.fromisoformat(value[:10]) <= date.fromisoformat(start[:10]):
            raise ValueError("End date must be after start date")
        return value


class TerminationSchema(FormSchema):
    reason: Annotated[str, required("Reason is required"), max_length(1000, "Too long")]
    effective_date: Annotated[str, required("Effective date is required"), iso_date("Effective date must be a valid date")]


class ClauseEditSchema(FormSchema):
    current_version: Annotated[str, required("Clause text is required"), max_length(5000, "Too long")]
    comment: Annotated[str, max_length(1000, "Too long")] = ""
