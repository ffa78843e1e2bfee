from leasedesk.forms.account import (
    ChangePasswordSchema,
    ClauseEditSchema,
    ForgotPasswordSchema,
    LeaseUploadSchema,
    LoginSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TerminationSchema,
    VerifyOTPSchema,
)
from leasedesk.forms.validation import validate_form

REGISTRATION = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "password": "correct-horse",
    "confirm_password": "correct-horse",
    "role": "tenant",
    "conditions": True,
}

UPLOAD = {
    "lease_title": "Suite 400 Lease",
    "property_address": "400 Market St",
    "start_date": "2025-01-01",
    "end_date": "2027-12-31",
    "document_name": "lease.PDF",
}


def test_login_form():
    assert validate_form(LoginSchema, {"email": "", "password": ""}) == {
        "email": "Email is required",
        "password": "Password is required",
    }
    assert validate_form(LoginSchema, {"email": "ada@example.com", "password": "x"}) == {}


def test_registration_rules():
    assert validate_form(RegisterSchema, REGISTRATION) == {}
    errors = validate_form(RegisterSchema, {**REGISTRATION, "confirm_password": "different"})
    assert errors == {"confirm_password": "Passwords must match"}
    errors = validate_form(RegisterSchema, {**REGISTRATION, "password": "short", "confirm_password": "short"})
    assert errors == {"password": "Password must be at least 8 characters"}
    errors = validate_form(RegisterSchema, {**REGISTRATION, "conditions": False})
    assert errors == {"conditions": "You must accept the terms and conditions"}


def test_change_password_rules():
    values = {"current_password": "old-password", "new_password": "new-password", "confirm_password": "nope"}
    assert validate_form(ChangePasswordSchema, values) == {"confirm_password": "Passwords must match"}


def test_lease_upload_rules():
    assert validate_form(LeaseUploadSchema, UPLOAD) == {}
    errors = validate_form(LeaseUploadSchema, {**UPLOAD, "end_date": "2024-06-01"})
    assert errors == {"end_date": "End date must be after start date"}
    errors = validate_form(LeaseUploadSchema, {**UPLOAD, "document_name": "lease.png"})
    assert errors == {"document_name": "Upload a PDF, DOC or DOCX file"}
    errors = validate_form(LeaseUploadSchema, {**UPLOAD, "document_name": ""})
    assert errors == {"document_name": "Lease document is required"}


def test_termination_rules():
    errors = validate_form(TerminationSchema, {"reason": "", "effective_date": "soon"})
    assert errors == {
        "reason": "Reason is required",
        "effective_date": "Effective date must be a valid date",
    }


def test_forgot_password_forms():
    assert validate_form(ForgotPasswordSchema, {"email": "not-an-email"}) == {"email": "Invalid email"}
    assert validate_form(VerifyOTPSchema, {"otp": ""}) == {"otp": "Enter the code we sent you"}
    assert validate_form(VerifyOTPSchema, {"otp": "12a456"}) == {"otp": "The code has 6 digits"}
    assert validate_form(VerifyOTPSchema, {"otp": "1234567"}) == {"otp": "The code has 6 digits"}
    assert validate_form(VerifyOTPSchema, {"otp": " 123456 "}) == {}
    values = {"new_password": "short", "confirm_password": "short"}
    assert validate_form(ResetPasswordSchema, values) == {"new_password": "Password must be at least 8 characters"}
    values = {"new_password": "long-enough", "confirm_password": "long-enougH"}
    assert validate_form(ResetPasswordSchema, values) == {"confirm_password": "Passwords must match"}


def test_clause_edit_form():
    assert validate_form(ClauseEditSchema, {"current_version": "  ", "comment": ""}) == {
        "current_version": "Clause text is required"
    }
    assert validate_form(ClauseEditSchema, {"current_version": "Rent is due on the 1st."}) == {}
