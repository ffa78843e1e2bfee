"""Account registration, sign-in, password changes and password resets."""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..auth import (
    create_access_token,
    create_reset_token,
    decode_reset_token,
    hash_password,
    password_fingerprint,
    verify_password,
)
from ..config import reset_code_minutes
from ..db.repo import Repo
from ..errors import InvalidRequest, PermissionDenied, RecordNotFound
from ..models.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    ResetTokenResponse,
    TokenResponse,
    UserProfile,
    VerifyOTPRequest,
)
from ..utils.logging import get_logger

LOGGER = get_logger("services.users")

PRIVATE_FIELDS = ("password_hash", "password_reset")
RESET_CODE_DIGITS = 6
MAX_RESET_ATTEMPTS = 5
INVALID_CODE = "Invalid or expired code"


def to_profile(user: Dict[str, Any]) -> UserProfile:
    return UserProfile.model_validate({k: v for k, v in user.items() if k not in PRIVATE_FIELDS})


def register(repo: Repo, req: RegisterRequest) -> UserProfile:
    email = req.email.strip().lower()
    if "@" not in email:
        raise InvalidRequest("Invalid email")
    user = {
        "id": uuid.uuid4().hex,
        "first_name": req.first_name.strip(),
        "last_name": req.last_name.strip(),
        "email": email,
        "role": req.role,
        "password_hash": hash_password(req.password),
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    repo.create_user(user)
    LOGGER.info("user_registered user_id=%s role=%s", user["id"], user["role"])
    return to_profile(user)


def login(repo: Repo, req: LoginRequest) -> TokenResponse:
    user = repo.find_user_by_email(req.email)
    if user is None or not verify_password(req.password, user["password_hash"]):
        LOGGER.info("login_failed")
        raise PermissionDenied("Invalid email or password")
    LOGGER.info("login_ok user_id=%s", user["id"])
    return TokenResponse(access_token=create_access_token(user["id"]), profile=to_profile(user))


def change_password(repo: Repo, user: Dict[str, Any], req: ChangePasswordRequest) -> None:
    if not verify_password(req.current_password, user["password_hash"]):
        raise PermissionDenied("Current password is incorrect")
    if req.current_password == req.new_password:
        raise InvalidRequest("New password must differ from the current one")
    user = dict(user, password_hash=hash_password(req.new_password))
    repo.save_user(user)
    LOGGER.info("password_changed user_id=%s", user["id"])


def request_password_reset(repo: Repo, req: ForgotPasswordRequest, now: Optional[datetime] = None) -> Optional[str]:
    """Issue a one-time code for ``req.email``.

    Returns the code so the caller can deliver it, or ``None`` for unknown
    emails; the route answers the same way in both cases. Only a hash of the
    code is stored and a new request replaces the previous code.
    """
    user = repo.find_user_by_email(req.email)
    if user is None:
        LOGGER.info("password_reset_unknown_email")
        return None
    now = now or datetime.now(timezone.utc)
    code = f"{secrets.randbelow(10 ** RESET_CODE_DIGITS):0{RESET_CODE_DIGITS}d}"
    user["password_reset"] = {
        "code_hash": hash_password(code),
        "expires_at": (now + timedelta(minutes=reset_code_minutes())).isoformat(),
        "attempts": 0,
    }
    repo.save_user(user)
    LOGGER.info("password_reset_requested user_id=%s", user["id"])
    return code


def verify_reset_code(repo: Repo, req: VerifyOTPRequest, now: Optional[datetime] = None) -> ResetTokenResponse:
    user = repo.find_user_by_email(req.email)
    pending = (user or {}).get("password_reset")
    if not pending:
        raise InvalidRequest(INVALID_CODE)

    now = now or datetime.now(timezone.utc)
    if now >= datetime.fromisoformat(pending["expires_at"]):
        user.pop("password_reset")
        repo.save_user(user)
        LOGGER.info("password_reset_expired user_id=%s", user["id"])
        raise InvalidRequest(INVALID_CODE)

    if not verify_password(req.otp.strip(), pending["code_hash"]):
        pending["attempts"] += 1
        if pending["attempts"] >= MAX_RESET_ATTEMPTS:
            user.pop("password_reset")
            LOGGER.warning("password_reset_locked user_id=%s", user["id"])
        repo.save_user(user)
        raise InvalidRequest(INVALID_CODE)

    user.pop("password_reset")
    repo.save_user(user)
    LOGGER.info("password_reset_verified user_id=%s", user["id"])
    return ResetTokenResponse(reset_token=create_reset_token(user["id"], user["password_hash"]))


def reset_password(repo: Repo, req: ResetPasswordRequest) -> None:
    claims = decode_reset_token(req.reset_token)
    try:
        user = repo.get_user(claims["sub"])
    except RecordNotFound:
        raise InvalidRequest("Invalid reset token") from None
    if claims.get("pwd") != password_fingerprint(user["password_hash"]):
        raise InvalidRequest("This reset token has already been used")
    user["password_hash"] = hash_password(req.new_password)
    user.pop("password_reset", None)
    repo.save_user(user)
    LOGGER.info("password_reset user_id=%s", user["id"])
