"""Password hashing, bearer tokens and the ``current_user`` dependency."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import ALGORITHM, access_token_minutes, reset_code_minutes, secret_key
from .db.repo import Repo, get_repository
from .errors import InvalidRequest, RecordNotFound
from .utils.logging import get_logger

LOGGER = get_logger("auth")

security = HTTPBearer(auto_error=False)

PBKDF2_ROUNDS = 120_000
RESET_PURPOSE = "password_reset"


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ROUNDS).hex()
    return f"{salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    salt, _, expected = password_hash.partition("$")
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ROUNDS).hex()
    return hmac.compare_digest(digest, expected)


def create_access_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": user_id, "iat": now, "exp": now + timedelta(minutes=access_token_minutes())}
    return jwt.encode(payload, secret_key(), algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify an access token and return its claims; 401 when expired or invalid."""
    try:
        return jwt.decode(token, secret_key(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def password_fingerprint(password_hash: str) -> str:
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]


def create_reset_token(user_id: str, password_hash: str) -> str:
    """Short-lived token that allows one password reset.

    It carries a fingerprint of the current hash, so it stops working once the
    password changes.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "purpose": RESET_PURPOSE,
        "pwd": password_fingerprint(password_hash),
        "iat": now,
        "exp": now + timedelta(minutes=reset_code_minutes()),
    }
    return jwt.encode(payload, secret_key(), algorithm=ALGORITHM)


def decode_reset_token(token: str) -> Dict[str, Any]:
    try:
        claims = jwt.decode(token, secret_key(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidRequest("Reset link expired. Request a new code.") from None
    except jwt.InvalidTokenError:
        raise InvalidRequest("Invalid reset token") from None
    if claims.get("purpose") != RESET_PURPOSE:
        raise InvalidRequest("Invalid reset token")
    return claims


def current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    repo: Repo = Depends(get_repository),
) -> Dict[str, Any]:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    claims = decode_token(credentials.credentials)
    if claims.get("purpose"):
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        return repo.get_user(claims["sub"])
    except RecordNotFound:
        LOGGER.warning("token_for_unknown_user")
        raise HTTPException(status_code=401, detail="Invalid token")
