"""Exchange API credential lifecycle: create, rotate, revoke, remove.

Only a masked form and a fingerprint of each key are stored. A rotation
issues a new key and returns it once in plain text.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..db.repo import Repo
from ..errors import ConflictError, PermissionDenied
from ..models.credential import CredentialCreate, CredentialRecord, CredentialStatus
from ..utils.io import sha256_bytes
from ..utils.logging import get_logger

LOGGER = get_logger("services.credentials")


def mask_key(api_key: str) -> str:
    return f"****{api_key[-4:]}"


def fingerprint(api_key: str) -> str:
    return sha256_bytes(api_key.encode())[:16]


def _owned(record: Dict[str, Any], user: Dict[str, Any]) -> CredentialRecord:
    if record["owner_id"] != user["id"]:
        raise PermissionDenied("You do not have access to this credential")
    return CredentialRecord.model_validate(record)


def list_credentials(repo: Repo, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return sorted(repo.list_credentials(user["id"]), key=lambda r: r.get("created_at") or "", reverse=True)


def create_credential(repo: Repo, user: Dict[str, Any], req: CredentialCreate) -> Dict[str, Any]:
    api_key = req.api_key.strip()
    key_print = fingerprint(api_key)
    for row in repo.list_credentials(user["id"]):
        if row["api_key_fingerprint"] == key_print and row["status"] == CredentialStatus.ACTIVE.value:
            raise ConflictError("This API key is already connected")
    record = CredentialRecord(
        id=uuid.uuid4().hex,
        owner_id=user["id"],
        exchange=req.exchange,
        label=req.label.strip(),
        api_key_masked=mask_key(api_key),
        api_key_fingerprint=key_print,
        owner_email=user["email"],
        notes=req.notes,
        created_at=datetime.now(timezone.utc),
    )
    LOGGER.info("credential_created credential_id=%s exchange=%s", record.id, record.exchange.value)
    return repo.save_credential(record.model_dump(mode="json"))


def rotate_credential(repo: Repo, user: Dict[str, Any], credential_id: str) -> Dict[str, Any]:
    record = _owned(repo.get_credential(credential_id), user)
    if record.status == CredentialStatus.REVOKED:
        raise ConflictError("Revoked credentials cannot be rotated")
    api_key = secrets.token_urlsafe(24)
    record.api_key_masked = mask_key(api_key)
    record.api_key_fingerprint = fingerprint(api_key)
    record.rotated_at = datetime.now(timezone.utc)
    stored = repo.save_credential(record.model_dump(mode="json"))
    LOGGER.info("credential_rotated credential_id=%s", record.id)
    return {"credential": stored, "api_key": api_key}


def revoke_credential(repo: Repo, user: Dict[str, Any], credential_id: str) -> Dict[str, Any]:
    record = _owned(repo.get_credential(credential_id), user)
    if record.status == CredentialStatus.REVOKED:
        raise ConflictError("Credential is already revoked")
    record.status = CredentialStatus.REVOKED
    LOGGER.info("credential_revoked credential_id=%s", record.id)
    return repo.save_credential(record.model_dump(mode="json"))


def remove_credential(repo: Repo, user: Dict[str, Any], credential_id: str) -> str:
    _owned(repo.get_credential(credential_id), user)
    repo.delete_credential(credential_id)
    LOGGER.info("credential_removed credential_id=%s", credential_id)
    return credential_id
