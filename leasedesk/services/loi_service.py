"""Create, update and query Letters of Intent."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..db.repo import Repo
from ..errors import ConflictError, PermissionDenied
from ..models.loi import LOIPayload, LOIRecord, SubmitStatus
from ..utils.logging import get_logger

LOGGER = get_logger("services.loi")

# Once an LOI has gone out it is no longer editable from the wizard.
LOCKED_STATUSES = (SubmitStatus.SENT, SubmitStatus.APPROVED)


def _owned(record: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    if record["owner_id"] != user["id"]:
        raise PermissionDenied("You do not have access to this LOI")
    return record


def _newest_first(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda r: r.get("updated_at") or "", reverse=True)


def submit_loi(repo: Repo, user: Dict[str, Any], payload: LOIPayload) -> Dict[str, Any]:
    """Insert a new LOI, or update the one named by ``payload.doc_id``."""

    now = datetime.now(timezone.utc)
    fields = payload.model_dump(exclude={"doc_id"})
    if payload.doc_id:
        existing = LOIRecord.model_validate(_owned(repo.get_loi(payload.doc_id), user))
        if existing.submit_status in LOCKED_STATUSES:
            raise ConflictError(f"LOI is {existing.submit_status.value} and can no longer be edited")
        record = LOIRecord(
            **fields,
            doc_id=existing.id,
            id=existing.id,
            owner_id=existing.owner_id,
            assignee=existing.assignee,
            created_at=existing.created_at,
            updated_at=now,
        )
    else:
        loi_id = uuid.uuid4().hex
        record = LOIRecord(**fields, doc_id=loi_id, id=loi_id, owner_id=user["id"], created_at=now, updated_at=now)

    stored = repo.save_loi(record.wire())
    LOGGER.info("loi_saved loi_id=%s submit_status=%s", record.id, record.submit_status.value)
    return stored


def list_lois(repo: Repo, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return _newest_first(repo.list_lois(user["id"]))


def list_drafts(repo: Repo, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [r for r in list_lois(repo, user) if r["submit_status"] == SubmitStatus.DRAFT.value]


def list_for_lease(repo: Repo, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """LOIs a lease can be attached to: everything past the draft stage."""
    return [r for r in list_lois(repo, user) if r["submit_status"] != SubmitStatus.DRAFT.value]


def get_loi(repo: Repo, user: Dict[str, Any], loi_id: str) -> Dict[str, Any]:
    return _owned(repo.get_loi(loi_id), user)
