"""Lease uploads, lookups and terminations."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..db.repo import Repo
from ..errors import ConflictError, InvalidRequest, PermissionDenied
from ..models.lease import LeaseDocument, LeaseRecord, LeaseStatus, TerminateLeaseRequest, Termination
from ..models.loi import LOIRecord, SubmitStatus
from ..utils.io import store_document
from ..utils.logging import get_logger
from .clause_service import draft_clauses

LOGGER = get_logger("services.lease")

ALLOWED_SUFFIXES = (".pdf", ".doc", ".docx")
MAX_DOCUMENT_BYTES = 20 * 1024 * 1024


def _owned(record: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    if record["owner_id"] != user["id"]:
        raise PermissionDenied("You do not have access to this lease")
    return record


def _parse_date(value: str, label: str) -> date:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise InvalidRequest(f"{label} must be a valid date") from None


def upload_lease(
    repo: Repo,
    user: Dict[str, Any],
    *,
    lease_title: str,
    property_address: str,
    start_date: str,
    end_date: str,
    filename: str,
    content: bytes,
    content_type: Optional[str] = None,
    notes: str = "",
    loi_id: Optional[str] = None,
) -> Dict[str, Any]:
    if not lease_title.strip() or not property_address.strip():
        raise InvalidRequest("Lease title and property address are required")
    if _parse_date(end_date, "End date") <= _parse_date(start_date, "Start date"):
        raise InvalidRequest("End date must be after start date")
    if Path(filename).suffix.lower() not in ALLOWED_SUFFIXES:
        raise InvalidRequest("Upload a PDF, DOC or DOCX file")
    if not content:
        raise InvalidRequest("Lease document is empty")
    if len(content) > MAX_DOCUMENT_BYTES:
        raise InvalidRequest("Lease document is larger than 20 MB")
    loi = None
    if loi_id:
        loi = repo.get_loi(loi_id)
        if loi["owner_id"] != user["id"]:
            raise PermissionDenied("You do not have access to this LOI")
        if loi["submit_status"] == SubmitStatus.DRAFT.value:
            raise ConflictError("Draft LOIs cannot be linked to a lease")

    stored = store_document(filename, content)
    now = datetime.now(timezone.utc)
    record = LeaseRecord(
        id=uuid.uuid4().hex,
        owner_id=user["id"],
        lease_title=lease_title.strip(),
        property_address=property_address.strip(),
        start_date=start_date[:10],
        end_date=end_date[:10],
        notes=notes,
        loi_id=loi_id or None,
        document=LeaseDocument(
            filename=stored["filename"],
            content_type=content_type,
            size=stored["size"],
            sha256=stored["sha256"],
        ),
        created_at=now,
        updated_at=now,
    )
    record.clauses = draft_clauses(record, LOIRecord.model_validate(loi) if loi else None, now)
    LOGGER.info(
        "lease_uploaded lease_id=%s loi_id=%s size=%d clauses=%d",
        record.id,
        record.loi_id,
        stored["size"],
        len(record.clauses),
    )
    return repo.save_lease(record.model_dump(mode="json"))


def list_leases(repo: Repo, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return sorted(repo.list_leases(user["id"]), key=lambda r: r.get("updated_at") or "", reverse=True)


def get_lease(repo: Repo, user: Dict[str, Any], lease_id: str) -> Dict[str, Any]:
    return _owned(repo.get_lease(lease_id), user)


def terminate_lease(repo: Repo, user: Dict[str, Any], lease_id: str, req: TerminateLeaseRequest) -> Dict[str, Any]:
    lease = LeaseRecord.model_validate(get_lease(repo, user, lease_id))
    if lease.status == LeaseStatus.TERMINATED:
        raise ConflictError("Lease is already terminated")
    if not req.reason.strip():
        raise InvalidRequest("Reason is required")
    _parse_date(req.effective_date, "Effective date")

    now = datetime.now(timezone.utc)
    lease.status = LeaseStatus.TERMINATED
    lease.termination = Termination(reason=req.reason.strip(), effective_date=req.effective_date[:10], requested_at=now)
    lease.updated_at = now
    LOGGER.info("lease_terminated lease_id=%s", lease.id)
    return repo.save_lease(lease.model_dump(mode="json"))
