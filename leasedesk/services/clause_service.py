"""Clause review for uploaded leases.

Each lease carries a list of clauses drafted from the lease form and, when one
is linked, the LOI it came from. A clause holds the text found in the lease
(``clause_details``), the version the tenant currently accepts
(``current_version``), a suggested wording and a risk label such as
``"Medium (5/10)"``. Reviewers accept the suggestion, reject the clause or
write their own version.
"""

from __future__ import annotations

import csv
import io
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from ..db.repo import Repo
from ..errors import ConflictError, InvalidRequest, PermissionDenied, RecordNotFound
from ..models.lease import (
    ClauseComment,
    ClauseReview,
    ClauseReviewRequest,
    ClauseStatus,
    ClauseSummary,
    LeaseClause,
    LeaseRecord,
    LeaseStatus,
)
from ..models.loi import LOIRecord
from ..utils.logging import get_logger

LOGGER = get_logger("services.clauses")

RISK_PATTERN = re.compile(r"\((\d+)/10\)")
HIGH_RISK = 7
MEDIUM_RISK = 4

CATEGORY_KEYWORDS = (
    (("rent", "deposit"), "Financial Terms"),
    (("legal", "compliance"), "Legal & Compliance"),
    (("address", "property"), "Property Details"),
    (("duration", "start", "end", "type"), "Basic Information"),
)
DEFAULT_CATEGORY = "Terms & Conditions"

CSV_COLUMNS = ("Clause Name", "Risk Level", "Status", "Current Version", "Suggested Version")


# ---------------------------------------------------------------------------
# Risk labels and grouping


def risk_score(risk: Optional[str]) -> int:
    match = RISK_PATTERN.search(risk or "")
    return int(match.group(1)) if match else 0


def risk_band(risk: Optional[str]) -> str:
    score = risk_score(risk)
    if score >= HIGH_RISK:
        return "high"
    if score >= MEDIUM_RISK:
        return "medium"
    return "low"


def risk_label(score: int) -> str:
    score = max(0, min(10, score))
    band = "High" if score >= HIGH_RISK else "Medium" if score >= MEDIUM_RISK else "Low"
    return f"{band} ({score}/10)"


def clause_category(name: str) -> str:
    lowered = name.lower()
    for keywords, category in CATEGORY_KEYWORDS:
        if any(word in lowered for word in keywords):
            return category
    return DEFAULT_CATEGORY


def clause_key(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _amount(text: Optional[str]) -> Optional[float]:
    digits = re.sub(r"[^\d.]", "", text or "")
    try:
        return float(digits)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Drafting


def _clause(name: str, details: str, suggestion: str, score: int, now: datetime) -> LeaseClause:
    return LeaseClause(
        key=clause_key(name),
        name=name,
        category=clause_category(name),
        clause_details=details,
        current_version=details,
        suggested_version=suggestion,
        risk=risk_label(score),
        created_at=now,
        updated_at=now,
    )


def draft_clauses(lease: LeaseRecord, loi: Optional[LOIRecord] = None, now: Optional[datetime] = None) -> List[LeaseClause]:
    """Build the reviewable clauses for ``lease``.

    Terms missing from the lease and its LOI are drafted empty with a high
    risk score so the reviewer has to fill them in.
    """

    now = now or datetime.now(timezone.utc)
    start, end = date.fromisoformat(lease.start_date), date.fromisoformat(lease.end_date)
    months = (end.year - start.year) * 12 + end.month - start.month
    clauses = [
        _clause(
            "Lease Duration",
            f"{lease.start_date} to {lease.end_date}",
            f"The term runs from {lease.start_date} to {lease.end_date}. "
            "Either party gives written notice of renewal at least 90 days before expiry.",
            5 if months < 12 else 2,
            now,
        ),
        _clause(
            "Property Address",
            lease.property_address,
            f"{lease.property_address}, together with the non-exclusive use of common areas serving the premises.",
            1,
            now,
        ),
    ]

    terms = loi.lease_terms if loi else None
    extras = loi.additional_details if loi else None
    rent = _amount(terms.monthly_rent) if terms else None
    deposit = _amount(terms.security_deposit) if terms else None

    if rent:
        clauses.append(
            _clause(
                "Monthly Rent",
                terms.monthly_rent,
                f"Tenant pays {terms.monthly_rent} per month in advance on the first day of each month.",
                2,
                now,
            )
        )
    else:
        clauses.append(_clause("Monthly Rent", "", "State the monthly rent and the day it falls due.", 8, now))

    if deposit is None:
        deposit_score = 6
    elif rent and deposit > 3 * rent:
        deposit_score = 7
    else:
        deposit_score = 3
    clauses.append(
        _clause(
            "Security Deposit",
            terms.security_deposit if terms else "",
            "The deposit is returned within 30 days of the end of the term, less documented deductions.",
            deposit_score,
            now,
        )
    )

    if terms and terms.lease_type:
        clauses.append(_clause("Lease Type", terms.lease_type, f"This is a {terms.lease_type} lease.", 2, now))

    renewal = bool(extras and extras.renewal_option)
    clauses.append(
        _clause(
            "Renewal Option",
            "Tenant may renew" if renewal else "",
            "Tenant may renew once for the same term at market rent, on 90 days written notice.",
            2 if renewal else 5,
            now,
        )
    )

    contingencies = extras.contingencies.strip() if extras else ""
    clauses.append(
        _clause(
            "Legal Compliance",
            contingencies,
            "Each party complies with applicable laws and keeps the permits its use of the premises requires.",
            2 if contingencies else 4,
            now,
        )
    )

    special = extras.special_conditions.strip() if extras else ""
    if special:
        clauses.append(
            _clause(
                "Special Conditions",
                special,
                f"{special} These conditions survive any assignment of the lease.",
                5,
                now,
            )
        )
    return clauses


def _linked_loi(repo: Repo, lease: LeaseRecord) -> Optional[LOIRecord]:
    if not lease.loi_id:
        return None
    try:
        return LOIRecord.model_validate(repo.get_loi(lease.loi_id))
    except RecordNotFound:
        LOGGER.warning("linked_loi_missing lease_id=%s loi_id=%s", lease.id, lease.loi_id)
        return None


# ---------------------------------------------------------------------------
# Review


def summarize(clauses: List[LeaseClause]) -> ClauseSummary:
    summary = ClauseSummary(total=len(clauses))
    for clause in clauses:
        band = risk_band(clause.risk)
        setattr(summary, f"{band}_risk", getattr(summary, f"{band}_risk") + 1)
        setattr(summary, clause.status.value, getattr(summary, clause.status.value) + 1)
    return summary


def _review(lease: LeaseRecord) -> ClauseReview:
    return ClauseReview(
        lease_id=lease.id,
        lease_title=lease.lease_title,
        lease_status=lease.status,
        clauses=lease.clauses,
        summary=summarize(lease.clauses),
    )


def _load(repo: Repo, user: Dict[str, Any], lease_id: str) -> LeaseRecord:
    lease = LeaseRecord.model_validate(repo.get_lease(lease_id))
    if lease.owner_id != user["id"]:
        raise PermissionDenied("You do not have access to this lease")
    if not lease.clauses:
        # Leases stored before clause drafting existed.
        lease.clauses = draft_clauses(lease, _linked_loi(repo, lease))
        repo.save_lease(lease.model_dump(mode="json"))
        LOGGER.info("clauses_drafted lease_id=%s count=%d", lease.id, len(lease.clauses))
    return lease


def list_clauses(repo: Repo, user: Dict[str, Any], lease_id: str) -> ClauseReview:
    return _review(_load(repo, user, lease_id))


def review_clause(
    repo: Repo,
    user: Dict[str, Any],
    lease_id: str,
    key: str,
    req: ClauseReviewRequest,
) -> ClauseReview:
    lease = _load(repo, user, lease_id)
    if lease.status == LeaseStatus.TERMINATED:
        raise ConflictError("Terminated leases cannot be reviewed")
    clause = next((c for c in lease.clauses if c.key == key), None)
    if clause is None:
        raise RecordNotFound(f"clause {key} not found")

    if req.action == "accept":
        clause.current_version = clause.suggested_version
        clause.status = ClauseStatus.APPROVED
    elif req.action == "reject":
        clause.status = ClauseStatus.REJECTED
    else:
        text = (req.current_version or "").strip()
        if not text:
            raise InvalidRequest("Clause text is required")
        clause.current_version = text
        clause.status = ClauseStatus.PENDING

    now = datetime.now(timezone.utc)
    if req.comment.strip():
        author = f"{user.get('first_name', '')} {user.get('last_name', '')}".strip() or user["email"]
        clause.comments.append(ClauseComment(author=author, text=req.comment.strip(), created_at=now))
    clause.updated_at = now
    lease.updated_at = now
    repo.save_lease(lease.model_dump(mode="json"))
    LOGGER.info("clause_reviewed lease_id=%s clause=%s action=%s", lease.id, key, req.action)
    return _review(lease)


# ---------------------------------------------------------------------------
# Export


def summary_filename(lease_id: str, today: Optional[date] = None) -> str:
    return f"lease-summary-{lease_id}-{(today or date.today()).isoformat()}.csv"


def summary_csv(review: ClauseReview, today: Optional[date] = None) -> str:
    """Render the review as a CSV report: header block, counts, then one row per clause."""

    summary = review.summary
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Lease Clause Review Summary"])
    writer.writerow(["Export Date", (today or date.today()).isoformat()])
    writer.writerow(["Lease Name", review.lease_title])
    writer.writerow(["Lease ID", review.lease_id])
    writer.writerow([])
    writer.writerow(["SUMMARY STATISTICS"])
    writer.writerow(["Total Clauses", summary.total])
    writer.writerow(["High Risk Clauses", summary.high_risk])
    writer.writerow(["Medium Risk Clauses", summary.medium_risk])
    writer.writerow(["Low Risk Clauses", summary.low_risk])
    writer.writerow(["Approved Clauses", summary.approved])
    writer.writerow(["Pending Clauses", summary.pending])
    writer.writerow(["Rejected Clauses", summary.rejected])
    writer.writerow([])
    writer.writerow(["DETAILED CLAUSE BREAKDOWN"])
    writer.writerow(CSV_COLUMNS)
    rows = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
    for clause in review.clauses:
        rows.writerow([clause.name, clause.risk, clause.status.value, clause.current_version, clause.suggested_version])
    return buffer.getvalue()


__all__ = [
    "clause_category",
    "clause_key",
    "draft_clauses",
    "list_clauses",
    "review_clause",
    "risk_band",
    "risk_label",
    "risk_score",
    "summarize",
    "summary_csv",
    "summary_filename",
]
