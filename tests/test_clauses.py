from datetime import date, datetime, timezone

from leasedesk.models.lease import ClauseReview, ClauseStatus, LeaseRecord, LeaseStatus
from leasedesk.services.clause_service import (
    clause_category,
    clause_key,
    draft_clauses,
    risk_band,
    risk_label,
    risk_score,
    summarize,
    summary_csv,
    summary_filename,
)

NOW = datetime(2025, 1, 15, tzinfo=timezone.utc)


def make_lease(**overrides):
    fields = dict(
        id="lease-1",
        owner_id="u1",
        lease_title="Kiosk, Level 1",
        property_address="12 Pier Rd",
        start_date="2025-02-01",
        end_date="2025-08-01",
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(overrides)
    return LeaseRecord(**fields)


def test_risk_labels_and_bands():
    assert risk_score("Medium (5/10)") == 5
    assert risk_band("High (7/10)") == "high"
    assert risk_band("Medium (4/10)") == "medium"
    assert risk_band("Low (3/10)") == "low"
    assert risk_band("unrated") == "low"
    assert risk_band(None) == "low"
    assert risk_label(8) == "High (8/10)"
    assert risk_label(12) == "High (10/10)"


def test_clause_categories():
    assert clause_category("Monthly Rent") == "Financial Terms"
    assert clause_category("Security Deposit") == "Financial Terms"
    assert clause_category("Legal Compliance") == "Legal & Compliance"
    assert clause_category("Property Address") == "Property Details"
    assert clause_category("Lease Duration") == "Basic Information"
    assert clause_category("Renewal Option") == "Terms & Conditions"
    assert clause_key("Legal & Compliance") == "legal-compliance"


def test_short_term_is_medium_risk():
    clauses = {clause.key: clause for clause in draft_clauses(make_lease(), now=NOW)}
    assert clauses["lease-duration"].risk == "Medium (5/10)"
    assert clauses["lease-duration"].current_version == "2025-02-01 to 2025-08-01"
    assert clauses["lease-duration"].created_at == NOW
    assert "special-conditions" not in clauses

    long_term = {c.key: c for c in draft_clauses(make_lease(end_date="2027-02-01"), now=NOW)}
    assert long_term["lease-duration"].risk == "Low (2/10)"


def test_summary_counts_bands_and_statuses():
    clauses = draft_clauses(make_lease(), now=NOW)
    clauses[0].status = ClauseStatus.APPROVED
    clauses[1].status = ClauseStatus.REJECTED
    summary = summarize(clauses)
    assert summary.total == 6
    assert summary.high_risk + summary.medium_risk + summary.low_risk == 6
    assert (summary.approved, summary.rejected, summary.pending) == (1, 1, 4)
    assert summarize([]).total == 0


def test_summary_csv_quotes_clause_rows():
    lease = make_lease()
    clauses = draft_clauses(lease, now=NOW)
    clauses[1].current_version = 'Unit "B", 12 Pier Rd'
    review = ClauseReview(
        lease_id=lease.id,
        lease_title=lease.lease_title,
        lease_status=LeaseStatus.IN_REVIEW,
        clauses=clauses,
        summary=summarize(clauses),
    )
    text = summary_csv(review, today=date(2025, 3, 9))
    lines = text.splitlines()
    assert lines[:4] == [
        "Lease Clause Review Summary",
        "Export Date,2025-03-09",
        'Lease Name,"Kiosk, Level 1"',
        "Lease ID,lease-1",
    ]
    assert lines[4] == ""
    assert '"Property Address","Low (1/10)","pending","Unit ""B"", 12 Pier Rd",' in text
    assert summary_filename("lease-1", date(2025, 3, 9)) == "lease-summary-lease-1-2025-03-09.csv"
