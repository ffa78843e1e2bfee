from datetime import date

from fastapi.testclient import TestClient

from leasedesk.api import app

client = TestClient(app)

LOI_BODY = {
    "doc_id": None,
    "title": "Suite 400 LOI",
    "propertyAddress": "400 Market St",
    "partyInfo": {
        "landlord_name": "Lana Lord",
        "landlord_email": "lana@example.com",
        "tenant_name": "Tom Tenant",
        "tenant_email": "tom@example.com",
    },
    "leaseTerms": {
        "monthlyRent": "5200",
        "securityDeposit": "10400",
        "leaseType": "Office",
        "leaseDuration": "3 years",
        "startDate": "2025-03-01",
    },
    "propertyDetails": {
        "propertySize": "2400",
        "intendedUse": "Office",
        "propertyType": "Office",
        "amenities": ["4 Parking Spaces"],
        "utilities": ["Electricity", "HVAC"],
    },
    "additionalDetails": {
        "renewalOption": True,
        "tenantImprovement": "$20/sf",
        "specialConditions": "Signage rights",
        "contingencies": "Financing Approval",
    },
    "submit_status": "Submitted",
}


def auth_headers(email="tenant@example.com", password="correct-horse"):
    client.post(
        "/api/users/register",
        json={"first_name": "Tina", "last_name": "Tenant", "email": email, "password": password, "role": "tenant"},
    )
    resp = client.post("/api/users/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def submit(headers, **overrides):
    resp = client.post("/api/loi/submit", json={**LOI_BODY, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def upload(headers, filename="lease.pdf", **fields):
    data = {
        "lease_title": "Suite 400 Lease",
        "property_address": "400 Market St",
        "start_date": "2025-03-01",
        "end_date": "2028-02-29",
        **fields,
    }
    files = {"document": (filename, b"%PDF-1.4 lease", "application/pdf")}
    return client.post("/api/lease/upload", data=data, files=files, headers=headers)


def test_health_endpoint():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_register_login_and_profile():
    resp = client.post(
        "/api/users/register",
        json={"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com", "password": "correct-horse"},
    )
    assert resp.status_code == 201
    assert "password_hash" not in resp.json()

    duplicate = client.post(
        "/api/users/register",
        json={"first_name": "Ada", "last_name": "L", "email": "ada@example.com", "password": "correct-horse"},
    )
    assert duplicate.status_code == 409

    bad = client.post("/api/users/login", json={"email": "ada@example.com", "password": "wrong-password"})
    assert bad.status_code == 401

    login = client.post("/api/users/login", json={"email": "ada@example.com", "password": "correct-horse"})
    assert login.status_code == 200
    token = login.json()["access_token"]
    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"


def test_protected_routes_need_a_token():
    assert client.get("/api/loi/").status_code == 401
    assert client.get("/api/loi/", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_change_password():
    headers = auth_headers()
    wrong = client.post(
        "/api/users/change_password",
        json={"current_password": "nope-nope", "new_password": "another-horse"},
        headers=headers,
    )
    assert wrong.status_code == 403
    resp = client.post(
        "/api/users/change_password",
        json={"current_password": "correct-horse", "new_password": "another-horse"},
        headers=headers,
    )
    assert resp.status_code == 200
    login = client.post("/api/users/login", json={"email": "tenant@example.com", "password": "another-horse"})
    assert login.status_code == 200


def test_draft_then_submit_updates_same_record():
    headers = auth_headers()
    draft = submit(headers, submit_status="Draft")
    assert draft["doc_id"] == draft["id"]
    assert [row["id"] for row in client.get("/api/loi/drafts", headers=headers).json()] == [draft["id"]]
    assert client.get("/api/dashboard/get_all_loi_for_lease_submittion", headers=headers).json() == []

    final = submit(headers, doc_id=draft["id"], title="Suite 400 LOI (final)")
    assert final["id"] == draft["id"]
    assert final["submit_status"] == "Submitted"
    assert final["created_at"] == draft["created_at"]

    listed = client.get("/api/loi/", headers=headers).json()
    assert len(listed) == 1
    assert listed[0]["title"] == "Suite 400 LOI (final)"
    assert client.get("/api/loi/drafts", headers=headers).json() == []
    assert len(client.get("/api/dashboard/get_all_loi_for_lease_submittion", headers=headers).json()) == 1

    fetched = client.get(f"/api/loi/{draft['id']}", headers=headers).json()
    assert fetched["leaseTerms"]["startDate"] == "2025-03-01"
    assert fetched["propertyDetails"]["utilities"] == ["Electricity", "HVAC"]


def test_loi_access_rules():
    owner = auth_headers()
    other = auth_headers(email="someone@example.com")
    record = submit(owner)
    assert client.get(f"/api/loi/{record['id']}", headers=other).status_code == 403
    assert client.get("/api/loi/missing", headers=owner).status_code == 404
    assert client.post("/api/loi/submit", json={**LOI_BODY, "doc_id": record["id"]}, headers=other).status_code == 403

    incomplete = {k: v for k, v in LOI_BODY.items() if k != "leaseTerms"}
    assert client.post("/api/loi/submit", json=incomplete, headers=owner).status_code == 422


def test_sent_loi_is_locked():
    headers = auth_headers()
    record = submit(headers, submit_status="Sent")
    resp = client.post("/api/loi/submit", json={**LOI_BODY, "doc_id": record["id"]}, headers=headers)
    assert resp.status_code == 409


def test_loi_pdf_export():
    headers = auth_headers()
    record = submit(headers)
    resp = client.get(f"/api/loi/{record['id']}/pdf", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


def test_lease_upload_and_termination():
    headers = auth_headers()
    loi = submit(headers)
    resp = upload(headers, loi_id=loi["id"], notes="Signed copy")
    assert resp.status_code == 201, resp.text
    lease = resp.json()
    assert lease["status"] == "In Review"
    assert lease["loi_id"] == loi["id"]
    assert lease["document"]["filename"] == "lease.pdf"
    assert lease["document"]["size"] == len(b"%PDF-1.4 lease")

    assert [row["id"] for row in client.get("/api/lease/", headers=headers).json()] == [lease["id"]]

    body = {"reason": "Tenant relocating", "effective_date": "2026-01-31"}
    terminated = client.post(f"/api/lease/{lease['id']}/terminate", json=body, headers=headers)
    assert terminated.status_code == 200
    assert terminated.json()["status"] == "Terminated"
    assert terminated.json()["termination"]["reason"] == "Tenant relocating"

    again = client.post(f"/api/lease/{lease['id']}/terminate", json=body, headers=headers)
    assert again.status_code == 409


def test_lease_upload_rules():
    headers = auth_headers()
    assert upload(headers, filename="lease.png").status_code == 400
    assert upload(headers, end_date="2024-01-01").status_code == 400

    draft = submit(headers, submit_status="Draft")
    assert upload(headers, loi_id=draft["id"]).status_code == 409
    assert upload(headers, loi_id="missing").status_code == 404


def test_credentials_lifecycle():
    headers = auth_headers()
    resp = client.post(
        "/api/credentials/",
        json={"exchange": "binance", "label": "Trading", "api_key": "abcd-efgh-1234"},
        headers=headers,
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["api_key_masked"] == "****1234"
    assert "api_key" not in created
    assert created["status"] == "active"

    duplicate = client.post(
        "/api/credentials/",
        json={"exchange": "binance", "label": "Again", "api_key": "abcd-efgh-1234"},
        headers=headers,
    )
    assert duplicate.status_code == 409

    rotated = client.post(f"/api/credentials/{created['id']}/rotate", headers=headers).json()
    assert rotated["credential"]["api_key_masked"] == f"****{rotated['api_key'][-4:]}"
    assert rotated["credential"]["rotated_at"] is not None

    revoked = client.post(f"/api/credentials/{created['id']}/revoke", headers=headers)
    assert revoked.json()["status"] == "revoked"
    assert client.post(f"/api/credentials/{created['id']}/revoke", headers=headers).status_code == 409
    assert client.post(f"/api/credentials/{created['id']}/rotate", headers=headers).status_code == 409

    removed = client.delete(f"/api/credentials/{created['id']}", headers=headers)
    assert removed.json() == {"id": created["id"]}
    assert client.get("/api/credentials/", headers=headers).json() == []
    assert client.delete(f"/api/credentials/{created['id']}", headers=headers).status_code == 404


def test_dashboard_counts():
    headers = auth_headers()
    submit(headers, submit_status="Draft")
    submit(headers)
    upload(headers)
    client.post(
        "/api/credentials/",
        json={"exchange": "bybit", "label": "Main", "api_key": "zzzz-yyyy-9999"},
        headers=headers,
    )
    stats = client.get("/api/dashboard/", headers=headers).json()
    assert stats["loi_total"] == 2
    assert stats["loi_by_status"] == {"Draft": 1, "Submitted": 1}
    assert stats["lease_total"] == 1
    assert stats["lease_by_status"] == {"In Review": 1}
    assert stats["credentials_total"] == 1
    assert stats["credentials_valid"] == 1
    assert len(stats["recent_lois"]) == 2


def clauses_by_key(review):
    return {clause["key"]: clause for clause in review["clauses"]}


def test_upload_without_loi_drafts_risky_gaps():
    headers = auth_headers()
    lease = upload(headers).json()
    resp = client.get(f"/api/lease/{lease['id']}/clauses", headers=headers)
    assert resp.status_code == 200
    review = resp.json()
    assert review["lease_title"] == "Suite 400 Lease"
    assert review["lease_status"] == "In Review"

    clauses = clauses_by_key(review)
    assert list(clauses) == [
        "lease-duration",
        "property-address",
        "monthly-rent",
        "security-deposit",
        "renewal-option",
        "legal-compliance",
    ]
    assert clauses["monthly-rent"]["risk"] == "High (8/10)"
    assert clauses["monthly-rent"]["current_version"] == ""
    assert clauses["property-address"]["current_version"] == "400 Market St"
    assert all(clause["status"] == "pending" for clause in clauses.values())
    assert review["summary"] == {
        "total": 6,
        "high_risk": 1,
        "medium_risk": 3,
        "low_risk": 2,
        "approved": 0,
        "pending": 6,
        "rejected": 0,
    }


def test_linked_loi_fills_financial_terms():
    headers = auth_headers()
    loi = submit(headers)
    lease = upload(headers, loi_id=loi["id"]).json()
    assert len(lease["clauses"]) == 8

    clauses = clauses_by_key(client.get(f"/api/lease/{lease['id']}/clauses", headers=headers).json())
    assert clauses["monthly-rent"]["clause_details"] == "5200"
    assert clauses["monthly-rent"]["risk"] == "Low (2/10)"
    assert clauses["security-deposit"]["risk"] == "Low (3/10)"
    assert clauses["lease-type"]["current_version"] == "Office"
    assert clauses["special-conditions"]["category"] == "Terms & Conditions"
    assert clauses["special-conditions"]["risk"] == "Medium (5/10)"


def test_large_deposit_is_high_risk():
    headers = auth_headers()
    loi = submit(headers, leaseTerms={**LOI_BODY["leaseTerms"], "securityDeposit": "$20,000"})
    lease = upload(headers, loi_id=loi["id"]).json()
    clauses = clauses_by_key(client.get(f"/api/lease/{lease['id']}/clauses", headers=headers).json())
    assert clauses["security-deposit"]["risk"] == "High (7/10)"


def test_accept_reject_and_edit():
    headers = auth_headers()
    lease = upload(headers).json()
    base = f"/api/lease/{lease['id']}/clauses"

    resp = client.post(f"{base}/monthly-rent/review", json={"action": "accept"}, headers=headers)
    assert resp.status_code == 200
    rent = clauses_by_key(resp.json())["monthly-rent"]
    assert rent["status"] == "approved"
    assert rent["current_version"] == rent["suggested_version"]
    assert rent["clause_details"] == ""

    resp = client.post(f"{base}/renewal-option/review", json={"action": "reject"}, headers=headers)
    assert clauses_by_key(resp.json())["renewal-option"]["status"] == "rejected"

    edit = {"action": "edit", "current_version": "Deposit equals two months rent.", "comment": "Agreed on call"}
    resp = client.post(f"{base}/security-deposit/review", json=edit, headers=headers)
    deposit = clauses_by_key(resp.json())["security-deposit"]
    assert deposit["status"] == "pending"
    assert deposit["current_version"] == "Deposit equals two months rent."
    assert [c["text"] for c in deposit["comments"]] == ["Agreed on call"]
    assert deposit["comments"][0]["author"] == "Tina Tenant"

    summary = client.get(base, headers=headers).json()["summary"]
    assert (summary["approved"], summary["rejected"], summary["pending"]) == (1, 1, 4)


def test_review_errors():
    headers = auth_headers()
    lease = upload(headers).json()
    base = f"/api/lease/{lease['id']}/clauses"

    assert client.post(f"{base}/no-such-clause/review", json={"action": "accept"}, headers=headers).status_code == 404
    blank = client.post(f"{base}/monthly-rent/review", json={"action": "edit", "current_version": "  "}, headers=headers)
    assert blank.status_code == 400
    assert client.post(f"{base}/monthly-rent/review", json={"action": "approve"}, headers=headers).status_code == 422

    other = auth_headers(email="other@example.com")
    assert client.get(base, headers=other).status_code == 403
    assert client.get("/api/lease/missing/clauses", headers=headers).status_code == 404
    assert client.get(base).status_code == 401


def test_terminated_lease_is_read_only():
    headers = auth_headers()
    lease = upload(headers).json()
    client.post(
        f"/api/lease/{lease['id']}/terminate",
        json={"reason": "Relocating", "effective_date": "2026-01-31"},
        headers=headers,
    )
    base = f"/api/lease/{lease['id']}/clauses"
    assert client.get(base, headers=headers).json()["lease_status"] == "Terminated"
    assert client.post(f"{base}/monthly-rent/review", json={"action": "accept"}, headers=headers).status_code == 409


def test_summary_csv_export():
    headers = auth_headers()
    lease = upload(headers).json()
    client.post(f"/api/lease/{lease['id']}/clauses/renewal-option/review", json={"action": "reject"}, headers=headers)

    resp = client.get(f"/api/lease/{lease['id']}/clauses/summary.csv", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    filename = f"lease-summary-{lease['id']}-{date.today().isoformat()}.csv"
    assert filename in resp.headers["content-disposition"]

    lines = resp.text.splitlines()
    assert lines[0] == "Lease Clause Review Summary"
    assert lines[2] == "Lease Name,Suite 400 Lease"
    assert lines[3] == f"Lease ID,{lease['id']}"
    assert "SUMMARY STATISTICS" in lines
    assert "Total Clauses,6" in lines
    assert "High Risk Clauses,1" in lines
    assert "Rejected Clauses,1" in lines
    header = lines.index("DETAILED CLAUSE BREAKDOWN") + 1
    assert lines[header] == "Clause Name,Risk Level,Status,Current Version,Suggested Version"
    assert lines[header + 3] == '"Monthly Rent","High (8/10)","pending","","State the monthly rent and the day it falls due."'
    assert len(lines) == header + 7


def request_code(monkeypatch, email="tenant@example.com"):
    monkeypatch.setenv("EXPOSE_RESET_CODES", "1")
    resp = client.post("/api/users/forgot_password", json={"email": email})
    assert resp.status_code == 200
    return resp.json()["otp"]


def test_forgot_password_flow(monkeypatch):
    auth_headers()
    code = request_code(monkeypatch)
    assert len(code) == 6 and code.isdigit()

    wrong = "000000" if code != "000000" else "111111"
    bad = client.post("/api/users/verify_otp", json={"email": "tenant@example.com", "otp": wrong})
    assert bad.status_code == 400
    assert bad.json()["detail"] == "Invalid or expired code"

    resp = client.post("/api/users/verify_otp", json={"email": "tenant@example.com", "otp": code})
    assert resp.status_code == 200
    token = resp.json()["reset_token"]
    # The code is single use.
    again = client.post("/api/users/verify_otp", json={"email": "tenant@example.com", "otp": code})
    assert again.status_code == 400

    # A reset token is not an access token.
    assert client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401

    short = client.post("/api/users/reset_password", json={"reset_token": token, "new_password": "short"})
    assert short.status_code == 422
    resp = client.post("/api/users/reset_password", json={"reset_token": token, "new_password": "brand-new-pass"})
    assert resp.status_code == 200

    old = client.post("/api/users/login", json={"email": "tenant@example.com", "password": "correct-horse"})
    assert old.status_code == 401
    new = client.post("/api/users/login", json={"email": "tenant@example.com", "password": "brand-new-pass"})
    assert new.status_code == 200

    reused = client.post("/api/users/reset_password", json={"reset_token": token, "new_password": "another-pass-1"})
    assert reused.status_code == 400


def test_forgot_password_does_not_reveal_accounts(monkeypatch):
    monkeypatch.delenv("EXPOSE_RESET_CODES", raising=False)
    auth_headers()
    known = client.post("/api/users/forgot_password", json={"email": "tenant@example.com"})
    unknown = client.post("/api/users/forgot_password", json={"email": "nobody@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json() == {"status": "ok", "otp": None}

    resp = client.post("/api/users/verify_otp", json={"email": "nobody@example.com", "otp": "123456"})
    assert resp.status_code == 400


def test_reset_code_locks_after_repeated_failures(monkeypatch):
    auth_headers()
    code = request_code(monkeypatch)
    wrong = "000000" if code != "000000" else "111111"
    for _ in range(5):
        resp = client.post("/api/users/verify_otp", json={"email": "tenant@example.com", "otp": wrong})
        assert resp.status_code == 400
    resp = client.post("/api/users/verify_otp", json={"email": "tenant@example.com", "otp": code})
    assert resp.status_code == 400

    code = request_code(monkeypatch)
    resp = client.post("/api/users/verify_otp", json={"email": "tenant@example.com", "otp": code})
    assert resp.status_code == 200


def test_reset_rejects_forged_tokens():
    auth_headers()
    resp = client.post("/api/users/reset_password", json={"reset_token": "not-a-jwt", "new_password": "brand-new-pass"})
    assert resp.status_code == 400
    login = client.post("/api/users/login", json={"email": "tenant@example.com", "password": "correct-horse"})
    access = login.json()["access_token"]
    resp = client.post("/api/users/reset_password", json={"reset_token": access, "new_password": "brand-new-pass"})
    assert resp.status_code == 400
