from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, Depends, FastAPI, File, Form, HTTPException, Response, UploadFile
from fastapi.encoders import jsonable_encoder

from .auth import current_user
from .config import api_host, api_port, expose_reset_codes
from .db.repo import Repo, get_repository
from .errors import ConflictError, InvalidRequest, LeaseDeskError, PermissionDenied, RecordNotFound
from .models.credential import CredentialCreate
from .models.dashboard import DashboardStats
from .models.lease import ClauseReview, ClauseReviewRequest, TerminateLeaseRequest
from .models.loi import LOIPayload, LOIRecord
from .models.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    ResetTokenResponse,
    TokenResponse,
    UserProfile,
    VerifyOTPRequest,
)
from .services import clause_service, credential_service, dashboard_service, lease_service, loi_service, user_service
from .services.pdf_service import PDFService
from .utils.logging import get_logger, quiet_libraries

LOGGER = get_logger("api")
quiet_libraries()

app = FastAPI(title="LeaseDesk API")
router = APIRouter(prefix="/api")
pdf_service = PDFService()

STATUS_BY_ERROR = (
    (RecordNotFound, 404),
    (PermissionDenied, 403),
    (ConflictError, 409),
    (InvalidRequest, 400),
)


@contextmanager
def domain_errors() -> Iterator[None]:
    try:
        yield
    except LeaseDeskError as exc:
        for error_type, status in STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                raise HTTPException(status_code=status, detail=str(exc)) from exc
        LOGGER.exception("unmapped_error type=%s", type(exc).__name__)
        raise HTTPException(status_code=500, detail="Internal error") from exc


# ---------------------------------------------------------------------------
# Users


@router.post("/users/register", response_model=UserProfile, status_code=201)
def register(req: RegisterRequest, repo: Repo = Depends(get_repository)):
    with domain_errors():
        return user_service.register(repo, req)


@router.post("/users/login", response_model=TokenResponse)
def login(req: LoginRequest, repo: Repo = Depends(get_repository)):
    try:
        return user_service.login(repo, req)
    except PermissionDenied as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


@router.get("/users/me", response_model=UserProfile)
def me(user: Dict[str, Any] = Depends(current_user)):
    return user_service.to_profile(user)


@router.post("/users/change_password")
def change_password(
    req: ChangePasswordRequest,
    user: Dict[str, Any] = Depends(current_user),
    repo: Repo = Depends(get_repository),
):
    with domain_errors():
        user_service.change_password(repo, user, req)
    return {"status": "ok"}


@router.post("/users/forgot_password", response_model=ForgotPasswordResponse)
def forgot_password(req: ForgotPasswordRequest, repo: Repo = Depends(get_repository)):
    code = user_service.request_password_reset(repo, req)
    # Unknown emails get the same answer.
    return ForgotPasswordResponse(otp=code if expose_reset_codes() else None)


@router.post("/users/verify_otp", response_model=ResetTokenResponse)
def verify_otp(req: VerifyOTPRequest, repo: Repo = Depends(get_repository)):
    with domain_errors():
        return user_service.verify_reset_code(repo, req)


@router.post("/users/reset_password")
def reset_password(req: ResetPasswordRequest, repo: Repo = Depends(get_repository)):
    with domain_errors():
        user_service.reset_password(repo, req)
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Dashboard


@router.get("/dashboard/", response_model=DashboardStats)
def dashboard(user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)):
    return dashboard_service.build_stats(repo, user)


@router.get("/dashboard/get_all_loi_for_lease_submittion")
def lois_for_lease(user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> List[Dict[str, Any]]:
    return loi_service.list_for_lease(repo, user)


# ---------------------------------------------------------------------------
# Letters of intent


@router.post("/loi/submit", status_code=201)
def submit_loi(
    payload: LOIPayload,
    user: Dict[str, Any] = Depends(current_user),
    repo: Repo = Depends(get_repository),
) -> Dict[str, Any]:
    with domain_errors():
        return loi_service.submit_loi(repo, user, payload)


@router.get("/loi/")
def list_lois(user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> List[Dict[str, Any]]:
    return loi_service.list_lois(repo, user)


@router.get("/loi/drafts")
def list_drafts(user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> List[Dict[str, Any]]:
    return loi_service.list_drafts(repo, user)


@router.get("/loi/{loi_id}")
def get_loi(loi_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> Dict[str, Any]:
    with domain_errors():
        return loi_service.get_loi(repo, user, loi_id)


@router.get("/loi/{loi_id}/pdf")
def export_loi(loi_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)):
    with domain_errors():
        record = LOIRecord.model_validate(loi_service.get_loi(repo, user, loi_id))
    pdf_bytes = pdf_service.render(record)
    headers = {"Content-Disposition": f'attachment; filename="loi-{loi_id}.pdf"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)


# ---------------------------------------------------------------------------
# Leases


@router.post("/lease/upload", status_code=201)
async def upload_lease(
    lease_title: str = Form(...),
    property_address: str = Form(...),
    start_date: str = Form(...),
    end_date: str = Form(...),
    notes: str = Form(""),
    loi_id: Optional[str] = Form(None),
    document: UploadFile = File(...),
    user: Dict[str, Any] = Depends(current_user),
    repo: Repo = Depends(get_repository),
) -> Dict[str, Any]:
    content = await document.read()
    with domain_errors():
        return lease_service.upload_lease(
            repo,
            user,
            lease_title=lease_title,
            property_address=property_address,
            start_date=start_date,
            end_date=end_date,
            filename=document.filename or "",
            content=content,
            content_type=document.content_type,
            notes=notes,
            loi_id=loi_id,
        )


@router.get("/lease/")
def list_leases(user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> List[Dict[str, Any]]:
    return lease_service.list_leases(repo, user)


@router.get("/lease/{lease_id}")
def get_lease(lease_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> Dict[str, Any]:
    with domain_errors():
        return lease_service.get_lease(repo, user, lease_id)


@router.post("/lease/{lease_id}/terminate")
def terminate_lease(
    lease_id: str,
    req: TerminateLeaseRequest,
    user: Dict[str, Any] = Depends(current_user),
    repo: Repo = Depends(get_repository),
) -> Dict[str, Any]:
    with domain_errors():
        return lease_service.terminate_lease(repo, user, lease_id, req)


@router.get("/lease/{lease_id}/clauses", response_model=ClauseReview)
def lease_clauses(lease_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)):
    with domain_errors():
        return clause_service.list_clauses(repo, user, lease_id)


@router.post("/lease/{lease_id}/clauses/{clause_key}/review", response_model=ClauseReview)
def review_clause(
    lease_id: str,
    clause_key: str,
    req: ClauseReviewRequest,
    user: Dict[str, Any] = Depends(current_user),
    repo: Repo = Depends(get_repository),
):
    with domain_errors():
        return clause_service.review_clause(repo, user, lease_id, clause_key, req)


@router.get("/lease/{lease_id}/clauses/summary.csv")
def clause_summary(lease_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)):
    with domain_errors():
        review = clause_service.list_clauses(repo, user, lease_id)
    headers = {"Content-Disposition": f'attachment; filename="{clause_service.summary_filename(lease_id)}"'}
    return Response(content=clause_service.summary_csv(review), media_type="text/csv", headers=headers)


# ---------------------------------------------------------------------------
# Credentials


@router.get("/credentials/")
def list_credentials(user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> List[Dict[str, Any]]:
    return credential_service.list_credentials(repo, user)


@router.post("/credentials/", status_code=201)
def create_credential(
    req: CredentialCreate,
    user: Dict[str, Any] = Depends(current_user),
    repo: Repo = Depends(get_repository),
) -> Dict[str, Any]:
    with domain_errors():
        return credential_service.create_credential(repo, user, req)


@router.post("/credentials/{credential_id}/rotate")
def rotate_credential(credential_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> Dict[str, Any]:
    with domain_errors():
        return credential_service.rotate_credential(repo, user, credential_id)


@router.post("/credentials/{credential_id}/revoke")
def revoke_credential(credential_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)) -> Dict[str, Any]:
    with domain_errors():
        return credential_service.revoke_credential(repo, user, credential_id)


@router.delete("/credentials/{credential_id}")
def remove_credential(credential_id: str, user: Dict[str, Any] = Depends(current_user), repo: Repo = Depends(get_repository)):
    with domain_errors():
        removed = credential_service.remove_credential(repo, user, credential_id)
    return jsonable_encoder({"id": removed})


@router.get("/health")
def health():
    return {"status": "ok"}


app.include_router(router)


def main() -> None:
    """Serve the API with uvicorn (``leasedesk-api`` console script)."""
    import uvicorn

    LOGGER.info("api_starting host=%s port=%s", api_host(), api_port())
    uvicorn.run("leasedesk.api:app", host=api_host(), port=api_port())


if __name__ == "__main__":
    main()
