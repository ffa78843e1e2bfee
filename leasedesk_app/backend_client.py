"""HTTP client the Streamlit app uses to talk to the LeaseDesk API."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional, Union

import requests
from requests import Response

from leasedesk.errors import ApiError, RequestCancelled
from leasedesk.models.loi import LOIPayload
from leasedesk.utils.logging import get_logger

LOGGER = get_logger("app.client")

DEFAULT_BASE_URL = "http://localhost:8000/api"


class BackendClient:
    """Thin wrapper over a ``requests`` session.

    Every call is keyed ``METHOD-url``. Starting a call with a key that is
    already in flight supersedes the older call: when the older one returns,
    its response is dropped and :class:`RequestCancelled` is raised instead.
    Non-2xx responses and transport failures raise :class:`ApiError`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10,
        token_getter: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_getter = token_getter or (lambda: None)
        self.on_unauthorized = on_unauthorized
        self.session = session or requests.Session()
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Transport
    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_getter()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _begin(self, key: str) -> int:
        with self._lock:
            generation = self._generations.get(key, 0) + 1
            self._generations[key] = generation
            return generation

    def _superseded(self, key: str, generation: int) -> bool:
        with self._lock:
            return self._generations.get(key) != generation

    def cancel(self, key: Optional[str] = None) -> None:
        """Mark the in-flight call for ``key`` (or every call) as superseded."""
        with self._lock:
            keys = [key] if key else list(self._generations)
            for k in keys:
                self._generations[k] = self._generations.get(k, 0) + 1

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        url = self.url(path)
        key = f"{method.upper()}-{url}"
        generation = self._begin(key)
        try:
            resp = self.session.request(
                method.upper(),
                url,
                json=json,
                data=data,
                files=files,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            if self._superseded(key, generation):
                raise RequestCancelled(key) from exc
            LOGGER.warning("request_failed key=%s error=%s", key, type(exc).__name__)
            raise ApiError("Unable to reach the server. Check your connection and try again.") from exc

        if self._superseded(key, generation):
            LOGGER.debug("request_superseded key=%s", key)
            raise RequestCancelled(key)
        self._raise_for_status(resp)
        if raw:
            return resp.content
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            LOGGER.warning("response_not_json key=%s status=%s", key, resp.status_code)
            raise ApiError("Unexpected response from server", resp.status_code) from exc

    def _raise_for_status(self, response: Response) -> None:
        if response.ok:
            return
        message = self._error_message(response)
        LOGGER.info("request_rejected status=%s url=%s", response.status_code, response.url)
        if response.status_code == 401 and self.on_unauthorized is not None:
            self.on_unauthorized()
        raise ApiError(message, response.status_code)

    @staticmethod
    def _error_message(response: Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or "Request failed"
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list):
            # FastAPI validation errors
            return "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or "Invalid request"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.reason or "Request failed"

    def get(self, path: str, **kwargs: Any) -> Any:
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self._request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self._request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self._request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self._request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------
    # Users
    def health(self) -> bool:
        try:
            return (self.get("/health") or {}).get("status") == "ok"
        except ApiError:
            return False

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.post("/users/login", json={"email": email, "password": password})

    def register(self, form: Dict[str, Any]) -> Dict[str, Any]:
        body = {k: form[k] for k in ("first_name", "last_name", "email", "password", "role") if k in form}
        return self.post("/users/register", json=body)

    def me(self) -> Dict[str, Any]:
        return self.get("/users/me")

    def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return self.post(
            "/users/change_password",
            json={"current_password": current_password, "new_password": new_password},
        )

    def forgot_password(self, email: str) -> Dict[str, Any]:
        return self.post("/users/forgot_password", json={"email": email})

    def verify_otp(self, email: str, otp: str) -> Dict[str, Any]:
        return self.post("/users/verify_otp", json={"email": email, "otp": otp})

    def reset_password(self, reset_token: str, new_password: str) -> Dict[str, Any]:
        return self.post("/users/reset_password", json={"reset_token": reset_token, "new_password": new_password})

    # ------------------------------------------------------------------
    # Dashboard and LOIs
    def dashboard(self) -> Dict[str, Any]:
        return self.get("/dashboard/")

    def lois_for_lease(self) -> List[Dict[str, Any]]:
        return self.get("/dashboard/get_all_loi_for_lease_submittion")

    def submit_loi(self, payload: Union[LOIPayload, Dict[str, Any]]) -> Dict[str, Any]:
        body = payload.wire() if isinstance(payload, LOIPayload) else payload
        return self.post("/loi/submit", json=body)

    def list_lois(self) -> List[Dict[str, Any]]:
        return self.get("/loi/")

    def list_drafts(self) -> List[Dict[str, Any]]:
        return self.get("/loi/drafts")

    def get_loi(self, loi_id: str) -> Dict[str, Any]:
        return self.get(f"/loi/{loi_id}")

    def loi_pdf(self, loi_id: str) -> bytes:
        return self.get(f"/loi/{loi_id}/pdf", raw=True)

    # ------------------------------------------------------------------
    # Leases
    def upload_lease(
        self,
        form: Dict[str, Any],
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        data = {k: v for k, v in form.items() if v not in (None, "")}
        files = {"document": (filename, content, content_type or "application/octet-stream")}
        return self.post("/lease/upload", data=data, files=files)

    def list_leases(self) -> List[Dict[str, Any]]:
        return self.get("/lease/")

    def get_lease(self, lease_id: str) -> Dict[str, Any]:
        return self.get(f"/lease/{lease_id}")

    def terminate_lease(self, lease_id: str, reason: str, effective_date: str) -> Dict[str, Any]:
        return self.post(f"/lease/{lease_id}/terminate", json={"reason": reason, "effective_date": effective_date})

    def lease_clauses(self, lease_id: str) -> Dict[str, Any]:
        return self.get(f"/lease/{lease_id}/clauses")

    def review_clause(
        self,
        lease_id: str,
        clause_key: str,
        action: str,
        current_version: Optional[str] = None,
        comment: str = "",
    ) -> Dict[str, Any]:
        body = {"action": action, "current_version": current_version, "comment": comment}
        return self.post(f"/lease/{lease_id}/clauses/{clause_key}/review", json=body)

    # ------------------------------------------------------------------
    # Credentials
    def list_credentials(self) -> List[Dict[str, Any]]:
        return self.get("/credentials/")

    def create_credential(self, form: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("/credentials/", json=form)

    def rotate_credential(self, credential_id: str) -> Dict[str, Any]:
        return self.post(f"/credentials/{credential_id}/rotate")

    def revoke_credential(self, credential_id: str) -> Dict[str, Any]:
        return self.post(f"/credentials/{credential_id}/revoke")

    def remove_credential(self, credential_id: str) -> str:
        self.delete(f"/credentials/{credential_id}")
        return credential_id
