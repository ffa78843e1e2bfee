"""Per-session application state: one slice per API area, grouped in ``AppState``.

A slice runs a client call and records the lifecycle of that call:

* pending   -> ``is_loading=True`` and the previous error is cleared
* fulfilled -> the payload is reduced into the slice, ``is_loading=False``
* rejected  -> the error message is kept, ``is_loading=False``

Results are plain values (:class:`Fulfilled` / :class:`Rejected`) so callers
branch on type instead of catching exceptions. There are no optimistic
updates and no retries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import ApiError, RequestCancelled
from .services.clause_service import risk_band
from .utils.coerce import count
from .utils.logging import get_logger

LOGGER = get_logger("state")


@dataclass(frozen=True)
class Pending:
    action: Enum


@dataclass(frozen=True)
class Fulfilled:
    action: Enum
    payload: Any = None


@dataclass(frozen=True)
class Rejected:
    action: Enum
    message: str
    status: Optional[int] = None
    cancelled: bool = False


Result = Union[Fulfilled, Rejected]


class Slice:
    """Base slice: subclasses set ``Action`` and implement :meth:`reduce`."""

    Action: type = Enum

    def __init__(self) -> None:
        self.is_loading = False
        self.error: Optional[str] = None
        self.last_action: Optional[Enum] = None

    def apply(self, result: Union[Pending, Fulfilled, Rejected]) -> None:
        self.last_action = result.action
        if isinstance(result, Pending):
            self.is_loading = True
            self.error = None
        elif isinstance(result, Fulfilled):
            self.reduce(result.action, result.payload)
            self.is_loading = False
            self.error = None
        else:
            self.is_loading = False
            self.error = result.message

    def run(self, action: Enum, call: Callable[..., Any], *args: Any, **kwargs: Any) -> Result:
        self.apply(Pending(action))
        try:
            payload = call(*args, **kwargs)
        except RequestCancelled as exc:
            # A newer request owns the slice now; only drop the loading flag.
            LOGGER.debug("action_cancelled action=%s key=%s", action.name, exc.key)
            self.is_loading = False
            return Rejected(action, exc.message, exc.status, cancelled=True)
        except ApiError as exc:
            LOGGER.info("action_rejected action=%s status=%s", action.name, exc.status)
            result: Result = Rejected(action, exc.message, exc.status)
        else:
            result = Fulfilled(action, payload)
        self.apply(result)
        return result

    def reduce(self, action: Enum, payload: Any) -> None:
        raise NotImplementedError


def _replace_by_id(items: List[Dict[str, Any]], updated: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [updated if item.get("id") == updated.get("id") else item for item in items]


class UserSlice(Slice):
    class Action(Enum):
        LOGIN = "login"
        REGISTER = "register"
        PROFILE = "profile"
        CHANGE_PASSWORD = "change_password"
        FORGOT_PASSWORD = "forgot_password"
        VERIFY_OTP = "verify_otp"
        RESET_PASSWORD = "reset_password"

    def __init__(self) -> None:
        super().__init__()
        self.token: Optional[str] = None
        self.profile: Optional[Dict[str, Any]] = None
        self.password_changed = False
        self.cancel_reset()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def reduce(self, action: Enum, payload: Any) -> None:
        if action is self.Action.LOGIN:
            self.token = payload.get("access_token")
            self.profile = payload.get("profile")
        elif action in (self.Action.REGISTER, self.Action.PROFILE):
            self.profile = payload
        elif action is self.Action.CHANGE_PASSWORD:
            self.password_changed = True
        elif action is self.Action.FORGOT_PASSWORD:
            self.reset_requested = True
            self.reset_code_hint = (payload or {}).get("otp")
        elif action is self.Action.VERIFY_OTP:
            self.reset_token = payload.get("reset_token")
            self.reset_code_hint = None
        elif action is self.Action.RESET_PASSWORD:
            self.reset_token = None
            self.password_reset = True

    @property
    def reset_stage(self) -> str:
        """Where the forgot-password flow stands: email, otp, password or done."""
        if self.password_reset:
            return "done"
        if self.reset_token:
            return "password"
        if self.reset_requested:
            return "otp"
        return "email"

    def cancel_reset(self) -> None:
        self.reset_email: Optional[str] = None
        self.reset_requested = False
        self.reset_code_hint: Optional[str] = None
        self.reset_token: Optional[str] = None
        self.password_reset = False

    def logout(self) -> None:
        self.token = None
        self.profile = None
        self.error = None
        self.password_changed = False
        self.cancel_reset()


class LOISlice(Slice):
    class Action(Enum):
        SUBMIT = "submit"
        LIST = "list"
        DRAFTS = "drafts"
        GET = "get"
        FOR_LEASE = "for_lease"

    def __init__(self) -> None:
        super().__init__()
        self.items: List[Dict[str, Any]] = []
        self.drafts: List[Dict[str, Any]] = []
        self.for_lease: List[Dict[str, Any]] = []
        self.current: Optional[Dict[str, Any]] = None
        self.last_submitted: Optional[Dict[str, Any]] = None

    def reduce(self, action: Enum, payload: Any) -> None:
        if action is self.Action.SUBMIT:
            self.last_submitted = payload
        elif action is self.Action.LIST:
            self.items = list(payload or [])
        elif action is self.Action.DRAFTS:
            self.drafts = list(payload or [])
        elif action is self.Action.GET:
            self.current = payload
        elif action is self.Action.FOR_LEASE:
            self.for_lease = list(payload or [])


class LeaseSlice(Slice):
    class Action(Enum):
        UPLOAD = "upload"
        LIST = "list"
        GET = "get"
        TERMINATE = "terminate"
        CLAUSES = "clauses"
        REVIEW_CLAUSE = "review_clause"

    def __init__(self) -> None:
        super().__init__()
        self.items: List[Dict[str, Any]] = []
        self.current: Optional[Dict[str, Any]] = None
        self.last_uploaded: Optional[Dict[str, Any]] = None
        self.review: Optional[Dict[str, Any]] = None

    def reduce(self, action: Enum, payload: Any) -> None:
        if action is self.Action.UPLOAD:
            self.last_uploaded = payload
        elif action is self.Action.LIST:
            self.items = list(payload or [])
        elif action is self.Action.GET:
            self.current = payload
        elif action is self.Action.TERMINATE:
            self.current = payload
            self.items = _replace_by_id(self.items, payload)
        elif action in (self.Action.CLAUSES, self.Action.REVIEW_CLAUSE):
            self.review = payload

    def clauses(self, category: Optional[str] = None, band: Optional[str] = None) -> List[Dict[str, Any]]:
        """Clauses of the loaded review, optionally narrowed to a category or risk band."""
        rows = list((self.review or {}).get("clauses") or [])
        if category:
            rows = [row for row in rows if row.get("category") == category]
        if band:
            rows = [row for row in rows if risk_band(row.get("risk")) == band]
        return rows


class DashboardSlice(Slice):
    class Action(Enum):
        STATS = "stats"

    def __init__(self) -> None:
        super().__init__()
        self.loi_total = 0
        self.lease_total = 0
        self.credentials_total = 0
        self.credentials_valid = 0
        self.loi_by_status: Dict[str, int] = {}
        self.lease_by_status: Dict[str, int] = {}
        self.recent_lois: List[Dict[str, Any]] = []

    def reduce(self, action: Enum, payload: Any) -> None:
        payload = payload or {}
        self.loi_total = count(payload.get("loi_total"))
        self.lease_total = count(payload.get("lease_total"))
        self.credentials_total = count(payload.get("credentials_total"))
        self.credentials_valid = count(payload.get("credentials_valid"))
        self.loi_by_status = {k: count(v) for k, v in (payload.get("loi_by_status") or {}).items()}
        self.lease_by_status = {k: count(v) for k, v in (payload.get("lease_by_status") or {}).items()}
        self.recent_lois = list(payload.get("recent_lois") or [])


class CredentialSlice(Slice):
    class Action(Enum):
        LIST = "list"
        CREATE = "create"
        ROTATE = "rotate"
        REVOKE = "revoke"
        REMOVE = "remove"

    def __init__(self) -> None:
        super().__init__()
        self.items: List[Dict[str, Any]] = []
        # Plain-text key returned once by a rotation; the view shows it and clears it.
        self.revealed_key: Optional[str] = None

    def reduce(self, action: Enum, payload: Any) -> None:
        if action is self.Action.LIST:
            self.items = list(payload or [])
        elif action is self.Action.CREATE:
            self.items = [payload] + self.items
        elif action is self.Action.ROTATE:
            self.revealed_key = payload.get("api_key")
            self.items = _replace_by_id(self.items, payload["credential"])
        elif action is self.Action.REVOKE:
            self.items = _replace_by_id(self.items, payload)
        elif action is self.Action.REMOVE:
            self.items = [item for item in self.items if item.get("id") != payload]


@dataclass
class AppState:
    user: UserSlice = field(default_factory=UserSlice)
    loi: LOISlice = field(default_factory=LOISlice)
    lease: LeaseSlice = field(default_factory=LeaseSlice)
    dashboard: DashboardSlice = field(default_factory=DashboardSlice)
    credentials: CredentialSlice = field(default_factory=CredentialSlice)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def reset(self) -> None:
        self.user = UserSlice()
        self.loi = LOISlice()
        self.lease = LeaseSlice()
        self.dashboard = DashboardSlice()
        self.credentials = CredentialSlice()


__all__ = [
    "Pending",
    "Fulfilled",
    "Rejected",
    "Result",
    "Slice",
    "UserSlice",
    "LOISlice",
    "LeaseSlice",
    "DashboardSlice",
    "CredentialSlice",
    "AppState",
]
