"""Exception types shared by the API, the HTTP client and the dashboard."""

from __future__ import annotations

from typing import Optional


class LeaseDeskError(Exception):
    """Base class for application errors."""


class RecordNotFound(LeaseDeskError):
    pass


class PermissionDenied(LeaseDeskError):
    pass


class ConflictError(LeaseDeskError):
    pass


class InvalidRequest(LeaseDeskError):
    """Input that passed schema checks but breaks a business rule."""


class ApiError(LeaseDeskError):
    """A failed API call as seen by the client: HTTP status (if any) plus a message."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.status}: {self.message}"


class RequestCancelled(ApiError):
    """Raised when a newer request with the same key superseded this one."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Request {key} cancelled due to new request")
        self.key = key
