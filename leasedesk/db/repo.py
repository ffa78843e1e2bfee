"""Record store for users, LOIs, leases and credentials (in memory or a JSON file)."""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, List, Optional

from ..config import db_mode
from ..errors import ConflictError, RecordNotFound
from ..utils.io import load_json, save_json
from ..utils.logging import get_logger

LOGGER = get_logger("db.repo")

STORE_FILE = "leasedesk.json"
COLLECTIONS = ("users", "lois", "leases", "credentials")


class Repo:
    """Dict-of-dicts store keyed by record id.

    Records go in and come out as JSON-ready dicts; callers get deep copies so
    nothing outside the lock mutates stored state. In ``json`` mode every
    write rewrites ``DATA_DIR/leasedesk.json``.
    """

    def __init__(self, mode: Optional[str] = None) -> None:
        self.mode = mode or db_mode()
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        if self.mode == "json":
            stored = load_json(STORE_FILE) or {}
            for name in COLLECTIONS:
                self._data[name] = dict(stored.get(name) or {})
            LOGGER.info("Repository running in JSON mode users=%d lois=%d", len(self._data["users"]), len(self._data["lois"]))
        else:
            LOGGER.info("Repository running in memory mode")

    # ------------------------------------------------------------------
    # Generic helpers
    def _persist(self) -> None:
        if self.mode == "json":
            save_json(STORE_FILE, self._data)

    def _get(self, collection: str, record_id: str) -> Dict[str, Any]:
        with self._lock:
            record = self._data[collection].get(record_id)
            if record is None:
                raise RecordNotFound(f"{collection[:-1]} {record_id} not found")
            return copy.deepcopy(record)

    def _put(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._data[collection][record["id"]] = copy.deepcopy(record)
            self._persist()
        return record

    def _list(self, collection: str, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [r for r in self._data[collection].values() if owner_id is None or r.get("owner_id") == owner_id]
            return copy.deepcopy(rows)

    def _delete(self, collection: str, record_id: str) -> None:
        with self._lock:
            if self._data[collection].pop(record_id, None) is None:
                raise RecordNotFound(f"{collection[:-1]} {record_id} not found")
            self._persist()

    # ------------------------------------------------------------------
    # Users
    def create_user(self, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            if self.find_user_by_email(record["email"]) is not None:
                raise ConflictError("An account with this email already exists")
            return self._put("users", record)

    def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        needle = email.strip().lower()
        with self._lock:
            for user in self._data["users"].values():
                if user["email"].lower() == needle:
                    return copy.deepcopy(user)
        return None

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self._get("users", user_id)

    def save_user(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._put("users", record)

    # ------------------------------------------------------------------
    # Letters of intent
    def list_lois(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._list("lois", owner_id)

    def get_loi(self, loi_id: str) -> Dict[str, Any]:
        return self._get("lois", loi_id)

    def save_loi(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._put("lois", record)

    # ------------------------------------------------------------------
    # Leases
    def list_leases(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._list("leases", owner_id)

    def get_lease(self, lease_id: str) -> Dict[str, Any]:
        return self._get("leases", lease_id)

    def save_lease(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._put("leases", record)

    # ------------------------------------------------------------------
    # Credentials
    def list_credentials(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._list("credentials", owner_id)

    def get_credential(self, credential_id: str) -> Dict[str, Any]:
        return self._get("credentials", credential_id)

    def save_credential(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._put("credentials", record)

    def delete_credential(self, credential_id: str) -> None:
        self._delete("credentials", credential_id)


_REPO: Optional[Repo] = None
_REPO_LOCK = threading.Lock()


def get_repository() -> Repo:
    global _REPO
    with _REPO_LOCK:
        if _REPO is None:
            _REPO = Repo()
        return _REPO


def reset_repository(mode: Optional[str] = None) -> Repo:
    """Drop the shared repository and build a fresh one."""

    global _REPO
    with _REPO_LOCK:
        _REPO = Repo(mode)
        return _REPO


__all__ = ["Repo", "get_repository", "reset_repository"]
