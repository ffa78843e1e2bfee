"""Aggregates behind the dashboard home page."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..db.repo import Repo
from ..models.dashboard import DashboardStats, RecentLOI
from ..utils.logging import get_logger
from .listing import stale_credentials
from .loi_service import list_lois

LOGGER = get_logger("services.dashboard")

RECENT_LIMIT = 5


def build_stats(repo: Repo, user: Dict[str, Any], now: Optional[datetime] = None) -> DashboardStats:
    now = now or datetime.now(timezone.utc)
    lois = list_lois(repo, user)
    leases = repo.list_leases(user["id"])
    credentials = repo.list_credentials(user["id"])

    active = [c for c in credentials if c["status"] == "active"]
    stats = DashboardStats(
        loi_total=len(lois),
        loi_by_status=dict(Counter(r["submit_status"] for r in lois)),
        lease_total=len(leases),
        lease_by_status=dict(Counter(r["status"] for r in leases)),
        credentials_total=len(credentials),
        credentials_valid=len(active) - stale_credentials(active, now=now),
        recent_lois=[
            RecentLOI(
                id=r["id"],
                title=r["title"],
                propertyAddress=r["propertyAddress"],
                submit_status=r["submit_status"],
                updated_at=r["updated_at"],
            )
            for r in lois[:RECENT_LIMIT]
        ],
        generated_at=now,
    )
    LOGGER.debug("dashboard_stats user_id=%s lois=%d leases=%d", user["id"], stats.loi_total, stats.lease_total)
    return stats
