"""Pydantic schema for the dashboard aggregate payload."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, Field


class RecentLOI(BaseModel):
    id: str
    title: str
    propertyAddress: str
    submit_status: str
    updated_at: datetime


class DashboardStats(BaseModel):
    loi_total: int = 0
    loi_by_status: Dict[str, int] = Field(default_factory=dict)
    lease_total: int = 0
    lease_by_status: Dict[str, int] = Field(default_factory=dict)
    credentials_total: int = 0
    credentials_valid: int = 0
    recent_lois: List[RecentLOI] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
