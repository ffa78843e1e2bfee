"""Pydantic schemas for uploaded leases, their clauses and terminations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class LeaseStatus(str, Enum):
    AVAILABLE = "Available"
    PENDING = "Pending"
    ACTIVE = "Active"
    IN_REVIEW = "In Review"
    TERMINATED = "Terminated"


class ClauseStatus(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class LeaseDocument(BaseModel):
    filename: str
    content_type: Optional[str] = None
    size: int
    sha256: str


class ClauseComment(BaseModel):
    author: str
    text: str
    created_at: datetime


class LeaseClause(BaseModel):
    key: str
    name: str
    category: str
    status: ClauseStatus = ClauseStatus.PENDING
    clause_details: str
    current_version: str
    suggested_version: str
    # "<Band> (<score>/10)"
    risk: str
    comments: List[ClauseComment] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Termination(BaseModel):
    reason: str
    effective_date: str
    requested_at: datetime


class LeaseRecord(BaseModel):
    id: str
    owner_id: str
    lease_title: str
    property_address: str
    start_date: str
    end_date: str
    notes: str = ""
    loi_id: Optional[str] = None
    status: LeaseStatus = LeaseStatus.IN_REVIEW
    document: Optional[LeaseDocument] = None
    termination: Optional[Termination] = None
    clauses: List[LeaseClause] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TerminateLeaseRequest(BaseModel):
    reason: str
    effective_date: str


class ClauseReviewRequest(BaseModel):
    action: Literal["accept", "reject", "edit"]
    current_version: Optional[str] = None
    comment: str = ""


class ClauseSummary(BaseModel):
    total: int = 0
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    approved: int = 0
    pending: int = 0
    rejected: int = 0


class ClauseReview(BaseModel):
    lease_id: str
    lease_title: str
    lease_status: LeaseStatus
    clauses: List[LeaseClause]
    summary: ClauseSummary
