"""Pydantic schemas for exchange API credentials."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Exchange(str, Enum):
    BINANCE = "binance"
    BYBIT = "bybit"
    BINGX = "bingx"


EXCHANGE_NAMES = {
    Exchange.BINANCE: "Binance",
    Exchange.BYBIT: "Bybit",
    Exchange.BINGX: "BingX",
}


class CredentialStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class CredentialRecord(BaseModel):
    id: str
    owner_id: str
    exchange: Exchange
    label: str
    api_key_masked: str
    api_key_fingerprint: str
    status: CredentialStatus = CredentialStatus.ACTIVE
    owner_email: str = ""
    notes: str = ""
    created_at: datetime
    last_used_at: Optional[datetime] = None
    rotated_at: Optional[datetime] = None


class CredentialCreate(BaseModel):
    exchange: Exchange
    label: str = Field(..., min_length=1, max_length=80)
    api_key: str = Field(..., min_length=8)
    notes: str = ""
