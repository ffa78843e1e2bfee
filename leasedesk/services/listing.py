"""Search, status filter, sort and pagination for the list views.

One implementation serves every table; a :class:`ListSpec` names the columns
an entity searches, filters and sorts on. Rows are plain dicts as returned by
the API and :func:`apply_query` hands back the same dict objects, reordered
and sliced.
"""

from __future__ import annotations

import locale
import math
import time
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from ..utils.coerce import to_int, to_str
from ..utils.logging import get_logger

LOGGER = get_logger("services.listing")

EPOCH = pd.Timestamp(0, tz="UTC")
SEARCH_DEBOUNCE_SECONDS = 0.35


@dataclass(frozen=True)
class SortField:
    name: str
    columns: Tuple[str, ...]
    kind: Literal["text", "date", "number"] = "text"


@dataclass(frozen=True)
class ListSpec:
    name: str
    search_fields: Tuple[Tuple[str, ...], ...]
    sort_fields: Tuple[SortField, ...]
    default_sort: str
    status_field: Tuple[str, ...] = ("status",)
    default_dir: Literal["asc", "desc"] = "asc"
    default_page_size: int = 10

    def sort_field(self, name: str) -> SortField:
        for sort_field in self.sort_fields:
            if sort_field.name == name:
                return sort_field
        raise KeyError(f"{self.name} cannot sort by {name!r}")

    def default_query(self) -> "ListQuery":
        return ListQuery(sort_by=self.default_sort, sort_dir=self.default_dir, page_size=self.default_page_size)


class ListQuery(BaseModel):
    """Immutable list state; every ``with_*`` returns a new query."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    status: str = ""
    sort_by: str = ""
    sort_dir: Literal["asc", "desc"] = "asc"
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)

    def with_search(self, query: str) -> "ListQuery":
        return self.model_copy(update={"query": query, "page": 1})

    def with_status(self, status: str) -> "ListQuery":
        return self.model_copy(update={"status": status, "page": 1})

    def with_sort(self, sort_by: str) -> "ListQuery":
        if sort_by == self.sort_by:
            direction = "desc" if self.sort_dir == "asc" else "asc"
        else:
            direction = "asc"
        return self.model_copy(update={"sort_by": sort_by, "sort_dir": direction, "page": 1})

    def with_page(self, page: int) -> "ListQuery":
        return self.model_copy(update={"page": max(1, int(page))})

    def with_page_size(self, page_size: int) -> "ListQuery":
        return self.model_copy(update={"page_size": max(1, int(page_size)), "page": 1})

    def to_query_params(self, spec: ListSpec) -> Dict[str, str]:
        """Only values that differ from the spec's defaults, so clean URLs stay clean."""

        defaults = spec.default_query()
        params: Dict[str, str] = {}
        for name in ("query", "status", "sort_by", "sort_dir", "page", "page_size"):
            value = getattr(self, name)
            if value != getattr(defaults, name):
                params[name] = str(value)
        return params

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any], spec: ListSpec) -> "ListQuery":
        query = spec.default_query()
        sort_names = {f.name for f in spec.sort_fields}
        update: Dict[str, Any] = {
            "query": to_str(params.get("query", query.query)),
            "status": to_str(params.get("status", query.status)),
        }
        if params.get("sort_by") in sort_names:
            update["sort_by"] = params["sort_by"]
        if params.get("sort_dir") in ("asc", "desc"):
            update["sort_dir"] = params["sort_dir"]
        page = to_int(params.get("page"))
        if page and page > 0:
            update["page"] = page
        page_size = to_int(params.get("page_size"))
        if page_size and page_size > 0:
            update["page_size"] = page_size
        return query.model_copy(update=update)


@dataclass
class Page:
    rows: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int
    total_pages: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def first_index(self) -> int:
        return 0 if self.total == 0 else (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        return min(self.page * self.page_size, self.total)


def clear(spec: ListSpec) -> ListQuery:
    return spec.default_query()


def total_pages(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def _pick(row: Mapping[str, Any], columns: Sequence[str]) -> Any:
    for column in columns:
        value = row.get(column)
        if value not in (None, ""):
            return value
    return None


def _column(rows: List[Dict[str, Any]], columns: Sequence[str]) -> pd.Series:
    return pd.Series([_pick(row, columns) for row in rows], dtype="object")


def collation_key(value: Any) -> str:
    # strxfrm is codepoint order under the C locale, so fold accents first
    decomposed = unicodedata.normalize("NFKD", to_str(value))
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return locale.strxfrm(folded.casefold())


def _sort_key(values: pd.Series, kind: str) -> pd.Series:
    if kind == "date":
        parsed = pd.to_datetime(values, errors="coerce", utc=True, format="ISO8601")
        return parsed.fillna(EPOCH)
    if kind == "number":
        return pd.to_numeric(values, errors="coerce").fillna(0)
    return values.map(collation_key)


def apply_query(rows: List[Dict[str, Any]], spec: ListSpec, query: ListQuery) -> Page:
    """Filter, sort and slice ``rows``; the page is clamped into ``[1, total_pages]``."""

    frame = pd.DataFrame({"position": range(len(rows))}, dtype="int64")
    mask = pd.Series(True, index=frame.index)

    needle = query.query.strip().casefold()
    if needle and rows:
        hits = pd.Series(False, index=frame.index)
        for columns in spec.search_fields:
            text = _column(rows, columns).fillna("").astype(str).str.casefold()
            hits |= text.str.contains(needle, regex=False)
        mask &= hits

    status = query.status.strip().casefold()
    if status and rows:
        mask &= _column(rows, spec.status_field).fillna("").astype(str).str.casefold() == status

    sort_name = query.sort_by or spec.default_sort
    sort_field = spec.sort_field(sort_name)
    if rows:
        frame["key"] = _sort_key(_column(rows, sort_field.columns), sort_field.kind)
        frame = frame[mask].sort_values(by="key", ascending=query.sort_dir == "asc", kind="mergesort")
    positions = frame["position"].tolist()

    total = len(positions)
    pages = total_pages(total, query.page_size)
    page = min(max(query.page, 1), pages)
    start = (page - 1) * query.page_size
    window = positions[start : start + query.page_size]
    LOGGER.debug("list_query entity=%s total=%s page=%s/%s", spec.name, total, page, pages)
    return Page(
        rows=[rows[i] for i in window],
        total=total,
        page=page,
        page_size=query.page_size,
        total_pages=pages,
    )


class Debouncer:
    """Hold the latest input until ``delay`` seconds pass with no newer input.

    ``push`` restarts the window; ``poll`` returns the held value once the
    window has elapsed (and forgets it), otherwise ``None``.
    """

    def __init__(self, delay: float = SEARCH_DEBOUNCE_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.delay = delay
        self.clock = clock
        self._value: Any = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def push(self, value: Any) -> None:
        self._value = value
        self._deadline = self.clock() + self.delay

    def remaining(self) -> float:
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self.clock())

    def poll(self) -> Any:
        if self._deadline is None or self.clock() < self._deadline:
            return None
        value = self._value
        self.cancel()
        return value

    def cancel(self) -> None:
        self._value = None
        self._deadline = None


def _parse_time(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    text = to_str(value)
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def stale_credentials(rows: List[Dict[str, Any]], days: int = 90, now: Optional[datetime] = None) -> int:
    """Active credentials whose last use (or creation, if never used) is older than ``days``."""

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    stale = 0
    for row in rows:
        if to_str(row.get("status")).lower() != "active":
            continue
        seen = _parse_time(row.get("last_used_at")) or _parse_time(row.get("created_at"))
        if seen is not None and seen < cutoff:
            stale += 1
    return stale


LOI_LIST = ListSpec(
    name="loi",
    search_fields=(("title",), ("propertyAddress", "property_address")),
    status_field=("submit_status",),
    sort_fields=(
        SortField("title", ("title",)),
        SortField("propertyAddress", ("propertyAddress", "property_address")),
        SortField("status", ("submit_status",)),
        SortField("updatedAt", ("updated_at", "created_at"), "date"),
    ),
    default_sort="updatedAt",
    default_dir="desc",
)

LEASE_LIST = ListSpec(
    name="lease",
    search_fields=(("lease_title", "title"), ("property_address", "propertyAddress")),
    sort_fields=(
        SortField("title", ("lease_title", "title")),
        SortField("propertyAddress", ("property_address", "propertyAddress")),
        SortField("status", ("status",)),
        SortField("date", ("updated_at", "end_date", "start_date"), "date"),
    ),
    default_sort="date",
    default_dir="desc",
)

CREDENTIAL_LIST = ListSpec(
    name="credential",
    search_fields=(("label",), ("owner_email",), ("api_key_masked",), ("exchange",)),
    sort_fields=(
        SortField("label", ("label",)),
        SortField("exchange", ("exchange",)),
        SortField("created", ("created_at",), "date"),
        SortField("lastUsed", ("last_used_at",), "date"),
    ),
    default_sort="created",
    default_dir="desc",
)

__all__ = [
    "SortField",
    "ListSpec",
    "ListQuery",
    "Page",
    "apply_query",
    "clear",
    "total_pages",
    "collation_key",
    "Debouncer",
    "stale_credentials",
    "LOI_LIST",
    "LEASE_LIST",
    "CREDENTIAL_LIST",
]
