"""Lenient conversions for values that arrive as form strings or loose JSON."""

from typing import Any, Optional


def to_int(v: Any) -> Optional[int]:
    """``"4"``, ``4.0`` and ``"4.0"`` become ``4``; blanks and junk become ``None``."""
    if v is None or isinstance(v, bool):
        return None
    text = str(v).strip()
    if not text or text.lower() == "null":
        return None
    try:
        return int(float(text))
    except (TypeError, ValueError, OverflowError):
        return None


def to_str(v: Any) -> str:
    return "" if v is None else str(v)


def count(v: Any) -> int:
    """Counter fields from aggregate payloads; anything unparseable or negative is zero."""
    return max(to_int(v) or 0, 0)


__all__ = ["to_int", "to_str", "count"]
