"""IO helpers for the JSON store and uploaded lease documents."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .logging import get_logger

LOGGER = get_logger("utils.io")

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


def data_dir() -> Path:
    """Resolve the data directory; read on every call so tests can repoint it."""

    return Path(os.getenv("DATA_DIR") or DEFAULT_DATA_DIR)


def load_json(name: str) -> Optional[Dict[str, Any]]:
    path = data_dir() / name
    if not path.exists():
        return None
    LOGGER.debug("loading_json path=%s", path)
    with open(path, "r", encoding="utf-8") as infile:
        return json.load(infile)


def save_json(name: str, payload: Dict[str, Any]) -> Path:
    """Write ``payload`` next to a temp file and swap it in."""

    path = data_dir() / name
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as outfile:
        json.dump(payload, outfile, indent=2, default=str)
    os.replace(tmp_path, path)
    LOGGER.debug("saved_json path=%s", path)
    return path


def sha256_bytes(content: bytes) -> str:
    h = hashlib.sha256()
    h.update(content)
    return h.hexdigest()


def store_document(filename: str, content: bytes) -> Dict[str, Any]:
    """Persist an uploaded document under ``uploads/`` keyed by content hash."""

    digest = sha256_bytes(content)
    suffix = Path(filename).suffix.lower()
    target = data_dir() / "uploads" / f"{digest}{suffix}"
    target.parent.mkdir(parents=True, exist_ok=True)
    if not target.exists():
        with open(target, "wb") as outfile:
            outfile.write(content)
    LOGGER.info("stored_document sha256=%s size=%d", digest, len(content))
    return {"filename": filename, "size": len(content), "sha256": digest, "path": str(target)}


__all__ = ["data_dir", "load_json", "save_json", "sha256_bytes", "store_document", "DEFAULT_DATA_DIR"]
