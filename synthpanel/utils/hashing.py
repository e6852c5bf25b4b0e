"""Deterministic hashing utilities for synthpanel.

All hashing uses SHA-256 over sorted-key JSON so identical data
always produces identical hashes.
"""

import hashlib
import json
from typing import Any


def compute_content_hash(data: Any) -> str:
    """Compute SHA-256 hash of arbitrary data.

    Args:
        data: Any JSON-serializable data (dict, list, primitive, or
              Pydantic model with .model_dump()).

    Returns:
        Hex-encoded SHA-256 hash string (64 characters).
    """
    if hasattr(data, "model_dump"):
        serializable = data.model_dump(mode="json")
    else:
        serializable = data

    serialized = json.dumps(serializable, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(serialized).hexdigest()
