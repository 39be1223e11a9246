"""Deterministic hashing for evaluation outputs.

Two evaluations of the same bet with the same recorded outcome must produce
the same hash, which makes re-runs comparable in the audit trail.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List


def _serialize_value(val: Any) -> Any:
    """Serialize a value for deterministic hashing."""
    if val is None:
        return None
    elif isinstance(val, Enum):
        return val.value
    elif isinstance(val, Decimal):
        return str(val)
    elif isinstance(val, datetime):
        return val.isoformat()
    elif isinstance(val, dict):
        return {str(k): _serialize_value(v) for k, v in sorted(val.items(), key=lambda kv: str(kv[0]))}
    elif isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    elif isinstance(val, (set, frozenset)):
        return sorted(_serialize_value(v) for v in val)
    elif isinstance(val, (int, float, str, bool)):
        return val
    else:
        return str(val)


def compute_hash(data: Dict[str, Any]) -> str:
    """Compute deterministic SHA256 hash of a dictionary.

    The hash is computed from a canonical JSON representation
    with sorted keys and consistent formatting.

    Args:
        data: Dictionary to hash

    Returns:
        Hex-encoded SHA256 hash (64 characters)
    """
    serialized = _serialize_value(data)
    canonical = json.dumps(serialized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def compute_results_hash(
    category: str,
    bet_id: int,
    user_results: List[Dict[str, Any]],
) -> str:
    """Compute hash of a full evaluation batch.

    Args:
        category: Bet category value
        bet_id: Bet instance identifier
        user_results: Per-user result dicts (userId, totalPoints, evaluatorResults)

    Returns:
        Hex-encoded SHA256 hash
    """
    # Sort by user for determinism regardless of load order
    sorted_results = sorted(user_results, key=lambda r: r.get("userId", 0))

    payload = {
        "category": category,
        "bet_id": bet_id,
        "n_users": len(sorted_results),
        "results": sorted_results,
    }
    return compute_hash(payload)


__all__ = [
    "compute_hash",
    "compute_results_hash",
]
