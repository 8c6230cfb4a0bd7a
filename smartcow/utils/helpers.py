# ==============================================================================
# HELPER UTILITIES
# ==============================================================================
# Common utility functions used across the application
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, TypeVar
from uuid import uuid4

T = TypeVar("T")


def generate_id(prefix: str) -> str:
    """
    Generate a client-side record identity.

    Args:
        prefix: Record kind (e.g., prod, order, msg)

    Returns:
        Identity such as ``prod-3f9c2a1be04d4c7a9d51c0e2f6ab8e13``
    """
    return f"{prefix}-{uuid4().hex}"


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_status(value: Optional[str]) -> str:
    """Trim and lower-case a status for comparisons."""
    return (value or "").strip().lower()


def conversation_id(first: str, second: str) -> str:
    """Order-independent conversation identity of two participants."""
    return "|".join(sorted((first, second)))


def minute_label(moment: datetime) -> str:
    """``HH:MM`` bucket label of a timestamp."""
    return moment.strftime("%H:%M")


def dedupe_keep_last(items: Iterable[T], key: str) -> List[T]:
    """
    Deduplicate records by an attribute, keeping the LAST occurrence.

    The surviving record takes the position of the last occurrence.
    """
    latest: Dict[Any, int] = {}
    materialized = list(items)
    for index, item in enumerate(materialized):
        latest[getattr(item, key)] = index
    return [item for index, item in enumerate(materialized) if latest[getattr(item, key)] == index]
