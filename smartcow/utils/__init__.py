# ==============================================================================
# UTILS PACKAGE INITIALIZATION
# ==============================================================================

"""
Utilities Module
================

Helper functions and utilities:
- ID generators
- Date/time utilities
- Status normalization and deduplication
"""

from smartcow.utils.helpers import (
    conversation_id,
    dedupe_keep_last,
    generate_id,
    minute_label,
    normalize_status,
    utc_now,
)

__all__ = [
    "conversation_id",
    "dedupe_keep_last",
    "generate_id",
    "minute_label",
    "normalize_status",
    "utc_now",
]
