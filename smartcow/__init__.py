# ==============================================================================
# SMARTCOW PACKAGE INITIALIZATION
# ==============================================================================
# Marketplace data synchronization layer with FastAPI surface
# Remote relational store (optional) + local record store fallback
# ==============================================================================

"""
SmartCow Marketplace Sync
=========================

Keeps product, order, article and revenue records consistent between an
optional remote relational store and a local fallback store, and signals
every change on a sequenced notification bus.

Features:
---------
- Remote store over a hosted REST endpoint or a direct SQL connection
- Local record store (in-memory or SQLite file shared between processes)
- Per-entity repositories with write-through caching and local fallback
- Derived marketplace snapshot (active, deduplicated, owner-filtered)
- Revenue ledger credited atomically on order completion
- JWT-based identities and role checks

Usage:
------
    from smartcow.main import app

    # Run with uvicorn
    uvicorn smartcow.main:app --reload
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
