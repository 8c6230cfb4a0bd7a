# ==============================================================================
# REMOTE ADAPTERS PACKAGE
# ==============================================================================

"""
Remote Adapters
===============

Table-level interface implementations for the remote relational store:
- BaseRemoteAdapter: Abstract interface definition
- RestRemoteAdapter: Hosted PostgREST endpoint using httpx
- SQLRemoteAdapter: Direct database using SQLAlchemy async
"""

from smartcow.database.adapters.base_adapter import BaseRemoteAdapter, Row
from smartcow.database.adapters.rest_adapter import RestRemoteAdapter
from smartcow.database.adapters.sql_adapter import SQLRemoteAdapter

__all__ = [
    "BaseRemoteAdapter",
    "Row",
    "RestRemoteAdapter",
    "SQLRemoteAdapter",
]
