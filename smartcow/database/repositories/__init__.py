# ==============================================================================
# REPOSITORIES PACKAGE
# ==============================================================================

"""
Repositories
============

Per-entity data access with interchangeable implementations:
- Repository: abstract interface, EntitySpec: storage layout
- LocalRepository: Local Record Store lists
- RemoteRepository: remote table rows (failures reported, never raised)
- WriteThroughRepository: remote first, local fallback and mirror
"""

from smartcow.database.repositories.base_repository import EntitySpec, Repository
from smartcow.database.repositories.local_repository import LocalRepository
from smartcow.database.repositories.remote_repository import RemoteRepository
from smartcow.database.repositories.write_through import WriteThroughRepository

__all__ = [
    "EntitySpec",
    "Repository",
    "LocalRepository",
    "RemoteRepository",
    "WriteThroughRepository",
]
