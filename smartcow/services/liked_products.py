# ==============================================================================
# LIKED PRODUCTS - Per-User Product Sets
# ==============================================================================

from __future__ import annotations

import logging
from typing import List

from smartcow.core.constants import StorageKeys, Topics
from smartcow.services.base_service import BaseService

logger = logging.getLogger(__name__)


class LikedProductsService(BaseService):
    """
    Set of liked product identities per user, kept in the local store.

    Stored as a JSON list without duplicates; only the owning identity
    toggles membership.
    """

    @staticmethod
    def key(user: str) -> str:
        return f"{StorageKeys.LIKED_PRODUCTS_PREFIX}{user}"

    def get_liked(self, user: str) -> List[str]:
        raw = self._store.read(self.key(user), [])
        if not isinstance(raw, list):
            return []
        return list(dict.fromkeys(str(item) for item in raw))

    def is_liked(self, user: str, product_id: str) -> bool:
        return product_id in self.get_liked(user)

    def like(self, user: str, product_id: str) -> List[str]:
        liked = self.get_liked(user)
        if product_id not in liked:
            liked.append(product_id)
            self._store.write(self.key(user), liked)
            self._notify(Topics.LIKED_PRODUCTS, {"userId": user})
        return liked

    def unlike(self, user: str, product_id: str) -> List[str]:
        liked = [item for item in self.get_liked(user) if item != product_id]
        self._store.write(self.key(user), liked)
        self._notify(Topics.LIKED_PRODUCTS, {"userId": user})
        return liked

    def toggle(self, user: str, product_id: str) -> bool:
        """Flip membership; returns True when the product is now liked."""
        if self.is_liked(user, product_id):
            self.unlike(user, product_id)
            return False
        self.like(user, product_id)
        return True
