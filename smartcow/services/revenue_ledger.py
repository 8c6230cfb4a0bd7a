# ==============================================================================
# REVENUE LEDGER - Per-Seller Accumulating Totals
# ==============================================================================
# smartcow_revenue:<role>:<userId> holds one integer, only ever increased
# ==============================================================================

from __future__ import annotations

import logging
from typing import Optional

from smartcow.core.constants import StorageKeys, Topics
from smartcow.services.base_service import BaseService

logger = logging.getLogger(__name__)


class RevenueLedger(BaseService):
    """
    Revenue totals keyed by (role, user).

    Credits use the medium's atomic increment, so concurrent completions
    for the same seller cannot lose an update. There is no debit.

    Example:
        >>> await ledger.credit("seller", "alice", 50000)
        50000
        >>> ledger.read("seller", "alice")
        50000
    """

    @staticmethod
    def key(role: str, user_id: str) -> str:
        return f"{StorageKeys.REVENUE_PREFIX}{role}:{user_id}"

    def read(self, role: str, user_id: str) -> int:
        """Current total (0 when absent or unreadable)."""
        value = self._store.read(self.key(role, user_id), 0)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    async def credit(self, role: str, user_id: str, amount: int) -> Optional[int]:
        """
        Add ``amount`` to the total of (role, user).

        Returns:
            New total, or None when the credit was rejected
        """
        if not role or not user_id:
            logger.warning(f"Revenue credit rejected: missing identity ({role!r}, {user_id!r})")
            return None
        if amount <= 0:
            logger.warning(f"Revenue credit rejected: non-positive amount {amount} for {role}:{user_id}")
            return None

        total = self._store.increment(self.key(role, user_id), amount)
        logger.info(f"Revenue credited {amount} to {role}:{user_id} (total {total})")
        self._notify(Topics.REVENUE, {"role": role, "userId": user_id, "total": total})
        return total
