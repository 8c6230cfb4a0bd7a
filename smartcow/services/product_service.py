# ==============================================================================
# PRODUCT SERVICE - Catalogs & Marketplace Snapshot
# ==============================================================================
# Per-owner product CRUD and the derived marketplace listing
# ==============================================================================

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from smartcow.core.constants import (
    ErrorMessages,
    StorageKeys,
    Topics,
    selling_role_of,
    split_identity,
)
from smartcow.core.exceptions import AuthorizationError
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import PRODUCTS
from smartcow.schemas.marketplace import Product, ProductCreate, ProductUpdate
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import dedupe_keep_last, generate_id, utc_now

logger = logging.getLogger(__name__)


def build_snapshot(products: List[Product]) -> List[Product]:
    """Active products only, one entry per identity (last occurrence wins)."""
    return dedupe_keep_last([p for p in products if p.is_active], "id")


class ProductService(BaseService):
    """
    Product catalogs of sellers and compost processors.

    Every mutation recomputes the marketplace snapshot for the writing
    owner and emits ``smartcow_marketplace_updated`` with ``{"cpId": owner}``.

    Owner filtering is an exact, case-sensitive comparison of the
    role-qualified identity: ``"Seller:alice"`` does not own products
    of ``"seller:alice"``.
    """

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._repo = context.repository(PRODUCTS)

    # ==========================================================================
    # CATALOG OPERATIONS
    # ==========================================================================

    async def create_product(
        self,
        owner: str,
        data: ProductCreate,
        owner_name: Optional[str] = None,
    ) -> Product:
        """
        Create a product in ``owner``'s catalog.

        Args:
            owner: Role-qualified identity (``seller:…`` or ``compost_processor:…``)
            data: Product fields
            owner_name: Display name (defaults to the username)

        Returns:
            Stored product

        Raises:
            AuthorizationError: If the owner's role cannot sell
            DatabaseError: If no store accepted the write
        """
        role = selling_role_of(owner)
        if role is None:
            raise AuthorizationError(ErrorMessages.SELLER_ONLY, required_permission="seller")
        _, username = split_identity(owner)

        product = Product(
            id=generate_id("prod"),
            seller_id=owner,
            seller_name=owner_name or username,
            product_owner_role=role.value,
            owner_user_id=username,
            created_at=utc_now(),
            **data.model_dump(),
        )
        stored = self._require_stored(await self._repo.add(product), "product")
        logger.info(f"Product {stored.id} created by {owner}")

        await self.recompute_marketplace(owner)
        self._notify(Topics.MARKETPLACE, {"cpId": owner})
        return stored

    async def update_product(
        self,
        owner: str,
        product_id: str,
        changes: ProductUpdate,
    ) -> Optional[Product]:
        """Apply changes to one of ``owner``'s products; None if not theirs."""
        existing = await self._repo.get(product_id)
        if existing is None or existing.seller_id != owner:
            logger.warning(f"Product {product_id} not found in catalog of {owner}")
            return None

        updated = await self._repo.update(product_id, changes.model_dump(exclude_unset=True))
        if updated is None:
            logger.warning(f"Product {product_id} update was not stored")
            return None

        await self.recompute_marketplace(owner)
        self._notify(Topics.MARKETPLACE, {"cpId": owner})
        return updated

    async def delete_product(self, owner: str, product_id: str) -> bool:
        existing = await self._repo.get(product_id)
        if existing is None or existing.seller_id != owner:
            logger.warning(f"Product {product_id} not found in catalog of {owner}")
            return False

        removed = await self._repo.remove(product_id)
        if removed:
            await self.recompute_marketplace(owner)
            self._notify(Topics.MARKETPLACE, {"cpId": owner})
        return removed

    async def list_products(self, owner: str) -> List[Product]:
        """``owner``'s catalog, every status included."""
        products = await self._repo.list(owner) or []
        return [p for p in products if p.seller_id == owner]

    async def get_product(self, product_id: str) -> Optional[Product]:
        return await self._repo.get(product_id)

    # ==========================================================================
    # MARKETPLACE SNAPSHOT
    # ==========================================================================

    def read_snapshot(self) -> List[Product]:
        """Persisted marketplace snapshot; unreadable entries are dropped."""
        raw = self._store.read(StorageKeys.MARKETPLACE_PRODUCTS, [])
        if not isinstance(raw, list):
            return []
        products: List[Product] = []
        for item in raw:
            try:
                products.append(Product.model_validate(item))
            except PydanticValidationError:
                logger.warning("Dropping unreadable marketplace entry")
        return products

    def _persist_snapshot(self, products: List[Product]) -> List[Product]:
        self._store.write(
            StorageKeys.MARKETPLACE_PRODUCTS,
            [p.to_local() for p in products],
        )
        return products

    async def recompute_marketplace(self, owner: str) -> List[Product]:
        """
        Replace ``owner``'s entries in the snapshot with their fresh active set.

        Steps: drop snapshot entries owned by ``owner``, append the owner's
        current active products, keep active entries only, deduplicate by
        identity keeping the last occurrence, persist.
        """
        fresh = await self.list_products(owner)
        others = [p for p in self.read_snapshot() if p.seller_id != owner]
        snapshot = build_snapshot(others + fresh)
        logger.debug(f"Marketplace recomputed for {owner}: {len(snapshot)} product(s)")
        return self._persist_snapshot(snapshot)

    async def rebuild_marketplace(self) -> List[Product]:
        """Recompute the snapshot from every owner's catalog."""
        return self._persist_snapshot(build_snapshot(await self._repo.list() or []))

    async def get_marketplace_products(self) -> List[Product]:
        """
        Marketplace listing shown to buyers.

        With a remote store the snapshot is rebuilt from all catalogs;
        local-only it is the persisted snapshot.
        """
        if self._context.remote_enabled:
            return await self.rebuild_marketplace()
        return self.read_snapshot()
