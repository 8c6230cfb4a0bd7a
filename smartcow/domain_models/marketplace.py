# ==============================================================================
# MARKETPLACE MODELS - Products & Orders
# ==============================================================================
# Remote rows for per-owner catalogs and buyer orders
# ==============================================================================

from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from smartcow.domain_models.base import CreatedAtMixin, SQLBase


class Product(SQLBase, CreatedAtMixin):
    """
    Product row.

    ``seller_id`` holds the owner's role-qualified identity
    (``seller:alice``); filtering on it is an exact string match.
    """

    __tablename__ = "products"

    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_owner_role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    owner_user_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Order(SQLBase, CreatedAtMixin):
    """Order row; ``product_id`` is an opaque reference."""

    __tablename__ = "orders"

    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    seller_name: Mapped[str] = mapped_column(String(255), nullable=False)
    buyer_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    buyer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_idr: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
