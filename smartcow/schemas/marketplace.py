# ==============================================================================
# MARKETPLACE SCHEMAS - Products, Orders & Overview
# ==============================================================================
# Domain records and request schemas for catalogs and orders
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from smartcow.core.constants import OrderStatus, ProductCategory, ProductStatus
from smartcow.schemas.base import BaseSchema
from smartcow.utils.helpers import normalize_status


# ==============================================================================
# PRODUCTS
# ==============================================================================

class Product(BaseSchema):
    """
    Catalog product owned by a seller or compost processor.

    ``status`` is kept exactly as written; use ``is_active`` for the
    case- and whitespace-insensitive check.
    """

    id: str
    seller_id: str = Field(..., description="Owner's role-qualified identity")
    seller_name: str
    product_owner_role: Optional[str] = None
    owner_user_id: Optional[str] = None
    name: str
    price: int = Field(..., ge=0, description="Unit price in whole IDR")
    unit: str
    category: str
    stock: int = Field(0, ge=0)
    status: str = ProductStatus.ACTIVE.value
    description: str = ""
    image: Optional[str] = None
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return normalize_status(self.status) == ProductStatus.ACTIVE.value


class ProductCreate(BaseSchema):
    """Schema for creating a product."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Product name",
    )
    price: int = Field(
        ...,
        ge=0,
        description="Unit price in whole IDR",
    )
    unit: str = Field(
        "kg",
        min_length=1,
        max_length=50,
        description="Unit label",
    )
    category: ProductCategory = Field(
        ProductCategory.COMPOST,
        description="Product category",
    )
    stock: int = Field(
        0,
        ge=0,
        description="Available stock",
    )
    status: str = Field(
        ProductStatus.ACTIVE.value,
        description="Lifecycle status",
    )
    description: str = Field(
        "",
        max_length=5000,
        description="Product description",
    )
    image: Optional[str] = Field(
        None,
        description="Image reference",
    )


class ProductUpdate(BaseSchema):
    """Schema for updating a product; unset fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    category: Optional[ProductCategory] = None
    stock: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None
    description: Optional[str] = Field(None, max_length=5000)
    image: Optional[str] = None


# ==============================================================================
# ORDERS
# ==============================================================================

class Order(BaseSchema):
    """Buyer order for one product line."""

    id: str
    product_id: str
    product_name: str
    seller_id: str
    seller_role: Optional[str] = None
    seller_name: str
    buyer_id: str
    buyer_name: str
    quantity: int = Field(..., ge=1)
    total_idr: int = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime


class OrderCreate(BaseSchema):
    """Schema for placing an order; the buyer is the authenticated identity."""

    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1, description="Seller's role-qualified identity")
    seller_name: str = Field("", description="Seller display name")
    buyer_name: str = Field("", description="Buyer display name")
    quantity: int = Field(..., ge=1)
    total_idr: int = Field(..., ge=0)


class OrderStatusUpdate(BaseSchema):
    """Schema for moving an order forward."""

    status: OrderStatus


# ==============================================================================
# OVERVIEW
# ==============================================================================

class Overview(BaseSchema):
    """Per-owner dashboard totals."""

    total_products: int = 0
    total_sales_idr: int = 0
    educational_posts: int = 0
    inquiries: int = 0
