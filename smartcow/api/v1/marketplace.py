# ==============================================================================
# MARKETPLACE ENDPOINTS - Catalogs, Marketplace Listing & Likes
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from smartcow.api.dependencies import CurrentIdentity, FacadeDep
from smartcow.core.constants import split_identity
from smartcow.core.exceptions import NotFoundError
from smartcow.schemas.base import APIResponse
from smartcow.schemas.marketplace import Overview, Product, ProductCreate, ProductUpdate

router = APIRouter(tags=["Marketplace"])


# ==============================================================================
# MARKETPLACE LISTING
# ==============================================================================

@router.get(
    "/marketplace/products",
    response_model=APIResponse[List[Product]],
    summary="Marketplace listing",
    description="Active products of every seller and compost processor.",
)
async def marketplace_products(facade: FacadeDep) -> APIResponse[List[Product]]:
    return APIResponse.ok(data=await facade.products.get_marketplace_products())


@router.post(
    "/marketplace/rebuild",
    response_model=APIResponse[List[Product]],
    summary="Rebuild marketplace snapshot",
    description="Recompute the snapshot from every catalog.",
)
async def rebuild_marketplace(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[Product]]:
    return APIResponse.ok(data=await facade.products.rebuild_marketplace())


# ==============================================================================
# OWN CATALOG
# ==============================================================================

@router.get(
    "/products/mine",
    response_model=APIResponse[List[Product]],
    summary="My catalog",
    description="Every product of the current seller, whatever its status.",
)
async def my_products(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[Product]]:
    return APIResponse.ok(data=await facade.products.list_products(identity))


@router.post(
    "/products",
    response_model=APIResponse[Product],
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
)
async def create_product(
    identity: CurrentIdentity,
    schema: ProductCreate,
    facade: FacadeDep,
) -> APIResponse[Product]:
    product = await facade.products.create_product(identity, schema)
    return APIResponse.ok(data=product, message="Product created successfully")


@router.get(
    "/products/liked",
    response_model=APIResponse[List[str]],
    summary="Liked products",
)
async def liked_products(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[str]]:
    return APIResponse.ok(data=facade.liked.get_liked(identity))


@router.get(
    "/products/{product_id}",
    response_model=APIResponse[Product],
    summary="Get product",
)
async def get_product(product_id: str, facade: FacadeDep) -> APIResponse[Product]:
    product = await facade.products.get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found", resource_type="product", resource_id=product_id)
    return APIResponse.ok(data=product)


@router.patch(
    "/products/{product_id}",
    response_model=APIResponse[Product],
    summary="Update product",
)
async def update_product(
    product_id: str,
    identity: CurrentIdentity,
    schema: ProductUpdate,
    facade: FacadeDep,
) -> APIResponse[Product]:
    product = await facade.products.update_product(identity, product_id, schema)
    if product is None:
        raise NotFoundError("Product not found in your catalog", resource_type="product", resource_id=product_id)
    return APIResponse.ok(data=product, message="Product updated successfully")


@router.delete(
    "/products/{product_id}",
    response_model=APIResponse[dict],
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[dict]:
    if not await facade.products.delete_product(identity, product_id):
        raise NotFoundError("Product not found in your catalog", resource_type="product", resource_id=product_id)
    return APIResponse.ok(data={"deleted": True}, message="Product deleted successfully")


@router.post(
    "/products/{product_id}/like",
    response_model=APIResponse[dict],
    summary="Toggle like",
)
async def toggle_like(
    product_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[dict]:
    liked = facade.liked.toggle(identity, product_id)
    return APIResponse.ok(data={"productId": product_id, "liked": liked})


# ==============================================================================
# DASHBOARD
# ==============================================================================

@router.get(
    "/overview",
    response_model=APIResponse[Overview],
    summary="Dashboard totals",
)
async def overview(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[Overview]:
    return APIResponse.ok(data=await facade.overview.get_overview(identity))


@router.get(
    "/revenue",
    response_model=APIResponse[dict],
    summary="Revenue total",
)
async def revenue(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[dict]:
    role, username = split_identity(identity)
    total = facade.ledger.read(role or "", username)
    return APIResponse.ok(data={"role": role, "userId": username, "total": total})
