from typing import List, Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.params import Query
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.common.utils import success_response
from storefront.db.dependencies import get_session
from storefront.config.admin_config import admin_config
from storefront.products.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SORT_OPTIONS, logger
from storefront.products.dependency import require_roles
from storefront.products.models import ProductCreateIn, ProductSearchFilters, StockDecrementIn, VariantInventoryIn
from storefront.products.repository import (fetch_product_details, find_by_ids, record_stock_mutation, resolve_product_ref,
                                            search_products, set_product_active, set_variant_inventory)
from storefront.products.services import create_product_with_variants
from storefront.products.utils import product_card, product_details

prods_public_router=APIRouter()
prods_admin_router=APIRouter(dependencies=[require_roles(admin_config.ADMIN_ROLE)])

SORT_PATTERN = "^(" + "|".join(SORT_OPTIONS) + ")$"


@prods_public_router.get("")
async def get_products(
    q: Optional[str] = Query(None, max_length=200),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    color: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    in_stock_only: bool = Query(False),
    sort: str = Query("newest", pattern=SORT_PATTERN),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session)):

    filters = ProductSearchFilters(category=category, brand=brand, gender=gender, color=color,
                                   min_price=min_price, max_price=max_price, min_rating=min_rating,
                                   in_stock_only=in_stock_only)

    products = await search_products(session, q, filters, sort=sort, limit=limit, offset=offset)

    items = [product_card(p) for p in products]
    return success_response({"items": items, "count": len(items), "limit": limit, "offset": offset})


@prods_public_router.get("/batch")
async def get_products_by_ids(
    ids: List[int] = Query(..., min_length=1, max_length=MAX_PAGE_SIZE),
    sort: Optional[str] = Query(None, pattern=SORT_PATTERN),
    session: AsyncSession = Depends(get_session)):

    products = await find_by_ids(session, ids, sort=sort)

    found = {p.product_id for p in products}
    missing = sorted({pid for pid in ids if pid not in found})

    return success_response({"items": [product_card(p) for p in products], "missing": missing})


@prods_public_router.get("/{product_id}")
async def get_product(product_id: int, session: AsyncSession = Depends(get_session)):

    product = await fetch_product_details(session, product_id)
    return success_response(product_details(product))

#---------------------------------------- admin ----------------------------------------

@prods_admin_router.post("/")
async def create_product(request: Request, payload: ProductCreateIn, session: AsyncSession = Depends(get_session)):

    logger.info("product.create.attempt", extra={"product_id": payload.product_id,
                                                 "user_public_id": request.state.user_public_id})

    product = await create_product_with_variants(session, payload)

    return success_response({"message": "product created", "product": product_details(product)},
                            status_code=status.HTTP_201_CREATED)


@prods_admin_router.post("/{product_id}/stock/decrement")
async def decrement_stock(product_id: int, payload: StockDecrementIn, session: AsyncSession = Depends(get_session)):

    product_pk = await resolve_product_ref(session, product_id)
    result = await record_stock_mutation(session, product_pk, payload.sku_id, payload.quantity)

    return success_response({"product_id": product_id, **result})


@prods_admin_router.put("/{product_id}/variants/{sku_id}")
async def update_variant_inventory(product_id: int, sku_id: int, payload: VariantInventoryIn,
                                   session: AsyncSession = Depends(get_session)):

    product_pk = await resolve_product_ref(session, product_id)
    result = await set_variant_inventory(session, product_pk, sku_id, payload.inventory_count, payload.available)

    return success_response({"product_id": product_id, **result})


@prods_admin_router.delete("/{product_id}")
async def deactivate_product(product_id: int, session: AsyncSession = Depends(get_session)):

    await set_product_active(session, product_id, False)
    return success_response({"message": f"product {product_id} deactivated"})


@prods_admin_router.post("/{product_id}/restore")
async def restore_product(product_id: int, session: AsyncSession = Depends(get_session)):

    await set_product_active(session, product_id, True)
    return success_response({"message": f"product {product_id} restored"})
