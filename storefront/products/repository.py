from typing import Iterable, List, Optional
from sqlalchemy import and_, asc, case, desc, func, or_, select, update
from sqlalchemy.orm import selectinload
from storefront.common.custom_exceptions import InsufficientInventoryError, NotFoundError, ProductNotFound
from storefront.common.utils import now
from storefront.schema.full_schema import Product, ProductVariant
from storefront.products.constants import logger


async def resolve_product_ref(session, product_id: int, active_only: bool = False) -> int:
    """Public numeric id -> storage ref (Product.id). Raises ProductNotFound."""
    stmt = select(Product.id).where(Product.product_id == product_id)
    if active_only:
        stmt = stmt.where(Product.is_active.is_(True))

    res = await session.execute(stmt)
    product_pk = res.scalar_one_or_none()

    if product_pk is None:
        logger.warning("product.not_found", extra={"product_id": product_id, "active_only": active_only})
        raise ProductNotFound()

    return product_pk


async def fetch_product_details(session, product_id: int) -> Product:
    stmt = (
        select(Product)
        .options(selectinload(Product.variants))
        .where(Product.product_id == product_id, Product.is_active.is_(True))
    )
    res = await session.execute(stmt)
    product = res.scalar_one_or_none()

    if product is None:
        raise ProductNotFound()

    return product


_SORTS = {
    "newest": (desc(Product.created_at), desc(Product.id)),
    "price_asc": (asc(Product.price), Product.id),
    "price_desc": (desc(Product.price), Product.id),
    "rating": (desc(Product.rating), desc(Product.rating_count), Product.id),
}


async def find_by_ids(session, product_ids: Iterable[int], sort: Optional[str] = None) -> List[Product]:
    """Active products among product_ids. Unknown or inactive ids are dropped, callers reconcile."""
    ids = list({int(pid) for pid in product_ids})
    if not ids:
        return []

    stmt = select(Product).where(Product.product_id.in_(ids), Product.is_active.is_(True))
    if sort:
        stmt = stmt.order_by(*_SORTS[sort])

    res = await session.execute(stmt)
    return list(res.scalars().all())


def search_conditions(text_query: Optional[str], filters) -> list:
    conds = [Product.is_active.is_(True)]

    if text_query:
        pattern = f"%{text_query.strip()}%"
        conds.append(or_(
            Product.product_name.ilike(pattern),
            Product.brand.ilike(pattern),
            Product.additional_info.ilike(pattern),
        ))

    if filters.category:
        conds.append(Product.category == filters.category)
    if filters.brand:
        conds.append(Product.brand == filters.brand)
    if filters.gender:
        conds.append(Product.gender == filters.gender)
    if filters.color:
        conds.append(Product.primary_colour == filters.color)

    # inclusive bounds, either side optional
    if filters.min_price is not None:
        conds.append(Product.price >= filters.min_price)
    if filters.max_price is not None:
        conds.append(Product.price <= filters.max_price)

    if filters.min_rating is not None:
        conds.append(Product.rating >= filters.min_rating)

    if filters.in_stock_only:
        conds.append(Product.is_out_of_stock.is_(False))

    return conds


async def search_products(session, text_query: Optional[str], filters, sort: str = "newest",
                          limit: int = 20, offset: int = 0) -> List[Product]:
    stmt = (
        select(Product)
        .where(and_(*search_conditions(text_query, filters)))
        .order_by(*_SORTS[sort])
        .limit(limit)
        .offset(offset)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def recompute_out_of_stock(session, product_pk: int) -> bool:
    """Rewrite Product.is_out_of_stock from its variants. Caller owns the transaction."""
    available_total = (
        select(func.coalesce(func.sum(
            case((ProductVariant.available.is_(True), ProductVariant.inventory_count), else_=0)), 0))
        .where(ProductVariant.product_pk == product_pk)
        .scalar_subquery()
    )
    stmt = (
        update(Product)
        .where(Product.id == product_pk)
        .values(is_out_of_stock=(available_total == 0), updated_at=now())
        .returning(Product.is_out_of_stock)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    return bool(res.scalar_one())


async def _variant_exists(session, product_pk: int, sku_id: int) -> bool:
    stmt = select(ProductVariant.id).where(ProductVariant.product_pk == product_pk,
                                           ProductVariant.sku_id == sku_id)
    res = await session.execute(stmt)
    return res.first() is not None


async def record_stock_mutation(session, product_pk: int, sku_id: int, quantity: int) -> dict:
    """Decrement one variant's inventory and recompute the product's stock flag.

    The decrement is a single conditional UPDATE (count >= quantity), so a
    rejected request writes nothing. A variant that reaches exactly zero is
    marked unavailable.
    """
    if quantity <= 0:
        raise ValueError("quantity must be positive")

    remaining = ProductVariant.inventory_count - quantity
    stmt = (
        update(ProductVariant)
        .where(
            ProductVariant.product_pk == product_pk,
            ProductVariant.sku_id == sku_id,
            ProductVariant.inventory_count >= quantity,
        )
        .values(
            inventory_count=remaining,
            available=case((remaining == 0, False), else_=ProductVariant.available),
        )
        .returning(ProductVariant.inventory_count, ProductVariant.available)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    row = res.one_or_none()

    if row is None:
        exists = await _variant_exists(session, product_pk, sku_id)
        await session.rollback()
        if not exists:
            logger.warning("inventory.variant_not_found", extra={"product_pk": product_pk, "sku_id": sku_id})
            raise NotFoundError(f"SKU {sku_id} not found on product")
        logger.warning("inventory.decrement.insufficient",
                       extra={"product_pk": product_pk, "sku_id": sku_id, "quantity": quantity})
        raise InsufficientInventoryError(f"Insufficient inventory for SKU {sku_id}")

    inventory_count, available = row
    is_out_of_stock = await recompute_out_of_stock(session, product_pk)
    await session.commit()

    logger.info("inventory.decrement.success",
                extra={"product_pk": product_pk, "sku_id": sku_id, "quantity": quantity,
                       "remaining": inventory_count, "is_out_of_stock": is_out_of_stock})

    return {
        "sku_id": sku_id,
        "inventory_count": int(inventory_count),
        "available": bool(available),
        "is_out_of_stock": is_out_of_stock,
    }


async def set_variant_inventory(session, product_pk: int, sku_id: int, inventory_count: int,
                                available: Optional[bool] = None) -> dict:
    """Restock / correct a variant. Availability defaults to count > 0."""
    if inventory_count < 0:
        raise ValueError("inventory_count must not be negative")
    if available is None:
        available = inventory_count > 0

    stmt = (
        update(ProductVariant)
        .where(ProductVariant.product_pk == product_pk, ProductVariant.sku_id == sku_id)
        .values(inventory_count=inventory_count, available=available)
        .returning(ProductVariant.id)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    if res.scalar_one_or_none() is None:
        await session.rollback()
        logger.warning("inventory.variant_not_found", extra={"product_pk": product_pk, "sku_id": sku_id})
        raise NotFoundError(f"SKU {sku_id} not found on product")

    is_out_of_stock = await recompute_out_of_stock(session, product_pk)
    await session.commit()

    logger.info("inventory.variant.updated",
                extra={"product_pk": product_pk, "sku_id": sku_id, "inventory_count": inventory_count,
                       "available": available, "is_out_of_stock": is_out_of_stock})

    return {
        "sku_id": sku_id,
        "inventory_count": inventory_count,
        "available": available,
        "is_out_of_stock": is_out_of_stock,
    }


async def set_product_active(session, product_id: int, is_active: bool) -> int:
    stmt = (
        update(Product)
        .where(Product.product_id == product_id)
        .values(is_active=is_active, updated_at=now())
        .returning(Product.id)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    product_pk = res.scalar_one_or_none()

    if product_pk is None:
        await session.rollback()
        raise ProductNotFound()

    await session.commit()
    logger.info("product.active.changed", extra={"product_id": product_id, "is_active": is_active})
    return product_pk
