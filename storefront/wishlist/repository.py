from typing import List, Optional, Tuple
from sqlalchemy import delete, desc, func, select
from storefront.common.custom_exceptions import WishlistLimitReached
from storefront.common.utils import now
from storefront.db.utils import upsert_insert
from storefront.schema.full_schema import Product, WishlistItem
from storefront.wishlist.constants import logger

# Each mutation below is one statement followed by a commit. The unique
# (user_id, product_pk) constraint is what keeps the wishlist a set, so
# concurrent add/remove on the same pair serialise in the database.


async def get_refs(session, user_id: int) -> List[int]:
    """Canonical membership as public product ids, most recently added first.

    Raw references: inactive products are still listed here.
    """
    stmt = (
        select(Product.product_id)
        .join(WishlistItem, WishlistItem.product_pk == Product.id)
        .where(WishlistItem.user_id == user_id)
        .order_by(desc(WishlistItem.created_at), desc(WishlistItem.id))
    )
    res = await session.execute(stmt)
    return [int(pid) for pid in res.scalars().all()]


async def get_resolved(session, user_id: int) -> List[Product]:
    """Wishlisted products joined to the catalog, inactive ones filtered out.

    Read only: members whose product no longer resolves stay in the table.
    """
    stmt = (
        select(Product)
        .join(WishlistItem, WishlistItem.product_pk == Product.id)
        .where(WishlistItem.user_id == user_id, Product.is_active.is_(True))
        .order_by(desc(WishlistItem.created_at), desc(WishlistItem.id))
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def is_member(session, user_id: int, product_pk: int) -> bool:
    stmt = select(WishlistItem.id).where(WishlistItem.user_id == user_id, WishlistItem.product_pk == product_pk)
    res = await session.execute(stmt)
    return res.first() is not None


async def count_items(session, user_id: int) -> int:
    stmt = select(func.count(WishlistItem.id)).where(WishlistItem.user_id == user_id)
    res = await session.execute(stmt)
    return int(res.scalar_one())


async def add(session, user_id: int, product_pk: int, max_items: Optional[int] = None) -> Tuple[List[int], bool]:
    """Idempotent add. Returns (canonical refs, created).

    created is True only when this call inserted the row, so two racing adds
    for the same pair see exactly one True.
    """
    # soft cap: racing adds of different products can overshoot by the number in flight
    if max_items is not None and await count_items(session, user_id) >= max_items:
        if not await is_member(session, user_id, product_pk):
            logger.warning("wishlist.add.limit_reached", extra={"user_id": user_id, "limit": max_items})
            raise WishlistLimitReached(max_items)

    stmt = (
        upsert_insert(session, WishlistItem)
        .values(user_id=user_id, product_pk=product_pk, created_at=now())
        .on_conflict_do_nothing(index_elements=[WishlistItem.user_id, WishlistItem.product_pk])
        .returning(WishlistItem.id)
    )
    res = await session.execute(stmt)
    created = res.scalar_one_or_none() is not None
    await session.commit()

    return await get_refs(session, user_id), created


async def remove(session, user_id: int, product_pk: int) -> List[int]:
    """Idempotent remove; a non-member is a no-op."""
    stmt = (
        delete(WishlistItem)
        .where(WishlistItem.user_id == user_id, WishlistItem.product_pk == product_pk)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)
    await session.commit()

    return await get_refs(session, user_id)


async def clear(session, user_id: int) -> List[int]:
    stmt = (
        delete(WishlistItem)
        .where(WishlistItem.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)
    await session.commit()
    return []
