from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.common.custom_exceptions import UserNotFound
from storefront.config.settings import config_settings
from storefront.db.dependencies import get_session
from storefront.products.repository import resolve_product_ref
from storefront.products.utils import product_card
from storefront.user.repository import user_exists
from storefront.wishlist import repository as wishlist_repo
from storefront.wishlist.constants import (MSG_ADDED, MSG_ALREADY_PRESENT, MSG_CLEARED, MSG_REMOVED, MSG_RETRIEVED,
                                           logger)
from storefront.wishlist.utils import wishlist_response

wishlist_router=APIRouter()

# Every route is scoped to the authenticated user on request.state; none of
# them takes a user id from the caller.


@wishlist_router.get("")
async def get_wishlist(request: Request, session: AsyncSession = Depends(get_session)):
    user_id = request.state.user_identifier

    if not await user_exists(session, user_id):
        # the auth middleware resolved this user moments ago, so this is an invariant break
        logger.error("wishlist.get.user_not_found", extra={"user_public_id": request.state.user_public_id})
        raise UserNotFound()

    products = await wishlist_repo.get_resolved(session, user_id)

    return wishlist_response(MSG_RETRIEVED, [product_card(p) for p in products])


@wishlist_router.get("/{product_id}")
async def get_membership(request: Request, product_id: int, session: AsyncSession = Depends(get_session)):
    user_id = request.state.user_identifier

    product_pk = await resolve_product_ref(session, product_id)
    in_wishlist = await wishlist_repo.is_member(session, user_id, product_pk)

    return {"success": True, "productId": product_id, "inWishlist": in_wishlist}


@wishlist_router.post("/{product_id}")
async def add_to_wishlist(request: Request, product_id: int, session: AsyncSession = Depends(get_session)):
    user_id = request.state.user_identifier

    # inactive products cannot be newly wishlisted
    product_pk = await resolve_product_ref(session, product_id, active_only=True)

    refs, created = await wishlist_repo.add(session, user_id, product_pk,
                                            max_items=config_settings.WISHLIST_MAX_ITEMS)

    if created:
        logger.info("wishlist.add.success", extra={"product_id": product_id, "wishlist_count": len(refs)})
        return wishlist_response(MSG_ADDED, refs, status_code=status.HTTP_201_CREATED)

    logger.info("wishlist.add.noop", extra={"product_id": product_id, "wishlist_count": len(refs)})
    return wishlist_response(MSG_ALREADY_PRESENT, refs, status_code=status.HTTP_200_OK)


@wishlist_router.delete("/{product_id}")
async def remove_from_wishlist(request: Request, product_id: int, session: AsyncSession = Depends(get_session)):
    user_id = request.state.user_identifier

    # inactive products still resolve so they can be removed
    product_pk = await resolve_product_ref(session, product_id)

    refs = await wishlist_repo.remove(session, user_id, product_pk)

    logger.info("wishlist.remove.success", extra={"product_id": product_id, "wishlist_count": len(refs)})
    return wishlist_response(MSG_REMOVED, refs)


@wishlist_router.delete("")
async def clear_wishlist(request: Request, session: AsyncSession = Depends(get_session)):
    user_id = request.state.user_identifier

    refs = await wishlist_repo.clear(session, user_id)

    logger.info("wishlist.clear.success", extra={"user_public_id": request.state.user_public_id})
    return wishlist_response(MSG_CLEARED, refs)
