import asyncio
import pytest
from sqlalchemy import func, select
from storefront.db.connection import async_session
from storefront.schema.full_schema import WishlistItem
from storefront.wishlist import repository as wishlist_repo


@pytest.mark.asyncio
async def test_add_is_idempotent(db_session, user, catalog):
    refs, created = await wishlist_repo.add(db_session, user.id, catalog[42].id)
    assert (refs, created) == ([42], True)

    refs_again, created_again = await wishlist_repo.add(db_session, user.id, catalog[42].id)
    assert refs_again == refs
    assert created_again is False


@pytest.mark.asyncio
async def test_repeated_adds_store_one_row(db_session, user, catalog):
    for _ in range(5):
        await wishlist_repo.add(db_session, user.id, catalog[7].id)

    stmt = select(func.count(WishlistItem.id)).where(WishlistItem.user_id == user.id)
    assert (await db_session.execute(stmt)).scalar_one() == 1


@pytest.mark.asyncio
async def test_add_then_remove_restores_original_set(db_session, user, catalog):
    await wishlist_repo.add(db_session, user.id, catalog[13].id)
    before = await wishlist_repo.get_refs(db_session, user.id)

    await wishlist_repo.add(db_session, user.id, catalog[42].id)
    after = await wishlist_repo.remove(db_session, user.id, catalog[42].id)

    assert after == before == [13]


@pytest.mark.asyncio
async def test_remove_non_member_is_noop(db_session, user, catalog):
    await wishlist_repo.add(db_session, user.id, catalog[13].id)

    refs = await wishlist_repo.remove(db_session, user.id, catalog[42].id)
    assert refs == [13]


@pytest.mark.asyncio
async def test_clear_returns_empty(db_session, user, catalog):
    await wishlist_repo.add(db_session, user.id, catalog[13].id)
    await wishlist_repo.add(db_session, user.id, catalog[42].id)

    assert await wishlist_repo.clear(db_session, user.id) == []
    assert await wishlist_repo.get_refs(db_session, user.id) == []


@pytest.mark.asyncio
async def test_resolved_read_is_not_destructive(db_session, user, catalog):
    await wishlist_repo.add(db_session, user.id, catalog[42].id)
    await wishlist_repo.add(db_session, user.id, catalog[7].id)

    catalog[7].is_active = False
    await db_session.commit()

    resolved = await wishlist_repo.get_resolved(db_session, user.id)
    assert [p.product_id for p in resolved] == [42]
    assert sorted(await wishlist_repo.get_refs(db_session, user.id)) == [7, 42]


@pytest.mark.asyncio
async def test_concurrent_adds_report_one_creation(user, catalog):
    product_pk = catalog[42].id

    async def add_once():
        async with async_session() as session:
            return await wishlist_repo.add(session, user.id, product_pk)

    results = await asyncio.gather(*[add_once() for _ in range(4)])

    assert sum(created for _, created in results) == 1
    assert all(refs == [42] for refs, _ in results)
