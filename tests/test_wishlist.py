import pytest
from sqlalchemy import select
from storefront.schema.full_schema import WishlistItem
import storefront.wishlist.routes as wishlist_routes

url_prefix = "/api/v1"


@pytest.mark.asyncio
async def test_add_remove_scenario(ac_client, auth_headers, catalog):

    resp = await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Product added to wishlist"
    assert body["wishlist"] == [42]
    assert body["wishlistCount"] == 1

    # repeat: same set, different status
    resp = await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Product already in wishlist"
    assert body["wishlist"] == [42]
    assert body["wishlistCount"] == 1

    resp = await ac_client.delete(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["wishlistCount"] == 0

    # removing a non-member is not an error
    resp = await ac_client.delete(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["wishlist"] == []
    assert resp.json()["wishlistCount"] == 0


@pytest.mark.asyncio
async def test_add_unknown_product_is_404_and_leaves_state(ac_client, auth_headers, catalog, db_session):

    await ac_client.post(f"{url_prefix}/wishlist/7", headers=auth_headers)

    resp = await ac_client.post(f"{url_prefix}/wishlist/999", headers=auth_headers)
    assert resp.status_code == 404, resp.text
    payload = resp.json()
    assert payload["status"] == "error"
    assert payload["error"]["details"]["message"] == "Product not found"

    rows = (await db_session.execute(select(WishlistItem.product_pk))).scalars().all()
    assert rows == [catalog[7].id]


@pytest.mark.asyncio
async def test_remove_unknown_product_is_404(ac_client, auth_headers, catalog):
    resp = await ac_client.delete(f"{url_prefix}/wishlist/999", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_get_returns_resolved_products_most_recent_first(ac_client, auth_headers, catalog):
    for pid in (42, 7, 13):
        resp = await ac_client.post(f"{url_prefix}/wishlist/{pid}", headers=auth_headers)
        assert resp.status_code == 201

    resp = await ac_client.get(f"{url_prefix}/wishlist", headers=auth_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Wishlist retrieved successfully"
    assert body["wishlistCount"] == 3
    assert [p["productId"] for p in body["wishlist"]] == [13, 7, 42]

    card = body["wishlist"][0]
    assert card["productName"] == "Classic Tee 13"
    assert card["price"] == 499
    assert card["mrp"] == 999
    assert card["discountPercentage"] == 50
    assert card["isOutOfStock"] is False


@pytest.mark.asyncio
async def test_post_and_delete_return_raw_refs_get_returns_projections(ac_client, auth_headers, catalog):
    resp = await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert all(isinstance(ref, int) for ref in resp.json()["wishlist"])

    resp = await ac_client.get(f"{url_prefix}/wishlist", headers=auth_headers)
    assert all(isinstance(p, dict) for p in resp.json()["wishlist"])


@pytest.mark.asyncio
async def test_deactivated_product_filtered_from_get_but_kept_in_set(ac_client, auth_headers, admin_headers, catalog):
    await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    await ac_client.post(f"{url_prefix}/wishlist/7", headers=auth_headers)

    resp = await ac_client.delete(f"{url_prefix}/admin/products/7", headers=admin_headers)
    assert resp.status_code == 200, resp.text

    resp = await ac_client.get(f"{url_prefix}/wishlist", headers=auth_headers)
    assert [p["productId"] for p in resp.json()["wishlist"]] == [42]

    # the read did not drop the membership
    resp = await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert sorted(resp.json()["wishlist"]) == [7, 42]

    # and the inactive product can still be removed
    resp = await ac_client.delete(f"{url_prefix}/wishlist/7", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["wishlist"] == [42]


@pytest.mark.asyncio
async def test_inactive_product_cannot_be_added(ac_client, auth_headers, catalog):
    resp = await ac_client.post(f"{url_prefix}/wishlist/99", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_clear_wishlist(ac_client, auth_headers, catalog):
    for pid in (42, 7):
        await ac_client.post(f"{url_prefix}/wishlist/{pid}", headers=auth_headers)

    resp = await ac_client.delete(f"{url_prefix}/wishlist", headers=auth_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json() == {
        "success": True,
        "message": "Wishlist cleared successfully",
        "wishlist": [],
        "wishlistCount": 0,
    }

    # clearing an empty wishlist still succeeds
    resp = await ac_client.delete(f"{url_prefix}/wishlist", headers=auth_headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_wishlists_are_scoped_to_the_token_user(ac_client, auth_headers, other_user, catalog):
    from storefront.auth.utils import create_access_token
    other_headers = {"Authorization": f"Bearer {create_access_token(other_user.public_id)}"}

    await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    await ac_client.post(f"{url_prefix}/wishlist/7", headers=other_headers)

    resp = await ac_client.delete(f"{url_prefix}/wishlist", headers=other_headers)
    assert resp.status_code == 200

    resp = await ac_client.get(f"{url_prefix}/wishlist", headers=auth_headers)
    assert [p["productId"] for p in resp.json()["wishlist"]] == [42]


@pytest.mark.asyncio
async def test_membership_probe(ac_client, auth_headers, catalog):
    await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)

    resp = await ac_client.get(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.json() == {"success": True, "productId": 42, "inWishlist": True}

    resp = await ac_client.get(f"{url_prefix}/wishlist/7", headers=auth_headers)
    assert resp.json()["inWishlist"] is False


@pytest.mark.asyncio
async def test_get_guards_missing_user(ac_client, auth_headers, catalog, monkeypatch):

    async def no_user(session, user_id):
        return False

    monkeypatch.setattr(wishlist_routes, "user_exists", no_user)

    resp = await ac_client.get(f"{url_prefix}/wishlist", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["error"]["details"]["message"] == "User not found"


@pytest.mark.asyncio
async def test_wishlist_cap(ac_client, auth_headers, catalog, monkeypatch):
    monkeypatch.setattr(wishlist_routes.config_settings, "WISHLIST_MAX_ITEMS", 1)

    resp = await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.status_code == 201

    resp = await ac_client.post(f"{url_prefix}/wishlist/7", headers=auth_headers)
    assert resp.status_code == 409

    # re-adding an existing member is still a no-op, not a cap error
    resp = await ac_client.post(f"{url_prefix}/wishlist/42", headers=auth_headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_non_numeric_product_id_is_422(ac_client, auth_headers, catalog):
    resp = await ac_client.post(f"{url_prefix}/wishlist/abc", headers=auth_headers)
    assert resp.status_code == 422
