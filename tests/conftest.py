import os
import tempfile

# settings are read at import time, so point them at a throwaway database first
_TEST_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENV"] = "dev"
os.environ["ENABLE_ADMIN"] = "true"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["WISHLIST_MAX_ITEMS"] = "500"

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel

from storefront.auth.utils import create_access_token
from storefront.db.connection import async_engine, async_session
from storefront.main import app
from storefront.products.models import ProductCreateIn
from storefront.products.services import create_product_with_variants
from storefront.user.repository import create_user

url_prefix = "/api/v1"


def product_payload(product_id, **overrides):
    data = {
        "product_id": product_id,
        "product_name": f"Classic Tee {product_id}",
        "brand": "Roadster",
        "category": "Tshirts",
        "gender": "Men",
        "primary_colour": "Navy Blue",
        "price": 499,
        "mrp": 999,
        "discount_display_label": "(50% OFF)",
        "search_image": f"https://img.example.com/{product_id}.jpg",
        "additional_info": "Pure cotton round neck",
        "rating": 4.2,
        "rating_count": 120,
        "variants": [
            {"sku_id": product_id * 10 + 1, "label": "M", "inventory_count": 5, "available": True},
            {"sku_id": product_id * 10 + 2, "label": "L", "inventory_count": 3, "available": True},
        ],
    }
    data.update(overrides)
    return ProductCreateIn(**data)


@pytest.fixture(autouse=True)
async def reset_db():
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield


@pytest.fixture
async def db_session():
    async with async_session() as session:
        yield session


@pytest.fixture
async def ac_client():
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac


@pytest.fixture
async def user(db_session):
    return await create_user(db_session, email="shopper@example.com", name="Shopper")


@pytest.fixture
async def other_user(db_session):
    return await create_user(db_session, email="other@example.com", name="Other")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.public_id)}"}


@pytest.fixture
def admin_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.public_id, ['admin'])}"}


@pytest.fixture
async def catalog(db_session):
    """Products 42, 7 and 13 are active; 99 is soft-deleted."""
    products = {}
    for pid in (42, 7, 13, 99):
        products[pid] = await create_product_with_variants(db_session, product_payload(pid))

    products[99].is_active = False
    await db_session.commit()
    return products
