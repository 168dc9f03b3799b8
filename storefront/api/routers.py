from fastapi import APIRouter
from storefront.api import version_prefix
from storefront.products.routes import prods_public_router,prods_admin_router
from storefront.wishlist.routes import wishlist_router
from storefront.common.routes import home_router



public_routers = APIRouter(prefix=version_prefix)

public_routers.include_router(prods_public_router, prefix="/products",tags=["products-public"])
public_routers.include_router(wishlist_router, prefix="/wishlist",tags=["wishlist"])
public_routers.include_router(home_router,tags=["home"])

#--------------------------------------------------------------------------------------------------------

admin_routers = APIRouter(prefix=f"{version_prefix}/admin")

admin_routers.include_router(prods_admin_router, prefix="/products",tags=["products-admin"])
