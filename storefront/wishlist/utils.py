from typing import Any, List
from fastapi import status
from storefront.common.utils import json_ok


def wishlist_response(message: str, wishlist: List[Any], status_code: int = status.HTTP_200_OK):
    """Flat body the wishlist clients read: {success, message, wishlist, wishlistCount}."""
    return json_ok({
        "success": True,
        "message": message,
        "wishlist": wishlist,
        "wishlistCount": len(wishlist),
    }, status_code=status_code)
