from storefront.common.logging_setup import get_logger

logger = get_logger("storefront.client")

WISHLIST_PATH = "/api/v1/wishlist"

FETCH_FAILED = "Failed to load wishlist"
ADD_FAILED = "Failed to add to wishlist"
REMOVE_FAILED = "Failed to remove from wishlist"
CLEAR_FAILED = "Failed to clear wishlist"
