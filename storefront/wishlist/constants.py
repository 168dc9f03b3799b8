from storefront.common.logging_setup import get_logger

logger = get_logger("storefront.wishlist")

MSG_ADDED = "Product added to wishlist"
MSG_ALREADY_PRESENT = "Product already in wishlist"
MSG_REMOVED = "Product removed from wishlist"
MSG_RETRIEVED = "Wishlist retrieved successfully"
MSG_CLEARED = "Wishlist cleared successfully"
