from storefront.common.logging_setup import get_logger

logger = get_logger("storefront.products")

GENDERS = ("Men", "Women", "Boys", "Girls", "Unisex")

SORT_OPTIONS = ("newest", "price_asc", "price_desc", "rating")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
