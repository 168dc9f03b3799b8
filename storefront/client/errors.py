from typing import Optional


class WishlistClientError(Exception):
    """A failed wishlist call, carrying a message fit to show the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotAuthenticatedError(WishlistClientError):
    def __init__(self, message: str = "Please login to add items to wishlist"):
        super().__init__(message, status_code=401)


class MutationInFlightError(WishlistClientError):
    """Another add/remove for the same product has not settled yet."""

    def __init__(self, product_id: int):
        super().__init__(f"Wishlist update for product {product_id} is still in progress")
        self.product_id = product_id
