from typing import Dict, FrozenSet, Iterable, Optional, Set
from storefront.client.api import WishlistApi
from storefront.client.constants import logger
from storefront.client.errors import MutationInFlightError, NotAuthenticatedError, WishlistClientError


def _ids(values: Iterable) -> Set[int]:
    return {int(v) for v in values}


class WishlistCache:
    """Client-side mirror of the signed-in user's wishlist.

    Owned by the session that creates it: start_session() on login or
    restore, end_session() on logout. Mutations are optimistic; the local set
    changes before the request goes out, is replaced wholesale by the server's
    canonical set on success, and is restored to the pre-mutation snapshot on
    failure.

    A product with a pending add/remove rejects further mutations until that
    request settles, so a late response cannot overwrite a newer intent for
    the same product. Each start_session/end_session opens a new epoch; a
    request that settles under an older epoch leaves the current state alone.
    """

    def __init__(self, api: Optional[WishlistApi] = None):
        self._api = api
        self._items: Set[int] = set()
        self._in_flight: Set[int] = set()
        self._clearing = False
        self._epoch = 0
        self.loading = False
        self.error: Optional[str] = None

    @property
    def items(self) -> FrozenSet[int]:
        return frozenset(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def pending(self) -> FrozenSet[int]:
        return frozenset(self._in_flight)

    @property
    def is_authenticated(self) -> bool:
        return self._api is not None and self._api.is_authenticated

    def contains(self, product_id: int) -> bool:
        return int(product_id) in self._items

    def clear_error(self) -> None:
        self.error = None

    # ---- lifecycle ----

    async def start_session(self, api: WishlistApi) -> FrozenSet[int]:
        self._api = api
        self._epoch += 1
        self._in_flight = set()
        self._clearing = False
        self.error = None
        return await self.fetch()

    def end_session(self) -> None:
        self._api = None
        self._epoch += 1
        self._items = set()
        self._in_flight = set()
        self._clearing = False
        self.loading = False
        self.error = None

    async def fetch(self) -> FrozenSet[int]:
        """Replace the local set with the server's. No request when signed out."""
        if not self.is_authenticated:
            self._items = set()
            return self.items

        epoch = self._epoch
        self.loading = True
        try:
            body = await self._api.get_wishlist()
        except WishlistClientError as exc:
            if self._epoch == epoch:
                # keep whatever we had; the error slot tells the UI
                self.error = exc.message
            logger.warning("wishlist.cache.fetch_failed", extra={"error": exc.message})
        else:
            if self._epoch == epoch:
                self._items = _ids(p["productId"] for p in body.get("wishlist") or [])
        finally:
            if self._epoch == epoch:
                self.loading = False

        return self.items

    # ---- mutations ----

    async def add(self, product_id: int) -> FrozenSet[int]:
        return await self._mutate(int(product_id), "add")

    async def remove(self, product_id: int) -> FrozenSet[int]:
        return await self._mutate(int(product_id), "remove")

    async def toggle(self, product_id: int) -> FrozenSet[int]:
        if self.contains(product_id):
            return await self.remove(product_id)
        return await self.add(product_id)

    async def clear(self) -> FrozenSet[int]:
        self._require_session()
        if self._in_flight or self._clearing:
            raise WishlistClientError("Wishlist has updates in progress")

        api, epoch = self._api, self._epoch
        snapshot = frozenset(self._items)
        self._items = set()
        self._clearing = True
        try:
            body = await api.clear()
        except WishlistClientError as exc:
            if self._epoch == epoch:
                self._rollback(snapshot, exc, "clear", None)
            raise
        finally:
            if self._epoch == epoch:
                self._clearing = False

        if self._epoch != epoch:
            return self.items

        return self._reconcile(body)

    def _require_session(self) -> None:
        if not self.is_authenticated:
            raise NotAuthenticatedError()

    async def _mutate(self, product_id: int, intent: str) -> FrozenSet[int]:
        self._require_session()
        api, epoch = self._api, self._epoch
        if product_id in self._in_flight or self._clearing:
            raise MutationInFlightError(product_id)

        snapshot = frozenset(self._items)
        if intent == "add":
            self._items.add(product_id)
        else:
            self._items.discard(product_id)
        self._in_flight.add(product_id)
        try:
            body = await (api.add(product_id) if intent == "add" else api.remove(product_id))
        except WishlistClientError as exc:
            if self._epoch == epoch:
                self._rollback(snapshot, exc, intent, product_id)
            raise
        finally:
            if self._epoch == epoch:
                self._in_flight.discard(product_id)

        if self._epoch != epoch:
            # session ended while the request was out
            return self.items

        return self._reconcile(body)

    def _reconcile(self, body: Dict) -> FrozenSet[int]:
        # replace, never merge: the server's set also heals earlier drift
        self._items = _ids(body.get("wishlist") or [])
        return self.items

    def _rollback(self, snapshot: FrozenSet[int], exc: WishlistClientError, intent: str,
                  product_id: Optional[int]) -> None:
        self._items = set(snapshot)
        self.error = exc.message
        logger.warning("wishlist.cache.rollback", extra={
            "intent": intent, "product_id": product_id, "status_code": exc.status_code, "error": exc.message,
        })
