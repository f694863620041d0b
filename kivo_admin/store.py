"""
Optimistic store for the products, orders and sellers collections.

Every operation updates local state synchronously and then schedules the
matching remote write as a background task. Nothing waits for that task and
nothing is rolled back when it fails: the local state always reflects the
last operation applied, the remote may silently lag or diverge.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from kivo_admin.mapping import COLLECTIONS, from_rows
from kivo_admin.models import (
    REVIEW_OUTCOMES,
    InvalidTransition,
    Order,
    OrderStatus,
    Product,
    ProductStatus,
    Record,
    Seller,
    SellerStatus,
    StoreSnapshot,
)
from kivo_admin.remote import RemoteCollectionService
from kivo_admin.sample_data import SAMPLES

logger = logging.getLogger(__name__)


class SyncedCollectionStore:
    def __init__(
        self,
        remote: Optional[RemoteCollectionService] = None,
        *,
        loading_timeout: float = 2.5,
    ) -> None:
        self._remote = remote
        self._loading_timeout = loading_timeout
        self._collections: dict[str, list[Record]] = {
            name: SAMPLES[name]() for name in COLLECTIONS
        }
        self._loading = False
        self._initialized = False
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()

    # ── reads ─────────────────────────────────────────────────────────────────

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._collections["products"])

    @property
    def orders(self) -> tuple[Order, ...]:
        return tuple(self._collections["orders"])

    @property
    def sellers(self) -> tuple[Seller, ...]:
        return tuple(self._collections["sellers"])

    @property
    def loading(self) -> bool:
        return self._loading

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            products=self.products,
            orders=self.orders,
            sellers=self.sellers,
            loading=self._loading,
        )

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._find("products", product_id)

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._find("orders", order_id)

    def get_seller(self, seller_id: str) -> Optional[Seller]:
        return self._find("sellers", seller_id)

    def _find(self, collection: str, record_id: str) -> Optional[Record]:
        return next((r for r in self._collections[collection] if r.id == record_id), None)

    # ── initial load ──────────────────────────────────────────────────────────

    def start(self) -> None:
        """Schedule ``initialize`` without waiting for it."""
        if self._initialized:
            return
        if self._remote is None:
            self._serve_samples()
            return
        self._loading = True
        self._spawn(self.initialize())

    async def initialize(self) -> None:
        if self._initialized:
            return
        if self._remote is None:
            self._serve_samples()
            return

        self._initialized = True
        self._loading = True
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._loading_timeout, self._loading_timed_out)
        try:
            await asyncio.gather(*(self._load(name) for name in COLLECTIONS))
        finally:
            self._cancel_timer()
            self._loading = False

    def _serve_samples(self) -> None:
        self._initialized = True
        self._loading = False
        logger.warning("Remote collection service not configured; serving sample data")

    async def _load(self, collection: str) -> None:
        try:
            rows = await self._remote.select_all(collection)
            records = from_rows(collection, rows)
        except Exception as exc:
            logger.warning("Fetching %s failed, keeping sample data: %s", collection, exc)
            return

        if not records:
            logger.info("Remote %s is empty, keeping sample data", collection)
            return
        # may land after the loading timer fired; the fetch is never aborted
        self._collections[collection] = records
        logger.info("Loaded %d %s from remote", len(records), collection)

    def _loading_timed_out(self) -> None:
        self._timer = None
        if self._loading:
            logger.info(
                "Initial fetch still pending after %.1fs; clearing loading flag",
                self._loading_timeout,
            )
        self._loading = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ── writes ────────────────────────────────────────────────────────────────

    def update_product_status(self, product_id: str, status: ProductStatus | str) -> bool:
        status = ProductStatus(status)
        if status not in REVIEW_OUTCOMES:
            raise ValueError(f"Products can only be moved to {sorted(s.value for s in REVIEW_OUTCOMES)}")

        product = self.get_product(product_id)
        if product is None:
            return False
        if product.status != ProductStatus.PENDING:
            raise InvalidTransition(f"Product {product_id} is already {product.status.value}")

        changed = self._apply("products", {product_id}, lambda p: p.model_copy(update={"status": status}))
        if changed:
            self._persist(
                f"status of product {product_id}",
                lambda remote: remote.update_by_id("products", product_id, {"status": status.value}),
            )
        return bool(changed)

    def bulk_approve_products(self, product_ids: Iterable[str]) -> int:
        requested = set(product_ids)
        # only pending listings can be approved
        wanted = {
            p.id for p in self._collections["products"]
            if p.id in requested and p.status == ProductStatus.PENDING
        }
        changed = self._apply(
            "products",
            wanted,
            lambda p: p.model_copy(update={"status": ProductStatus.IN_STOCK}),
        )
        if changed:
            self._persist(
                f"approval of {len(changed)} products",
                lambda remote: remote.update_by_ids(
                    "products", changed, {"status": ProductStatus.IN_STOCK.value}
                ),
            )
        return len(changed)

    def assign_delivery(self, order_id: str, rider_name: str) -> bool:
        rider = (rider_name or "").strip()
        if not rider:
            logger.warning("Ignoring delivery assignment for %s without a rider name", order_id)
            return False

        order = self.get_order(order_id)
        if order is None:
            return False
        if order.status != OrderStatus.PENDING:
            raise InvalidTransition(f"Order {order_id} is already {order.status.value}")

        changed = self._apply(
            "orders",
            {order_id},
            lambda o: o.model_copy(update={"status": OrderStatus.OUT_FOR_DELIVERY, "rider_name": rider}),
        )
        if changed:
            self._persist(
                f"delivery assignment of order {order_id}",
                lambda remote: remote.update_by_id(
                    "orders",
                    order_id,
                    {"rider_name": rider, "status": OrderStatus.OUT_FOR_DELIVERY.value},
                ),
            )
        return bool(changed)

    def toggle_seller_status(self, seller_id: str) -> bool:
        def flip(seller: Seller) -> Seller:
            new_status = (
                SellerStatus.SUSPENDED if seller.status == SellerStatus.ACTIVE else SellerStatus.ACTIVE
            )
            return seller.model_copy(update={"status": new_status})

        changed = self._apply("sellers", {seller_id}, flip)
        if changed:
            new_status = self.get_seller(seller_id).status
            self._persist(
                f"status of seller {seller_id}",
                lambda remote: remote.update_by_id("sellers", seller_id, {"status": new_status.value}),
            )
        return bool(changed)

    def _apply(
        self,
        collection: str,
        ids: set[str],
        change: Callable[[Any], Record],
    ) -> list[str]:
        """Replace every record whose id is in ``ids``; return the ids touched."""
        touched: list[str] = []
        records: list[Record] = []
        for record in self._collections[collection]:
            if record.id in ids:
                record = change(record)
                touched.append(record.id)
            records.append(record)
        self._collections[collection] = records
        return touched

    # ── background persistence ────────────────────────────────────────────────

    def _persist(
        self,
        description: str,
        write: Callable[[RemoteCollectionService], Awaitable[None]],
    ) -> None:
        if self._remote is None:
            logger.debug("Remote not configured; %s kept locally only", description)
            return
        self._spawn(self._write(description, write))

    async def _write(
        self,
        description: str,
        write: Callable[[RemoteCollectionService], Awaitable[None]],
    ) -> None:
        try:
            await write(self._remote)
        except Exception as exc:
            logger.error("Persisting %s failed; local change kept: %s", description, exc)

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for the initial load and every in-flight remote write."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        self._cancel_timer()
        if self._remote is not None:
            await self._remote.close()
