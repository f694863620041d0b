from datetime import datetime, timezone
from typing import Iterable, Optional

from pydantic import BaseModel

from kivo_admin.models import (
    Order,
    OrderStatus,
    Product,
    ProductStatus,
    Seller,
    SellerStatus,
    StoreSnapshot,
)

RECENT_ORDERS = 6
APPROVAL_QUEUE = 3
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class DashboardSummary(BaseModel):
    pending_products: int
    open_orders: int
    active_sellers: int
    recent_orders: list[Order]
    approval_queue: list[Product]


def _created(order: Order) -> datetime:
    """Aware UTC sort key; naive timestamps are read as UTC."""
    try:
        created = datetime.fromisoformat(order.created_at)
    except ValueError:
        # unparseable timestamps sink to the bottom of the list
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created.astimezone(timezone.utc)


def dashboard_summary(snapshot: StoreSnapshot) -> DashboardSummary:
    pending = [p for p in snapshot.products if p.status == ProductStatus.PENDING]
    open_orders = [o for o in snapshot.orders if o.status == OrderStatus.PENDING]
    active = [s for s in snapshot.sellers if s.status == SellerStatus.ACTIVE]
    recent = sorted(snapshot.orders, key=_created, reverse=True)[:RECENT_ORDERS]

    return DashboardSummary(
        pending_products=len(pending),
        open_orders=len(open_orders),
        active_sellers=len(active),
        recent_orders=recent,
        approval_queue=pending[:APPROVAL_QUEUE],
    )


# ── Products ─────────────────────────────────────────────────────────────────

def filter_products(
    products: Iterable[Product],
    status: Optional[ProductStatus] = None,
    fabric: Optional[str] = None,
) -> list[Product]:
    """``None`` for either filter means "all"."""
    return [
        p for p in products
        if (status is None or p.status == status)
        and (fabric is None or p.fabric == fabric)
    ]


def product_status_counts(
    products: Iterable[Product],
    fabric: Optional[str] = None,
) -> dict[str, int]:
    counts = {status.value: 0 for status in ProductStatus}
    for p in filter_products(products, fabric=fabric):
        counts[p.status.value] += 1
    return counts


def unique_fabrics(products: Iterable[Product]) -> list[str]:
    return sorted({p.fabric for p in products})


def pending_ids(products: Iterable[Product]) -> list[str]:
    return [p.id for p in products if p.status == ProductStatus.PENDING]


# ── Orders / sellers ─────────────────────────────────────────────────────────

def search_orders(orders: Iterable[Order], term: Optional[str] = None) -> list[Order]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(orders)
    return [
        o for o in orders
        if needle in o.id.lower()
        or needle in o.customer_name.lower()
        or needle in o.product_name.lower()
    ]


def sellers_by_status(sellers: Iterable[Seller], status: Optional[SellerStatus] = None) -> list[Seller]:
    return [s for s in sellers if status is None or s.status == status]
