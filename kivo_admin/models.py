from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ProductStatus(str, Enum):
    PENDING = "pending"
    IN_STOCK = "in_stock"
    REJECTED = "rejected"


class OrderStatus(str, Enum):
    PENDING = "pending"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class SellerStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


# statuses an admin may move a pending listing to
REVIEW_OUTCOMES = frozenset({ProductStatus.IN_STOCK, ProductStatus.REJECTED})


class InvalidTransition(ValueError):
    """Raised when a record is asked to leave a status it can no longer leave."""


class Record(BaseModel):
    # records are replaced on every change, never edited in place
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str


class Product(Record):
    title: str
    fabric: str
    fit: str
    price: float
    sizes: tuple[str, ...]
    stock: int
    image_url: str
    status: ProductStatus
    sku: str


class Order(Record):
    product_name: str
    size: str
    customer_name: str
    address: str
    created_at: str  # ISO-8601, kept as the remote sends it
    amount: float
    status: OrderStatus
    rider_name: Optional[str] = None  # only set once out for delivery
    image_url: str


class Seller(Record):
    name: str
    shop_name: str
    email: str
    acceptance_rate: float  # percentage, 0-100
    status: SellerStatus
    joined_at: str


# ── Read snapshot ────────────────────────────────────────────────────────────

class StoreSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    products: tuple[Product, ...]
    orders: tuple[Order, ...]
    sellers: tuple[Seller, ...]
    loading: bool
