"""
Bundled demo records.

Produces:
  - 7 products  (six pending review, P005 already in stock)
  - 3 orders    (ORD-7783 already out for delivery)
  - 3 sellers   (S003 suspended)

Used as the initial state of every store and as the fallback whenever the
remote collection service is unreachable, unconfigured or empty. Every call
builds fresh records so no store can leak changes back into the defaults.
"""

from kivo_admin.models import (
    Order,
    OrderStatus,
    Product,
    ProductStatus,
    Seller,
    SellerStatus,
)

_IMG = "https://images.unsplash.com/photo-{}?q=80&w={}&auto=format&fit=crop"


def sample_products() -> list[Product]:
    return [
        Product(
            id="P001",
            title="Royal Silk Banarasi Saree",
            fabric="Pure Silk",
            fit="Drape",
            price=18500,
            sizes=["Free Size"],
            stock=5,
            image_url=_IMG.format("1610189012906-4783382c52e4", 600),
            status=ProductStatus.PENDING,
            sku="KIVO-SILK-001",
        ),
        Product(
            id="P002",
            title="Midnight Velvet Blazer",
            fabric="Italian Velvet",
            fit="Slim Tailored",
            price=12499,
            sizes=["S", "M", "L", "XL"],
            stock=12,
            image_url=_IMG.format("1591047139829-d91aecb6caea", 600),
            status=ProductStatus.PENDING,
            sku="KIVO-VEL-002",
        ),
        Product(
            id="P003",
            title="Bohemian Floral Maxi",
            fabric="Chiffon",
            fit="Flowing",
            price=4800,
            sizes=["XS", "S", "M"],
            stock=25,
            image_url=_IMG.format("1572804013309-59a88b7e92f1", 600),
            status=ProductStatus.PENDING,
            sku="KIVO-BOHO-003",
        ),
        Product(
            id="P004",
            title="Minimalist Linen Set",
            fabric="Organic Linen",
            fit="Relaxed",
            price=6500,
            sizes=["M", "L", "XL"],
            stock=18,
            image_url=_IMG.format("1515886657613-9f3515b0c78f", 600),
            status=ProductStatus.PENDING,
            sku="KIVO-LIN-004",
        ),
        Product(
            id="P005",
            title="Urban Street Jacket",
            fabric="Denim & Leather",
            fit="Oversized",
            price=8900,
            sizes=["S", "M", "L"],
            stock=30,
            image_url=_IMG.format("1551488852-080175923fab", 600),
            status=ProductStatus.IN_STOCK,
            sku="KIVO-URB-005",
        ),
        Product(
            id="P006",
            title="Emerald Evening Gown",
            fabric="Satin",
            fit="Bodycon",
            price=15000,
            sizes=["S", "M"],
            stock=8,
            image_url=_IMG.format("1566174053879-31528523f8ae", 600),
            status=ProductStatus.PENDING,
            sku="KIVO-EVE-006",
        ),
        Product(
            id="P007",
            title="Handcrafted Leather Tote",
            fabric="Full Grain Leather",
            fit="One Size",
            price=22000,
            sizes=["One Size"],
            stock=3,
            image_url=_IMG.format("1590874103328-eac38a683ce7", 600),
            status=ProductStatus.PENDING,
            sku="KIVO-ACC-007",
        ),
    ]


def sample_orders() -> list[Order]:
    return [
        Order(
            id="ORD-7782",
            product_name="Royal Silk Banarasi Saree",
            size="Free Size",
            customer_name="Ananya Gupta",
            address="12, Palm Grove, Mumbai, MH",
            created_at="2023-10-25T10:30:00",
            amount=18500,
            status=OrderStatus.PENDING,
            image_url=_IMG.format("1610189012906-4783382c52e4", 200),
        ),
        Order(
            id="ORD-7783",
            product_name="Urban Street Jacket",
            size="L",
            customer_name="Rahul Verma",
            address="4B, Green Park, Delhi, DL",
            created_at="2023-10-25T11:15:00",
            amount=8900,
            status=OrderStatus.OUT_FOR_DELIVERY,
            rider_name="Vikram Singh",
            image_url=_IMG.format("1551488852-080175923fab", 200),
        ),
        Order(
            id="ORD-7784",
            product_name="Bohemian Floral Maxi",
            size="M",
            customer_name="Priya Sharma",
            address="88, Lake View, Bangalore, KA",
            created_at="2023-10-25T12:00:00",
            amount=4800,
            status=OrderStatus.PENDING,
            image_url=_IMG.format("1572804013309-59a88b7e92f1", 200),
        ),
    ]


def sample_sellers() -> list[Seller]:
    return [
        Seller(
            id="S001",
            name="Ethnic Weaves Ltd.",
            shop_name="The Silk Route",
            email="contact@ethnicweaves.com",
            acceptance_rate=98,
            status=SellerStatus.ACTIVE,
            joined_at="2023-01-15",
        ),
        Seller(
            id="S002",
            name="Urban Threads",
            shop_name="Urban Mode",
            email="hello@urbanthreads.io",
            acceptance_rate=85,
            status=SellerStatus.ACTIVE,
            joined_at="2023-03-22",
        ),
        Seller(
            id="S003",
            name="Jaipur Block Prints",
            shop_name="Rajasthan Colors",
            email="info@jaipurblocks.net",
            acceptance_rate=62,
            status=SellerStatus.SUSPENDED,
            joined_at="2023-05-10",
        ),
    ]


SAMPLES = {
    "products": sample_products,
    "orders": sample_orders,
    "sellers": sample_sellers,
}
