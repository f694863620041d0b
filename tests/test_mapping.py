import pytest

from kivo_admin.mapping import (
    MappingError,
    from_row,
    order_from_row,
    order_to_row,
    product_from_row,
    product_to_row,
    seller_from_row,
    seller_to_row,
    to_view,
)
from kivo_admin.models import OrderStatus, SellerStatus

ORDER_ROW = {
    "id": "ORD-9001",
    "product_name": "Midnight Velvet Blazer",
    "size": "M",
    "customer_name": "Kabir Mehta",
    "address": "7, Civil Lines, Jaipur, RJ",
    "created_at": "2024-03-02T18:45:00",
    "amount": 12499,
    "status": "out_for_delivery",
    "rider_name": "Arjun Rao",
    "image_url": "https://cdn.kivo.test/o9001.jpg",
}

PRODUCT_ROW = {
    "id": "P200",
    "title": "Chikankari Kurta",
    "fabric": "Cotton Mul",
    "fit": "Straight",
    "price": 3450.5,
    "sizes": ["S", "M"],
    "stock": 14,
    "image_url": "https://cdn.kivo.test/p200.jpg",
    "status": "rejected",
    "sku": "KIVO-CHK-200",
}

SELLER_ROW = {
    "id": "S200",
    "name": "Lucknow Looms",
    "shop_name": "Threadcraft",
    "email": "ops@looms.test",
    "acceptance_rate": 77.5,
    "status": "suspended",
    "joined_at": "2023-11-30",
}


class TestRoundTrip:
    def test_order_round_trip(self):
        order = order_from_row(ORDER_ROW)
        assert order.rider_name == "Arjun Rao"
        assert order.status == OrderStatus.OUT_FOR_DELIVERY
        assert order_to_row(order) == ORDER_ROW

    def test_product_round_trip(self):
        assert product_to_row(product_from_row(PRODUCT_ROW)) == PRODUCT_ROW

    def test_seller_round_trip(self):
        seller = seller_from_row(SELLER_ROW)
        assert seller.shop_name == "Threadcraft"
        assert seller.status == SellerStatus.SUSPENDED
        assert seller_to_row(seller) == SELLER_ROW

    def test_null_rider_is_absent(self):
        row = {**ORDER_ROW, "status": "pending", "rider_name": None}
        order = order_from_row(row)
        assert order.rider_name is None
        assert "rider_name" not in order_to_row(order)

    def test_extra_columns_ignored(self):
        seller = seller_from_row({**SELLER_ROW, "inserted_at": "2023-11-30T00:00:00"})
        assert seller_to_row(seller) == SELLER_ROW


class TestViewPayload:
    def test_view_uses_camel_case(self):
        view = to_view(order_from_row(ORDER_ROW))
        assert view["productName"] == "Midnight Velvet Blazer"
        assert view["customerName"] == "Kabir Mehta"
        assert view["createdAt"] == "2024-03-02T18:45:00"
        assert view["riderName"] == "Arjun Rao"
        assert view["imageUrl"] == "https://cdn.kivo.test/o9001.jpg"
        assert "product_name" not in view

    def test_seller_view(self):
        view = to_view(seller_from_row(SELLER_ROW))
        assert view["shopName"] == "Threadcraft"
        assert view["acceptanceRate"] == 77.5
        assert view["joinedAt"] == "2023-11-30"


class TestErrors:
    def test_missing_field_raises_mapping_error(self):
        row = {k: v for k, v in PRODUCT_ROW.items() if k != "sku"}
        with pytest.raises(MappingError) as exc:
            product_from_row(row)
        assert exc.value.collection == "products"

    def test_unknown_status_raises(self):
        with pytest.raises(MappingError):
            seller_from_row({**SELLER_ROW, "status": "banned"})

    def test_unknown_collection(self):
        with pytest.raises(ValueError, match="Unknown collection"):
            from_row("customers", {"id": "C1"})
