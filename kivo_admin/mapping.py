"""Translation between remote rows, internal records and view payloads.

The remote collection service stores snake_case columns (``image_url``,
``rider_name``, ``shop_name`` ...), the admin UI consumes camelCase keys
(``imageUrl``, ``riderName``, ``shopName`` ...). Records keep snake_case
attribute names and carry camelCase aliases, so both directions are a
validate or dump call with the right options.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from kivo_admin.models import Order, Product, Record, Seller

COLLECTIONS: dict[str, type[Record]] = {
    "products": Product,
    "orders": Order,
    "sellers": Seller,
}


class MappingError(ValueError):
    """Raised when a remote row cannot be turned into a record."""

    def __init__(self, collection: str, message: str) -> None:
        self.collection = collection
        super().__init__(f"Invalid {collection} row: {message}")


def model_for(collection: str) -> type[Record]:
    model = COLLECTIONS.get(collection)
    if model is None:
        raise ValueError(f"Unknown collection '{collection}'")
    return model


def from_row(collection: str, row: Mapping[str, Any]) -> Record:
    model = model_for(collection)
    try:
        return model.model_validate(dict(row))
    except ValidationError as exc:
        raise MappingError(collection, str(exc)) from exc


def from_rows(collection: str, rows: list[Mapping[str, Any]]) -> list[Record]:
    return [from_row(collection, row) for row in rows]


def to_row(record: Record) -> dict[str, Any]:
    """Remote representation; absent optionals (``rider_name``) are omitted."""
    return record.model_dump(mode="json", exclude_none=True)


def to_view(record: Record) -> dict[str, Any]:
    """camelCase payload for the admin UI."""
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def product_from_row(row: Mapping[str, Any]) -> Product:
    return from_row("products", row)


def order_from_row(row: Mapping[str, Any]) -> Order:
    return from_row("orders", row)


def seller_from_row(row: Mapping[str, Any]) -> Seller:
    return from_row("sellers", row)


def product_to_row(product: Product) -> dict[str, Any]:
    return to_row(product)


def order_to_row(order: Order) -> dict[str, Any]:
    return to_row(order)


def seller_to_row(seller: Seller) -> dict[str, Any]:
    return to_row(seller)
