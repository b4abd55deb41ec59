import pytest

from domain.models import OrderItem
from services.pricing_service import (
    customer_tier,
    finishing_surcharge,
    order_item_prices,
    parse_decimal,
    price,
    unit_price,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2", 2.0),
        ("1.5", 1.5),
        ("1.5m", 1.5),
        (" 3 ", 3.0),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        (4, 4.0),
    ],
)
def test_parse_decimal(raw, expected):
    assert parse_decimal(raw) == expected


def test_area_item_price(products, categories, customers, finishings):
    item = OrderItem(1, 1, "Mata Ayam", "Spanduk", "2", "1.5", 3)
    assert price(item, "Budi", products, categories, customers, finishings) == 150000


def test_piece_item_ignores_dimensions(products, categories, customers, finishings):
    item = OrderItem(1, 2, "", "Kartu nama", "9", "5", 2)
    assert price(item, "Budi", products, categories, customers, finishings) == 100000


def test_tier_price_used_for_customer_level(products, categories, customers, finishings):
    item = OrderItem(1, 1, "", "Banner", "1", "1", 1)
    assert price(item, "Toko Sinar", products, categories, customers, finishings) == 12000


def test_zero_tier_price_falls_back_to_end_customer(products):
    assert unit_price(products[1], "Grosir") == 50000


def test_unknown_customer_uses_default_tier(customers):
    assert customer_tier("Tidak Ada", customers) == "End Customer"


def test_missing_product_prices_zero(products, categories, customers, finishings):
    item = OrderItem(1, 99, "Mata Ayam", "?", "2", "2", 5)
    assert price(item, "Budi", products, categories, customers, finishings) == 0

    no_product = OrderItem(2, None, "", "?", "", "", 1)
    assert price(no_product, "Budi", products, categories, customers, finishings) == 0


def test_unknown_finishing_adds_nothing(finishings):
    assert finishing_surcharge("Laminasi", finishings) == 0
    assert finishing_surcharge("", finishings) == 0


def test_area_item_with_blank_dimension_keeps_surcharge(products, categories, customers, finishings):
    item = OrderItem(1, 1, "Mata Ayam", "Spanduk", "", "2", 2)
    assert price(item, "Budi", products, categories, customers, finishings) == 10000


def test_order_item_prices(snapshot):
    order = snapshot.order_by_id("NOTA-002")
    prices = order_item_prices(
        order, snapshot.products, snapshot.categories, snapshot.customers, snapshot.finishings,
    )
    assert prices == [100000, 50000, 12000]
