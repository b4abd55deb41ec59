# percetakan/services/pricing_service.py

import logging
import re
from typing import List, Optional, Sequence

from domain.models import (
    DEFAULT_TIER,
    TIER_COLUMN,
    UNIT_AREA,
    CategoryData,
    CustomerData,
    FinishingData,
    Order,
    OrderItem,
    ProductData,
)

logger = logging.getLogger(__name__)

_DECIMAL_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_decimal(value) -> float:
    """
    Parse a length/width field the way the order form does: take the leading
    numeric part, anything blank or non-numeric is 0.

      "2"      -> 2.0
      "1.5m"   -> 1.5
      ""       -> 0.0
      "abc"    -> 0.0
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    match = _DECIMAL_PREFIX.match(str(value))
    if not match:
        return 0.0
    return float(match.group(0))


def customer_tier(customer_name: str, customers: Sequence[CustomerData]) -> str:
    customer = next((c for c in customers if c.name == customer_name), None)
    if customer is None or customer.level not in TIER_COLUMN:
        return DEFAULT_TIER
    return customer.level


def unit_price(product: ProductData, tier: str) -> float:
    price = getattr(product.price, TIER_COLUMN.get(tier, TIER_COLUMN[DEFAULT_TIER]), 0)
    # an unset tier column falls back to the End Customer price
    return price or product.price.end_customer


def find_product(product_id: Optional[int], products: Sequence[ProductData]) -> Optional[ProductData]:
    if not product_id:
        return None
    return next((p for p in products if p.id == product_id), None)


def is_area_based(product: ProductData, categories: Sequence[CategoryData]) -> bool:
    # joined on the category *name* stored on the product
    category = next((c for c in categories if c.name == product.category), None)
    return category is not None and category.unit_type == UNIT_AREA


def finishing_surcharge(name: str, finishings: Sequence[FinishingData]) -> float:
    finishing = next((f for f in finishings if f.name == name), None)
    return finishing.price if finishing else 0


def price(
        item: OrderItem,
        customer_name: str,
        products: Sequence[ProductData],
        categories: Sequence[CategoryData],
        customers: Sequence[CustomerData],
        finishings: Sequence[FinishingData],
) -> float:
    """
    Line total of one order item:

        (multiplier * unit_price + finishing_surcharge) * qty

    where multiplier is length * width for area-billed categories and 1
    otherwise. Every lookup degrades to a zero contribution when the
    referenced product, category or finishing cannot be found. No rounding.
    """
    product = find_product(item.product_id, products)
    if product is None:
        logger.debug("No product %r for item %s, pricing as 0", item.product_id, item.id)
        return 0

    tier = customer_tier(customer_name, customers)
    material = unit_price(product, tier)

    multiplier = 1.0
    if is_area_based(product, categories):
        multiplier = parse_decimal(item.length) * parse_decimal(item.width)

    surcharge = finishing_surcharge(item.finishing, finishings)
    return (multiplier * material + surcharge) * (item.qty or 0)


def order_item_prices(
        order: Order,
        products: Sequence[ProductData],
        categories: Sequence[CategoryData],
        customers: Sequence[CustomerData],
        finishings: Sequence[FinishingData],
) -> List[float]:
    return [
        price(item, order.customer, products, categories, customers, finishings)
        for item in order.items
    ]
