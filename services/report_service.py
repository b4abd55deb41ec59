# percetakan/services/report_service.py

import logging
from typing import Dict, List, Optional, Sequence

from domain.models import (
    UNPROCESSED,
    AssetItem,
    CustomerSalesRow,
    DebtItem,
    InventoryItem,
    InventoryRow,
    Order,
    ProductSalesRow,
    ReceivableItem,
    ReceivableRow,
    SalesRow,
    Snapshot,
)
from services.pricing_service import find_product, order_item_prices
from utils.dates import in_range

logger = logging.getLogger(__name__)

LOW_STOCK = "Stok Menipis"
IN_STOCK = "Tersedia"


def filter_orders(
        orders: Sequence[Order],
        start: Optional[str],
        end: Optional[str],
        customer: Optional[str] = None,
) -> List[Order]:
    return [
        o for o in orders
        if in_range(o.order_date, start, end) and (not customer or o.customer == customer)
    ]


def sales_summary(orders: Sequence[Order]) -> Dict[str, float]:
    total_sales = sum(o.total_price for o in orders)
    transactions = len(orders)
    return {
        "total_sales": total_sales,
        "transactions": transactions,
        "items": sum(item.qty for o in orders for item in o.items),
        "average": total_sales / transactions if transactions else 0,
    }


def _item_prices(order: Order, snapshot: Snapshot) -> List[float]:
    return order_item_prices(
        order, snapshot.products, snapshot.categories, snapshot.customers, snapshot.finishings,
    )


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------

def detailed_sales_rows(
        orders: Sequence[Order],
        snapshot: Snapshot,
        reconcile: bool = True,
) -> List[SalesRow]:
    """
    One row per order item, priced by the pricing resolver.

    With `reconcile`, the last item of each order absorbs the difference
    between the stored order total and the derived item total so the rows
    add up to what was billed. The export path passes reconcile=False and
    shows the derived prices as they are.
    """
    receivables = {r.id: r for r in snapshot.receivables}
    rows: List[SalesRow] = []

    for order in orders:
        prices = _item_prices(order, snapshot)
        if reconcile and prices:
            prices[-1] += order.total_price - sum(prices)

        receivable = receivables.get(order.id)
        status = receivable.payment_status if receivable else UNPROCESSED

        for item, item_total in zip(order.items, prices):
            product = find_product(item.product_id, snapshot.products)
            rows.append(
                SalesRow(
                    no=len(rows) + 1,
                    date=order.order_date,
                    order_id=order.id,
                    customer=order.customer,
                    description=item.description,
                    material=product.name if product else "N/A",
                    length=item.length,
                    width=item.width,
                    qty=item.qty,
                    total=item_total,
                    status=status,
                )
            )

    return rows


def sort_sales_rows(rows: Sequence[SalesRow], key: str = "order_id", descending: bool = True) -> List[SalesRow]:
    """
    Sort by any SalesRow attribute and renumber. Text compares
    case-insensitively with digit runs compared as numbers.
    """
    def sort_key(row: SalesRow):
        value = getattr(row, key)
        if isinstance(value, (int, float)):
            return (0, value)
        return (1, _natural_key(str(value)))

    ordered = sorted(rows, key=sort_key, reverse=descending)
    return [
        SalesRow(**{**row.__dict__, "no": i})
        for i, row in enumerate(ordered, start=1)
    ]


def _natural_key(text: str):
    parts = []
    digits = ""
    for ch in text.lower():
        if ch.isdigit():
            digits += ch
            continue
        if digits:
            parts.append((0, int(digits), ""))
            digits = ""
        parts.append((1, 0, ch))
    if digits:
        parts.append((0, int(digits), ""))
    return parts


def sales_by_product(orders: Sequence[Order], snapshot: Snapshot) -> List[ProductSalesRow]:
    grouped: Dict[str, ProductSalesRow] = {}

    for order in orders:
        for item, item_total in zip(order.items, _item_prices(order, snapshot)):
            product = find_product(item.product_id, snapshot.products)
            name = product.name if product else "N/A"
            row = grouped.setdefault(name, ProductSalesRow(product=name, quantity=0, revenue=0))
            row.quantity += item.qty
            row.revenue += item_total

    return sorted(grouped.values(), key=lambda r: r.quantity, reverse=True)


def sales_by_customer(orders: Sequence[Order], snapshot: Snapshot) -> List[CustomerSalesRow]:
    """
    Spend is re-derived from current prices and can differ from the stored
    order totals when prices changed after the order was taken.
    """
    grouped: Dict[str, CustomerSalesRow] = {}

    for order in orders:
        row = grouped.setdefault(
            order.customer, CustomerSalesRow(customer=order.customer, orders=0, items=0, spend=0),
        )
        row.orders += 1
        row.items += len(order.items)
        row.spend += sum(_item_prices(order, snapshot))

    return sorted(grouped.values(), key=lambda r: r.spend, reverse=True)


# ---------------------------------------------------------------------------
# Receivables
# ---------------------------------------------------------------------------

def receivable_rows(
        receivables: Sequence[ReceivableItem],
        orders: Sequence[Order],
        start: Optional[str],
        end: Optional[str],
        customer: Optional[str] = None,
) -> List[ReceivableRow]:
    """
    Receivables whose order date falls in range. A receivable without a
    matching order has no date to filter on and is left out.
    """
    order_dates = {o.id: o.order_date for o in orders}
    rows: List[ReceivableRow] = []

    for r in receivables:
        order_date = order_dates.get(r.id)
        if order_date is None or not in_range(order_date, start, end):
            continue
        if customer and r.customer != customer:
            continue
        rows.append(
            ReceivableRow(
                id=r.id,
                customer=r.customer,
                amount=r.amount,
                paid=r.paid,
                remaining=r.active_remaining,
                payment_status=r.payment_status,
                production_status=r.production_status,
                due=r.due,
            )
        )

    rows.sort(key=lambda row: row.id, reverse=True)
    return rows


# ---------------------------------------------------------------------------
# Inventory, assets
# ---------------------------------------------------------------------------

def inventory_rows(inventory: Sequence[InventoryItem], low_stock_threshold: float = 5) -> List[InventoryRow]:
    return [
        InventoryRow(
            id=i.id,
            name=i.name,
            sku=i.sku,
            type=i.type,
            stock=i.stock,
            unit=i.unit,
            status=LOW_STOCK if i.stock <= low_stock_threshold else IN_STOCK,
        )
        for i in inventory
    ]


def usage_in_range(item: InventoryItem, start: Optional[str], end: Optional[str]) -> float:
    return sum(u.amount_used for u in item.usage_history if in_range(u.date, start, end))


def assets_debts_summary(assets: Sequence[AssetItem], debts: Sequence[DebtItem]) -> Dict[str, float]:
    total_assets = sum(a.value for a in assets)
    total_debts = sum(d.value for d in debts)
    return {
        "total_assets": total_assets,
        "total_debts": total_debts,
        "net_worth": total_assets - total_debts,
    }
