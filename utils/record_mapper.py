# percetakan/utils/record_mapper.py

"""
Row <-> dataclass conversion for the record store. Rows are the camelCase
JSON objects stored in Supabase. Reading is lenient: missing keys fall back
to empty defaults so that old rows still load.
"""

from typing import Any, Dict, List, Optional

from domain.models import (
    DEFAULT_TIER,
    AssetItem,
    CategoryData,
    CustomerData,
    DebtItem,
    ExpenseItem,
    FinishingData,
    InventoryItem,
    LegacyExpense,
    LegacyIncome,
    LegacyReceivable,
    NotificationSettings,
    Order,
    OrderItem,
    Payment,
    PaymentMethod,
    ProductData,
    ProductPrice,
    ReceivableItem,
    Snapshot,
    StockUsageRecord,
)


def _num(value: Any, default: float = 0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def order_item_from_row(row: Dict[str, Any]) -> OrderItem:
    custom = row.get("customPrice")
    return OrderItem(
        id=row.get("id") or 0,
        product_id=row.get("productId"),
        finishing=_str(row.get("finishing")),
        description=_str(row.get("description")),
        length=_str(row.get("length")),
        width=_str(row.get("width")),
        qty=_num(row.get("qty")),
        custom_price=_num(custom) if custom is not None else None,
    )


def order_from_row(row: Dict[str, Any]) -> Order:
    return Order(
        id=_str(row.get("id")),
        customer=_str(row.get("customer")),
        order_date=_str(row.get("orderDate"))[:10],
        items=[order_item_from_row(i) for i in row.get("orderItems") or []],
        details=_str(row.get("details")),
        total_price=_num(row.get("totalPrice")),
    )


def payment_from_row(row: Dict[str, Any]) -> Payment:
    return Payment(
        amount=_num(row.get("amount")),
        date=_str(row.get("date"))[:10],
        method_id=_str(row.get("methodId")),
        method_name=_str(row.get("methodName")),
    )


def receivable_from_row(row: Dict[str, Any]) -> ReceivableItem:
    return ReceivableItem(
        id=_str(row.get("id")),
        customer=_str(row.get("customer")),
        amount=_num(row.get("amount")),
        due=_str(row.get("due"))[:10],
        payment_status=_str(row.get("paymentStatus")),
        production_status=_str(row.get("productionStatus")),
        payments=[payment_from_row(p) for p in row.get("payments") or []],
        discount=_num(row.get("discount")),
        delivery_date=_str(row.get("deliveryDate"))[:10] or None,
        delivery_note=row.get("deliveryNote"),
    )


def expense_from_row(row: Dict[str, Any]) -> ExpenseItem:
    return ExpenseItem(
        id=row.get("id") or 0,
        name=_str(row.get("name")),
        category=_str(row.get("category")),
        amount=_num(row.get("amount")),
        date=_str(row.get("date"))[:10],
    )


def inventory_from_row(row: Dict[str, Any]) -> InventoryItem:
    return InventoryItem(
        id=row.get("id") or 0,
        name=_str(row.get("name")),
        sku=_str(row.get("sku")),
        stock=_num(row.get("stock")),
        unit=_str(row.get("unit")),
        type=_str(row.get("type")),
        usage_history=[
            StockUsageRecord(date=_str(u.get("date"))[:10], amount_used=_num(u.get("amountUsed")))
            for u in row.get("usageHistory") or []
        ],
    )


def product_from_row(row: Dict[str, Any]) -> ProductData:
    price = row.get("price") or {}
    return ProductData(
        id=row.get("id") or 0,
        name=_str(row.get("name")),
        category=_str(row.get("category")),
        price=ProductPrice(
            end_customer=_num(price.get("endCustomer")),
            retail=_num(price.get("retail")),
            grosir=_num(price.get("grosir")),
            reseller=_num(price.get("reseller")),
            corporate=_num(price.get("corporate")),
        ),
    )


def category_from_row(row: Dict[str, Any]) -> CategoryData:
    return CategoryData(id=row.get("id") or 0, name=_str(row.get("name")), unit_type=_str(row.get("unitType")))


def finishing_from_row(row: Dict[str, Any]) -> FinishingData:
    return FinishingData(id=row.get("id") or 0, name=_str(row.get("name")), price=_num(row.get("price")))


def customer_from_row(row: Dict[str, Any]) -> CustomerData:
    return CustomerData(
        id=row.get("id") or 0,
        name=_str(row.get("name")),
        contact=_str(row.get("contact")),
        level=row.get("level") or DEFAULT_TIER,
    )


def legacy_receivable_from_row(row: Dict[str, Any]) -> LegacyReceivable:
    return LegacyReceivable(
        id=row.get("id") or 0,
        customer=_str(row.get("customer")),
        date=_str(row.get("date"))[:10],
        amount=_num(row.get("amount")),
    )


def notification_settings_from_value(value: Optional[Dict[str, Any]], defaults: NotificationSettings) -> NotificationSettings:
    """app_settings "notificationSettings" value; unset keys keep `defaults`."""
    value = value or {}

    def flag(key: str, default: bool) -> bool:
        return default if value.get(key) is None else bool(value.get(key))

    return NotificationSettings(
        low_stock_alert=flag("lowStockAlert", defaults.low_stock_alert),
        low_stock_threshold=_num(value.get("lowStockThreshold"), defaults.low_stock_threshold),
        receivable_due_soon_alert=flag("receivableDueSoonAlert", defaults.receivable_due_soon_alert),
        receivable_due_soon_days=int(_num(value.get("receivableDueSoonDays"), defaults.receivable_due_soon_days)),
        receivable_overdue_alert=flag("receivableOverdueAlert", defaults.receivable_overdue_alert),
        new_order_in_queue_alert=flag("newOrderInQueueAlert", defaults.new_order_in_queue_alert),
        default_due_date_days=int(_num(value.get("defaultDueDateDays"), defaults.default_due_date_days)),
    )


def payment_methods_from_value(value: Optional[List[Dict[str, Any]]]) -> List[PaymentMethod]:
    return [
        PaymentMethod(
            id=_str(m.get("id")),
            name=_str(m.get("name")),
            type=_str(m.get("type")) or "Tunai",
            details=_str(m.get("details")),
        )
        for m in value or []
    ]


def _single(rows: List[Dict[str, Any]], cls):
    if not rows:
        return None
    row = rows[0]
    return cls(last_date=_str(row.get("lastDate"))[:10], amount=_num(row.get("amount")))


def snapshot_from_tables(
        tables: Dict[str, List[Dict[str, Any]]],
        permissions: Optional[List[str]] = None,
        notification_settings: Optional[NotificationSettings] = None,
        payment_methods: Optional[List[PaymentMethod]] = None,
) -> Snapshot:
    """
    Build a Snapshot from {table_name: rows}. Missing tables are empty.
    The production board is left empty; see ledger_service.build_board.
    """
    def rows(name: str) -> List[Dict[str, Any]]:
        return tables.get(name) or []

    return Snapshot(
        orders=[order_from_row(r) for r in rows("orders")],
        receivables=[receivable_from_row(r) for r in rows("receivables")],
        expenses=[expense_from_row(r) for r in rows("expenses")],
        inventory=[inventory_from_row(r) for r in rows("inventory")],
        products=[product_from_row(r) for r in rows("products")],
        categories=[category_from_row(r) for r in rows("categories")],
        finishings=[finishing_from_row(r) for r in rows("finishings")],
        customers=[customer_from_row(r) for r in rows("customers")],
        legacy_income=_single(rows("legacy_income"), LegacyIncome),
        legacy_expense=_single(rows("legacy_expense"), LegacyExpense),
        legacy_receivables=[legacy_receivable_from_row(r) for r in rows("legacy_receivables")],
        assets=[AssetItem(id=r.get("id") or 0, name=_str(r.get("name")), value=_num(r.get("value"))) for r in rows("assets")],
        debts=[DebtItem(id=r.get("id") or 0, name=_str(r.get("name")), value=_num(r.get("value"))) for r in rows("debts")],
        permissions=list(permissions or []),
        notification_settings=notification_settings or NotificationSettings(),
        payment_methods=list(payment_methods or []),
    )


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def expense_to_row(expense: ExpenseItem) -> Dict[str, Any]:
    return {
        "name": expense.name,
        "category": expense.category,
        "amount": expense.amount,
        "date": expense.date,
    }


def usage_history_to_rows(item: InventoryItem) -> List[Dict[str, Any]]:
    return [{"date": u.date, "amountUsed": u.amount_used} for u in item.usage_history]


def receivable_to_row(receivable: ReceivableItem) -> Dict[str, Any]:
    return {
        "id": receivable.id,
        "customer": receivable.customer,
        "amount": receivable.amount,
        "due": receivable.due,
        "paymentStatus": receivable.payment_status,
        "productionStatus": receivable.production_status,
        "payments": [
            {"amount": p.amount, "date": p.date, "methodId": p.method_id, "methodName": p.method_name}
            for p in receivable.payments
        ],
        "discount": receivable.discount,
        "deliveryDate": receivable.delivery_date,
        "deliveryNote": receivable.delivery_note,
    }


def legacy_receivable_to_row(item: LegacyReceivable) -> Dict[str, Any]:
    # the store assigns ids
    return {"customer": item.customer, "date": item.date, "amount": item.amount}


def named_value_to_row(item) -> Dict[str, Any]:
    """AssetItem and DebtItem share the same row shape."""
    return {"name": item.name, "value": item.value}
