from domain.models import ExpenseItem, InventoryItem, NotificationSettings, Payment, ReceivableItem, StockUsageRecord
from services.dashboard_service import items_delivered_today
from services.ledger_service import build_board
from utils.record_mapper import (
    expense_to_row,
    legacy_receivable_to_row,
    named_value_to_row,
    notification_settings_from_value,
    payment_methods_from_value,
    receivable_to_row,
    snapshot_from_tables,
    usage_history_to_rows,
)

TABLES = {
    "orders": [
        {
            "id": "NOTA-001",
            "customer": "Budi",
            "orderDate": "2024-03-01T08:00:00",
            "details": "Spanduk",
            "totalPrice": "150000",
            "orderItems": [
                {"id": 1, "productId": 1, "finishing": "Mata Ayam", "description": "Spanduk",
                 "length": "2", "width": "1.5", "qty": 3},
            ],
        },
    ],
    "receivables": [
        {
            "id": "NOTA-001",
            "customer": "Budi",
            "amount": 150000,
            "due": "2024-03-10",
            "paymentStatus": "Belum Lunas",
            "productionStatus": "Proses Cetak",
            "payments": [{"amount": 50000, "date": "2024-03-01", "methodName": "Tunai"}],
        },
    ],
    "products": [
        {"id": 1, "name": "Banner", "category": "Banner", "price": {"endCustomer": 15000, "grosir": None}},
    ],
    "customers": [{"id": 1, "name": "Budi", "level": None}],
    "legacy_income": [{"id": 1, "lastDate": "2023-12-31", "amount": 1000}],
    "legacy_receivables": [{"id": 3, "customer": "Pak Joko", "date": "2023-11-01", "amount": "20000"}],
}


def test_snapshot_from_tables():
    snapshot = snapshot_from_tables(TABLES, ["reports"])

    order = snapshot.orders[0]
    assert order.order_date == "2024-03-01"
    assert order.total_price == 150000
    assert order.items[0].qty == 3
    assert order.items[0].custom_price is None

    receivable = snapshot.receivables[0]
    assert receivable.paid == 50000
    assert receivable.payments[0].method_name == "Tunai"
    assert receivable.discount == 0

    assert snapshot.products[0].price.end_customer == 15000
    assert snapshot.products[0].price.grosir == 0
    assert snapshot.customers[0].level == "End Customer"
    assert snapshot.legacy_income.amount == 1000
    assert snapshot.legacy_expense is None
    assert snapshot.legacy_receivables[0].amount == 20000
    assert snapshot.expenses == []
    assert snapshot.permissions == ["reports"]


def test_board_from_loaded_snapshot():
    snapshot = snapshot_from_tables(TABLES)
    board = build_board(snapshot.orders, snapshot.receivables)
    assert [c.id for c in board.printing] == ["NOTA-001"]


def test_writers():
    assert expense_to_row(ExpenseItem(5, "Tinta", "Bahan", 20000, "2024-03-15")) == {
        "name": "Tinta", "category": "Bahan", "amount": 20000, "date": "2024-03-15",
    }
    item = InventoryItem(1, "Flexi", "F", 8, "m", "Bahan Baku", [StockUsageRecord("2024-03-15", 2)])
    assert usage_history_to_rows(item) == [{"date": "2024-03-15", "amountUsed": 2}]
    assert legacy_receivable_to_row(snapshot_from_tables(TABLES).legacy_receivables[0]) == {
        "customer": "Pak Joko", "date": "2023-11-01", "amount": 20000,
    }


def test_delivery_timestamp_counts_as_delivered_that_day():
    tables = dict(TABLES)
    tables["receivables"] = [
        dict(TABLES["receivables"][0], productionStatus="Telah Dikirim", deliveryDate="2024-03-15T10:00:00"),
    ]
    snapshot = snapshot_from_tables(tables)

    assert snapshot.receivables[0].delivery_date == "2024-03-15"
    assert items_delivered_today(snapshot, "2024-03-15") == 1


def test_missing_delivery_date_stays_none():
    snapshot = snapshot_from_tables(TABLES)
    assert snapshot.receivables[0].delivery_date is None


def test_notification_settings_from_value():
    defaults = NotificationSettings()
    assert notification_settings_from_value(None, defaults) == defaults

    loaded = notification_settings_from_value(
        {"lowStockAlert": False, "lowStockThreshold": "4", "newOrderInQueueAlert": True, "defaultDueDateDays": 14},
        defaults,
    )
    assert loaded.low_stock_alert is False
    assert loaded.low_stock_threshold == 4
    assert loaded.new_order_in_queue_alert is True
    assert loaded.default_due_date_days == 14
    assert loaded.receivable_due_soon_days == 3


def test_payment_methods_from_value():
    methods = payment_methods_from_value([{"id": "bca", "name": "BCA", "type": "Transfer Bank"}, {"id": 7, "name": "QRIS"}])
    assert [(m.id, m.name, m.type) for m in methods] == [("bca", "BCA", "Transfer Bank"), ("7", "QRIS", "Tunai")]
    assert payment_methods_from_value(None) == []


def test_receivable_to_row_loads_back():
    receivable = ReceivableItem(
        id="NOTA-009",
        customer="Budi",
        amount=90000,
        due="2024-03-22",
        payment_status="Belum Lunas",
        production_status="Dalam Antrian",
        payments=[Payment(40000, "2024-03-15", "bca", "BCA")],
        discount=5000,
    )
    row = receivable_to_row(receivable)
    assert row["payments"] == [{"amount": 40000, "date": "2024-03-15", "methodId": "bca", "methodName": "BCA"}]
    assert row["productionStatus"] == "Dalam Antrian"
    assert snapshot_from_tables({"receivables": [row]}).receivables[0] == receivable


def test_named_value_to_row():
    snapshot = snapshot_from_tables({"assets": [{"id": 2, "name": "Mesin", "value": "1500000"}]})
    assert named_value_to_row(snapshot.assets[0]) == {"name": "Mesin", "value": 1500000}
