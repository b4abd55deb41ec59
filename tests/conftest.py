import pytest

from domain.models import (
    PAYMENT_PAID,
    PAYMENT_UNPAID,
    STATUS_DELIVERED,
    STATUS_PRINTING,
    STATUS_QUEUE,
    UNIT_AREA,
    UNIT_PIECE,
    CategoryData,
    CustomerData,
    ExpenseItem,
    FinishingData,
    InventoryItem,
    LegacyExpense,
    LegacyIncome,
    LegacyReceivable,
    Order,
    OrderItem,
    Payment,
    ProductData,
    ProductPrice,
    ReceivableItem,
    Snapshot,
)
from services.ledger_service import build_board

TODAY = "2024-03-15"


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def products():
    return [
        ProductData(id=1, name="Banner Flexi", category="Banner", price=ProductPrice(end_customer=15000, grosir=12000)),
        ProductData(id=2, name="Kartu Nama", category="Cetak Kertas", price=ProductPrice(end_customer=50000)),
    ]


@pytest.fixture
def categories():
    return [
        CategoryData(id=1, name="Banner", unit_type=UNIT_AREA),
        CategoryData(id=2, name="Cetak Kertas", unit_type=UNIT_PIECE),
    ]


@pytest.fixture
def finishings():
    return [FinishingData(id=1, name="Mata Ayam", price=5000)]


@pytest.fixture
def customers():
    return [
        CustomerData(id=1, name="Budi", level="End Customer"),
        CustomerData(id=2, name="Toko Sinar", level="Grosir"),
    ]


@pytest.fixture
def snapshot(products, categories, finishings, customers):
    orders = [
        Order(
            id="NOTA-001",
            customer="Budi",
            order_date="2024-03-01",
            items=[OrderItem(1, 1, "Mata Ayam", "Spanduk toko", "2", "1.5", 3)],
            details="Spanduk toko\n2x1.5",
            total_price=150000,
        ),
        Order(
            id="NOTA-002",
            customer="Toko Sinar",
            order_date=TODAY,
            items=[
                OrderItem(1, 2, "", "Kartu nama A", "", "", 2),
                OrderItem(2, 2, "", "Kartu nama B", "", "", 1),
                OrderItem(3, 1, "", "Banner promo", "1", "1", 1),
            ],
            details="Kartu nama\nBanner",
            total_price=170000,
        ),
        Order(
            id="NOTA-003",
            customer="Budi",
            order_date=TODAY,
            items=[OrderItem(1, 2, "", "Kartu nama", "", "", 1)],
            details="Kartu nama",
            total_price=50000,
        ),
    ]
    receivables = [
        ReceivableItem(
            id="NOTA-001",
            customer="Budi",
            amount=150000,
            due="2024-03-10",
            payment_status=PAYMENT_PAID,
            production_status=STATUS_DELIVERED,
            payments=[Payment(150000, "2024-03-01", "1", "Tunai")],
            delivery_date=TODAY,
        ),
        ReceivableItem(
            id="NOTA-002",
            customer="Toko Sinar",
            amount=170000,
            due="2024-03-20",
            payment_status=PAYMENT_UNPAID,
            production_status=STATUS_QUEUE,
            payments=[Payment(50000, TODAY, "2", "Transfer")],
        ),
        ReceivableItem(
            id="NOTA-003",
            customer="Budi",
            amount=50000,
            due="2024-03-20",
            payment_status=PAYMENT_UNPAID,
            production_status=STATUS_PRINTING,
        ),
    ]
    return Snapshot(
        orders=orders,
        receivables=receivables,
        expenses=[
            ExpenseItem(1, "Tinta", "Bahan", 20000, TODAY),
            ExpenseItem(2, "Listrik", "Operasional", 30000, "2024-03-05"),
            ExpenseItem(3, "Sewa", "Operasional", 100000, "2023-12-01"),
        ],
        inventory=[
            InventoryItem(1, "Flexi 280gr", "FLX-280", 10, "m", "Bahan Baku"),
            InventoryItem(2, "Tinta Cyan", "INK-C", 3, "botol", "Bahan Baku"),
        ],
        products=products,
        categories=categories,
        finishings=finishings,
        customers=customers,
        legacy_income=LegacyIncome("2023-12-31", 1000000),
        legacy_expense=LegacyExpense("2023-12-31", 400000),
        legacy_receivables=[LegacyReceivable(1, "Pak Joko", "2023-11-01", 20000)],
        board=build_board(orders, receivables),
    )
