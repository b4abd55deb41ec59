# percetakan/domain/models.py

from dataclasses import dataclass, field
from typing import Dict, List, Optional

PAYMENT_UNPAID = "Belum Lunas"
PAYMENT_PAID = "Lunas"

STATUS_QUEUE = "Dalam Antrian"
STATUS_PRINTING = "Proses Cetak"
STATUS_READY = "Siap Ambil"
STATUS_DELIVERED = "Telah Dikirim"
UNPROCESSED = "Belum Diproses"

STAGES = ("queue", "printing", "warehouse", "delivered")

STAGE_STATUS: Dict[str, str] = {
    "queue": STATUS_QUEUE,
    "printing": STATUS_PRINTING,
    "warehouse": STATUS_READY,
    "delivered": STATUS_DELIVERED,
}

STATUS_STAGE: Dict[str, str] = {v: k for k, v in STAGE_STATUS.items()}

DEFAULT_TIER = "End Customer"

# customer level -> ProductPrice attribute
TIER_COLUMN: Dict[str, str] = {
    "End Customer": "end_customer",
    "Retail": "retail",
    "Grosir": "grosir",
    "Reseller": "reseller",
    "Corporate": "corporate",
}

UNIT_AREA = "Per Luas"
UNIT_PIECE = "Per Buah"

INVENTORY_RAW = "Bahan Baku"
INVENTORY_FINISHED = "Barang Jadi"

NOTICE_WARNING = "warning"
NOTICE_INFO = "info"

EXPENSE_CATEGORIES = (
    "Tinta & Bahan Cetak",
    "Kertas & Media",
    "Listrik & Air",
    "Gaji Karyawan",
    "Perawatan Mesin",
    "Lain-lain",
)


@dataclass
class OrderItem:
    """
    One line of an order. Length and width are kept as the raw strings typed
    into the order form; they may be blank or non-numeric.
    """
    id: int
    product_id: Optional[int]
    finishing: str
    description: str
    length: str
    width: str
    qty: float
    custom_price: Optional[float] = None


@dataclass
class Order:
    id: str  # nota number
    customer: str
    order_date: str  # ISO YYYY-MM-DD
    items: List[OrderItem]
    details: str
    total_price: float  # stored at creation time, never recomputed


@dataclass
class Payment:
    amount: float
    date: str
    method_id: str = ""
    method_name: str = ""


@dataclass
class ReceivableItem:
    id: str  # same as Order.id
    customer: str
    amount: float
    due: str
    payment_status: str
    production_status: str
    payments: List[Payment] = field(default_factory=list)
    discount: float = 0
    delivery_date: Optional[str] = None
    delivery_note: Optional[str] = None

    @property
    def paid(self) -> float:
        return sum(p.amount for p in self.payments)

    @property
    def remaining(self) -> float:
        return self.amount - (self.discount or 0) - self.paid

    @property
    def active_remaining(self) -> float:
        # overpaid receivables count as settled, never as negative debt
        return max(0, self.remaining)


@dataclass
class ExpenseItem:
    id: int
    name: str
    category: str
    amount: float
    date: str


@dataclass
class StockUsageRecord:
    date: str
    amount_used: float


@dataclass
class InventoryItem:
    id: int
    name: str
    sku: str
    stock: float
    unit: str
    type: str  # INVENTORY_RAW / INVENTORY_FINISHED
    usage_history: List[StockUsageRecord] = field(default_factory=list)


@dataclass
class CardData:
    id: str
    customer: str
    details: str


@dataclass
class KanbanData:
    queue: List[CardData] = field(default_factory=list)
    printing: List[CardData] = field(default_factory=list)
    warehouse: List[CardData] = field(default_factory=list)
    delivered: List[CardData] = field(default_factory=list)

    def stage(self, name: str) -> List[CardData]:
        if name not in STAGES:
            raise ValueError(f"Unknown production stage: {name}")
        return getattr(self, name)


@dataclass
class ProductPrice:
    end_customer: float = 0
    retail: float = 0
    grosir: float = 0
    reseller: float = 0
    corporate: float = 0


@dataclass
class ProductData:
    id: int
    name: str
    category: str  # category *name*, joined by string match
    price: ProductPrice


@dataclass
class CategoryData:
    id: int
    name: str
    unit_type: str  # UNIT_AREA / UNIT_PIECE


@dataclass
class FinishingData:
    id: int
    name: str
    price: float


@dataclass
class CustomerData:
    id: int
    name: str
    contact: str = ""
    level: str = DEFAULT_TIER


@dataclass
class LegacyIncome:
    last_date: str
    amount: float


@dataclass
class LegacyExpense:
    last_date: str
    amount: float


@dataclass
class LegacyReceivable:
    id: int
    customer: str
    date: str
    amount: float


@dataclass
class AssetItem:
    id: int
    name: str
    value: float


@dataclass
class DebtItem:
    id: int
    name: str
    value: float


@dataclass
class PaymentMethod:
    id: str
    name: str
    type: str = "Tunai"
    details: str = ""


@dataclass
class NotificationSettings:
    low_stock_alert: bool = True
    low_stock_threshold: float = 10
    receivable_due_soon_alert: bool = True
    receivable_due_soon_days: int = 3
    receivable_overdue_alert: bool = True
    new_order_in_queue_alert: bool = False
    default_due_date_days: int = 7


@dataclass
class Snapshot:
    """
    Everything the aggregation functions read during one render pass.
    Services treat a Snapshot as read-only and return new ones on change.
    """
    orders: List[Order] = field(default_factory=list)
    receivables: List[ReceivableItem] = field(default_factory=list)
    expenses: List[ExpenseItem] = field(default_factory=list)
    inventory: List[InventoryItem] = field(default_factory=list)
    products: List[ProductData] = field(default_factory=list)
    categories: List[CategoryData] = field(default_factory=list)
    finishings: List[FinishingData] = field(default_factory=list)
    customers: List[CustomerData] = field(default_factory=list)
    legacy_income: Optional[LegacyIncome] = None
    legacy_expense: Optional[LegacyExpense] = None
    legacy_receivables: List[LegacyReceivable] = field(default_factory=list)
    assets: List[AssetItem] = field(default_factory=list)
    debts: List[DebtItem] = field(default_factory=list)
    board: KanbanData = field(default_factory=KanbanData)
    permissions: List[str] = field(default_factory=list)
    notification_settings: NotificationSettings = field(default_factory=NotificationSettings)
    payment_methods: List[PaymentMethod] = field(default_factory=list)

    def order_by_id(self, order_id: str) -> Optional[Order]:
        return next((o for o in self.orders if o.id == order_id), None)

    def receivable_by_id(self, order_id: str) -> Optional[ReceivableItem]:
        return next((r for r in self.receivables if r.id == order_id), None)


# ---------------------------------------------------------------------------
# Activity feeds
# ---------------------------------------------------------------------------

@dataclass
class NotificationItem:
    id: str
    text: str
    type: str  # NOTICE_WARNING / NOTICE_INFO
    target: str  # menu key the notice points to


@dataclass
class PaymentActivity:
    date: str
    order_id: str
    customer: str
    description: str  # first line of the order details, or "N/A"
    source: str  # payment method name
    amount: float


@dataclass
class ProductionActivity:
    order_id: str
    customer: str
    description: str
    length: str
    width: str
    qty: float
    finishing: str
    status: str  # production status, or UNPROCESSED


# ---------------------------------------------------------------------------
# Aggregation outputs
# ---------------------------------------------------------------------------

@dataclass
class ChartPoint:
    label: str
    value: float


@dataclass
class DashboardStats:
    income_today: float
    transactions_today: int
    active_receivables: float
    expenses_today: float


@dataclass
class AnnualRecap:
    year: int
    total_income: float
    total_expense: float
    balance: float
    total_receivables: float
    sales_this_year: float
    expenses_this_year: float
    orders_this_year: int
    receivables_this_year: float
    monthly_orders: List[ChartPoint]


@dataclass
class CategoryTotal:
    name: str
    total: float


@dataclass
class ProfitAndLoss:
    start: str
    end: str
    total_sales: float
    total_expenses: float
    profit: float
    income_by_category: List[CategoryTotal]
    expense_by_category: List[CategoryTotal]
    sales_chart: List[ChartPoint]
    expense_pie: List[ChartPoint]


@dataclass
class SalesRow:
    no: int
    date: str
    order_id: str
    customer: str
    description: str
    material: str  # product name, "N/A" when unknown
    length: str
    width: str
    qty: float
    total: float
    status: str


@dataclass
class ProductSalesRow:
    product: str
    quantity: float
    revenue: float


@dataclass
class CustomerSalesRow:
    customer: str
    orders: int
    items: int
    spend: float


@dataclass
class ReceivableRow:
    id: str
    customer: str
    amount: float
    paid: float
    remaining: float
    payment_status: str
    production_status: str
    due: str


@dataclass
class InventoryRow:
    id: int
    name: str
    sku: str
    type: str
    stock: float
    unit: str
    status: str
