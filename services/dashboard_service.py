# percetakan/services/dashboard_service.py

import logging
from typing import Dict, List, Optional, Sequence

from domain.models import (
    PAYMENT_UNPAID,
    STAGES,
    STATUS_DELIVERED,
    UNPROCESSED,
    CardData,
    ChartPoint,
    DashboardStats,
    ExpenseItem,
    KanbanData,
    LegacyReceivable,
    Order,
    PaymentActivity,
    ProductionActivity,
    ReceivableItem,
    Snapshot,
)
from utils.dates import day_month_label, last_n_days, today_iso

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
SERIES_DAYS = 30


# ---------------------------------------------------------------------------
# "Today" cards
# ---------------------------------------------------------------------------

def income_today(receivables: Sequence[ReceivableItem], today: Optional[str] = None) -> float:
    today = today or today_iso()
    return sum(
        p.amount
        for r in receivables
        for p in r.payments
        if p.date == today
    )


def transactions_today(orders: Sequence[Order], today: Optional[str] = None) -> int:
    today = today or today_iso()
    return sum(1 for o in orders if o.order_date == today)


def active_receivables_total(
        receivables: Sequence[ReceivableItem],
        legacy_receivables: Sequence[LegacyReceivable],
) -> float:
    """
    Unpaid receivables contribute their remaining balance clamped at zero;
    legacy receivables are all-or-nothing and contribute their full amount.
    """
    current = sum(r.active_remaining for r in receivables if r.payment_status == PAYMENT_UNPAID)
    legacy = sum(r.amount for r in legacy_receivables)
    return current + legacy


def expenses_today(expenses: Sequence[ExpenseItem], today: Optional[str] = None) -> float:
    today = today or today_iso()
    return sum(e.amount for e in expenses if e.date == today)


def dashboard_stats(snapshot: Snapshot, today: Optional[str] = None) -> DashboardStats:
    today = today or today_iso()
    return DashboardStats(
        income_today=income_today(snapshot.receivables, today),
        transactions_today=transactions_today(snapshot.orders, today),
        active_receivables=active_receivables_total(snapshot.receivables, snapshot.legacy_receivables),
        expenses_today=expenses_today(snapshot.expenses, today),
    )


def financial_flow_today(snapshot: Snapshot, today: Optional[str] = None) -> List[ChartPoint]:
    """
    Revenue, collected, outstanding and spent for today. An order with no
    receivable record yet is fully outstanding. Zero buckets are dropped.
    """
    today = today or today_iso()
    orders = [o for o in snapshot.orders if o.order_date == today]
    receivable_by_id = {r.id: r for r in snapshot.receivables}

    revenue = sum(o.total_price for o in orders)

    outstanding = 0.0
    for order in orders:
        receivable = receivable_by_id.get(order.id)
        if receivable is not None:
            outstanding += receivable.active_remaining
        else:
            outstanding += order.total_price

    points = [
        ChartPoint("Total Pendapatan", revenue),
        ChartPoint("Dibayar", income_today(snapshot.receivables, today)),
        ChartPoint("Piutang", outstanding),
        ChartPoint("Pengeluaran", expenses_today(snapshot.expenses, today)),
    ]
    return [p for p in points if p.value > 0]


# ---------------------------------------------------------------------------
# Rolling 30-day series
# ---------------------------------------------------------------------------

def _dense_series(orders: Sequence[Order], today: str, value_of) -> List[ChartPoint]:
    buckets: Dict[str, float] = {day: 0 for day in last_n_days(today, SERIES_DAYS)}
    for order in orders:
        if order.order_date in buckets:
            buckets[order.order_date] += value_of(order)
    # dicts keep insertion order, so the series stays oldest-first
    return [ChartPoint(day_month_label(day), total) for day, total in buckets.items()]


def sales_by_day_30(orders: Sequence[Order], today: Optional[str] = None) -> List[ChartPoint]:
    return _dense_series(orders, today or today_iso(), lambda o: o.total_price)


def orders_by_day_30(orders: Sequence[Order], today: Optional[str] = None) -> List[ChartPoint]:
    return _dense_series(orders, today or today_iso(), lambda o: 1)


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------

def items_count(cards: Sequence[CardData], orders: Sequence[Order]) -> int:
    """
    Number of order *lines* behind the cards. Cards whose order is missing
    contribute 0.
    """
    line_counts = {o.id: len(o.items) for o in orders}
    return sum(line_counts.get(card.id, 0) for card in cards)


def production_item_counts(board: KanbanData, orders: Sequence[Order]) -> Dict[str, int]:
    return {stage: items_count(board.stage(stage), orders) for stage in STAGES}


def items_delivered_today(snapshot: Snapshot, today: Optional[str] = None) -> int:
    """
    Uses the receivable's delivery date, not membership in the delivered
    column, to decide what was delivered today.
    """
    today = today or today_iso()
    delivered_ids = {
        r.id
        for r in snapshot.receivables
        if r.production_status == STATUS_DELIVERED and r.delivery_date == today
    }
    return sum(len(o.items) for o in snapshot.orders if o.id in delivered_ids)


def total_items_today(orders: Sequence[Order], today: Optional[str] = None) -> int:
    today = today or today_iso()
    return sum(len(o.items) for o in orders if o.order_date == today)


def production_pie(snapshot: Snapshot, today: Optional[str] = None) -> List[ChartPoint]:
    counts = production_item_counts(snapshot.board, snapshot.orders)
    points = [
        ChartPoint("Dalam Antrian", counts["queue"]),
        ChartPoint("Proses Cetak", counts["printing"]),
        ChartPoint("Siap Ambil", counts["warehouse"]),
        ChartPoint("Terkirim Hari Ini", items_delivered_today(snapshot, today)),
    ]
    return [p for p in points if p.value > 0]


# ---------------------------------------------------------------------------
# Activity feeds
# ---------------------------------------------------------------------------

def _first_line(text: str) -> str:
    return (text or "").split("\n")[0]


def recent_payments(snapshot: Snapshot, today: Optional[str] = None) -> List[PaymentActivity]:
    today = today or today_iso()
    orders = {o.id: o for o in snapshot.orders}

    activity: List[PaymentActivity] = []
    for receivable in snapshot.receivables:
        order = orders.get(receivable.id)
        for payment in receivable.payments:
            if payment.date != today:
                continue
            activity.append(
                PaymentActivity(
                    date=payment.date,
                    order_id=receivable.id,
                    customer=receivable.customer,
                    description=_first_line(order.details) if order else "N/A",
                    source=payment.method_name,
                    amount=payment.amount,
                )
            )

    # nota number descending; sort is stable so same-nota payments keep order
    activity.sort(key=lambda a: a.order_id, reverse=True)
    return activity[:RECENT_LIMIT]


def recent_production_activity(snapshot: Snapshot, today: Optional[str] = None) -> List[ProductionActivity]:
    today = today or today_iso()
    receivables = {r.id: r for r in snapshot.receivables}

    activity: List[ProductionActivity] = []
    for order in snapshot.orders:
        if order.order_date != today:
            continue
        receivable = receivables.get(order.id)
        status = receivable.production_status if receivable else UNPROCESSED
        for item in order.items:
            activity.append(
                ProductionActivity(
                    order_id=order.id,
                    customer=order.customer,
                    description=item.description,
                    length=item.length,
                    width=item.width,
                    qty=item.qty,
                    finishing=item.finishing,
                    status=status,
                )
            )

    activity.sort(key=lambda a: a.order_id, reverse=True)
    return activity[:RECENT_LIMIT]
