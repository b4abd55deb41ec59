# percetakan/services/ledger_service.py

"""
State changes behind the console's buttons, expressed as functions from one
Snapshot to the next. Nothing here mutates its input; callers swap the old
snapshot for the returned one (and persist through data_integrator).
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from domain.models import (
    PAYMENT_PAID,
    PAYMENT_UNPAID,
    STAGE_STATUS,
    STAGES,
    STATUS_DELIVERED,
    STATUS_PRINTING,
    STATUS_QUEUE,
    STATUS_STAGE,
    AssetItem,
    CardData,
    DebtItem,
    ExpenseItem,
    KanbanData,
    LegacyExpense,
    LegacyIncome,
    LegacyReceivable,
    Order,
    Payment,
    ReceivableItem,
    Snapshot,
    StockUsageRecord,
)
from utils.dates import add_days, today_iso

logger = logging.getLogger(__name__)

SETTLEMENT_CATEGORY = "Pelunasan Piutang Lama"


def _next_id(items) -> int:
    return max((i.id for i in items), default=0) + 1


# ---------------------------------------------------------------------------
# Legacy ledger
# ---------------------------------------------------------------------------

def set_legacy_income(snapshot: Snapshot, data: Optional[LegacyIncome]) -> Snapshot:
    return replace(snapshot, legacy_income=data)


def set_legacy_expense(snapshot: Snapshot, data: Optional[LegacyExpense]) -> Snapshot:
    return replace(snapshot, legacy_expense=data)


def add_legacy_receivable(snapshot: Snapshot, customer: str, date: str, amount: float) -> Snapshot:
    item = LegacyReceivable(
        id=_next_id(snapshot.legacy_receivables),
        customer=customer,
        date=date,
        amount=amount,
    )
    return replace(snapshot, legacy_receivables=[*snapshot.legacy_receivables, item])


def _legacy_receivable(snapshot: Snapshot, receivable_id: int) -> LegacyReceivable:
    found = next((r for r in snapshot.legacy_receivables if r.id == receivable_id), None)
    if found is None:
        raise ValueError(f"Legacy receivable {receivable_id} not found")
    return found


def update_legacy_receivable(snapshot: Snapshot, item: LegacyReceivable) -> Snapshot:
    _legacy_receivable(snapshot, item.id)
    return replace(
        snapshot,
        legacy_receivables=[item if r.id == item.id else r for r in snapshot.legacy_receivables],
    )


def delete_legacy_receivable(snapshot: Snapshot, receivable_id: int) -> Snapshot:
    _legacy_receivable(snapshot, receivable_id)
    return replace(
        snapshot,
        legacy_receivables=[r for r in snapshot.legacy_receivables if r.id != receivable_id],
    )


def settlement_expense(item: LegacyReceivable, expense_id: int, date: str) -> ExpenseItem:
    return ExpenseItem(
        id=expense_id,
        name=f"Pelunasan piutang lama - {item.customer}",
        category=SETTLEMENT_CATEGORY,
        amount=item.amount,
        date=date,
    )


def settle_legacy_receivable(snapshot: Snapshot, receivable_id: int, date: Optional[str] = None) -> Snapshot:
    """
    Settling a legacy receivable removes it and books its full amount as a
    new current-system expense. Both parts land in the same new snapshot.
    """
    item = _legacy_receivable(snapshot, receivable_id)
    expense = settlement_expense(item, _next_id(snapshot.expenses), date or today_iso())

    logger.info("Settling legacy receivable %s (%s) for %s", item.id, item.customer, item.amount)

    return replace(
        snapshot,
        legacy_receivables=[r for r in snapshot.legacy_receivables if r.id != receivable_id],
        expenses=[*snapshot.expenses, expense],
    )


# ---------------------------------------------------------------------------
# Assets, debts, stock
# ---------------------------------------------------------------------------

def add_asset(snapshot: Snapshot, name: str, value: float) -> Snapshot:
    asset = AssetItem(id=_next_id(snapshot.assets), name=name, value=value)
    return replace(snapshot, assets=[*snapshot.assets, asset])


def add_debt(snapshot: Snapshot, name: str, value: float) -> Snapshot:
    debt = DebtItem(id=_next_id(snapshot.debts), name=name, value=value)
    return replace(snapshot, debts=[*snapshot.debts, debt])


def use_inventory_stock(snapshot: Snapshot, item_id: int, amount: float, date: str) -> Snapshot:
    """
    Stock only ever goes down through this call; orders do not consume it.
    """
    if amount <= 0:
        raise ValueError("Amount used must be positive")

    inventory = []
    found = False
    for item in snapshot.inventory:
        if item.id == item_id:
            found = True
            item = replace(
                item,
                stock=item.stock - amount,
                usage_history=[*item.usage_history, StockUsageRecord(date=date, amount_used=amount)],
            )
        inventory.append(item)

    if not found:
        raise ValueError(f"Inventory item {item_id} not found")

    return replace(snapshot, inventory=inventory)


# ---------------------------------------------------------------------------
# Production board
# ---------------------------------------------------------------------------

def build_board(orders: Sequence[Order], receivables: Sequence[ReceivableItem]) -> KanbanData:
    """
    Place every receivable's order in the column of its production status.
    Receivables whose order is missing, or whose status is unknown, get no card.
    """
    orders_by_id = {o.id: o for o in orders}
    board = KanbanData()
    for r in receivables:
        order = orders_by_id.get(r.id)
        stage = STATUS_STAGE.get(r.production_status)
        if order is None or stage is None:
            continue
        board.stage(stage).append(CardData(id=order.id, customer=order.customer, details=order.details))
    return board


def move_card(board: KanbanData, order_id: str, from_stage: str, to_stage: str) -> KanbanData:
    """
    Transfer a card between columns. The card is taken out of every column
    before being placed, so an id never ends up in two columns.
    """
    if from_stage not in STAGES or to_stage not in STAGES:
        raise ValueError(f"Unknown production stage: {from_stage} -> {to_stage}")

    card = next((c for c in board.stage(from_stage) if c.id == order_id), None)
    if card is None:
        raise ValueError(f"Order {order_id} is not in {from_stage}")

    columns = {stage: [c for c in board.stage(stage) if c.id != order_id] for stage in STAGES}
    columns[to_stage].append(card)
    return KanbanData(**columns)


def _update_receivable(snapshot: Snapshot, order_id: str, **changes) -> list:
    if snapshot.receivable_by_id(order_id) is None:
        raise ValueError(f"Receivable {order_id} not found")
    return [replace(r, **changes) if r.id == order_id else r for r in snapshot.receivables]


def move_production_card(snapshot: Snapshot, order_id: str, from_stage: str, to_stage: str) -> Snapshot:
    board = move_card(snapshot.board, order_id, from_stage, to_stage)
    receivables = _update_receivable(snapshot, order_id, production_status=STAGE_STATUS[to_stage])
    logger.info("Order %s moved %s -> %s", order_id, from_stage, to_stage)
    return replace(snapshot, board=board, receivables=receivables)


def deliver_order(snapshot: Snapshot, order_id: str, note: str = "", date: Optional[str] = None) -> Snapshot:
    receivables = _update_receivable(
        snapshot, order_id,
        production_status=STATUS_DELIVERED,
        delivery_date=date or today_iso(),
        delivery_note=note,
    )
    stage = next((s for s in STAGES if any(c.id == order_id for c in snapshot.board.stage(s))), None)
    board = snapshot.board
    if stage is not None and stage != "delivered":
        board = move_card(board, order_id, stage, "delivered")
    return replace(snapshot, board=board, receivables=receivables)


def cancel_queue(snapshot: Snapshot, order_id: str) -> Snapshot:
    """
    Take a queued order off the board. Its receivable is dropped, which
    returns the order to the unprocessed list.
    """
    if not any(c.id == order_id for c in snapshot.board.queue):
        raise ValueError(f"Order {order_id} is not in the queue")

    board = replace(snapshot.board, queue=[c for c in snapshot.board.queue if c.id != order_id])
    receivables = [r for r in snapshot.receivables if r.id != order_id]
    return replace(snapshot, board=board, receivables=receivables)


# ---------------------------------------------------------------------------
# Sales, receivables, expenses
# ---------------------------------------------------------------------------

def _order(snapshot: Snapshot, order_id: str) -> Order:
    order = snapshot.order_by_id(order_id)
    if order is None:
        raise ValueError(f"Order {order_id} not found")
    return order


def _new_receivable(order: Order, due_days: int, production_status: str) -> ReceivableItem:
    return ReceivableItem(
        id=order.id,
        customer=order.customer,
        amount=order.total_price,
        due=add_days(order.order_date, due_days),
        payment_status=PAYMENT_UNPAID,
        production_status=production_status,
    )


def _with_receivable(snapshot: Snapshot, receivable: ReceivableItem) -> Snapshot:
    if snapshot.receivable_by_id(receivable.id) is None:
        receivables = [*snapshot.receivables, receivable]
    else:
        receivables = [receivable if r.id == receivable.id else r for r in snapshot.receivables]
    return replace(snapshot, receivables=receivables, board=build_board(snapshot.orders, receivables))


def process_order(snapshot: Snapshot, order_id: str, due_days: Optional[int] = None) -> Snapshot:
    """
    Send an order to printing. An order without a receivable gets one, billed
    at its stored total and due `due_days` after the order date.
    """
    order = _order(snapshot, order_id)
    if due_days is None:
        due_days = snapshot.notification_settings.default_due_date_days

    receivable = snapshot.receivable_by_id(order_id)
    if receivable is None:
        receivable = _new_receivable(order, due_days, STATUS_PRINTING)
    else:
        receivable = replace(receivable, production_status=STATUS_PRINTING)

    logger.info("Order %s processed, due %s", order_id, receivable.due)
    return _with_receivable(snapshot, receivable)


def add_payment(
        snapshot: Snapshot,
        order_id: str,
        payment: Payment,
        discount: Optional[float] = None,
        due_days: Optional[int] = None,
) -> Snapshot:
    """
    Record a payment against an order. A first payment on an order without a
    receivable creates one in the production queue. The receivable turns
    "Lunas" once nothing remains to be paid.
    """
    if payment.amount <= 0:
        raise ValueError("Payment amount must be positive")

    order = _order(snapshot, order_id)
    if due_days is None:
        due_days = snapshot.notification_settings.default_due_date_days

    receivable = snapshot.receivable_by_id(order_id) or _new_receivable(order, due_days, STATUS_QUEUE)
    receivable = replace(
        receivable,
        payments=[*receivable.payments, payment],
        discount=receivable.discount if discount is None else discount,
    )
    if receivable.remaining <= 0:
        receivable = replace(receivable, payment_status=PAYMENT_PAID)

    logger.info("Payment of %s on order %s, status %s", payment.amount, order_id, receivable.payment_status)
    return _with_receivable(snapshot, receivable)


def add_expense(snapshot: Snapshot, name: str, category: str, amount: float, date: str) -> Snapshot:
    if amount <= 0:
        raise ValueError("Expense amount must be positive")
    expense = ExpenseItem(id=_next_id(snapshot.expenses), name=name, category=category, amount=amount, date=date)
    return replace(snapshot, expenses=[*snapshot.expenses, expense])
