from dataclasses import replace

import pytest

from domain.models import STAGES, LegacyExpense, LegacyIncome, LegacyReceivable, Order, Payment
from services.dashboard_service import expenses_today
from services.ledger_service import (
    SETTLEMENT_CATEGORY,
    add_asset,
    add_debt,
    add_expense,
    add_legacy_receivable,
    add_payment,
    build_board,
    cancel_queue,
    delete_legacy_receivable,
    deliver_order,
    move_card,
    move_production_card,
    process_order,
    set_legacy_expense,
    set_legacy_income,
    settle_legacy_receivable,
    update_legacy_receivable,
    use_inventory_stock,
)


def _board_ids(board):
    return {stage: [c.id for c in board.stage(stage)] for stage in STAGES}


def test_build_board_places_cards_by_status(snapshot):
    assert _board_ids(snapshot.board) == {
        "queue": ["NOTA-002"],
        "printing": ["NOTA-003"],
        "warehouse": [],
        "delivered": ["NOTA-001"],
    }


def test_build_board_skips_receivable_without_order(snapshot):
    board = build_board(snapshot.orders[1:], snapshot.receivables)
    assert "NOTA-001" not in {c.id for stage in STAGES for c in board.stage(stage)}


def test_move_card_keeps_partition(snapshot):
    board = move_card(snapshot.board, "NOTA-002", "queue", "printing")
    ids = _board_ids(board)
    assert ids["queue"] == []
    assert ids["printing"] == ["NOTA-003", "NOTA-002"]

    all_ids = [i for stage_ids in ids.values() for i in stage_ids]
    assert len(all_ids) == len(set(all_ids))
    # input untouched
    assert _board_ids(snapshot.board)["queue"] == ["NOTA-002"]


def test_move_card_missing_raises(snapshot):
    with pytest.raises(ValueError):
        move_card(snapshot.board, "NOTA-003", "queue", "printing")
    with pytest.raises(ValueError):
        move_card(snapshot.board, "NOTA-002", "queue", "gudang")


def test_move_production_card_updates_status(snapshot):
    updated = move_production_card(snapshot, "NOTA-003", "printing", "warehouse")
    assert updated.receivable_by_id("NOTA-003").production_status == "Siap Ambil"
    assert _board_ids(updated.board)["warehouse"] == ["NOTA-003"]
    assert snapshot.receivable_by_id("NOTA-003").production_status == "Proses Cetak"


def test_deliver_order(snapshot, today):
    updated = deliver_order(snapshot, "NOTA-003", "Diambil sendiri", today)
    receivable = updated.receivable_by_id("NOTA-003")
    assert receivable.production_status == "Telah Dikirim"
    assert receivable.delivery_date == today
    assert receivable.delivery_note == "Diambil sendiri"
    assert _board_ids(updated.board)["delivered"] == ["NOTA-001", "NOTA-003"]


def test_cancel_queue(snapshot):
    updated = cancel_queue(snapshot, "NOTA-002")
    assert updated.receivable_by_id("NOTA-002") is None
    assert _board_ids(updated.board)["queue"] == []
    assert updated.order_by_id("NOTA-002") is not None


def test_cancel_queue_only_for_queued_orders(snapshot):
    with pytest.raises(ValueError):
        cancel_queue(snapshot, "NOTA-003")


def test_set_legacy_totals(snapshot):
    updated = set_legacy_income(snapshot, LegacyIncome("2023-12-31", 5))
    updated = set_legacy_expense(updated, None)
    assert updated.legacy_income.amount == 5
    assert updated.legacy_expense is None
    assert snapshot.legacy_expense == LegacyExpense("2023-12-31", 400000)


def test_legacy_receivable_crud(snapshot):
    updated = add_legacy_receivable(snapshot, "Bu Sari", "2023-10-01", 45000)
    assert [r.id for r in updated.legacy_receivables] == [1, 2]

    updated = update_legacy_receivable(updated, LegacyReceivable(2, "Bu Sari", "2023-10-01", 40000))
    assert updated.legacy_receivables[1].amount == 40000

    updated = delete_legacy_receivable(updated, 1)
    assert [r.id for r in updated.legacy_receivables] == [2]

    with pytest.raises(ValueError):
        delete_legacy_receivable(updated, 1)
    with pytest.raises(ValueError):
        update_legacy_receivable(updated, LegacyReceivable(7, "X", "", 1))


def test_settle_legacy_receivable_books_expense(snapshot, today):
    updated = settle_legacy_receivable(snapshot, 1, today)

    assert updated.legacy_receivables == []
    assert len(updated.expenses) == len(snapshot.expenses) + 1

    expense = updated.expenses[-1]
    assert expense.amount == 20000
    assert expense.category == SETTLEMENT_CATEGORY
    assert expense.name == "Pelunasan piutang lama - Pak Joko"
    assert expense.date == today
    assert expense.id == 4

    assert len(snapshot.legacy_receivables) == 1


def test_settle_unknown_legacy_receivable(snapshot):
    with pytest.raises(ValueError):
        settle_legacy_receivable(snapshot, 42)


def test_add_asset_and_debt(snapshot):
    updated = add_debt(add_asset(snapshot, "Mesin", 1000), "Leasing", 500)
    assert [(a.id, a.name) for a in updated.assets] == [(1, "Mesin")]
    assert [(d.id, d.value) for d in updated.debts] == [(1, 500)]


def test_use_inventory_stock(snapshot, today):
    updated = use_inventory_stock(snapshot, 1, 2.5, today)
    item = updated.inventory[0]
    assert item.stock == 7.5
    assert [(u.date, u.amount_used) for u in item.usage_history] == [(today, 2.5)]
    assert snapshot.inventory[0].stock == 10


@pytest.mark.parametrize("item_id, amount", [(1, 0), (1, -1), (99, 1)])
def test_use_inventory_stock_rejects(snapshot, today, item_id, amount):
    with pytest.raises(ValueError):
        use_inventory_stock(snapshot, item_id, amount, today)


def _with_new_order(snapshot):
    order = Order("NOTA-004", "Sari", "2024-03-15", [], "Stiker", 80000)
    return replace(snapshot, orders=[*snapshot.orders, order])


def _assert_partition(snapshot):
    ids = [c.id for stage in STAGES for c in snapshot.board.stage(stage)]
    assert len(ids) == len(set(ids))
    assert set(ids) == {r.id for r in snapshot.receivables}


def test_production_flow_keeps_each_order_in_one_column(snapshot, today):
    updated = add_payment(_with_new_order(snapshot), "NOTA-004", Payment(10000, today))
    _assert_partition(updated)
    assert _board_ids(updated.board)["queue"] == ["NOTA-002", "NOTA-004"]

    updated = move_production_card(updated, "NOTA-002", "queue", "printing")
    _assert_partition(updated)
    updated = move_production_card(updated, "NOTA-003", "printing", "warehouse")
    _assert_partition(updated)
    updated = deliver_order(updated, "NOTA-003", "", today)
    _assert_partition(updated)
    updated = cancel_queue(updated, "NOTA-004")
    _assert_partition(updated)

    assert _board_ids(updated.board) == {
        "queue": [],
        "printing": ["NOTA-002"],
        "warehouse": [],
        "delivered": ["NOTA-001", "NOTA-003"],
    }
    assert updated.receivable_by_id("NOTA-002").production_status == "Proses Cetak"
    assert updated.receivable_by_id("NOTA-003").production_status == "Telah Dikirim"


def test_settlement_raises_expenses_today_by_its_amount(snapshot, today):
    before = expenses_today(snapshot.expenses, today)
    settled = settle_legacy_receivable(snapshot, 1, today)
    assert expenses_today(settled.expenses, today) - before == 20000


def test_process_new_order_creates_receivable(snapshot):
    updated = process_order(_with_new_order(snapshot), "NOTA-004")

    receivable = updated.receivable_by_id("NOTA-004")
    assert receivable.amount == 80000
    assert receivable.due == "2024-03-22"
    assert receivable.payment_status == "Belum Lunas"
    assert receivable.production_status == "Proses Cetak"
    assert "NOTA-004" in _board_ids(updated.board)["printing"]
    _assert_partition(updated)


def test_process_order_due_days(snapshot):
    updated = process_order(_with_new_order(snapshot), "NOTA-004", due_days=30)
    assert updated.receivable_by_id("NOTA-004").due == "2024-04-14"


def test_process_queued_order_keeps_receivable(snapshot):
    updated = process_order(snapshot, "NOTA-002")

    receivable = updated.receivable_by_id("NOTA-002")
    assert receivable.production_status == "Proses Cetak"
    assert receivable.due == "2024-03-20"
    assert receivable.paid == 50000
    assert _board_ids(updated.board)["queue"] == []
    assert snapshot.receivable_by_id("NOTA-002").production_status == "Dalam Antrian"


def test_process_unknown_order(snapshot):
    with pytest.raises(ValueError):
        process_order(snapshot, "NOTA-999")


def test_partial_payment_stays_unpaid(snapshot, today):
    updated = add_payment(snapshot, "NOTA-002", Payment(60000, today, "cash-default", "Tunai"))
    receivable = updated.receivable_by_id("NOTA-002")
    assert receivable.paid == 110000
    assert receivable.remaining == 60000
    assert receivable.payment_status == "Belum Lunas"


def test_payment_with_discount_settles(snapshot, today):
    updated = add_payment(snapshot, "NOTA-002", Payment(100000, today), discount=20000)
    receivable = updated.receivable_by_id("NOTA-002")
    assert receivable.discount == 20000
    assert receivable.remaining == 0
    assert receivable.payment_status == "Lunas"
    assert snapshot.receivable_by_id("NOTA-002").payment_status == "Belum Lunas"


def test_first_payment_queues_new_order(snapshot, today):
    updated = add_payment(_with_new_order(snapshot), "NOTA-004", Payment(80000, today))
    receivable = updated.receivable_by_id("NOTA-004")
    assert receivable.production_status == "Dalam Antrian"
    assert receivable.due == "2024-03-22"
    assert receivable.payment_status == "Lunas"
    assert "NOTA-004" in _board_ids(updated.board)["queue"]


@pytest.mark.parametrize("order_id, amount", [("NOTA-002", 0), ("NOTA-002", -5), ("NOTA-999", 1000)])
def test_add_payment_rejects(snapshot, today, order_id, amount):
    with pytest.raises(ValueError):
        add_payment(snapshot, order_id, Payment(amount, today))


def test_add_expense(snapshot, today):
    updated = add_expense(snapshot, "Kertas A3", "Kertas & Media", 75000, today)
    expense = updated.expenses[-1]
    assert (expense.id, expense.name, expense.category, expense.amount) == (4, "Kertas A3", "Kertas & Media", 75000)
    assert expenses_today(updated.expenses, today) == 95000
    assert len(snapshot.expenses) == 3

    with pytest.raises(ValueError):
        add_expense(snapshot, "Nol", "Lain-lain", 0, today)
