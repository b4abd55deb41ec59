import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client, create_client

import settings
from domain.models import (
    AssetItem,
    DebtItem,
    ExpenseItem,
    InventoryItem,
    LegacyExpense,
    LegacyIncome,
    LegacyReceivable,
    NotificationSettings,
    PaymentMethod,
    ReceivableItem,
    Snapshot,
)
from services.ledger_service import build_board
from services.permission_service import default_permissions, known_permissions
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

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000

SNAPSHOT_TABLES = (
    "orders",
    "receivables",
    "expenses",
    "inventory",
    "products",
    "categories",
    "finishings",
    "customers",
    "legacy_income",
    "legacy_expense",
    "legacy_receivables",
    "assets",
    "debts",
)

DEFAULT_PAYMENT_METHODS = [
    PaymentMethod(id="cash-default", name="Tunai", type="Tunai", details="Pembayaran tunai di kasir"),
]


@lru_cache(maxsize=1)
def get_client() -> Client:
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def _table(name: str):
    return get_client().schema(settings.SCHEMA).table(name)


def fetch_table(table_name: str) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Fetch every row of a table, PAGE_SIZE rows at a time.
    Returns (ok, message, rows)
    """
    rows: List[Dict[str, Any]] = []
    start = 0
    try:
        while True:
            resp = _table(table_name).select("*").range(start, start + PAGE_SIZE - 1).execute()

            if getattr(resp, "error", None):
                return False, f"Fetch {table_name} failed: {resp.error}", []

            page = resp.data or []
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                break
            start += PAGE_SIZE

        return True, "Fetched", rows

    except Exception as e:
        return False, f"Unexpected error: {e}", []


def fetch_app_setting(key: str) -> Tuple[bool, str, Any]:
    """
    Value of one app_settings(key, value) row, or None when the key is unset.
    """
    try:
        resp = (
            _table("app_settings")
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch {key} failed: {resp.error}", None

        if not resp.data:
            return True, f"No {key} configured", None

        return True, "Fetched", resp.data[0].get("value")

    except Exception as e:
        return False, f"Unexpected error: {e}", None


def fetch_menu_permissions(user_level: str) -> Tuple[bool, str, List[str]]:
    """
    Permission strings of one user level, stored as
    app_settings(key="menuPermissions", value={level: [...]}).
    Levels without a stored list get the built-in defaults.
    """
    ok, msg, value = fetch_app_setting("menuPermissions")
    if not ok:
        return False, msg, []

    stored = (value or {}).get(user_level)
    if stored is None:
        logger.info("No stored permissions for %s, using defaults", user_level)
        return True, msg, default_permissions(user_level)
    return True, msg, known_permissions(stored)


def fetch_notification_settings() -> Tuple[bool, str, NotificationSettings]:
    ok, msg, value = fetch_app_setting("notificationSettings")
    if not ok:
        return False, msg, settings.DEFAULT_NOTIFICATION_SETTINGS
    return True, msg, notification_settings_from_value(value, settings.DEFAULT_NOTIFICATION_SETTINGS)


def fetch_payment_methods() -> Tuple[bool, str, List[PaymentMethod]]:
    ok, msg, value = fetch_app_setting("paymentMethods")
    if not ok:
        return False, msg, []
    return True, msg, payment_methods_from_value(value) or list(DEFAULT_PAYMENT_METHODS)


def load_snapshot(user_level: str) -> Tuple[bool, str, Optional[Snapshot]]:
    tables: Dict[str, List[Dict[str, Any]]] = {}
    for name in SNAPSHOT_TABLES:
        ok, msg, rows = fetch_table(name)
        if not ok:
            return False, msg, None
        tables[name] = rows

    ok, msg, permissions = fetch_menu_permissions(user_level)
    if not ok:
        return False, msg, None

    ok, msg, notification_settings = fetch_notification_settings()
    if not ok:
        return False, msg, None

    ok, msg, payment_methods = fetch_payment_methods()
    if not ok:
        return False, msg, None

    snapshot = snapshot_from_tables(tables, permissions, notification_settings, payment_methods)
    snapshot.board = build_board(snapshot.orders, snapshot.receivables)

    logger.info(
        "Loaded snapshot: %d orders, %d receivables, %d expenses",
        len(snapshot.orders), len(snapshot.receivables), len(snapshot.expenses),
    )
    return True, "Loaded", snapshot


# ---------------------------------------------------------------------------
# Writes
#
# Each call persists a record taken from the Snapshot a ledger_service
# function returned.
# ---------------------------------------------------------------------------

def _execute(query, action: str) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    try:
        resp = query.execute()

        if getattr(resp, "error", None):
            return False, f"{action} failed: {resp.error}", None

        row = resp.data[0] if resp.data else None
        return True, action, row

    except Exception as e:
        return False, str(e), None


SINGLE_ROW_ID = 1


def _save_single(table_name: str, data) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    # legacy totals live in a one-row table; None clears it
    if data is None:
        return _execute(_table(table_name).delete().eq("id", SINGLE_ROW_ID), f"Clear {table_name}")
    return _execute(
        _table(table_name).upsert({"id": SINGLE_ROW_ID, "lastDate": data.last_date, "amount": data.amount}),
        f"Save {table_name}",
    )


def save_legacy_income(data: Optional[LegacyIncome]):
    return _save_single("legacy_income", data)


def save_legacy_expense(data: Optional[LegacyExpense]):
    return _save_single("legacy_expense", data)


def insert_legacy_receivable(item: LegacyReceivable):
    return _execute(
        _table("legacy_receivables").insert(legacy_receivable_to_row(item)),
        "Insert legacy receivable",
    )


def update_legacy_receivable(item: LegacyReceivable):
    return _execute(
        _table("legacy_receivables").update(legacy_receivable_to_row(item)).eq("id", item.id),
        "Update legacy receivable",
    )


def delete_legacy_receivable(receivable_id: int):
    return _execute(_table("legacy_receivables").delete().eq("id", receivable_id), "Delete legacy receivable")


def settle_legacy_receivable(item: LegacyReceivable, expense: ExpenseItem) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Delete the legacy receivable and insert the expense that settles it.
    """
    ok_del, msg_del, _ = delete_legacy_receivable(item.id)
    if not ok_del:
        return False, msg_del, None

    ok_ins, msg_ins, row = insert_expense(expense)
    if not ok_ins:
        # the receivable is already gone; report it so the expense can be re-entered by hand
        logger.error("Legacy receivable %s deleted but expense insert failed: %s", item.id, msg_ins)
        return False, f"Piutang lama {item.id} terhapus, tetapi pengeluaran gagal dicatat: {msg_ins}", None

    logger.info("Settled legacy receivable %s as expense %s", item.id, row.get("id") if row else None)
    return True, "Settled", row


def insert_expense(expense: ExpenseItem):
    return _execute(_table("expenses").insert(expense_to_row(expense)), "Insert expense")


def insert_asset(asset: AssetItem):
    return _execute(_table("assets").insert(named_value_to_row(asset)), "Insert asset")


def insert_debt(debt: DebtItem):
    return _execute(_table("debts").insert(named_value_to_row(debt)), "Insert debt")


def save_inventory_usage(item: InventoryItem):
    """Persist the stock and usage history of an item after use_inventory_stock."""
    return _execute(
        _table("inventory")
        .update({"stock": item.stock, "usageHistory": usage_history_to_rows(item)})
        .eq("id", item.id),
        "Update stock",
    )


def save_receivable(receivable: ReceivableItem):
    """
    Insert or replace a receivable. Covers processing, payments, production
    moves and delivery.
    """
    return _execute(_table("receivables").upsert(receivable_to_row(receivable)), "Save receivable")


def delete_receivable(order_id: str):
    return _execute(_table("receivables").delete().eq("id", order_id), "Delete receivable")
