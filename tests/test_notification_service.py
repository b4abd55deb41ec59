from dataclasses import replace

from domain.models import NOTICE_INFO, NOTICE_WARNING, NotificationSettings, Order
from services.notification_service import notifications, unprocessed_orders


def test_unprocessed_orders_include_queued(snapshot):
    orders = [*snapshot.orders, Order("NOTA-004", "Sari", "2024-03-15", [], "", 25000)]
    # NOTA-002 sits in the queue, NOTA-004 has no receivable
    assert [o.id for o in unprocessed_orders(orders, snapshot.receivables)] == ["NOTA-002", "NOTA-004"]


def test_low_stock_uses_threshold_ten_by_default(snapshot):
    notices = notifications(snapshot)
    # Flexi at exactly 10 counts as low
    assert [n.id for n in notices] == ["low-stock-1", "low-stock-2"]
    assert notices[1].text == "Stok 'Tinta Cyan' menipis! Sisa 3 botol."
    assert notices[1].type == NOTICE_WARNING
    assert notices[1].target == "inventory"


def test_low_stock_threshold_from_settings(snapshot):
    notices = notifications(snapshot, NotificationSettings(low_stock_threshold=5))
    assert [n.id for n in notices] == ["low-stock-2"]


def test_low_stock_alert_switched_off(snapshot):
    assert notifications(snapshot, NotificationSettings(low_stock_alert=False)) == []


def test_new_orders_alert(snapshot):
    orders = [*snapshot.orders, Order("NOTA-004", "Sari", "2024-03-15", [], "", 25000)]
    settings = NotificationSettings(low_stock_alert=False, new_order_in_queue_alert=True)

    notices = notifications(replace(snapshot, orders=orders), settings)
    assert len(notices) == 1
    assert notices[0].id == "new-orders-summary"
    assert notices[0].text == "Ada 2 order baru di antrian produksi."
    assert notices[0].type == NOTICE_INFO
    assert notices[0].target == "production"


def test_new_orders_alert_silent_when_all_processed(snapshot):
    receivables = [r for r in snapshot.receivables if r.id != "NOTA-002"]
    orders = [o for o in snapshot.orders if o.id != "NOTA-002"]
    settings = NotificationSettings(low_stock_alert=False, new_order_in_queue_alert=True)
    assert notifications(replace(snapshot, orders=orders, receivables=receivables), settings) == []


def test_snapshot_settings_used_when_none_given(snapshot):
    quiet = replace(snapshot, notification_settings=NotificationSettings(low_stock_alert=False))
    assert notifications(quiet) == []
