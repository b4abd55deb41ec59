# percetakan/services/notification_service.py

from typing import List, Optional, Sequence

from domain.models import (
    NOTICE_INFO,
    NOTICE_WARNING,
    STATUS_QUEUE,
    NotificationItem,
    NotificationSettings,
    Order,
    ReceivableItem,
    Snapshot,
)
from utils.formatting import format_number


def unprocessed_orders(orders: Sequence[Order], receivables: Sequence[ReceivableItem]) -> List[Order]:
    """
    Orders that have not left the queue: no receivable yet, or a receivable
    still marked "Dalam Antrian".
    """
    processed = {r.id for r in receivables if r.production_status != STATUS_QUEUE}
    return [o for o in orders if o.id not in processed]


def notifications(snapshot: Snapshot, settings: Optional[NotificationSettings] = None) -> List[NotificationItem]:
    """
    Alerts derived from the snapshot. Each kind is switched on or off by
    `settings`, which defaults to the snapshot's own notification settings.
    """
    settings = settings or snapshot.notification_settings
    notices: List[NotificationItem] = []

    if settings.low_stock_alert:
        for item in snapshot.inventory:
            if item.stock <= settings.low_stock_threshold:
                notices.append(
                    NotificationItem(
                        id=f"low-stock-{item.id}",
                        text=f"Stok '{item.name}' menipis! Sisa {format_number(item.stock)} {item.unit}.",
                        type=NOTICE_WARNING,
                        target="inventory",
                    )
                )

    if settings.new_order_in_queue_alert:
        waiting = unprocessed_orders(snapshot.orders, snapshot.receivables)
        if waiting:
            notices.append(
                NotificationItem(
                    id="new-orders-summary",
                    text=f"Ada {len(waiting)} order baru di antrian produksi.",
                    type=NOTICE_INFO,
                    target="production",
                )
            )

    return notices
