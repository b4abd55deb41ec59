# percetakan/services/export_service.py

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional, Sequence

import pandas as pd

from domain.models import InventoryRow, Order, ReceivableRow, Snapshot
from services.report_service import detailed_sales_rows
from utils.dates import format_date, today_iso

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

REPORT_TYPES = ("sales", "receivables", "inventory")

SHEET_NAMES = {
    "sales": "Data Transaksi",
    "receivables": "Laporan Piutang",
    "inventory": "Laporan Stok",
}

COLUMNS = {
    "sales": [
        "No.", "Tanggal", "No. Nota", "Nama Pelanggan", "Deskripsi", "Bahan",
        "Panjang", "Lebar", "Qty", "Total", "Status Pembayaran",
    ],
    "receivables": [
        "No Nota", "Pelanggan", "Total Tagihan", "Sudah Dibayar", "Sisa Tagihan",
        "Status Bayar", "Status Produksi", "Tanggal Jatuh Tempo",
    ],
    "inventory": ["Nama Item", "SKU", "Tipe", "Stok Saat Ini", "Satuan", "Status"],
}

# the reference tables a sales export needs to re-price items
SALES_EXTRA_KEYS = ("products", "categories", "customers", "finishings", "receivables")


@dataclass
class ExportFile:
    file_name: str
    content: bytes
    mime: str = XLSX_MIME


def export_file_name(report_type: str, start: Optional[str], end: Optional[str], today: Optional[str] = None) -> str:
    return f"Laporan_{report_type}_{start or 'awal'}_sampai_{end or today or today_iso()}.xlsx"


def _numeric_or_text(value: str):
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def _sales_records(orders: Sequence[Order], extra: Dict[str, list]) -> List[dict]:
    # the export prices each item as it stands today, without folding in
    # the difference to the stored order total
    snapshot = Snapshot(**{key: list(extra[key]) for key in SALES_EXTRA_KEYS})
    rows = detailed_sales_rows(orders, snapshot, reconcile=False)
    return [
        {
            "No.": row.no,
            "Tanggal": format_date(row.date),
            "No. Nota": row.order_id,
            "Nama Pelanggan": row.customer,
            "Deskripsi": row.description,
            "Bahan": row.material,
            "Panjang": _numeric_or_text(row.length),
            "Lebar": _numeric_or_text(row.width),
            "Qty": row.qty,
            "Total": row.total,
            "Status Pembayaran": row.status,
        }
        for row in rows
    ]


def _receivable_records(rows: Sequence[ReceivableRow]) -> List[dict]:
    return [
        {
            "No Nota": r.id,
            "Pelanggan": r.customer,
            "Total Tagihan": r.amount,
            "Sudah Dibayar": r.paid,
            "Sisa Tagihan": r.remaining,
            "Status Bayar": r.payment_status,
            "Status Produksi": r.production_status,
            "Tanggal Jatuh Tempo": format_date(r.due),
        }
        for r in rows
    ]


def _inventory_records(rows: Sequence[InventoryRow]) -> List[dict]:
    return [
        {
            "Nama Item": i.name,
            "SKU": i.sku,
            "Tipe": i.type,
            "Stok Saat Ini": i.stock,
            "Satuan": i.unit,
            "Status": i.status,
        }
        for i in rows
    ]


def export_report(
        report_type: str,
        data,
        date_range: Dict[str, str],
        extra_data: Optional[Dict[str, list]] = None,
        today: Optional[str] = None,
) -> Optional[ExportFile]:
    """
    Shape one report into a single-sheet workbook.

    `data` is the list of orders for "sales", ReceivableRow objects for
    "receivables" and InventoryRow objects for "inventory". A sales export
    without every reference table in `extra_data` is skipped, as is an
    unknown report type; both return None.
    """
    if report_type not in REPORT_TYPES:
        logger.warning("Export not available for report type %r", report_type)
        return None

    if report_type == "sales":
        if not extra_data or any(extra_data.get(k) is None for k in SALES_EXTRA_KEYS):
            logger.warning("Sales export skipped: reference tables missing")
            return None
        records = _sales_records(data or [], extra_data)
    elif report_type == "receivables":
        records = _receivable_records(data or [])
    else:
        records = _inventory_records(data or [])

    df = pd.DataFrame(records, columns=COLUMNS[report_type])

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAMES[report_type], index=False)
    output.seek(0)

    file_name = export_file_name(
        report_type,
        date_range.get("start_date"),
        date_range.get("end_date"),
        today,
    )
    logger.info("Exported %d %s rows to %s", len(records), report_type, file_name)
    return ExportFile(file_name=file_name, content=output.getvalue())
