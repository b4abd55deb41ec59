# percetakan/services/print_service.py

import logging
from io import BytesIO
from typing import List, Sequence, Tuple

from docx import Document

from domain.models import ProfitAndLoss, ReceivableRow, SalesRow
from utils.dates import format_date, today_iso
from utils.docx_helpers import add_summary_line, add_table, set_base_font
from utils.formatting import format_currency, format_number

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _new_document(store, title: str, period: str) -> Document:
    doc = Document()
    set_base_font(doc)

    doc.add_heading(store.name, level=2)
    if store.address:
        doc.add_paragraph(store.address)
    if store.phone:
        doc.add_paragraph(f"Telp/WA: {store.phone}")

    doc.add_heading(title, level=1)
    doc.add_paragraph(period)
    return doc


def _to_bytes(doc: Document) -> bytes:
    output = BytesIO()
    doc.save(output)
    return output.getvalue()


def period_label(start: str, end: str) -> str:
    return f"Periode: {format_date(start) if start else '...'} - {format_date(end) if end else '...'}"


def print_sales_report(
        rows: Sequence[SalesRow],
        total_sales: float,
        start: str,
        end: str,
        store,
) -> Tuple[str, bytes]:
    doc = _new_document(store, "Laporan Penjualan", period_label(start, end))

    headers = ["No", "Tanggal", "No. Nota", "Pelanggan", "Deskripsi", "Bahan", "P", "L", "Qty", "Total", "Status"]
    body = [
        [
            row.no, format_date(row.date), row.order_id, row.customer, row.description,
            row.material, row.length, row.width, format_number(row.qty),
            format_currency(row.total), row.status,
        ]
        for row in rows
    ]
    add_table(doc, headers, body, numeric_cols=(9,))
    add_summary_line(doc, "Total Penjualan:", format_currency(total_sales))

    logger.info("Rendered sales report with %d rows", len(body))
    return f"Laporan_Penjualan_{start or 'awal'}_{end or today_iso()}.docx", _to_bytes(doc)


def print_receivables_report(
        rows: Sequence[ReceivableRow],
        start: str,
        end: str,
        store,
) -> Tuple[str, bytes]:
    doc = _new_document(store, "Laporan Piutang", period_label(start, end))

    headers = [
        "No", "No. Nota", "Pelanggan", "Total Tagihan", "Dibayar", "Sisa",
        "Status Bayar", "Status Produksi", "Jatuh Tempo",
    ]
    body = [
        [
            idx, r.id, r.customer, format_currency(r.amount), format_currency(r.paid),
            format_currency(r.remaining), r.payment_status, r.production_status, format_date(r.due),
        ]
        for idx, r in enumerate(rows, start=1)
    ]
    add_table(doc, headers, body, numeric_cols=(3, 4, 5))
    add_summary_line(doc, "Total Sisa Tagihan:", format_currency(sum(r.remaining for r in rows)))

    logger.info("Rendered receivables report with %d rows", len(body))
    return f"Laporan_Piutang_{start or 'awal'}_{end or today_iso()}.docx", _to_bytes(doc)


def print_profit_and_loss(pnl: ProfitAndLoss, period: str, store) -> Tuple[str, bytes]:
    doc = _new_document(store, "Laporan Laba Rugi", period)

    doc.add_heading("Pendapatan", level=3)
    income: List[list] = [[c.name, format_currency(c.total)] for c in pnl.income_by_category]
    income.append(["TOTAL PENDAPATAN", format_currency(pnl.total_sales)])
    add_table(doc, ["Kategori", "Total"], income, numeric_cols=(1,))

    doc.add_heading("Pengeluaran", level=3)
    expense: List[list] = [[c.name, format_currency(c.total)] for c in pnl.expense_by_category]
    expense.append(["TOTAL PENGELUARAN", format_currency(pnl.total_expenses)])
    add_table(doc, ["Kategori", "Total"], expense, numeric_cols=(1,))

    add_summary_line(doc, "Laba Rugi:", format_currency(pnl.profit))
    return f"Laporan_Laba_Rugi_{pnl.start}_{pnl.end}.docx", _to_bytes(doc)
