from io import BytesIO

from docx import Document

from services.print_service import period_label, print_profit_and_loss, print_receivables_report, print_sales_report
from services.recap_service import profit_and_loss
from services.report_service import detailed_sales_rows, receivable_rows
from settings import StoreInfo
from utils.dates import today_iso

STORE = StoreInfo(name="Toko Uji", address="Jl. Merdeka 1", phone="0812")


def _text(doc):
    return "\n".join(p.text for p in doc.paragraphs)


def test_period_label():
    assert period_label("2024-03-01", "2024-03-31") == "Periode: 01/03/2024 - 31/03/2024"
    assert period_label("", "2024-03-31") == "Periode: ... - 31/03/2024"


def test_print_sales_report(snapshot):
    rows = detailed_sales_rows(snapshot.orders, snapshot)
    file_name, content = print_sales_report(rows, 370000, "2024-03-01", "2024-03-31", STORE)

    assert file_name == "Laporan_Penjualan_2024-03-01_2024-03-31.docx"
    doc = Document(BytesIO(content))
    text = _text(doc)
    assert "Toko Uji" in text
    assert "Telp/WA: 0812" in text
    assert "Laporan Penjualan" in text
    assert "Rp 370.000" in text

    table = doc.tables[0]
    assert len(table.rows) == len(rows) + 1
    assert table.rows[0].cells[2].text == "No. Nota"
    assert table.rows[1].cells[9].text == "Rp 150.000"


def test_print_receivables_report(snapshot):
    rows = receivable_rows(snapshot.receivables, snapshot.orders, "", "")
    file_name, content = print_receivables_report(rows, "", "2024-03-31", STORE)

    assert file_name == "Laporan_Piutang_awal_2024-03-31.docx"
    doc = Document(BytesIO(content))
    assert "Rp 170.000" in _text(doc)
    assert [r.cells[1].text for r in doc.tables[0].rows[1:]] == ["NOTA-003", "NOTA-002", "NOTA-001"]


def test_print_profit_and_loss(snapshot):
    pnl = profit_and_loss(snapshot, "2024-03-01", "2024-03-31")
    file_name, content = print_profit_and_loss(pnl, "Periode: Mar 2024", STORE)

    assert file_name == "Laporan_Laba_Rugi_2024-03-01_2024-03-31.docx"
    doc = Document(BytesIO(content))
    assert "Rp 320.000" in _text(doc)

    income, expense = doc.tables
    assert income.rows[-1].cells[0].text == "TOTAL PENDAPATAN"
    assert income.rows[-1].cells[1].text == "Rp 370.000"
    assert expense.rows[-1].cells[1].text == "Rp 50.000"


def test_blank_end_date_names_file_by_today(snapshot):
    rows = receivable_rows(snapshot.receivables, snapshot.orders, "", "")
    sales_name, _ = print_sales_report(detailed_sales_rows(snapshot.orders, snapshot), 370000, "", None, STORE)
    receivables_name, _ = print_receivables_report(rows, "", "", STORE)

    assert sales_name == f"Laporan_Penjualan_awal_{today_iso()}.docx"
    assert receivables_name == f"Laporan_Piutang_awal_{today_iso()}.docx"
    assert "None" not in sales_name
