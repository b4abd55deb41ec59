import re

import pandas as pd
import streamlit as st

import settings
from element_component import chart_frame, get_snapshot, pie_table
from services.export_service import export_report
from services.permission_service import accessible_tabs, resolve_active_tab
from services.print_service import DOCX_MIME, print_profit_and_loss, print_receivables_report, print_sales_report
from services.recap_service import annual_recap, available_years, profit_and_loss
from services.report_service import (
    assets_debts_summary,
    detailed_sales_rows,
    filter_orders,
    inventory_rows,
    receivable_rows,
    sales_by_customer,
    sales_by_product,
    sales_summary,
    sort_sales_rows,
)
from utils.dates import MONTH_LABELS, current_month_range, format_date, month_range, today_iso, year_range
from utils.formatting import format_currency, format_number

settings.configure_logging()

st.set_page_config(page_title="Laporan", page_icon="📊", layout="wide")
st.sidebar.header("📊 Laporan")

snapshot = get_snapshot()
today = today_iso()

tabs = accessible_tabs(snapshot.permissions, "reports")
st.session_state.setdefault("report_tab", "")
st.session_state["report_tab"] = resolve_active_tab(tabs, st.session_state["report_tab"])

if not st.session_state["report_tab"]:
    st.info("Anda tidak memiliki akses ke laporan.")
    st.stop()

labels = {key: label for key, label in tabs}
active_tab = st.sidebar.radio(
    "Jenis Laporan",
    options=list(labels.keys()),
    format_func=labels.get,
    index=list(labels.keys()).index(st.session_state["report_tab"]),
)
st.session_state["report_tab"] = active_tab
st.title(labels[active_tab])


def _date_filter():
    first_day, last_day = current_month_range(today)
    col_start, col_end, col_customer = st.columns(3)
    start = col_start.date_input("Dari", value=pd.Timestamp(first_day))
    end = col_end.date_input("Sampai", value=pd.Timestamp(last_day))
    customers = sorted({o.customer for o in snapshot.orders})
    customer = col_customer.selectbox("Pelanggan", customers, index=None, placeholder="Semua pelanggan")
    return start.isoformat(), end.isoformat(), customer


def _currency_columns(df: pd.DataFrame, columns) -> pd.DataFrame:
    df = df.copy()
    for col in columns:
        df[col] = df[col].apply(format_currency)
    return df


# -------------------------------------------------------------------
# Final Rekapitulasi
# -------------------------------------------------------------------

if active_tab == "finalRecap":
    years = available_years(snapshot.orders) or [int(today[:4])]
    year = st.selectbox("Tahun", years, format_func=lambda y: f"Tahun {y}")
    recap = annual_recap(snapshot, year)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Pemasukan", format_currency(recap.total_income))
    col2.metric("Total Pengeluaran", format_currency(recap.total_expense))
    col3.metric("Total Piutang", format_currency(recap.total_receivables))

    col1, col2, col3, col4 = st.columns(4)
    col1.metric(f"Penjualan ({year})", format_currency(recap.sales_this_year))
    col2.metric(f"Piutang ({year})", format_currency(recap.receivables_this_year))
    col3.metric(f"Pengeluaran ({year})", format_currency(recap.expenses_this_year))
    col4.metric("Saldo Akhir (Estimasi)", format_currency(recap.balance))

    st.subheader(f"Total Order per Bulan ({recap.orders_this_year} order)")
    st.bar_chart(chart_frame(recap.monthly_orders, "Total Order", "Bulan"))

# -------------------------------------------------------------------
# Laba Rugi
# -------------------------------------------------------------------

elif active_tab == "profitAndLoss":
    col_type, col_value = st.columns(2)
    filter_type = col_type.radio("Periode", ["month", "year"], format_func={"month": "Bulanan", "year": "Tahunan"}.get, horizontal=True)

    if filter_type == "month":
        year_month = col_value.text_input("Bulan (YYYY-MM)", value=today[:7])
        if not re.match(r"^\d{4}-(0[1-9]|1[0-2])$", year_month):
            st.error("Format bulan harus YYYY-MM")
            st.stop()
        start, end = month_range(year_month)
        year, month = int(year_month[:4]), int(year_month[5:7])
        period = f"Periode: {MONTH_LABELS[month - 1]} {year}"
    else:
        year = col_value.number_input("Tahun", value=int(today[:4]), step=1)
        start, end = year_range(int(year))
        period = f"Periode: Tahun {int(year)}"

    pnl = profit_and_loss(snapshot, start, end, filter_type)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Pendapatan", format_currency(pnl.total_sales))
    col2.metric("Total Pengeluaran", format_currency(pnl.total_expenses))
    col3.metric("Laba Rugi", format_currency(pnl.profit))

    st.area_chart(chart_frame(pnl.sales_chart, "Penjualan", "Periode"))

    col_income, col_expense = st.columns(2)
    with col_income:
        st.subheader("Pendapatan")
        st.dataframe(
            pd.DataFrame([(c.name, format_currency(c.total)) for c in pnl.income_by_category], columns=["Kategori", "Total"]),
            hide_index=True, width="stretch",
        )
    with col_expense:
        st.subheader("Pengeluaran")
        st.dataframe(
            _currency_columns(pie_table(pnl.expense_pie, "Total"), ["Total"]),
            hide_index=True, width="stretch",
        )

    file_name, content = print_profit_and_loss(pnl, period, settings.STORE_INFO)
    st.download_button("Cetak Laporan", data=content, file_name=file_name, mime=DOCX_MIME)

# -------------------------------------------------------------------
# Penjualan
# -------------------------------------------------------------------

elif active_tab == "sales":
    start, end, customer = _date_filter()
    orders = filter_orders(snapshot.orders, start, end, customer)
    summary = sales_summary(orders)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Penjualan", format_currency(summary["total_sales"]))
    col2.metric("Jumlah Transaksi", summary["transactions"])
    col3.metric("Item Terjual", format_number(summary["items"]))
    col4.metric("Rata-rata Transaksi", format_currency(summary["average"]))

    sort_key = st.selectbox(
        "Urutkan", ["order_id", "date", "customer", "total", "qty"],
        format_func={"order_id": "No. Nota", "date": "Tanggal", "customer": "Pelanggan", "total": "Total", "qty": "Qty"}.get,
    )
    descending = st.toggle("Menurun", value=True)
    rows = sort_sales_rows(detailed_sales_rows(orders, snapshot), sort_key, descending)

    if not rows:
        st.info("Tidak ada data penjualan untuk periode ini.")
    else:
        df = pd.DataFrame([r.__dict__ for r in rows])
        df["date"] = df["date"].apply(format_date)
        df["total"] = df["total"].apply(format_currency)
        st.dataframe(df, hide_index=True, width="stretch")

        col_product, col_customer = st.columns(2)
        with col_product:
            st.subheader("Penjualan per Produk")
            st.dataframe(
                _currency_columns(pd.DataFrame([r.__dict__ for r in sales_by_product(orders, snapshot)]), ["revenue"]),
                hide_index=True, width="stretch",
            )
        with col_customer:
            st.subheader("Penjualan per Pelanggan")
            st.dataframe(
                _currency_columns(pd.DataFrame([r.__dict__ for r in sales_by_customer(orders, snapshot)]), ["spend"]),
                hide_index=True, width="stretch",
            )

    export = export_report(
        "sales",
        orders,
        {"start_date": start, "end_date": end},
        {
            "products": snapshot.products,
            "categories": snapshot.categories,
            "customers": snapshot.customers,
            "finishings": snapshot.finishings,
            "receivables": snapshot.receivables,
        },
    )
    col_xlsx, col_docx = st.columns(2)
    if export:
        col_xlsx.download_button("Ekspor Excel", data=export.content, file_name=export.file_name, mime=export.mime)
    file_name, content = print_sales_report(rows, summary["total_sales"], start, end, settings.STORE_INFO)
    col_docx.download_button("Cetak Laporan", data=content, file_name=file_name, mime=DOCX_MIME)

# -------------------------------------------------------------------
# Piutang
# -------------------------------------------------------------------

elif active_tab == "receivables":
    start, end, customer = _date_filter()
    rows = receivable_rows(snapshot.receivables, snapshot.orders, start, end, customer)

    if not rows:
        st.info("Tidak ada data piutang untuk periode ini.")
    else:
        df = pd.DataFrame([r.__dict__ for r in rows])
        df["due"] = df["due"].apply(format_date)
        st.dataframe(_currency_columns(df, ["amount", "paid", "remaining"]), hide_index=True, width="stretch")
        st.metric("Total Sisa Tagihan", format_currency(sum(r.remaining for r in rows)))

    export = export_report("receivables", rows, {"start_date": start, "end_date": end})
    col_xlsx, col_docx = st.columns(2)
    col_xlsx.download_button("Ekspor Excel", data=export.content, file_name=export.file_name, mime=export.mime)
    file_name, content = print_receivables_report(rows, start, end, settings.STORE_INFO)
    col_docx.download_button("Cetak Laporan", data=content, file_name=file_name, mime=DOCX_MIME)

# -------------------------------------------------------------------
# Stok
# -------------------------------------------------------------------

elif active_tab == "inventory":
    rows = inventory_rows(snapshot.inventory, snapshot.notification_settings.low_stock_threshold)
    if not rows:
        st.info("Belum ada data stok.")
    else:
        st.dataframe(pd.DataFrame([r.__dict__ for r in rows]), hide_index=True, width="stretch")

    # stock has no date dimension
    export = export_report("inventory", rows, {"start_date": "", "end_date": ""})
    st.download_button("Ekspor Excel", data=export.content, file_name=export.file_name, mime=export.mime)

# -------------------------------------------------------------------
# Aset dan Hutang
# -------------------------------------------------------------------

elif active_tab == "assetsDebts":
    summary = assets_debts_summary(snapshot.assets, snapshot.debts)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Aset", format_currency(summary["total_assets"]))
    col2.metric("Total Hutang", format_currency(summary["total_debts"]))
    col3.metric("Kekayaan Bersih", format_currency(summary["net_worth"]))

    col_assets, col_debts = st.columns(2)
    with col_assets:
        st.dataframe(
            pd.DataFrame([(a.name, format_currency(a.value)) for a in snapshot.assets], columns=["Aset", "Nilai"]),
            hide_index=True, width="stretch",
        )
    with col_debts:
        st.dataframe(
            pd.DataFrame([(d.name, format_currency(d.value)) for d in snapshot.debts], columns=["Hutang", "Nilai"]),
            hide_index=True, width="stretch",
        )

elif active_tab == "dataPenjualanLama":
    st.page_link("pages/3_Data_Lama.py", label="Kelola data pemasukan, pengeluaran dan piutang lama", icon="🗂️")
