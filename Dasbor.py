import pandas as pd
import streamlit as st

import settings
from domain.models import NOTICE_WARNING
from element_component import chart_frame, get_snapshot, pie_table
from services.dashboard_service import (
    dashboard_stats,
    financial_flow_today,
    orders_by_day_30,
    production_item_counts,
    items_delivered_today,
    production_pie,
    recent_payments,
    recent_production_activity,
    sales_by_day_30,
    total_items_today,
)
from services.notification_service import notifications
from services.permission_service import accessible_tabs, resolve_active_tab
from utils.dates import today_iso
from utils.formatting import format_currency, format_number

settings.configure_logging()

st.set_page_config(
    page_title="Dasbor",
    page_icon="🏠",
    layout="wide",
)

st.sidebar.header("🏠 Dasbor")

snapshot = get_snapshot()
today = today_iso()

# -------------------------------------------------------------------
# Notifikasi
# -------------------------------------------------------------------

for notice in notifications(snapshot):
    if notice.type == NOTICE_WARNING:
        st.sidebar.warning(notice.text, icon="⚠️")
    else:
        st.sidebar.info(notice.text, icon="🛒")

# -------------------------------------------------------------------
# Tabs allowed for this user
# -------------------------------------------------------------------

tabs = accessible_tabs(snapshot.permissions, "dashboard")
st.session_state.setdefault("dashboard_tab", "")
st.session_state["dashboard_tab"] = resolve_active_tab(tabs, st.session_state["dashboard_tab"])

if not st.session_state["dashboard_tab"]:
    st.info("Anda tidak memiliki akses ke dasbor.")
    st.stop()

if len(tabs) > 1:
    labels = {key: label for key, label in tabs}
    st.session_state["dashboard_tab"] = st.radio(
        "Dasbor",
        options=list(labels.keys()),
        format_func=labels.get,
        horizontal=True,
        index=list(labels.keys()).index(st.session_state["dashboard_tab"]),
        label_visibility="collapsed",
    )

active_tab = st.session_state["dashboard_tab"]

# -------------------------------------------------------------------
# Dasbor Penjualan
# -------------------------------------------------------------------

if active_tab == "penjualan":
    stats = dashboard_stats(snapshot, today)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Pemasukan Hari Ini", format_currency(stats.income_today))
    col2.metric("Jumlah Transaksi", stats.transactions_today)
    col3.metric("Piutang Aktif", format_currency(stats.active_receivables))
    col4.metric("Pengeluaran Hari Ini", format_currency(stats.expenses_today))

    col_chart, col_flow = st.columns([2, 1])
    with col_chart:
        st.subheader("Grafik Penjualan (30 Hari Terakhir)")
        st.area_chart(chart_frame(sales_by_day_30(snapshot.orders, today), "Penjualan"))
    with col_flow:
        st.subheader("Arus Keuangan Hari Ini")
        flow = financial_flow_today(snapshot, today)
        if flow:
            df_flow = pie_table(flow)
            df_flow["Nilai"] = df_flow["Nilai"].apply(format_currency)
            st.dataframe(df_flow, hide_index=True, width="stretch")
        else:
            st.caption("Belum ada transaksi hari ini.")

    st.subheader("Pembayaran Terbaru Hari Ini")
    payments = recent_payments(snapshot, today)
    if payments:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "No. Nota": p.order_id,
                        "Pelanggan": p.customer,
                        "Deskripsi": p.description,
                        "Sumber": p.source,
                        "Jumlah": format_currency(p.amount),
                    }
                    for p in payments
                ]
            ),
            hide_index=True,
            width="stretch",
        )
    else:
        st.caption("Belum ada pembayaran hari ini.")

# -------------------------------------------------------------------
# Dasbor Produksi
# -------------------------------------------------------------------

if active_tab == "produksi":
    counts = production_item_counts(snapshot.board, snapshot.orders)

    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Item Masuk Hari Ini", total_items_today(snapshot.orders, today))
    col2.metric("Dalam Antrian", counts["queue"])
    col3.metric("Proses Cetak", counts["printing"])
    col4.metric("Siap Ambil", counts["warehouse"])
    col5.metric("Terkirim Hari Ini", items_delivered_today(snapshot, today))

    col_chart, col_pie = st.columns([2, 1])
    with col_chart:
        st.subheader("Order Masuk (30 Hari Terakhir)")
        st.line_chart(chart_frame(orders_by_day_30(snapshot.orders, today), "Order Masuk"))
    with col_pie:
        st.subheader("Status Produksi")
        pie = production_pie(snapshot, today)
        if pie:
            st.dataframe(pie_table(pie, "Item"), hide_index=True, width="stretch")
        else:
            st.caption("Tidak ada item dalam produksi.")

    st.subheader("Aktivitas Produksi Hari Ini")
    activity = recent_production_activity(snapshot, today)
    if activity:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "No. Nota": a.order_id,
                        "Pelanggan": a.customer,
                        "Deskripsi": a.description,
                        "Ukuran": f"{a.length} x {a.width}" if a.length or a.width else "-",
                        "Qty": format_number(a.qty),
                        "Finishing": a.finishing or "-",
                        "Status": a.status,
                    }
                    for a in activity
                ]
            ),
            hide_index=True,
            width="stretch",
        )
    else:
        st.caption("Belum ada order hari ini.")
