import pandas as pd
import streamlit as st

import data_integrator
import settings
from domain.models import EXPENSE_CATEGORIES
from element_component import confirmation_dialog, get_snapshot
from services.dashboard_service import expenses_today
from services.ledger_service import add_expense
from services.permission_service import visible
from utils.dates import format_date, today_iso
from utils.formatting import format_currency

settings.configure_logging()

st.set_page_config(page_title="Pengeluaran", page_icon="🧾")
st.sidebar.header("🧾 Pengeluaran")

snapshot = get_snapshot()
today = today_iso()

if not visible(snapshot.permissions, "expenses"):
    st.info("Anda tidak memiliki akses ke pengeluaran.")
    st.stop()

if "expense_state" not in st.session_state:
    st.session_state["expense_state"] = False

if st.session_state["expense_state"]:
    st.success("Pengeluaran berhasil dicatat")
    st.session_state["expense_state"] = False

st.metric("Pengeluaran Hari Ini", format_currency(expenses_today(snapshot.expenses, today)))

with st.form("expense_form", clear_on_submit=True):
    name = st.text_input("Nama Pengeluaran")
    category = st.selectbox("Kategori", EXPENSE_CATEGORIES)
    amount = st.number_input("Jumlah", min_value=0.0, step=1000.0)
    date = st.date_input("Tanggal", value=pd.Timestamp(today))
    submitted = st.form_submit_button("Tambah")

if submitted:
    if not name.strip():
        st.error("Nama pengeluaran wajib diisi")
    else:
        try:
            updated = add_expense(snapshot, name.strip(), category, amount, date.isoformat())
        except ValueError:
            st.error("Jumlah pengeluaran harus lebih dari 0")
        else:
            expense = updated.expenses[-1]
            confirmation_dialog(
                {
                    "Nama": expense.name,
                    "Kategori": expense.category,
                    "Jumlah": format_currency(expense.amount),
                    "Tanggal": expense.date,
                },
                lambda expense=expense: data_integrator.insert_expense(expense),
                "expense_state",
            )

if snapshot.expenses:
    st.subheader("Riwayat Pengeluaran")
    recent = sorted(snapshot.expenses, key=lambda e: e.date, reverse=True)
    st.dataframe(
        pd.DataFrame(
            [(format_date(e.date), e.name, e.category, format_currency(e.amount)) for e in recent],
            columns=["Tanggal", "Nama", "Kategori", "Jumlah"],
        ),
        hide_index=True,
        width="stretch",
    )
