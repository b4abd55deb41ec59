import pandas as pd
import streamlit as st

import data_integrator
import settings
from domain.models import LegacyExpense, LegacyIncome, LegacyReceivable
from element_component import confirmation_dialog, get_snapshot
from services.ledger_service import (
    add_asset,
    add_debt,
    add_legacy_receivable,
    settle_legacy_receivable,
    update_legacy_receivable,
)
from services.permission_service import visible
from utils.dates import format_date, today_iso
from utils.formatting import format_currency

settings.configure_logging()

st.set_page_config(page_title="Data Lama", page_icon="🗂️", layout="wide")
st.sidebar.header("🗂️ Data Penjualan Lama")

snapshot = get_snapshot()
today = today_iso()

if not visible(snapshot.permissions, "reports/dataPenjualanLama"):
    st.info("Anda tidak memiliki akses ke data penjualan lama.")
    st.stop()

if "legacy_state" not in st.session_state:
    st.session_state["legacy_state"] = False

if st.session_state["legacy_state"]:
    st.success("Data lama berhasil disimpan")
    st.session_state["legacy_state"] = False

# -------------------------------------------------------------------
# Pemasukan dan pengeluaran lama
# -------------------------------------------------------------------

col_income, col_expense = st.columns(2)

with col_income:
    st.subheader("Pemasukan Lama")
    current = snapshot.legacy_income
    with st.form("legacy_income_form"):
        last_date = st.date_input("Tanggal Terakhir", value=pd.Timestamp(current.last_date if current else today), key="income_date")
        amount = st.number_input("Jumlah", min_value=0.0, value=float(current.amount if current else 0), step=1000.0, key="income_amount")
        submitted = st.form_submit_button("Simpan")
    if submitted:
        data = LegacyIncome(last_date=last_date.isoformat(), amount=amount)
        confirmation_dialog(
            {"Tanggal Terakhir": data.last_date, "Jumlah": format_currency(data.amount)},
            lambda data=data: data_integrator.save_legacy_income(data),
            "legacy_state",
        )
    if current and st.button("Hapus Pemasukan Lama"):
        confirmation_dialog(
            {"Aksi": "Hapus pemasukan lama", "Jumlah": format_currency(current.amount)},
            lambda: data_integrator.save_legacy_income(None),
            "legacy_state",
        )

with col_expense:
    st.subheader("Pengeluaran Lama")
    current = snapshot.legacy_expense
    with st.form("legacy_expense_form"):
        last_date = st.date_input("Tanggal Terakhir", value=pd.Timestamp(current.last_date if current else today), key="expense_date")
        amount = st.number_input("Jumlah", min_value=0.0, value=float(current.amount if current else 0), step=1000.0, key="expense_amount")
        submitted = st.form_submit_button("Simpan")
    if submitted:
        data = LegacyExpense(last_date=last_date.isoformat(), amount=amount)
        confirmation_dialog(
            {"Tanggal Terakhir": data.last_date, "Jumlah": format_currency(data.amount)},
            lambda data=data: data_integrator.save_legacy_expense(data),
            "legacy_state",
        )
    if current and st.button("Hapus Pengeluaran Lama"):
        confirmation_dialog(
            {"Aksi": "Hapus pengeluaran lama", "Jumlah": format_currency(current.amount)},
            lambda: data_integrator.save_legacy_expense(None),
            "legacy_state",
        )

# -------------------------------------------------------------------
# Piutang lama
# -------------------------------------------------------------------

st.subheader("Piutang Lama")

if snapshot.legacy_receivables:
    df = pd.DataFrame(
        [
            {"ID": r.id, "Pelanggan": r.customer, "Tanggal": format_date(r.date), "Jumlah": format_currency(r.amount)}
            for r in snapshot.legacy_receivables
        ]
    )
    st.dataframe(df, hide_index=True, width="stretch")
    st.metric("Total Piutang Lama", format_currency(sum(r.amount for r in snapshot.legacy_receivables)))
else:
    st.caption("Belum ada piutang lama.")

with st.expander("Tambah Piutang Lama"):
    with st.form("legacy_receivable_add", clear_on_submit=True):
        customer = st.text_input("Pelanggan")
        date = st.date_input("Tanggal", value=pd.Timestamp(today))
        amount = st.number_input("Jumlah", min_value=0.0, step=1000.0)
        submitted = st.form_submit_button("Tambah")
    if submitted:
        if not customer.strip() or amount <= 0:
            st.error("Pelanggan dan jumlah wajib diisi")
        else:
            updated = add_legacy_receivable(snapshot, customer.strip(), date.isoformat(), amount)
            item = updated.legacy_receivables[-1]
            confirmation_dialog(
                {"Pelanggan": item.customer, "Tanggal": item.date, "Jumlah": format_currency(item.amount)},
                lambda item=item: data_integrator.insert_legacy_receivable(item),
                "legacy_state",
            )

if snapshot.legacy_receivables:
    by_id = {r.id: r for r in snapshot.legacy_receivables}
    selected_id = st.selectbox(
        "Pilih Piutang Lama",
        list(by_id.keys()),
        format_func=lambda i: f"{by_id[i].customer} - {format_currency(by_id[i].amount)}",
        index=None,
        placeholder="Pilih piutang untuk diubah, dihapus atau dilunasi",
    )

    if selected_id is not None:
        selected = by_id[selected_id]
        with st.form("legacy_receivable_edit"):
            customer = st.text_input("Pelanggan", value=selected.customer)
            date = st.date_input("Tanggal", value=pd.Timestamp(selected.date or today))
            amount = st.number_input("Jumlah", min_value=0.0, value=float(selected.amount), step=1000.0)
            submitted = st.form_submit_button("Simpan Perubahan")
        if submitted:
            edited = LegacyReceivable(id=selected.id, customer=customer.strip(), date=date.isoformat(), amount=amount)
            try:
                updated = update_legacy_receivable(snapshot, edited)
            except ValueError as e:
                st.error(str(e))
            else:
                item = next(r for r in updated.legacy_receivables if r.id == edited.id)
                confirmation_dialog(
                    {"ID": item.id, "Pelanggan": item.customer, "Tanggal": item.date, "Jumlah": format_currency(item.amount)},
                    lambda item=item: data_integrator.update_legacy_receivable(item),
                    "legacy_state",
                )

        col_delete, col_settle = st.columns(2)
        if col_delete.button("Hapus Piutang"):
            confirmation_dialog(
                {"Aksi": "Hapus piutang lama", "Pelanggan": selected.customer, "Jumlah": format_currency(selected.amount)},
                lambda receivable_id=selected.id: data_integrator.delete_legacy_receivable(receivable_id),
                "legacy_state",
            )
        if col_settle.button("Lunasi Piutang", type="primary"):
            try:
                settled = settle_legacy_receivable(snapshot, selected.id, today)
            except ValueError as e:
                st.error(str(e))
            else:
                expense = settled.expenses[-1]
                confirmation_dialog(
                    {
                        "Aksi": "Lunasi piutang lama",
                        "Pelanggan": selected.customer,
                        "Dicatat sebagai": expense.name,
                        "Jumlah": format_currency(expense.amount),
                    },
                    lambda item=selected, expense=expense: data_integrator.settle_legacy_receivable(item, expense),
                    "legacy_state",
                )

# -------------------------------------------------------------------
# Aset dan hutang
# -------------------------------------------------------------------

st.subheader("Aset dan Hutang")
col_asset, col_debt = st.columns(2)

with col_asset:
    with st.form("asset_form", clear_on_submit=True):
        name = st.text_input("Nama Aset")
        value = st.number_input("Nilai Aset", min_value=0.0, step=1000.0)
        submitted = st.form_submit_button("Tambah Aset")
    if submitted and name.strip():
        asset = add_asset(snapshot, name.strip(), value).assets[-1]
        confirmation_dialog(
            {"Aset": asset.name, "Nilai": format_currency(asset.value)},
            lambda asset=asset: data_integrator.insert_asset(asset),
            "legacy_state",
        )

with col_debt:
    with st.form("debt_form", clear_on_submit=True):
        name = st.text_input("Nama Hutang")
        value = st.number_input("Nilai Hutang", min_value=0.0, step=1000.0)
        submitted = st.form_submit_button("Tambah Hutang")
    if submitted and name.strip():
        debt = add_debt(snapshot, name.strip(), value).debts[-1]
        confirmation_dialog(
            {"Hutang": debt.name, "Nilai": format_currency(debt.value)},
            lambda debt=debt: data_integrator.insert_debt(debt),
            "legacy_state",
        )
