import pandas as pd
import streamlit as st

import data_integrator
import settings
from domain.models import PAYMENT_PAID, Payment
from element_component import confirmation_dialog, get_snapshot
from services.ledger_service import add_payment
from services.notification_service import unprocessed_orders
from services.permission_service import visible
from utils.dates import format_date, today_iso
from utils.formatting import format_currency

settings.configure_logging()

st.set_page_config(page_title="Piutang", page_icon="💳", layout="wide")
st.sidebar.header("💳 Piutang & Pembayaran")

snapshot = get_snapshot()

if not visible(snapshot.permissions, "receivables"):
    st.info("Anda tidak memiliki akses ke piutang.")
    st.stop()

if "payment_state" not in st.session_state:
    st.session_state["payment_state"] = False

if st.session_state["payment_state"]:
    st.success("Pembayaran berhasil dicatat")
    st.session_state["payment_state"] = False

# -------------------------------------------------------------------
# Tagihan terbuka
# -------------------------------------------------------------------

open_receivables = [r for r in snapshot.receivables if r.payment_status != PAYMENT_PAID]
new_orders = [
    o for o in unprocessed_orders(snapshot.orders, snapshot.receivables)
    if snapshot.receivable_by_id(o.id) is None
]

bills = {}
for r in open_receivables:
    bills[r.id] = (r.customer, r.remaining, r.due)
for o in new_orders:
    bills[o.id] = (o.customer, o.total_price, None)

if not bills:
    st.caption("Tidak ada tagihan terbuka.")
    st.stop()

st.dataframe(
    pd.DataFrame(
        [
            (order_id, customer, format_currency(remaining), format_date(due) if due else "Belum diproses")
            for order_id, (customer, remaining, due) in bills.items()
        ],
        columns=["No. Nota", "Pelanggan", "Sisa Tagihan", "Jatuh Tempo"],
    ),
    hide_index=True,
    width="stretch",
)

# -------------------------------------------------------------------
# Catat pembayaran
# -------------------------------------------------------------------

st.subheader("Catat Pembayaran")

order_id = st.selectbox(
    "No. Nota",
    list(bills.keys()),
    format_func=lambda i: f"{i} - {bills[i][0]} ({format_currency(bills[i][1])})",
    index=None,
    placeholder="Pilih tagihan",
)

if order_id is not None:
    methods = {m.id: m for m in snapshot.payment_methods}
    current = snapshot.receivable_by_id(order_id)

    with st.form("payment_form"):
        amount = st.number_input("Jumlah Bayar", min_value=0.0, value=float(max(0, bills[order_id][1])), step=1000.0)
        method_id = st.selectbox("Metode", list(methods.keys()), format_func=lambda i: methods[i].name)
        discount = st.number_input(
            "Diskon", min_value=0.0, value=float(current.discount if current else 0), step=1000.0
        )
        date = st.date_input("Tanggal", value=pd.Timestamp(today_iso()))
        submitted = st.form_submit_button("Simpan Pembayaran")

    if submitted:
        method = methods.get(method_id)
        payment = Payment(
            amount=amount,
            date=date.isoformat(),
            method_id=method.id if method else "",
            method_name=method.name if method else "",
        )
        try:
            updated = add_payment(snapshot, order_id, payment, discount)
        except ValueError as e:
            st.error(str(e))
        else:
            receivable = updated.receivable_by_id(order_id)
            confirmation_dialog(
                {
                    "No. Nota": receivable.id,
                    "Pelanggan": receivable.customer,
                    "Dibayar": format_currency(payment.amount),
                    "Metode": payment.method_name,
                    "Sisa Tagihan": format_currency(receivable.active_remaining),
                    "Status": receivable.payment_status,
                },
                lambda receivable=receivable: data_integrator.save_receivable(receivable),
                "payment_state",
            )
