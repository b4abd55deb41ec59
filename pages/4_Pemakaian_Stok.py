import pandas as pd
import streamlit as st

import data_integrator
import settings
from domain.models import INVENTORY_FINISHED, INVENTORY_RAW
from element_component import confirmation_dialog, get_snapshot
from services.ledger_service import use_inventory_stock
from services.permission_service import visible
from services.report_service import inventory_rows
from utils.dates import format_date, today_iso
from utils.formatting import format_number

settings.configure_logging()

st.set_page_config(page_title="Pemakaian Stok", page_icon="📦")
st.sidebar.header("📦 Pemakaian Stok")

snapshot = get_snapshot()

if not visible(snapshot.permissions, "inventory"):
    st.info("Anda tidak memiliki akses ke stok.")
    st.stop()

if "stock_usage_state" not in st.session_state:
    st.session_state["stock_usage_state"] = False

if st.session_state["stock_usage_state"]:
    st.success("Pemakaian stok berhasil dicatat")
    st.session_state["stock_usage_state"] = False

threshold = snapshot.notification_settings.low_stock_threshold
for inventory_type, title in ((INVENTORY_RAW, "Bahan Baku"), (INVENTORY_FINISHED, "Barang Jadi")):
    rows = inventory_rows([i for i in snapshot.inventory if i.type == inventory_type], threshold)
    if rows:
        st.subheader(title)
        st.dataframe(pd.DataFrame([r.__dict__ for r in rows]), hide_index=True, width="stretch")

raw_items = {i.id: i for i in snapshot.inventory if i.type == INVENTORY_RAW}

if not raw_items:
    st.caption("Belum ada bahan baku.")
    st.stop()

item_id = st.selectbox(
    "Bahan Baku",
    list(raw_items.keys()),
    format_func=lambda i: f"{raw_items[i].name} ({format_number(raw_items[i].stock)} {raw_items[i].unit})",
    index=None,
    placeholder="Pilih bahan baku",
)

if item_id is not None:
    item = raw_items[item_id]
    amount = st.number_input(f"Jumlah Dipakai ({item.unit})", min_value=0.0, step=1.0)
    date = st.date_input("Tanggal", value=pd.Timestamp(today_iso()))

    if st.button("Catat Pemakaian"):
        try:
            updated = use_inventory_stock(snapshot, item_id, amount, date.isoformat())
        except ValueError:
            st.error("Jumlah pemakaian harus lebih dari 0")
        else:
            used = next(i for i in updated.inventory if i.id == item_id)
            confirmation_dialog(
                {
                    "Bahan": used.name,
                    "Dipakai": f"{format_number(amount)} {used.unit}",
                    "Sisa Stok": f"{format_number(used.stock)} {used.unit}",
                },
                lambda used=used: data_integrator.save_inventory_usage(used),
                "stock_usage_state",
            )

    if item.usage_history:
        st.subheader("Riwayat Pemakaian")
        st.dataframe(
            pd.DataFrame(
                [(format_date(u.date), format_number(u.amount_used)) for u in reversed(item.usage_history)],
                columns=["Tanggal", "Jumlah"],
            ),
            hide_index=True,
        )
