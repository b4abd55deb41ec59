import streamlit as st

import data_integrator
import settings
from domain.models import STAGES
from element_component import confirmation_dialog, get_snapshot, refresh_snapshot
from services.dashboard_service import items_count
from services.ledger_service import cancel_queue, deliver_order, move_production_card, process_order
from services.notification_service import unprocessed_orders
from services.permission_service import visible
from utils.dates import format_date, today_iso
from utils.formatting import format_currency

settings.configure_logging()

st.set_page_config(page_title="Produksi / Status Order", page_icon="🖨️", layout="wide")
st.sidebar.header("🖨️ Produksi / Status Order")

snapshot = get_snapshot()

if not visible(snapshot.permissions, "production"):
    st.info("Anda tidak memiliki akses ke halaman produksi.")
    st.stop()

STAGE_TITLES = {
    "queue": "Dalam Antrian",
    "printing": "Proses Cetak",
    "warehouse": "Siap Ambil",
    "delivered": "Telah Dikirim",
}
NEXT_STAGE = {"queue": "printing", "printing": "warehouse"}

if "production_state" not in st.session_state:
    st.session_state["production_state"] = False

if st.session_state["production_state"]:
    st.success("Status produksi berhasil diperbarui")
    st.session_state["production_state"] = False

# -------------------------------------------------------------------
# Order belum diproses
# -------------------------------------------------------------------

new_orders = [
    o for o in unprocessed_orders(snapshot.orders, snapshot.receivables)
    if snapshot.receivable_by_id(o.id) is None
]

with st.expander(f"Order Belum Diproses ({len(new_orders)})", expanded=bool(new_orders)):
    if not new_orders:
        st.caption("Semua order sudah diproses.")
    for order in new_orders:
        col_info, col_action = st.columns([4, 1])
        col_info.markdown(
            f"**{order.id}** · {order.customer} · {format_date(order.order_date)} · {format_currency(order.total_price)}"
        )
        if col_action.button("Proses", key=f"process_{order.id}"):
            try:
                updated = process_order(snapshot, order.id)
            except ValueError as e:
                st.error(str(e))
            else:
                receivable = updated.receivable_by_id(order.id)
                confirmation_dialog(
                    {
                        "No. Nota": order.id,
                        "Pelanggan": order.customer,
                        "Tagihan": format_currency(receivable.amount),
                        "Jatuh Tempo": format_date(receivable.due),
                        "Status": receivable.production_status,
                    },
                    lambda receivable=receivable: data_integrator.save_receivable(receivable),
                    "production_state",
                )

# -------------------------------------------------------------------
# Papan produksi
# -------------------------------------------------------------------

columns = st.columns(len(STAGES))

for col, stage in zip(columns, STAGES):
    cards = snapshot.board.stage(stage)
    with col:
        st.subheader(STAGE_TITLES[stage])
        st.caption(f"{len(cards)} order / {items_count(cards, snapshot.orders)} item")

        for card in cards:
            with st.container(border=True):
                st.markdown(f"**{card.id}**  \n{card.customer}")
                first_line = card.details.split("\n")[0]
                st.caption(first_line + (" ..." if "\n" in card.details else ""))

                if stage in NEXT_STAGE:
                    target = NEXT_STAGE[stage]
                    if st.button(f"➡️ {STAGE_TITLES[target]}", key=f"move_{card.id}"):
                        try:
                            updated = move_production_card(snapshot, card.id, stage, target)
                        except ValueError as e:
                            st.error(str(e))
                        else:
                            ok, msg, _ = data_integrator.save_receivable(updated.receivable_by_id(card.id))
                            if ok:
                                st.session_state["production_state"] = True
                                refresh_snapshot()
                                st.rerun()
                            st.error(msg)

                if stage == "warehouse":
                    note = st.text_input("Catatan", key=f"note_{card.id}")
                    if st.button("Serahkan", key=f"deliver_{card.id}"):
                        try:
                            updated = deliver_order(snapshot, card.id, note, today_iso())
                        except ValueError as e:
                            st.error(str(e))
                        else:
                            receivable = updated.receivable_by_id(card.id)
                            confirmation_dialog(
                                {
                                    "No. Nota": card.id,
                                    "Pelanggan": card.customer,
                                    "Tanggal Kirim": receivable.delivery_date,
                                    "Catatan": receivable.delivery_note,
                                },
                                lambda receivable=receivable: data_integrator.save_receivable(receivable),
                                "production_state",
                            )

                if stage == "queue":
                    if st.button("Batal Antrian", key=f"cancel_{card.id}"):
                        try:
                            # raises unless the card is still queued
                            cancel_queue(snapshot, card.id)
                        except ValueError as e:
                            st.error(str(e))
                        else:
                            confirmation_dialog(
                                {"No. Nota": card.id, "Pelanggan": card.customer, "Aksi": "Batal antrian"},
                                lambda order_id=card.id: data_integrator.delete_receivable(order_id),
                                "production_state",
                            )
