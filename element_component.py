import pandas as pd
import streamlit as st

import settings
from data_integrator import load_snapshot
from domain.models import ChartPoint


@st.cache_data(ttl=60, show_spinner="Memuat data...")
def _cached_snapshot(user_level: str):
    return load_snapshot(user_level)


def get_snapshot():
    """
    Current snapshot for this rerun. Stops the page with an error if the
    record store cannot be read.
    """
    ok, msg, snapshot = _cached_snapshot(settings.USER_LEVEL)
    if not ok:
        st.error(f"Gagal memuat data: {msg}")
        st.stop()
    return snapshot


def refresh_snapshot():
    _cached_snapshot.clear()


def chart_frame(points, value_name: str, index_name: str = "Tanggal") -> pd.DataFrame:
    return pd.DataFrame(
        [(p.label, p.value) for p in points],
        columns=[index_name, value_name],
    ).set_index(index_name)


def pie_table(points: list[ChartPoint], value_name: str = "Nilai") -> pd.DataFrame:
    return pd.DataFrame([(p.label, p.value) for p in points], columns=["Kategori", value_name])


@st.dialog("Konfirmasi")
def confirmation_dialog(value: dict, action, state_name: str):
    """
    Show `value` as a Key/Value table and run `action()` on "Ya".
    `action` returns (ok, message, data) like the data_integrator calls.
    """
    df = pd.DataFrame(list(value.items()), columns=["Key", "Value"])
    df["Value"] = df["Value"].astype("string")
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Ya", type="primary", key="confirm_yes"):
            status, msg, data = action()
            st.session_state[state_name] = status

            if not status:
                st.error(msg)
            else:
                refresh_snapshot()
                st.rerun()
    with col_no:
        if st.button("Tidak"):
            st.rerun()
