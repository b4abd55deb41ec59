# percetakan/services/permission_service.py

from typing import Dict, Iterable, List, Sequence, Tuple

# (key, label) per menu, in display order
MENU_TABS: Dict[str, List[Tuple[str, str]]] = {
    "dashboard": [
        ("penjualan", "Dasbor Penjualan"),
        ("produksi", "Dasbor Produksi"),
    ],
    "sales": [],
    "production": [],
    "receivables": [],
    "expenses": [],
    "inventory": [],
    "reports": [
        ("finalRecap", "Final Rekapitulasi"),
        ("profitAndLoss", "Laba Rugi"),
        ("sales", "Penjualan"),
        ("receivables", "Piutang"),
        ("inventory", "Stok"),
        ("assetsDebts", "Aset dan Hutang"),
        ("dataPenjualanLama", "Data Penjualan Lama"),
    ],
    "settings": [
        ("storeInfo", "Informasi Toko"),
        ("paymentMethods", "Metode Pembayaran"),
        ("userManagement", "Manajemen Pengguna & Akses"),
        ("notifications", "Notifikasi"),
    ],
}

ALL_PERMISSIONS: List[str] = [
    key
    for menu, tabs in MENU_TABS.items()
    for key in [menu] + [f"{menu}/{tab}" for tab, _ in tabs]
]


def visible(permissions: Iterable[str], key: str) -> bool:
    """
    A view is visible only if its exact key is granted. There is no
    hierarchy: "reports" does not imply "reports/sales".
    """
    return key in set(permissions)


def accessible_tabs(
        permissions: Iterable[str],
        menu: str,
        tabs: Sequence[Tuple[str, str]] = None,
) -> List[Tuple[str, str]]:
    granted = set(permissions)
    if tabs is None:
        tabs = MENU_TABS.get(menu, [])
    return [(key, label) for key, label in tabs if f"{menu}/{key}" in granted]


def resolve_active_tab(accessible: Sequence[Tuple[str, str]], current: str) -> str:
    """
    Keep `current` while it is still permitted, otherwise fall back to the
    first permitted tab, or "" when nothing is permitted.
    """
    keys = [key for key, _ in accessible]
    if current in keys:
        return current
    return keys[0] if keys else ""


# used when app_settings has no permission list for a level
DEFAULT_MENU_PERMISSIONS: Dict[str, List[str]] = {
    "Kasir": ["dashboard", "dashboard/penjualan", "sales", "receivables", "reports"],
    "Office": [
        "dashboard", "dashboard/penjualan", "dashboard/produksi", "sales", "receivables", "expenses",
        "reports", "reports/sales", "reports/receivables", "reports/inventory", "reports/assetsDebts",
        "reports/dataPenjualanLama", "reports/finalRecap",
    ],
    "Produksi": ["dashboard", "dashboard/produksi", "production", "inventory"],
    "Admin": ALL_PERMISSIONS,
}


def known_permissions(permissions: Iterable[str]) -> List[str]:
    """Drop keys that name no menu or tab, keeping order."""
    known = set(ALL_PERMISSIONS)
    return [p for p in permissions if p in known]


def default_permissions(user_level: str) -> List[str]:
    return list(DEFAULT_MENU_PERMISSIONS.get(user_level, []))
