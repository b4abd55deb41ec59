from services.permission_service import (
    ALL_PERMISSIONS,
    DEFAULT_MENU_PERMISSIONS,
    accessible_tabs,
    default_permissions,
    known_permissions,
    resolve_active_tab,
    visible,
)


def test_visible_requires_exact_key():
    perms = ["reports", "dashboard/penjualan"]
    assert visible(perms, "reports")
    assert not visible(perms, "reports/sales")
    assert not visible(perms, "dashboard")


def test_accessible_tabs_keeps_menu_order():
    perms = ["reports/sales", "reports/finalRecap", "dashboard/produksi"]
    assert accessible_tabs(perms, "reports") == [
        ("finalRecap", "Final Rekapitulasi"),
        ("sales", "Penjualan"),
    ]


def test_accessible_tabs_with_explicit_tabs():
    tabs = [("a", "A"), ("b", "B")]
    assert accessible_tabs(["menu/b"], "menu", tabs) == [("b", "B")]


def test_accessible_tabs_unknown_menu():
    assert accessible_tabs(ALL_PERMISSIONS, "tidak-ada") == []


def test_resolve_active_tab():
    tabs = [("penjualan", "Dasbor Penjualan"), ("produksi", "Dasbor Produksi")]
    assert resolve_active_tab(tabs, "produksi") == "produksi"
    assert resolve_active_tab(tabs, "hilang") == "penjualan"
    assert resolve_active_tab([], "produksi") == ""


def test_all_permissions_has_menus_and_tabs():
    assert "reports" in ALL_PERMISSIONS
    assert "reports/profitAndLoss" in ALL_PERMISSIONS
    assert "settings/userManagement" in ALL_PERMISSIONS
    assert len(ALL_PERMISSIONS) == len(set(ALL_PERMISSIONS))


def test_default_permissions_per_level():
    assert default_permissions("Admin") == ALL_PERMISSIONS
    assert "production" in default_permissions("Produksi")
    assert "reports/profitAndLoss" not in default_permissions("Office")
    assert default_permissions("Tamu") == []

    # callers get a copy
    default_permissions("Kasir").append("settings")
    assert "settings" not in DEFAULT_MENU_PERMISSIONS["Kasir"]


def test_defaults_name_known_keys_only():
    for permissions in DEFAULT_MENU_PERMISSIONS.values():
        assert known_permissions(permissions) == permissions


def test_known_permissions_drops_stale_keys():
    assert known_permissions(["reports/oldTab", "sales", "dashboard"]) == ["sales", "dashboard"]
