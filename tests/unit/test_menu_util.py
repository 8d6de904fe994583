"""Tests for menu icon resolution and role-menus payload normalization."""

import pytest

from fastener_console.core.exceptions import ServerError
from fastener_console.utils.menu_util import DEFAULT_ICON, MenuIcon, normalize_menu_ids, resolve_icon


@pytest.mark.parametrize("icon_key, expected", [
    ("layout-dashboard", MenuIcon.DASHBOARD),
    ("Dashboard", MenuIcon.DASHBOARD),
    ("file_text", MenuIcon.FILE_TEXT),
    ("companies", MenuIcon.BUILDING),
    ("shipment", MenuIcon.TRUCK),
    ("not-an-icon", DEFAULT_ICON),
    ("", DEFAULT_ICON),
    (None, DEFAULT_ICON),
])
def test_resolve_icon(icon_key, expected) -> None:
    assert resolve_icon(icon_key) is expected


@pytest.mark.parametrize("payload", [
    [1, 2, 3],
    [{"id": 1}, {"id": 2}, {"id": 3}],
    [{"menu_id": 1, "role_id": 4}, {"menu_id": 2, "role_id": 4}, {"menu_id": 3, "role_id": 4}],
    {"menu_ids": [1, 2, 3]},
    {"data": [{"id": 1}, {"id": 2}, {"id": 3}]},
    ["1", "2", "3"],
])
def test_normalize_menu_ids_accepts_backend_shapes(payload) -> None:
    assert normalize_menu_ids(payload) == frozenset({1, 2, 3})


def test_normalize_menu_ids_empty_assignment() -> None:
    assert normalize_menu_ids([]) == frozenset()
    assert normalize_menu_ids(None) == frozenset()


@pytest.mark.parametrize("payload", [
    "1,2,3",
    {"unexpected": [1]},
    [{"name": "no id"}],
    [True],
])
def test_normalize_menu_ids_rejects_unknown_shapes(payload) -> None:
    with pytest.raises(ServerError):
        normalize_menu_ids(payload)
