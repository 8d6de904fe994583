"""Tests for MenuAuthorizationResolver (navigation vs editing views, pure toggle)."""

from fastener_console.modules.menu.resolver import MenuAuthorizationResolver, is_active

MENUS = [
    {"id": 1, "name": "Dashboard", "parent_id": None, "order_no": 1, "icon": "dashboard"},
    {"id": 5, "name": "Quotes", "parent_id": None, "order_no": 2, "icon": "quotes"},
    {"id": 6, "name": "Old quotes", "parent_id": 5, "order_no": 1, "is_active": False},
    {"id": 7, "name": "Quote detail", "parent_id": 5, "order_no": 2, "icon": "bogus-icon"},
    {"id": 8, "name": "Attachments", "parent_id": 6, "order_no": 1},
]


def _ids(tree: list) -> list:
    result = []
    for node in tree:
        result.append(node["id"])
        result.extend(_ids(node["children"]))
    return result


def test_inactive_menu_hidden_from_navigation_but_checked_in_editing_view() -> None:
    """allowed {5, 6} with menu 6 inactive: navigation drops 6, editing view keeps it checked."""
    resolver = MenuAuthorizationResolver.from_records(MENUS)

    visible = resolver.visible_tree({5, 6})
    assert _ids(visible) == [5]

    editing = resolver.editing_tree({5, 6})
    quotes = next(node for node in editing if node["id"] == 5)
    old_quotes = next(node for node in quotes["children"] if node["id"] == 6)
    assert old_quotes["checked"] is True
    assert old_quotes["is_active"] is False


def test_visible_tree_excluded_parent_hides_allowed_children() -> None:
    resolver = MenuAuthorizationResolver.from_records(MENUS)
    assert _ids(resolver.visible_tree({1, 7})) == [1]
    assert _ids(resolver.visible_tree({1, 5, 7})) == [1, 5, 7]


def test_visible_tree_nodes_carry_icon_and_level() -> None:
    resolver = MenuAuthorizationResolver.from_records(MENUS)
    visible = resolver.visible_tree({1, 5, 7})
    assert visible[0]["icon"] == "layout-dashboard"
    assert visible[0]["level"] == 0
    detail = visible[1]["children"][0]
    assert detail["icon"] == "circle"
    assert detail["level"] == 1


def test_visible_tree_empty_allowed_set() -> None:
    resolver = MenuAuthorizationResolver.from_records(MENUS)
    assert resolver.visible_tree(frozenset()) == []


def test_editing_tree_lists_every_menu() -> None:
    resolver = MenuAuthorizationResolver.from_records(MENUS)
    editing = resolver.editing_tree({1})
    assert sorted(_ids(editing)) == [1, 5, 6, 7, 8]
    assert editing[0]["checked"] is True
    assert editing[1]["checked"] is False


def test_toggle_is_pure_and_does_not_cascade() -> None:
    state = frozenset({1, 5})
    checked = MenuAuthorizationResolver.toggle(state, 7, True)
    assert checked == {1, 5, 7}
    assert state == {1, 5}

    unchecked = MenuAuthorizationResolver.toggle(checked, 5, False)
    # children of 5 are left alone
    assert unchecked == {1, 7}
    assert MenuAuthorizationResolver.toggle(unchecked, 5, False) == {1, 7}


def test_is_active_defaults_to_true() -> None:
    assert is_active({"id": 1}) is True
    assert is_active({"id": 1, "is_active": None}) is True
    assert is_active({"id": 1, "is_active": 0}) is False
