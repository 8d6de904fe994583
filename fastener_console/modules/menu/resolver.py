# fastener_console/modules/menu/resolver.py
from typing import Any, Iterable, List, Mapping, FrozenSet, AbstractSet

from fastener_console.utils.menu_util import resolve_icon
from fastener_console.utils.tree_index import TreeIndex


def is_active(menu: Mapping[str, Any]) -> bool:
    # records without the flag count as active
    value = menu.get("is_active", True)
    return value is None or bool(value)


class MenuAuthorizationResolver:
    """
    Two read views over the same menu tree:
    - visible_tree: what a role sees in its navigation (allowed AND active)
    - editing_tree: every node for the admin screen, with a checked flag
    """

    def __init__(self, index: TreeIndex):
        self.index = index

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "MenuAuthorizationResolver":
        return cls(TreeIndex.build(records))

    def visible_tree(self, allowed_ids: AbstractSet[int]) -> List[dict]:
        """Strict filter: an excluded node hides its whole subtree"""
        allowed = frozenset(allowed_ids or ())
        return self.index.nested(
            include=lambda menu: menu["id"] in allowed and is_active(menu),
            decorate=_icon_fields,
        )

    def editing_tree(self, checked_ids: AbstractSet[int]) -> List[dict]:
        checked = frozenset(checked_ids or ())
        return self.index.nested(
            decorate=lambda menu: dict(_icon_fields(menu), checked=menu["id"] in checked, is_active=is_active(menu)),
        )

    @staticmethod
    def toggle(state: AbstractSet[int], menu_id: int, checked: bool) -> FrozenSet[int]:
        """Pure update of one menu id; parents and children are left alone"""
        if checked:
            return frozenset(state) | {menu_id}
        return frozenset(state) - {menu_id}


def _icon_fields(menu: Mapping[str, Any]) -> dict:
    return {"icon": resolve_icon(menu.get("icon")).value}
