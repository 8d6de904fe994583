# utils/menu_util.py
import logging
from enum import Enum
from typing import Any, FrozenSet, Optional

from fastener_console.core.exceptions import ServerError

logger = logging.getLogger(__name__)


class MenuIcon(str, Enum):
    """Icons the console knows how to render, keyed by the backend icon string"""
    DASHBOARD = "layout-dashboard"
    USERS = "users"
    BUILDING = "building"
    PACKAGE = "package"
    FILE_TEXT = "file-text"
    TRUCK = "truck"
    SETTINGS = "settings"
    SHIELD = "shield"
    MENU = "menu"
    CIRCLE = "circle"


DEFAULT_ICON = MenuIcon.CIRCLE

# backend spellings seen in menu records -> icon
ICON_ALIASES = {
    "dashboard": MenuIcon.DASHBOARD,
    "layoutdashboard": MenuIcon.DASHBOARD,
    "user": MenuIcon.USERS,
    "company": MenuIcon.BUILDING,
    "companies": MenuIcon.BUILDING,
    "product": MenuIcon.PACKAGE,
    "quote": MenuIcon.FILE_TEXT,
    "quotes": MenuIcon.FILE_TEXT,
    "filetext": MenuIcon.FILE_TEXT,
    "shipment": MenuIcon.TRUCK,
    "shipments": MenuIcon.TRUCK,
    "role": MenuIcon.SHIELD,
    "roles": MenuIcon.SHIELD,
}


def resolve_icon(icon_key: Optional[str]) -> MenuIcon:
    """Icon key -> MenuIcon, unknown or empty keys fall back to DEFAULT_ICON"""
    if not icon_key:
        return DEFAULT_ICON

    key = str(icon_key).strip().lower()
    try:
        return MenuIcon(key)
    except ValueError:
        pass

    compact = key.replace("-", "").replace("_", "").replace(" ", "")
    icon = ICON_ALIASES.get(compact)
    if icon is None:
        for member in MenuIcon:
            if member.value.replace("-", "") == compact:
                return member
        logger.debug(f"[MENU] Unknown icon key {icon_key!r}, using {DEFAULT_ICON.value}")
        return DEFAULT_ICON
    return icon


def normalize_menu_ids(payload: Any) -> FrozenSet[int]:
    """
    role-menus response -> frozenset of menu ids.

    Accepted shapes:
    - [1, 2, 3]
    - [{"id": 1, ...}, {"menu_id": 2, ...}]
    - {"menu_ids": [...]} or {"data": [...]} wrapping either of the above
    """
    if payload is None:
        return frozenset()

    if isinstance(payload, dict):
        for key in ("menu_ids", "data", "menus"):
            if key in payload:
                return normalize_menu_ids(payload[key])
        raise ServerError("Unexpected role-menus response shape")

    if not isinstance(payload, list):
        raise ServerError("Unexpected role-menus response shape")

    menu_ids = set()
    for item in payload:
        if isinstance(item, dict):
            value = item.get("menu_id", item.get("id"))
        else:
            value = item

        if isinstance(value, bool):
            value = None
        elif isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())

        if not isinstance(value, int):
            raise ServerError(f"Unexpected role-menus entry: {item!r}")
        menu_ids.add(value)

    return frozenset(menu_ids)
