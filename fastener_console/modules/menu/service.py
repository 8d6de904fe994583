import logging
from typing import List, Optional, FrozenSet

from fastener_console.common.response import ResponseBuilder, ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.config import BACKEND_CONFIG
from fastener_console.core.exceptions import ServerError, ValidationError
from fastener_console.core.navigation_config import ROLE_NAVIGATION_CONFIG
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.menu.resolver import MenuAuthorizationResolver
from fastener_console.modules.menu.schemas import MenuBase
from fastener_console.utils.menu_util import normalize_menu_ids
from fastener_console.utils.tree_index import TreeIndex

logger = logging.getLogger(__name__)


# ==============================
# backend fetch helpers (shared with role_menu)
# ==============================
async def fetch_roles(client: BackendClient) -> List[dict]:
    roles = await client.get(BACKEND_CONFIG.ROLES_PATH)
    if not isinstance(roles, list):
        raise ServerError("Unexpected roles response shape")
    return roles


async def fetch_menu_records(client: BackendClient) -> list:
    records = await client.get(BACKEND_CONFIG.MENUS_PATH)
    if not isinstance(records, list):
        raise ServerError("Unexpected menus response shape")
    return records


async def load_menu_resolver(client: BackendClient) -> MenuAuthorizationResolver:
    """Full menu tree; a failed fetch propagates instead of rendering partial data"""
    return MenuAuthorizationResolver.from_records(await fetch_menu_records(client))


async def fetch_role_menu_ids(client: BackendClient, role_id: int) -> FrozenSet[int]:
    """A role without assignments yields an empty set"""
    payload = await client.get(BACKEND_CONFIG.ROLE_MENUS_PATH, params={"role_id": role_id})
    return normalize_menu_ids(payload)


def find_role(roles: List[dict], role_name: str) -> Optional[dict]:
    for role in roles:
        if isinstance(role, dict) and role.get("name") == role_name:
            return role
    return None


def _issues(index: TreeIndex) -> List[dict]:
    return [issue.to_dict() for issue in index.issues]


# ==============================
# menu views
# ==============================
async def fetch_menu_list(client: BackendClient) -> ApiResponse[list]:
    """Flattened menu list with levels (for indented tables)"""
    index = TreeIndex.build(await fetch_menu_records(client))
    data = [item.to_dict() for item in index.flatten()]
    return ResponseBuilder.success(data=data, message="Menu list loaded.")


async def fetch_menu_tree(client: BackendClient) -> ApiResponse[dict]:
    """Every menu, nested, inactive ones included"""
    resolver = await load_menu_resolver(client)
    data = {
        "menus": resolver.editing_tree(frozenset()),
        "issues": _issues(resolver.index),
    }
    return ResponseBuilder.success(data=data, message="Menu tree loaded.")


async def build_navigation(session: ConsoleSession, client: BackendClient) -> dict:
    """
    Navigation for the session role.
    Dynamic role-menu assignments are authoritative; the static role map is
    used only when the backend has no menu API or does not know the role.
    """
    try:
        roles = await fetch_roles(client)
        role = find_role(roles, session.role)
        if role is None:
            logger.warning(f"[MENU] Role {session.role!r} is unknown to the backend, using static navigation")
            return _static_navigation(session.role)

        resolver = await load_menu_resolver(client)
        allowed_ids = await fetch_role_menu_ids(client, int(role["id"]))
    except ServerError as e:
        if e.backend_status != 404:
            raise
        logger.warning(f"[MENU] Dynamic menu API unavailable ({e.message}), using static navigation")
        return _static_navigation(session.role)

    return {
        "source": "dynamic",
        "role": session.role,
        "menus": resolver.visible_tree(allowed_ids),
        "issues": _issues(resolver.index),
    }


def _static_navigation(role: str) -> dict:
    return {
        "source": "static",
        "role": role,
        "menus": ROLE_NAVIGATION_CONFIG.get_entries(role),
        "issues": [],
    }


async def fetch_navigation(session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    data = await build_navigation(session, client)
    return ResponseBuilder.success(data=data, message="Navigation loaded.")


# ==============================
# menu CRUD
# ==============================
def _validate_menu(menu_info: MenuBase, menu_id: Optional[int] = None, index: Optional[TreeIndex] = None) -> dict:
    if not menu_info.name or not menu_info.name.strip():
        raise ValidationError("Menu name is required.", field="name")
    if not menu_info.path or not menu_info.path.strip():
        raise ValidationError("Menu path is required.", field="path")

    parent_id = menu_info.parent_id
    if parent_id is not None and index is not None:
        if parent_id not in index:
            raise ValidationError(f"Parent menu {parent_id} does not exist.", field="parent_id")
        if menu_id is not None and parent_id in index.descendant_ids(menu_id):
            raise ValidationError("A menu cannot be moved under itself or one of its sub-menus.", field="parent_id")

    menu_dict = menu_info.model_dump(exclude_unset=True)
    menu_dict["name"] = menu_info.name.strip()
    menu_dict["path"] = menu_info.path.strip()
    return menu_dict


async def create_menu(menu_info: MenuBase, client: BackendClient) -> ApiResponse[dict]:
    index = TreeIndex.build(await fetch_menu_records(client)) if menu_info.parent_id is not None else None
    menu_dict = _validate_menu(menu_info, index=index)
    created = await client.post(BACKEND_CONFIG.MENUS_PATH, json=menu_dict)
    logger.info(f"[MENU] Created menu {menu_dict['name']!r}")
    return ResponseBuilder.success(data=created, message="Menu created.")


async def update_menu(menu_id: int, menu_info: MenuBase, client: BackendClient) -> ApiResponse[dict]:
    index = TreeIndex.build(await fetch_menu_records(client))
    if menu_id not in index:
        raise ServerError(f"Menu {menu_id} not found.", backend_status=404)
    menu_dict = _validate_menu(menu_info, menu_id=menu_id, index=index)
    updated = await client.put(f"{BACKEND_CONFIG.MENUS_PATH}/{menu_id}", json=menu_dict)
    logger.info(f"[MENU] Updated menu {menu_id}")
    return ResponseBuilder.success(data=updated, message="Menu updated.")


async def delete_menu(menu_id: int, client: BackendClient) -> ApiResponse[dict]:
    await client.delete(f"{BACKEND_CONFIG.MENUS_PATH}/{menu_id}")
    logger.info(f"[MENU] Deleted menu {menu_id}")
    return ResponseBuilder.success(data={"id": menu_id, "deleted": True}, message="Menu deleted.")
