import logging
from typing import AbstractSet, Any, FrozenSet, Iterable, Optional

from fastener_console.common.response import ResponseBuilder, ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.config import BACKEND_CONFIG
from fastener_console.core.exceptions import ServerError, ValidationError
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.menu.resolver import MenuAuthorizationResolver
from fastener_console.modules.menu.service import (
    fetch_roles,
    fetch_role_menu_ids,
    load_menu_resolver,
)
from fastener_console.modules.role_menu.editor import EDITOR_REGISTRY, RoleMenuEditor

logger = logging.getLogger(__name__)


def _validate_menu_ids(resolver: MenuAuthorizationResolver, menu_ids: Iterable[int]) -> FrozenSet[int]:
    state = frozenset(menu_ids)
    unknown = sorted(menu_id for menu_id in state if menu_id not in resolver.index)
    if unknown:
        raise ValidationError(f"Unknown menu ids: {unknown}", field="menu_ids")
    return state


async def commit_role_menus(client: BackendClient, role_id: int, state: AbstractSet[int]) -> FrozenSet[int]:
    """
    Replace-all save of a role's menu set. Same set twice -> same backend state.
    Never retried: a duplicate delivery could undo an edit made in between.
    """
    menu_ids = sorted(state)
    await client.post(BACKEND_CONFIG.ROLE_MENUS_PATH, json={"role_id": role_id, "menu_ids": menu_ids})
    logger.info(f"[ROLE_MENU] Committed {len(menu_ids)} menus for role {role_id}")
    return frozenset(menu_ids)


async def fetch_role_list(client: BackendClient) -> ApiResponse[list]:
    roles = await fetch_roles(client)
    return ResponseBuilder.success(data=roles, message="Role list loaded.")


def _role_id(role: Any) -> Optional[int]:
    """Backend role id as int, string ids included"""
    value = role.get("id") if isinstance(role, dict) else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


async def _ensure_role_exists(client: BackendClient, role_id: int) -> None:
    roles = await fetch_roles(client)
    if not any(_role_id(role) == role_id for role in roles):
        raise ServerError(f"Role {role_id} not found.", backend_status=404)


async def fetch_role_menu_view(role_id: int, client: BackendClient) -> ApiResponse[dict]:
    """Admin editing tree: every menu with its checkbox state for the role"""
    resolver = await load_menu_resolver(client)
    checked = await fetch_role_menu_ids(client, role_id)
    data = {
        "role_id": role_id,
        "checked": sorted(checked),
        "menus": resolver.editing_tree(checked),
    }
    return ResponseBuilder.success(data=data, message="Role menus loaded.")


async def save_role_menus(role_id: int, menu_ids: Iterable[int], client: BackendClient) -> ApiResponse[dict]:
    await _ensure_role_exists(client, role_id)
    resolver = await load_menu_resolver(client)
    state = _validate_menu_ids(resolver, menu_ids)
    saved = await commit_role_menus(client, role_id, state)
    return ResponseBuilder.success(
        data={"role_id": role_id, "checked": sorted(saved)},
        message="Role menus saved."
    )


# ==============================
# per-session editor
# ==============================
def _editor(session: ConsoleSession) -> RoleMenuEditor:
    return EDITOR_REGISTRY.get(session.token)


async def _editor_view(editor: RoleMenuEditor, client: BackendClient) -> dict:
    data = editor.snapshot()
    if editor.role_id is None or not editor.loaded:
        data["menus"] = []
        return data
    resolver = await load_menu_resolver(client)
    data["menus"] = resolver.editing_tree(editor.checked)
    return data


async def fetch_editor(session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    editor = _editor(session)
    return ResponseBuilder.success(data=await _editor_view(editor, client), message="Editor state loaded.")


async def select_editor_role(session: ConsoleSession, role_id: int, client: BackendClient) -> ApiResponse[dict]:
    editor = _editor(session)
    applied = await editor.select_role(role_id, lambda selected: fetch_role_menu_ids(client, selected))

    data = await _editor_view(editor, client)
    data["applied"] = applied
    message = "Role selected." if applied else "Role selection was superseded by a newer one."
    return ResponseBuilder.success(data=data, message=message)


async def toggle_editor_menu(
        session: ConsoleSession,
        menu_id: int,
        checked: bool,
        client: BackendClient
) -> ApiResponse[dict]:
    editor = _editor(session)
    resolver = await load_menu_resolver(client)
    _validate_menu_ids(resolver, [menu_id])
    editor.toggle(menu_id, checked)

    data = editor.snapshot()
    data["menus"] = resolver.editing_tree(editor.checked)
    return ResponseBuilder.success(data=data, message="Menu toggled.")


async def save_editor(session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    editor = _editor(session)
    await editor.save(lambda role_id, state: commit_role_menus(client, role_id, state))
    return ResponseBuilder.success(data=editor.snapshot(), message="Role menus saved.")


def discard_editor(session: ConsoleSession) -> None:
    EDITOR_REGISTRY.discard(session.token)
