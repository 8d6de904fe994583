# fastener_console/modules/role_menu/router.py
from fastapi import APIRouter, Depends, Path
from fastener_console.common.response import ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_backend_client, get_session
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.role_menu import schemas
from fastener_console.modules.role_menu import service as role_menu_service

role_router = APIRouter()
role_menu_router = APIRouter()


# role list
@role_router.get("")
async def fetch_role_list(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[list]:
    return await role_menu_service.fetch_role_list(client)


# editor state for the current session
@role_menu_router.get("/editor")
async def fetch_editor(
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await role_menu_service.fetch_editor(session, client)


# select the role to edit (unsaved edits are dropped)
@role_menu_router.post("/editor/select")
async def select_editor_role(
        select_request: schemas.EditorSelectRequest,
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await role_menu_service.select_editor_role(session, select_request.role_id, client)


# check / uncheck one menu
@role_menu_router.post("/editor/toggle")
async def toggle_editor_menu(
        toggle_request: schemas.EditorToggleRequest,
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await role_menu_service.toggle_editor_menu(
        session, toggle_request.menu_id, toggle_request.checked, client
    )


# save the edited set
@role_menu_router.post("/editor/save")
async def save_editor(
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await role_menu_service.save_editor(session, client)


# editing tree for a role
@role_menu_router.get("/{role_id}")
async def fetch_role_menus(
        role_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await role_menu_service.fetch_role_menu_view(role_id, client)


# replace-all save for a role
@role_menu_router.put("/{role_id}")
async def save_role_menus(
        commit_request: schemas.RoleMenuCommitRequest,
        role_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await role_menu_service.save_role_menus(role_id, commit_request.menu_ids, client)
