# fastener_console/modules/menu/router.py
from typing import Any
from fastapi import APIRouter, Depends, Path
from fastener_console.common.response import ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_backend_client, get_session
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.menu.schemas import MenuBase
from fastener_console.modules.menu import service as menu_service

menu_router = APIRouter()


# menu list (flattened with levels)
@menu_router.get("")
async def fetch_menu_list(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[list]:
    return await menu_service.fetch_menu_list(client)


# full menu tree
@menu_router.get("/tree")
async def fetch_menu_tree(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await menu_service.fetch_menu_tree(client)


# navigation for the current session role
@menu_router.get("/navigation")
async def fetch_navigation(
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await menu_service.fetch_navigation(session, client)


# create menu
@menu_router.post("")
async def create_menu(
        menu_info: MenuBase,
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await menu_service.create_menu(menu_info, client)


# update menu
@menu_router.put("/{menu_id}")
async def update_menu(
        menu_info: MenuBase,
        menu_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await menu_service.update_menu(menu_id, menu_info, client)


# delete menu
@menu_router.delete("/{menu_id}")
async def delete_menu(
        menu_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await menu_service.delete_menu(menu_id, client)
