# fastener_console/modules/account/router.py
from typing import Any
from fastapi import APIRouter, Depends, Path
from fastener_console.common.response import ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_backend_client, require_account_admin
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.account import schemas
from fastener_console.modules.account import service as account_service

# superadmin / company_admin only
account_router = APIRouter(dependencies=[Depends(require_account_admin)])


# account list
@account_router.get("")
async def fetch_account_list(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[list]:
    return await account_service.fetch_account_list(client)


# create account
@account_router.post("")
async def create_account(
        account_info: schemas.AccountCreate,
        session: ConsoleSession = Depends(require_account_admin),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await account_service.create_account(account_info, session, client)


# update role / active flag
@account_router.put("/{account_id}")
async def update_account(
        account_info: schemas.AccountUpdate,
        account_id: int = Path(...),
        session: ConsoleSession = Depends(require_account_admin),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await account_service.update_account(account_id, account_info, session, client)


# reset password
@account_router.put("/{account_id}/reset-password")
async def reset_account_password(
        reset_info: schemas.PasswordResetRequest,
        account_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await account_service.reset_account_password(account_id, reset_info, client)


# delete account
@account_router.delete("/{account_id}")
async def delete_account(
        account_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await account_service.delete_account(account_id, client)
