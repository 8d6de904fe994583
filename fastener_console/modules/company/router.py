# fastener_console/modules/company/router.py
from typing import Any
from fastapi import APIRouter, Depends, Path
from fastener_console.common.response import ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_backend_client, get_session
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.company.schemas import CompanyBase
from fastener_console.modules.company import service as company_service

company_router = APIRouter()


# company list (flattened with levels)
@company_router.get("")
async def fetch_company_list(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await company_service.fetch_company_list(client)


# companies the session may assign accounts to
@company_router.get("/selectable")
async def fetch_selectable_companies(
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await company_service.fetch_selectable_companies(session, client)


# parent choices when editing a company
@company_router.get("/{company_id}/parent-options")
async def fetch_parent_options(
        company_id: int = Path(...),
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await company_service.fetch_parent_options(company_id, session, client)


# root-to-company path (breadcrumb)
@company_router.get("/{company_id}/ancestors")
async def fetch_company_ancestors(
        company_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await company_service.fetch_company_ancestors(company_id, client)


# create company
@company_router.post("")
async def create_company(
        company_info: CompanyBase,
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await company_service.create_company(company_info, session, client)


# update company
@company_router.put("/{company_id}")
async def update_company(
        company_info: CompanyBase,
        company_id: int = Path(...),
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await company_service.update_company(company_id, company_info, session, client)


# delete company
@company_router.delete("/{company_id}")
async def delete_company(
        company_id: int = Path(...),
        session: ConsoleSession = Depends(get_session),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await company_service.delete_company(company_id, session, client)
