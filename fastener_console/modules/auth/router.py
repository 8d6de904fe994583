# fastener_console/modules/auth/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Response, Request
from fastapi.security import HTTPAuthorizationCredentials
from fastener_console.common.response import ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_public_backend_client, get_session, security
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.auth import schemas
from fastener_console.modules.auth import service as auth_service


auth_router = APIRouter()


# login
@auth_router.post("/login", response_model=schemas.LoginResponse)
async def login(
        login_data: schemas.LoginRequest,
        response: Response,
        client: BackendClient = Depends(get_public_backend_client)
):
    return await auth_service.login_user(login_data, response, client)


@auth_router.post("/logout")
def logout(
        response: Response,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
):
    bearer_token = credentials.credentials if credentials else None
    return auth_service.logout_user(response, request, bearer_token)


# current session
@auth_router.get("/session")
def fetch_session(
        session: ConsoleSession = Depends(get_session)
) -> ApiResponse[schemas.SessionResponse]:
    return auth_service.fetch_session(session)
