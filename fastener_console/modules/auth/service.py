import logging
from typing import Optional

from fastapi import Response, Request
from fastener_console.common.response import ResponseBuilder, ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.config import BACKEND_CONFIG, TOKEN_CONFIG
from fastener_console.core.exceptions import ServerError, ValidationError
from fastener_console.core.security import create_session_token, check_session_token
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.auth import schemas as auth_schemas
from fastener_console.modules.menu.service import build_navigation
from fastener_console.modules.role_menu.service import discard_editor
from fastener_console.utils.cookie_util import set_session_cookie, delete_session_cookie

logger = logging.getLogger(__name__)


async def login_user(
        login_data: auth_schemas.LoginRequest,
        response: Response,
        client: BackendClient
) -> dict:
    username = login_data.username.strip()
    if not username:
        raise ValidationError("Username is required.", field="username")
    if not login_data.password:
        raise ValidationError("Password is required.", field="password")

    # a 401 from the backend surfaces as Unauthorized
    result = await client.post(BACKEND_CONFIG.LOGIN_PATH, json={"username": username, "password": login_data.password})
    if not isinstance(result, dict):
        raise ServerError("Unexpected login response shape")

    try:
        session = ConsoleSession.init(result.get("token"), result.get("role"), result.get("company_id"))
    except ValueError:
        raise ServerError("Login response did not include a token")

    session_token = create_session_token(session)
    set_session_cookie(response=response, session_token=session_token)

    # navigation is fetched with the new backend token
    client.authorize(session.token)
    menu = await build_navigation(session, client)

    logger.info(f"[SESSION] {username!r} logged in as {session.role!r} (company {session.company_id})")
    return {
        "access_token": session_token,
        "token_type": "bearer",
        "role": session.role,
        "company_id": session.company_id,
        "menu": menu
    }


def logout_user(response: Response, request: Request, bearer_token: Optional[str] = None) -> dict:
    """Token, role and company_id are cleared together; works with an expired or missing session"""
    token = bearer_token or request.cookies.get(TOKEN_CONFIG.SESSION_COOKIE_NAME)
    if token:
        result = check_session_token(token)
        if result["valid"]:
            session = ConsoleSession.from_claims(result["payload"])
            discard_editor(session)
            logger.info(f"[SESSION] Logged out role {session.role!r}")

    delete_session_cookie(response)
    return {"message": "Successfully logged out"}


def fetch_session(session: ConsoleSession) -> ApiResponse[dict]:
    data = {
        "role": session.role,
        "company_id": session.company_id,
        "has_company": session.has_company,
    }
    return ResponseBuilder.success(data=data, message="Session loaded.")
