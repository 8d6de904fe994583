# fastener_console/core/dependencies.py
import re
from typing import AsyncIterator, Optional

from fastapi import Depends, Request, Response, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from fastener_console.core.api_client import BackendClient, build_backend_client
from fastener_console.core.config import TOKEN_CONFIG, ROLE_CONFIG
from fastener_console.core.exceptions import Unauthorized
from fastener_console.core.security import create_session_token, verify_session_token
from fastener_console.core.session import ConsoleSession
from fastener_console.utils.cookie_util import set_session_cookie

# paths reachable without a session
EXCLUDED_PATHS = [
    r"^/auth/login$",
    r"^/auth/logout$",
    r"^/docs.*",
    r"^/openapi\.json$",
    r"^/redoc.*",
    r"^/$",
    r"^/health$"
]

security = HTTPBearer(auto_error=False)


async def get_current_session_global(
        request: Request,
        response: Response,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[ConsoleSession]:
    """
    Global session check, skipped for EXCLUDED_PATHS.
    The session token comes from the Authorization header or the session cookie.
    Every authenticated request re-issues the token, so the expiry is an idle timeout.
    """
    path = request.url.path
    for pattern in EXCLUDED_PATHS:
        if re.match(pattern, path):
            return None

    token = credentials.credentials if credentials else request.cookies.get(TOKEN_CONFIG.SESSION_COOKIE_NAME)
    if not token:
        raise Unauthorized(detail="Missing session")

    session = verify_session_token(token)
    request.state.session = session
    request.state.session_token = token
    renew_session(response, session)
    return session


def renew_session(response: Response, session: ConsoleSession) -> str:
    """Fresh token in the cookie and in the renew header (for bearer clients)"""
    renewed = create_session_token(session)
    set_session_cookie(response=response, session_token=renewed)
    response.headers[TOKEN_CONFIG.SESSION_RENEW_HEADER] = renewed
    return renewed


def get_session(request: Request) -> ConsoleSession:
    session = getattr(request.state, "session", None)
    if session is None:
        raise Unauthorized(detail="Missing session")
    return session


def require_account_admin(session: ConsoleSession = Depends(get_session)) -> ConsoleSession:
    if session.role not in ROLE_CONFIG.ACCOUNT_ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to manage accounts."
        )
    return session


async def get_backend_client(session: ConsoleSession = Depends(get_session)) -> AsyncIterator[BackendClient]:
    """Backend client carrying the session bearer token"""
    client = build_backend_client(session.token)
    try:
        yield client
    finally:
        await client.aclose()


async def get_public_backend_client() -> AsyncIterator[BackendClient]:
    """Backend client without a token (login)"""
    client = build_backend_client()
    try:
        yield client
    finally:
        await client.aclose()
