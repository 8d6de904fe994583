# utils/cookie_util.py
from fastapi import Response
from fastener_console.core.config import TOKEN_CONFIG


def set_session_cookie(response: Response, session_token: str):
    """Store the signed session token in an HttpOnly cookie"""
    response.set_cookie(
        key=TOKEN_CONFIG.SESSION_COOKIE_NAME,
        value=session_token,
        max_age=TOKEN_CONFIG.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=TOKEN_CONFIG.SESSION_COOKIE_SECURE,
        samesite="strict",
        path="/",
        domain=None
    )


def delete_session_cookie(response: Response):
    """Drop the session cookie (token, role and company_id go together)"""
    response.delete_cookie(
        key=TOKEN_CONFIG.SESSION_COOKIE_NAME,
        path="/",
        domain=None,
        secure=TOKEN_CONFIG.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="strict"
    )
