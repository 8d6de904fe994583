# fastener_console/core/security.py
import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from fastener_console.core.config import TOKEN_CONFIG
from fastener_console.core.exceptions import Unauthorized
from fastener_console.core.session import ConsoleSession

logger = logging.getLogger(__name__)


def _generate_jwt(data: dict, secret: str, expire_delta: timedelta) -> str:
    """
    Shared JWT encoder.
    exp (UTC) is added to the payload before encoding
    """
    payload = data.copy()
    payload.update({"exp": datetime.now(timezone.utc) + expire_delta, "type": "session"})
    return jwt.encode(payload, secret, algorithm=TOKEN_CONFIG.ALGORITHM)


def create_session_token(session: ConsoleSession) -> str:
    """Sign the whole session into one token"""
    return _generate_jwt(
        session.to_claims(),
        TOKEN_CONFIG.SESSION_SECRET_KEY,
        timedelta(minutes=TOKEN_CONFIG.SESSION_EXPIRE_MINUTES)
    )


def check_session_token(token: str) -> dict:
    """
    Session token check without raising
    - returns {"valid": bool, "error": Optional[str], "payload": Optional[dict]}
    """
    try:
        payload = jwt.decode(token, TOKEN_CONFIG.SESSION_SECRET_KEY, algorithms=[TOKEN_CONFIG.ALGORITHM])
    except JWTError as e:
        logger.debug(f"[SESSION] Token decode error: {e}")
        return {"valid": False, "error": f"Invalid session: {str(e)}", "payload": None}

    if payload.get("type") != "session":
        return {"valid": False, "error": "Invalid token type", "payload": None}
    if not payload.get("token"):
        return {"valid": False, "error": "Session is missing the backend token", "payload": None}

    return {"valid": True, "error": None, "payload": payload}


def verify_session_token(token: str) -> ConsoleSession:
    """Decode a session token, raises Unauthorized on failure"""
    result = check_session_token(token)
    if not result["valid"]:
        raise Unauthorized(detail=result["error"] or "Invalid session")
    return ConsoleSession.from_claims(result["payload"])
