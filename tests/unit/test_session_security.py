"""Tests for ConsoleSession and the signed session token."""

from datetime import timedelta

import pytest
from jose import jwt

from fastener_console.core.config import TOKEN_CONFIG
from fastener_console.core.exceptions import Unauthorized
from fastener_console.core.security import (
    _generate_jwt,
    check_session_token,
    create_session_token,
    verify_session_token,
)
from fastener_console.core.session import ConsoleSession


def test_session_requires_token() -> None:
    with pytest.raises(ValueError):
        ConsoleSession.init(None, "sales", 3)
    with pytest.raises(ValueError):
        ConsoleSession.init("", "sales", 3)


@pytest.mark.parametrize("raw, expected", [
    (12, 12),
    ("12", 12),
    (None, 0),
    ("", 0),
    ("abc", 0),
    (-3, 0),
])
def test_company_id_is_coerced(raw, expected) -> None:
    session = ConsoleSession.init("tok", "sales", raw)
    assert session.company_id == expected
    assert session.has_company is (expected > 0)


def test_session_token_restores_whole_session() -> None:
    session = ConsoleSession.init("tok", "company_admin", 2)
    restored = verify_session_token(create_session_token(session))
    assert restored == session


def test_tampered_token_is_rejected() -> None:
    token = create_session_token(ConsoleSession.init("tok", "sales", 3))
    forged = jwt.encode({"token": "tok", "role": "superadmin", "company_id": 1, "type": "session"}, "wrong-key",
                        algorithm="HS256")
    assert check_session_token(token)["valid"] is True
    with pytest.raises(Unauthorized):
        verify_session_token(forged)


def test_expired_token_is_rejected() -> None:
    expired = _generate_jwt(
        {"token": "tok", "role": "sales", "company_id": 3},
        TOKEN_CONFIG.SESSION_SECRET_KEY,
        timedelta(minutes=-1),
    )
    result = check_session_token(expired)
    assert result["valid"] is False
    with pytest.raises(Unauthorized) as exc_info:
        verify_session_token(expired)
    assert exc_info.value.status_code == 401


def test_token_of_other_type_is_rejected() -> None:
    other = jwt.encode({"token": "tok", "type": "access"}, TOKEN_CONFIG.SESSION_SECRET_KEY,
                       algorithm=TOKEN_CONFIG.ALGORITHM)
    assert check_session_token(other) == {"valid": False, "error": "Invalid token type", "payload": None}


def test_token_without_backend_token_is_rejected() -> None:
    empty = _generate_jwt({"role": "sales"}, TOKEN_CONFIG.SESSION_SECRET_KEY, timedelta(minutes=5))
    assert check_session_token(empty)["valid"] is False
