# fastener_console/modules/auth/schemas.py
from pydantic import BaseModel
from typing import Any, List


class LoginRequest(BaseModel):
    username: str
    password: str


class NavigationResponse(BaseModel):
    source: str
    role: str
    menus: List[Any] = []
    issues: List[Any] = []


class LoginResponse(BaseModel):
    access_token: str
    token_type: str
    role: str
    company_id: int
    menu: NavigationResponse


class SessionResponse(BaseModel):
    role: str
    company_id: int
    has_company: bool
