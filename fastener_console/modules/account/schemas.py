# fastener_console/modules/account/schemas.py
from pydantic import BaseModel
from typing import Optional
from fastener_console.core.config import ROLE_CONFIG


class AccountCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: str = ROLE_CONFIG.DEFAULT_ACCOUNT_ROLE
    company_id: Optional[int] = None


class AccountUpdate(BaseModel):
    role: Optional[str] = None
    is_active: Optional[bool] = None


class PasswordResetRequest(BaseModel):
    password: Optional[str] = None
