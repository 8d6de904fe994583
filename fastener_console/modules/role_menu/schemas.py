# fastener_console/modules/role_menu/schemas.py
from pydantic import BaseModel, Field
from typing import List


class RoleMenuCommitRequest(BaseModel):
    """Complete new menu set for a role (replace-all)"""
    menu_ids: List[int] = Field(default_factory=list)


class EditorSelectRequest(BaseModel):
    role_id: int


class EditorToggleRequest(BaseModel):
    menu_id: int
    checked: bool
