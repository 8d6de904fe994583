# fastener_console/modules/menu/schemas.py
from pydantic import BaseModel
from typing import Optional


class MenuBase(BaseModel):
    """Menu create / update payload"""
    name: Optional[str] = None
    path: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[int] = None
    order_no: Optional[int] = None
    is_active: Optional[bool] = True

    class Config:
        from_attributes = True
