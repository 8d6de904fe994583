# fastener_console/modules/company/schemas.py
from pydantic import BaseModel
from typing import Optional


class CompanyBase(BaseModel):
    """Company create / update payload"""
    name: Optional[str] = None
    parent_id: Optional[int] = None
    currency: Optional[str] = None
    language: Optional[str] = None

    class Config:
        from_attributes = True
