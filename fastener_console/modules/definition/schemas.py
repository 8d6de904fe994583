# fastener_console/modules/definition/schemas.py
from pydantic import BaseModel
from typing import Optional


class CustomerBase(BaseModel):
    """Customer (group customer) payload"""
    group_customer_code: Optional[str] = None
    group_customer_name: Optional[str] = None
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class ProductCategoryBase(BaseModel):
    category_code: Optional[str] = None
    name: Optional[str] = None

    class Config:
        from_attributes = True
