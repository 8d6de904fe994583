# common/schemas/response.py
from typing import TypeVar, Generic, Optional
from pydantic import BaseModel, Field

DataType = TypeVar('DataType')


class ApiResponse(BaseModel, Generic[DataType]):
    """Standard console response envelope"""
    code: int = Field(description="response code")
    message: str = Field(description="response message")
    data: Optional[DataType] = Field(default=None, description="response data")

    @classmethod
    def error(cls, code: int, message: str):
        return cls(code=code, message=message, data=None)
