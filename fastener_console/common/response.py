# common/response.py
# builds the common ApiResponse returned by every router
from typing import TypeVar, Optional, Any
from fastapi import status
from fastener_console.common.schemas.response import ApiResponse

T = TypeVar('T')


class ResponseBuilder:
    """Response helper"""

    DEFAULT_MESSAGES = {
        "GET": "Data loaded successfully",
        "POST": "Data created successfully",
        "PUT": "Data updated successfully",
        "PATCH": "Data updated successfully",
        "DELETE": "Data deleted successfully"
    }

    @staticmethod
    def _get_default_message(message: Optional[str], method: Optional[str]) -> str:
        if message is not None:
            return message
        return ResponseBuilder.DEFAULT_MESSAGES.get((method or "GET").upper(), "Request completed")

    @staticmethod
    def error(
            message: str,
            code: int = status.HTTP_400_BAD_REQUEST,
            data: Optional[Any] = None
    ) -> ApiResponse[None]:
        """Error response"""
        return ApiResponse(
            code=code,
            message=message,
            data=data
        )

    @staticmethod
    def success(
            data: Optional[T] = None,
            message: Optional[str] = None,
            code: int = status.HTTP_200_OK,
            method: Optional[str] = None
    ) -> ApiResponse[T]:
        """Success response"""
        return ApiResponse(
            code=code,
            message=ResponseBuilder._get_default_message(message, method),
            data=data
        )
