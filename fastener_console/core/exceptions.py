# fastener_console/core/exceptions.py
import logging
from typing import Optional, List, Any
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastener_console.common.schemas.response import ApiResponse
from fastener_console.utils.cookie_util import delete_session_cookie

logger = logging.getLogger(__name__)


class ConsoleError(Exception):
    """Base for every error the console reports back as an ApiResponse."""
    status_code = 500
    default_message = "Unexpected console error"
    retryable = False

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def payload(self) -> Optional[dict]:
        return {"retryable": self.retryable}


class NetworkError(ConsoleError):
    """Backend request could not complete. State is unchanged, caller may retry."""
    status_code = 503
    default_message = "Backend is unreachable, please try again"
    retryable = True


class Unauthorized(StarletteHTTPException):
    """
    Session is invalid (status 401).
    The handler clears the session cookie; never retried.
    """
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class ServerError(ConsoleError):
    """Backend answered 4xx/5xx (other than 401)."""
    status_code = 502
    default_message = "Backend request failed"

    def __init__(self, message: Optional[str] = None, backend_status: Optional[int] = None):
        super().__init__(message)
        self.backend_status = backend_status
        if backend_status == 404:
            self.status_code = 404

    def payload(self) -> Optional[dict]:
        return {"retryable": self.retryable, "backend_status": self.backend_status}


class ValidationError(ConsoleError):
    """Client-side check failed; the backend was not contacted."""
    status_code = 400
    default_message = "Invalid input"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def payload(self) -> Optional[dict]:
        return {"field": self.field}


class TreeIntegrityError(ConsoleError):
    """Hierarchy is structurally broken (cycle, dangling reference)."""
    status_code = 409
    default_message = "Hierarchy data is inconsistent"

    def __init__(self, message: Optional[str] = None, node_id: Optional[int] = None):
        super().__init__(message)
        self.node_id = node_id

    def payload(self) -> Optional[dict]:
        return {"node_id": self.node_id}


class CycleDetected(TreeIntegrityError):
    """Parent chain of a node loops back on itself."""
    default_message = "Cycle detected in hierarchy"

    def __init__(self, node_id: int, partial_path: Optional[List[Any]] = None):
        super().__init__(f"Cycle detected while walking ancestors of node {node_id}", node_id=node_id)
        self.partial_path = partial_path or []


def setup_global_exception_handlers(app: FastAPI):
    @app.exception_handler(ConsoleError)
    async def console_exception_handler(request: Request, exc: ConsoleError):
        """Console error taxonomy -> ApiResponse"""
        if exc.status_code >= 500:
            logger.error(f"Console error on {request.url}: {exc.status_code} - {exc.message}")
        else:
            logger.warning(f"Console error on {request.url}: {exc.status_code} - {exc.message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse(code=exc.status_code, message=exc.message, data=exc.payload()).model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        HTTPException (401, 403, 404 ...)
        401 always drops the whole session cookie.
        """
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

        logger.error(f"HTTP exception on {request.url}: {exc.status_code} - {detail}")

        response = JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse.error(code=exc.status_code, message=detail).model_dump(),
            headers=getattr(exc, "headers", None)
        )
        if exc.status_code == 401:
            delete_session_cookie(response)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Pydantic request validation (422), first error becomes the message"""
        logger.error(f"Validation error on {request.url}: {exc.errors()}")
        errors = exc.errors()
        message = "Invalid request data"
        if errors:
            first = errors[0]
            loc = ".".join([str(p) for p in first.get("loc", [])])
            msg = first.get("msg", "")
            message = f"{loc}: {msg}" if loc else msg

        return JSONResponse(
            status_code=422,
            content=ApiResponse.error(code=422, message=message).model_dump()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Anything unhandled (500)"""
        logger.exception(f"Unhandled exception on {request.url}: {exc}")
        return JSONResponse(
            status_code=500,
            content=ApiResponse.error(code=500, message="Internal console error").model_dump()
        )
