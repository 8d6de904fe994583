# fastener_console/core/api_client.py
import asyncio
import logging
from typing import Any, Optional

import httpx
from fastener_console.core.config import BACKEND_CONFIG
from fastener_console.core.exceptions import NetworkError, ServerError, Unauthorized

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Authenticated fetch against the quoting backend.

    Every call carries the session bearer token. Failures are mapped onto the
    console error taxonomy:
    - transport failure / timeout -> NetworkError (GET retried once with backoff)
    - 401 -> Unauthorized (never retried)
    - other 4xx/5xx -> ServerError with the backend message when there is one
    """

    def __init__(
            self,
            token: Optional[str] = None,
            base_url: Optional[str] = None,
            timeout: Optional[float] = None,
            get_retry: Optional[int] = None,
            retry_backoff: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.get_retry = BACKEND_CONFIG.GET_RETRY if get_retry is None else get_retry
        self.retry_backoff = BACKEND_CONFIG.RETRY_BACKOFF_SECONDS if retry_backoff is None else retry_backoff

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url or BACKEND_CONFIG.BASE_URL,
            headers=headers,
            timeout=BACKEND_CONFIG.TIMEOUT if timeout is None else timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def authorize(self, token: str) -> None:
        """Attach a bearer token after login"""
        self.token = token
        self._client.headers["Authorization"] = f"Bearer {token}"

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        attempt = 0
        while True:
            try:
                return await self.request("GET", path, params=params)
            except NetworkError:
                if attempt >= self.get_retry:
                    raise
                attempt += 1
                delay = self.retry_backoff * attempt
                logger.warning(f"[BACKEND] GET {path} failed, retry {attempt}/{self.get_retry} in {delay}s")
                await asyncio.sleep(delay)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def request(self, method: str, path: str, params: Optional[dict] = None, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.TransportError as e:
            logger.error(f"[BACKEND] {method} {path} did not complete: {e!r}")
            raise NetworkError(f"Backend is unreachable ({type(e).__name__})")

        if response.status_code == 401:
            logger.info(f"[BACKEND] {method} {path} rejected the session token")
            raise Unauthorized(detail="Session expired, please log in again")

        if response.status_code >= 400:
            message = _extract_error_message(response)
            logger.error(f"[BACKEND] {method} {path} -> {response.status_code}: {message}")
            raise ServerError(message, backend_status=response.status_code)

        # 204 No Content (delete) and empty bodies
        if response.status_code == 204 or not response.content:
            return {"success": True}

        try:
            return response.json()
        except ValueError:
            raise ServerError("Backend returned a non-JSON response", backend_status=response.status_code)


def _extract_error_message(response: httpx.Response) -> str:
    fallback = f"Request failed with status {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback

    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


def build_backend_client(token: Optional[str] = None) -> BackendClient:
    return BackendClient(token=token)
