"""Pytest configuration and fixtures for the console.

API tests run main:app over ASGITransport; the quoting backend is replaced by
FakeBackend, an in-memory store served through httpx.MockTransport.
"""

import copy
import json
import re
from typing import Optional

import httpx
import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient

from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_backend_client, get_public_backend_client, get_session
from fastener_console.core.security import create_session_token
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.role_menu.editor import EDITOR_REGISTRY
from main import app

BACKEND_URL = "http://backend.test"

USERS = {
    "admin": {"password": "secret", "token": "tok-admin", "role": "superadmin", "company_id": 1},
    "manager": {"password": "secret", "token": "tok-manager", "role": "company_admin", "company_id": 2},
    "seller": {"password": "secret", "token": "tok-seller", "role": "sales", "company_id": 3},
    "ghost": {"password": "secret", "token": "", "role": "sales", "company_id": 3},
}

COMPANIES = [
    {"id": 1, "name": "Head Office", "parent_id": None, "currency": "KRW", "language": "ko"},
    {"id": 2, "name": "Korea Branch", "parent_id": 1, "currency": "KRW", "language": "ko"},
    {"id": 3, "name": "Busan Office", "parent_id": 2, "currency": "KRW", "language": "ko"},
    {"id": 4, "name": "Vietnam Branch", "parent_id": 1, "currency": "VND", "language": "vi"},
    {"id": 5, "name": "Partner Group", "parent_id": None, "currency": "USD", "language": "en"},
]

MENUS = [
    {"id": 1, "name": "Dashboard", "path": "/dashboard", "icon": "dashboard", "parent_id": None, "order_no": 1},
    {"id": 2, "name": "Definitions", "path": "/dashboard/definitions", "icon": "settings", "parent_id": None,
     "order_no": 2},
    {"id": 3, "name": "Companies", "path": "/dashboard/definitions/companies", "icon": "company", "parent_id": 2,
     "order_no": 1},
    {"id": 4, "name": "Customers", "path": "/dashboard/definitions/customers", "icon": "users", "parent_id": 2,
     "order_no": 2},
    {"id": 5, "name": "Archive", "path": "/dashboard/archive", "icon": None, "parent_id": None, "order_no": 3,
     "is_active": False},
    {"id": 6, "name": "Role menus", "path": "/dashboard/role-menus", "icon": "shield", "parent_id": None,
     "order_no": 4},
]

ROLES = [
    {"id": 1, "name": "superadmin"},
    {"id": 2, "name": "company_admin"},
    {"id": 3, "name": "sales"},
]

ROLE_MENUS = {1: {1, 2, 3, 4, 5, 6}, 2: {1, 2, 4}, 3: {1, 3}}

CUSTOMERS = [
    {"id": 1, "group_customer_code": "HD", "group_customer_name": "Hyundai", "remarks": ""},
    {"id": 2, "group_customer_code": "SS", "group_customer_name": "Samsung", "remarks": "key account"},
]

TRADE_TERMS = {
    1: [
        {"id": 10, "customer_id": 1, "incoterm": "CIF", "is_primary": False},
        {"id": 11, "customer_id": 1, "incoterm": "FOB", "is_primary": True},
    ],
}

PRODUCT_CATEGORIES = [
    {"id": 1, "category_code": "BOLT", "name": "Bolts"},
    {"id": 2, "category_code": "NUT", "name": "Nuts"},
]

ACCOUNTS = [
    {"id": 3, "username": "seller", "role": "sales", "company_id": 3, "is_active": True},
    {"id": 1, "username": "admin", "role": "superadmin", "company_id": 1, "is_active": True,
     "company_name": "Head Office"},
    {"id": 2, "username": "manager", "role": "company_admin", "company_id": 2, "is_active": True},
]


def nest(records: list) -> list:
    """Flat {id, parent_id} records -> nested records with children (parent_id dropped)"""
    nodes = {record["id"]: dict(record, children=[]) for record in records}
    roots = []
    for record in records:
        node = nodes[record["id"]]
        node.pop("parent_id", None)
        parent = nodes.get(record["parent_id"])
        (parent["children"] if parent else roots).append(node)
    return roots


class FakeBackend:
    """In-memory quoting backend"""

    def __init__(self):
        self.collections = {
            "/api/definitions/companies": copy.deepcopy(COMPANIES),
            "/api/definitions/customers": copy.deepcopy(CUSTOMERS),
            "/api/definitions/product-categories": copy.deepcopy(PRODUCT_CATEGORIES),
            "/api/menus": copy.deepcopy(MENUS),
            "/api/manage-accounts": copy.deepcopy(ACCOUNTS),
        }
        self.roles = copy.deepcopy(ROLES)
        self.role_menus = {role_id: set(menu_ids) for role_id, menu_ids in ROLE_MENUS.items()}
        self.trade_terms = copy.deepcopy(TRADE_TERMS)
        self.passwords = {}
        self.requests = []
        self.menus_available = True
        self.nested_companies = False
        self.role_menu_shape = "ids"
        self.revoked_tokens = set()
        self.failing_paths = set()

    @property
    def companies(self) -> list:
        return self.collections["/api/definitions/companies"]

    def client(self, token: Optional[str] = None) -> BackendClient:
        return BackendClient(
            token=token,
            base_url=BACKEND_URL,
            get_retry=0,
            retry_backoff=0,
            transport=httpx.MockTransport(self.handler),
        )

    def calls(self, method: str, path: Optional[str] = None) -> list:
        return [call for call in self.requests if call[0] == method and (path is None or call[1] == path)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))
        body = json.loads(request.content) if request.content else None

        if path == "/api/login":
            return self._login(body or {})

        auth = request.headers.get("Authorization", "")
        token = auth[len("Bearer "):] if auth.startswith("Bearer ") else None
        if not token or token in self.revoked_tokens:
            return httpx.Response(401, json={"detail": "Invalid token"})

        if path in self.failing_paths:
            return httpx.Response(500, json={"error": "Database unavailable"})

        if path in ("/api/roles", "/api/menus", "/api/role-menus") and not self.menus_available:
            return httpx.Response(404, json={"detail": "Not Found"})

        if path == "/api/roles" and method == "GET":
            return httpx.Response(200, json=self.roles)
        if path == "/api/role-menus":
            return self._role_menus(request, method, body)

        match = re.fullmatch(r"/api/customers/(\d+)/trade-terms", path)
        if match and method == "GET":
            return httpx.Response(200, json=self.trade_terms.get(int(match.group(1)), []))

        match = re.fullmatch(r"/api/manage-accounts/(\d+)/reset-password", path)
        if match and method == "PUT":
            self.passwords[int(match.group(1))] = body["password"]
            return httpx.Response(204)

        return self._collection(method, path, body)

    def _login(self, body: dict) -> httpx.Response:
        user = USERS.get(body.get("username"))
        if user is None or user["password"] != body.get("password"):
            return httpx.Response(401, json={"error": "Invalid username or password"})
        return httpx.Response(200, json={
            "token": user["token"], "role": user["role"], "company_id": user["company_id"]
        })

    def _role_menus(self, request: httpx.Request, method: str, body: Optional[dict]) -> httpx.Response:
        if method == "POST":
            self.role_menus[int(body["role_id"])] = set(body["menu_ids"])
            return httpx.Response(200, json={"success": True})

        menu_ids = sorted(self.role_menus.get(int(request.url.params["role_id"]), set()))
        if self.role_menu_shape == "objects":
            return httpx.Response(200, json=[{"menu_id": menu_id, "role_id": 1} for menu_id in menu_ids])
        if self.role_menu_shape == "wrapped":
            return httpx.Response(200, json={"menu_ids": menu_ids})
        return httpx.Response(200, json=menu_ids)

    def _collection(self, method: str, path: str, body: Optional[dict]) -> httpx.Response:
        match = re.fullmatch(r"(/api/[a-z/-]+?)(?:/(\d+))?", path)
        if match is None or match.group(1) not in self.collections:
            return httpx.Response(404, json={"detail": "Not Found"})
        records = self.collections[match.group(1)]
        item_id = int(match.group(2)) if match.group(2) else None

        if item_id is None:
            if method == "GET":
                if match.group(1) == "/api/definitions/companies" and self.nested_companies:
                    return httpx.Response(200, json=nest(records))
                return httpx.Response(200, json=records)
            if method == "POST":
                record = dict(body, id=max((r["id"] for r in records), default=0) + 1)
                records.append(record)
                return httpx.Response(201, json=record)
            return httpx.Response(405, json={"detail": "Method Not Allowed"})

        record = next((r for r in records if r["id"] == item_id), None)
        if record is None:
            return httpx.Response(404, json={"message": f"Record {item_id} not found"})
        if method == "GET":
            return httpx.Response(200, json=record)
        if method == "PUT":
            record.update(body)
            return httpx.Response(200, json=record)
        if method == "DELETE":
            records.remove(record)
            return httpx.Response(204)
        return httpx.Response(405, json={"detail": "Method Not Allowed"})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(autouse=True)
def reset_editor_registry():
    """Role-menu editors live in process memory; start every test empty."""
    EDITOR_REGISTRY._editors.clear()
    yield
    EDITOR_REGISTRY._editors.clear()


@pytest.fixture
async def client(backend: FakeBackend) -> AsyncClient:
    """Async HTTP client against the console app, backed by FakeBackend."""

    async def override_backend_client(session: ConsoleSession = Depends(get_session)):
        backend_client = backend.client(session.token)
        try:
            yield backend_client
        finally:
            await backend_client.aclose()

    async def override_public_backend_client():
        backend_client = backend.client()
        try:
            yield backend_client
        finally:
            await backend_client.aclose()

    app.dependency_overrides[get_backend_client] = override_backend_client
    app.dependency_overrides[get_public_backend_client] = override_public_backend_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def session_headers(role: str = "superadmin", company_id: int = 1, token: str = "tok-admin") -> dict:
    session = ConsoleSession.init(token, role, company_id)
    return {"Authorization": f"Bearer {create_session_token(session)}"}


@pytest.fixture
def admin_headers() -> dict:
    return session_headers("superadmin", 1, "tok-admin")


@pytest.fixture
def manager_headers() -> dict:
    return session_headers("company_admin", 2, "tok-manager")


@pytest.fixture
def seller_headers() -> dict:
    return session_headers("sales", 3, "tok-seller")


@pytest.fixture
def make_headers():
    """Factory for session headers with an arbitrary role / company"""
    return session_headers
