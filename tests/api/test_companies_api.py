"""Tests for /companies endpoints (hierarchy views, scope and edit rules)."""

from httpx import AsyncClient


def _pairs(rows: list) -> list:
    return [(row["id"], row["level"]) for row in rows]


async def test_company_list_is_flattened(client: AsyncClient, admin_headers) -> None:
    response = await client.get("/companies", headers=admin_headers)
    data = response.json()["data"]
    assert _pairs(data["companies"]) == [(1, 0), (2, 1), (3, 2), (4, 1), (5, 0)]
    assert data["issues"] == []


async def test_nested_backend_response_gives_same_list(client: AsyncClient, backend, admin_headers) -> None:
    backend.nested_companies = True
    response = await client.get("/companies", headers=admin_headers)
    rows = response.json()["data"]["companies"]
    assert _pairs(rows) == [(1, 0), (2, 1), (3, 2), (4, 1), (5, 0)]
    assert rows[2]["parent_id"] == 2


async def test_company_list_survives_a_cycle(client: AsyncClient, backend, admin_headers) -> None:
    backend.companies.extend([
        {"id": 7, "name": "Loop A", "parent_id": 8},
        {"id": 8, "name": "Loop B", "parent_id": 7},
    ])
    response = await client.get("/companies", headers=admin_headers)
    data = response.json()["data"]
    assert [row["id"] for row in data["companies"]] == [1, 2, 3, 4, 5]
    assert {issue["node_id"] for issue in data["issues"]} == {7, 8}


async def test_selectable_companies_follow_role(client: AsyncClient, admin_headers, manager_headers) -> None:
    admin = await client.get("/companies/selectable", headers=admin_headers)
    assert len(admin.json()["data"]["companies"]) == 5

    manager = await client.get("/companies/selectable", headers=manager_headers)
    data = manager.json()["data"]
    assert _pairs(data["companies"]) == [(2, 0), (3, 1)]
    assert data["selectable"] is True


async def test_selectable_companies_empty_without_home_company(client: AsyncClient, make_headers) -> None:
    response = await client.get("/companies/selectable", headers=make_headers("company_admin", 0, "tok-manager"))
    data = response.json()["data"]
    assert data["companies"] == []
    assert data["selectable"] is False


async def test_parent_options_exclude_company_subtree(client: AsyncClient, admin_headers) -> None:
    response = await client.get("/companies/2/parent-options", headers=admin_headers)
    assert {row["id"] for row in response.json()["data"]["companies"]} == {1, 4, 5}


async def test_parent_options_unknown_company_returns_404(client: AsyncClient, admin_headers) -> None:
    response = await client.get("/companies/99/parent-options", headers=admin_headers)
    assert response.status_code == 404


async def test_ancestors(client: AsyncClient, admin_headers) -> None:
    response = await client.get("/companies/3/ancestors", headers=admin_headers)
    data = response.json()["data"]
    assert [company["id"] for company in data["path"]] == [1, 2, 3]
    assert data["cycle"] is False


async def test_ancestors_through_cycle_returns_partial_path(client: AsyncClient, backend, admin_headers) -> None:
    backend.companies.extend([
        {"id": 7, "name": "Loop A", "parent_id": 8},
        {"id": 8, "name": "Loop B", "parent_id": 7},
    ])
    response = await client.get("/companies/7/ancestors", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["cycle"] is True
    assert [company["id"] for company in data["path"]] == [8, 7]


async def test_create_company_inside_scope(client: AsyncClient, backend, manager_headers) -> None:
    response = await client.post(
        "/companies",
        json={"name": "Daegu Office", "parent_id": 3, "currency": "KRW", "language": "ko"},
        headers=manager_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["parent_id"] == 3
    assert len(backend.companies) == 6


async def test_create_company_outside_scope_is_rejected(client: AsyncClient, backend, manager_headers) -> None:
    response = await client.post("/companies", json={"name": "Hanoi", "parent_id": 4}, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["data"]["field"] == "parent_id"

    response = await client.post("/companies", json={"name": "Top level"}, headers=manager_headers)
    assert response.status_code == 400
    assert backend.calls("POST", "/api/definitions/companies") == []


async def test_superadmin_creates_root_company(client: AsyncClient, admin_headers) -> None:
    response = await client.post("/companies", json={"name": "New Group"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["parent_id"] is None


async def test_create_company_requires_name(client: AsyncClient, admin_headers) -> None:
    response = await client.post("/companies", json={"name": " ", "parent_id": 1}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["data"]["field"] == "name"


async def test_manager_renames_home_company(client: AsyncClient, backend, manager_headers) -> None:
    response = await client.put("/companies/2", json={"name": "Korea HQ"}, headers=manager_headers)
    assert response.status_code == 200
    company = next(company for company in backend.companies if company["id"] == 2)
    assert company["name"] == "Korea HQ"
    assert company["parent_id"] == 1


async def test_manager_cannot_edit_company_outside_scope(client: AsyncClient, manager_headers) -> None:
    response = await client.put("/companies/4", json={"name": "Vietnam HQ"}, headers=manager_headers)
    assert response.status_code == 400


async def test_move_company_under_descendant_is_rejected(client: AsyncClient, backend, admin_headers) -> None:
    response = await client.put("/companies/1", json={"parent_id": 3}, headers=admin_headers)
    assert response.status_code == 400
    assert backend.calls("PUT") == []


async def test_update_with_no_fields_is_rejected(client: AsyncClient, admin_headers) -> None:
    response = await client.put("/companies/2", json={}, headers=admin_headers)
    assert response.status_code == 400


async def test_delete_company_with_children_is_rejected(client: AsyncClient, backend, admin_headers) -> None:
    response = await client.delete("/companies/2", headers=admin_headers)
    assert response.status_code == 400
    assert backend.calls("DELETE") == []


async def test_delete_leaf_company(client: AsyncClient, backend, admin_headers) -> None:
    response = await client.delete("/companies/3", headers=admin_headers)
    assert response.status_code == 200
    assert all(company["id"] != 3 for company in backend.companies)
