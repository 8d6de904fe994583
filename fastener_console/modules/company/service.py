import logging
from typing import List

from fastener_console.common.response import ResponseBuilder, ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.config import BACKEND_CONFIG
from fastener_console.core.exceptions import CycleDetected, ServerError, ValidationError
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.company.form import CompanyEditForm
from fastener_console.modules.company.schemas import CompanyBase
from fastener_console.modules.company.scope import CompanyScopeResolver
from fastener_console.utils.tree_index import FlatNode, TreeIndex

logger = logging.getLogger(__name__)


async def load_company_index(client: BackendClient) -> TreeIndex:
    """Companies come back flat or nested depending on the backend version"""
    records = await client.get(BACKEND_CONFIG.COMPANIES_PATH)
    if not isinstance(records, list):
        raise ServerError("Unexpected companies response shape")
    return TreeIndex.build(records)


async def load_company_scope(client: BackendClient) -> CompanyScopeResolver:
    return CompanyScopeResolver(await load_company_index(client))


def _rows(companies: List[FlatNode]) -> List[dict]:
    return [item.to_dict() for item in companies]


def _issues(index: TreeIndex) -> List[dict]:
    return [issue.to_dict() for issue in index.issues]


def _ensure_in_scope(scope: CompanyScopeResolver, session: ConsoleSession, company_id: int) -> None:
    if company_id not in scope.index:
        raise ServerError(f"Company {company_id} not found.", backend_status=404)
    if session.role != scope.superadmin_role and not scope.can_assign(session.role, session.company_id, company_id):
        raise ValidationError("Company is outside your organisation.", field="id")


async def fetch_company_list(client: BackendClient) -> ApiResponse[dict]:
    """All companies, flattened with levels for indentation"""
    index = await load_company_index(client)
    data = {
        "companies": _rows(index.flatten()),
        "issues": _issues(index),
    }
    return ResponseBuilder.success(data=data, message="Company list loaded.")


async def fetch_selectable_companies(session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    """Companies the session may assign accounts to; empty disables the control"""
    scope = await load_company_scope(client)
    companies = scope.selectable_companies(session.role, session.company_id)
    data = {
        "companies": _rows(companies),
        "selectable": bool(companies),
    }
    return ResponseBuilder.success(data=data, message="Selectable companies loaded.")


async def fetch_parent_options(company_id: int, session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    """Parent choices for a company: never itself nor one of its descendants"""
    scope = await load_company_scope(client)
    if company_id not in scope.index:
        raise ServerError(f"Company {company_id} not found.", backend_status=404)
    companies = scope.parent_options(company_id, session.role, session.company_id)
    data = {
        "company_id": company_id,
        "companies": _rows(companies),
        "selectable": bool(companies),
    }
    return ResponseBuilder.success(data=data, message="Parent options loaded.")


async def fetch_company_ancestors(company_id: int, client: BackendClient) -> ApiResponse[dict]:
    """Root-to-company path; a looping chain gives the partial path flagged as a cycle"""
    index = await load_company_index(client)
    if company_id not in index:
        raise ServerError(f"Company {company_id} not found.", backend_status=404)

    try:
        path = index.ancestor_path(company_id)
        cycle = False
    except CycleDetected as e:
        path = e.partial_path
        cycle = True

    data = {"company_id": company_id, "path": path, "cycle": cycle}
    return ResponseBuilder.success(data=data, message="Company path loaded.")


async def create_company(company_info: CompanyBase, session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    scope = await load_company_scope(client)
    form = CompanyEditForm(scope, role=session.role, home_company_id=session.company_id)
    form.begin()
    form.update(
        name=company_info.name or "",
        parent_id=company_info.parent_id,
        currency=company_info.currency,
        language=company_info.language,
    )

    created = await form.submit(lambda payload: client.post(BACKEND_CONFIG.COMPANIES_PATH, json=payload))
    logger.info(f"[COMPANY] Created company {form.name!r} under {form.parent_id}")
    return ResponseBuilder.success(data=created, message="Company created.")


async def update_company(
        company_id: int,
        company_info: CompanyBase,
        session: ConsoleSession,
        client: BackendClient
) -> ApiResponse[dict]:
    scope = await load_company_scope(client)
    _ensure_in_scope(scope, session, company_id)
    company = scope.index.get(company_id)

    form = CompanyEditForm(scope, role=session.role, home_company_id=session.company_id)
    form.begin(company)
    changes = company_info.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("Nothing to update.")
    form.update(**changes)

    updated = await form.submit(
        lambda payload: client.put(f"{BACKEND_CONFIG.COMPANIES_PATH}/{company_id}", json=payload)
    )
    logger.info(f"[COMPANY] Updated company {company_id}, fields {sorted(changes)}")
    return ResponseBuilder.success(data=updated, message="Company updated.")


async def delete_company(company_id: int, session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    scope = await load_company_scope(client)
    _ensure_in_scope(scope, session, company_id)

    children = scope.index.children_of(company_id)
    if children:
        raise ValidationError(
            f"Company has {len(children)} sub-companies, move or delete them first.",
            field="id"
        )

    await client.delete(f"{BACKEND_CONFIG.COMPANIES_PATH}/{company_id}")
    logger.info(f"[COMPANY] Deleted company {company_id}")
    return ResponseBuilder.success(data={"id": company_id, "deleted": True}, message="Company deleted.")
