import logging
from typing import List

from fastener_console.common.response import ResponseBuilder, ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.config import BACKEND_CONFIG, ROLE_CONFIG
from fastener_console.core.exceptions import ServerError, ValidationError
from fastener_console.core.session import ConsoleSession
from fastener_console.modules.account.schemas import AccountCreate, AccountUpdate, PasswordResetRequest
from fastener_console.modules.company.service import load_company_index, load_company_scope

logger = logging.getLogger(__name__)


def sort_accounts(accounts: List[dict]) -> List[dict]:
    """Admin accounts first, then by id"""
    def sort_key(account: dict):
        is_admin = account.get("role") in ROLE_CONFIG.ACCOUNT_ADMIN_ROLES
        return (0 if is_admin else 1, account.get("id") or 0)
    return sorted(accounts, key=sort_key)


def _check_role_grant(session: ConsoleSession, role: str) -> None:
    if not role or not role.strip():
        raise ValidationError("Role is required.", field="role")
    if role == ROLE_CONFIG.SUPERADMIN_ROLE and session.role != ROLE_CONFIG.SUPERADMIN_ROLE:
        raise ValidationError("Only a superadmin can grant the superadmin role.", field="role")


async def fetch_account_list(client: BackendClient) -> ApiResponse[list]:
    accounts = await client.get(BACKEND_CONFIG.ACCOUNTS_PATH)
    if not isinstance(accounts, list):
        raise ServerError("Unexpected accounts response shape")

    if any(not account.get("company_name") for account in accounts):
        index = await load_company_index(client)
        for account in accounts:
            company = index.get(account.get("company_id"))
            if not account.get("company_name") and company is not None:
                account["company_name"] = company.get("name")

    return ResponseBuilder.success(data=sort_accounts(accounts), message="Account list loaded.")


async def create_account(account_info: AccountCreate, session: ConsoleSession, client: BackendClient) -> ApiResponse[dict]:
    if not account_info.username or not account_info.username.strip():
        raise ValidationError("Username is required.", field="username")
    if not account_info.password:
        raise ValidationError("Password is required.", field="password")
    if not account_info.company_id:
        raise ValidationError("Company is required.", field="company_id")
    _check_role_grant(session, account_info.role)

    scope = await load_company_scope(client)
    if not scope.can_assign(session.role, session.company_id, account_info.company_id):
        raise ValidationError("Company is outside the companies you can assign.", field="company_id")

    payload = {
        "username": account_info.username.strip(),
        "password": account_info.password,
        "role": account_info.role,
        "company_id": account_info.company_id,
    }
    created = await client.post(BACKEND_CONFIG.ACCOUNTS_PATH, json=payload)
    logger.info(f"[ACCOUNT] Created account {payload['username']!r} in company {payload['company_id']}")
    return ResponseBuilder.success(data=created, message="Account created.")


async def update_account(
        account_id: int,
        account_info: AccountUpdate,
        session: ConsoleSession,
        client: BackendClient
) -> ApiResponse[dict]:
    update_dict = account_info.model_dump(exclude_unset=True, exclude_none=True)
    if not update_dict:
        raise ValidationError("Nothing to update.")
    if "role" in update_dict:
        _check_role_grant(session, update_dict["role"])

    updated = await client.put(f"{BACKEND_CONFIG.ACCOUNTS_PATH}/{account_id}", json=update_dict)
    logger.info(f"[ACCOUNT] Updated account {account_id}, fields {sorted(update_dict)}")
    return ResponseBuilder.success(data=updated, message="Account updated.")


async def reset_account_password(
        account_id: int,
        reset_info: PasswordResetRequest,
        client: BackendClient
) -> ApiResponse[dict]:
    if not reset_info.password:
        raise ValidationError("New password is required.", field="password")

    await client.put(
        f"{BACKEND_CONFIG.ACCOUNTS_PATH}/{account_id}/reset-password",
        json={"password": reset_info.password}
    )
    logger.info(f"[ACCOUNT] Password reset for account {account_id}")
    return ResponseBuilder.success(data={"id": account_id}, message="Password updated.")


async def delete_account(account_id: int, client: BackendClient) -> ApiResponse[dict]:
    await client.delete(f"{BACKEND_CONFIG.ACCOUNTS_PATH}/{account_id}")
    logger.info(f"[ACCOUNT] Deleted account {account_id}")
    return ResponseBuilder.success(data={"id": account_id, "deleted": True}, message="Account deleted.")
