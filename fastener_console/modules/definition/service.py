import logging

from fastener_console.common.response import ResponseBuilder, ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.config import BACKEND_CONFIG
from fastener_console.core.exceptions import ValidationError
from fastener_console.modules.definition.schemas import CustomerBase, ProductCategoryBase

logger = logging.getLogger(__name__)


# ==============================
# customers
# ==============================
def _customer_payload(customer_info: CustomerBase) -> dict:
    code = (customer_info.group_customer_code or "").strip()
    name = (customer_info.group_customer_name or "").strip()
    if not code:
        raise ValidationError("Customer code is required.", field="group_customer_code")
    if not name:
        raise ValidationError("Customer name is required.", field="group_customer_name")
    return {
        "group_customer_code": code,
        "group_customer_name": name,
        "remarks": (customer_info.remarks or "").strip(),
    }


async def fetch_customer_list(client: BackendClient) -> ApiResponse[list]:
    customers = await client.get(BACKEND_CONFIG.CUSTOMERS_PATH)
    return ResponseBuilder.success(data=customers, message="Customer list loaded.")


async def fetch_customer(customer_id: int, client: BackendClient) -> ApiResponse[dict]:
    customer = await client.get(f"{BACKEND_CONFIG.CUSTOMERS_PATH}/{customer_id}")
    return ResponseBuilder.success(data=customer, message="Customer loaded.")


async def fetch_customer_trade_terms(customer_id: int, client: BackendClient) -> ApiResponse[list]:
    terms = await client.get(BACKEND_CONFIG.TRADE_TERMS_PATH.format(customer_id=customer_id))
    if isinstance(terms, list):
        # primary term first
        terms = sorted(terms, key=lambda term: (not term.get("is_primary"), term.get("id") or 0))
    return ResponseBuilder.success(data=terms, message="Trade terms loaded.")


async def create_customer(customer_info: CustomerBase, client: BackendClient) -> ApiResponse[dict]:
    payload = _customer_payload(customer_info)
    created = await client.post(BACKEND_CONFIG.CUSTOMERS_PATH, json=payload)
    logger.info(f"[CUSTOMER] Created customer {payload['group_customer_code']!r}")
    return ResponseBuilder.success(data=created, message="Customer created.")


async def update_customer(customer_id: int, customer_info: CustomerBase, client: BackendClient) -> ApiResponse[dict]:
    payload = _customer_payload(customer_info)
    updated = await client.put(f"{BACKEND_CONFIG.CUSTOMERS_PATH}/{customer_id}", json=payload)
    logger.info(f"[CUSTOMER] Updated customer {customer_id}")
    return ResponseBuilder.success(data=updated, message="Customer updated.")


async def delete_customer(customer_id: int, client: BackendClient) -> ApiResponse[dict]:
    await client.delete(f"{BACKEND_CONFIG.CUSTOMERS_PATH}/{customer_id}")
    logger.info(f"[CUSTOMER] Deleted customer {customer_id}")
    return ResponseBuilder.success(data={"id": customer_id, "deleted": True}, message="Customer deleted.")


# ==============================
# product categories
# ==============================
def _category_payload(category_info: ProductCategoryBase) -> dict:
    code = (category_info.category_code or "").strip()
    name = (category_info.name or "").strip()
    if not code or not name:
        raise ValidationError("Category code and name are both required.",
                              field="category_code" if not code else "name")
    return {"category_code": code, "name": name}


async def fetch_product_category_list(client: BackendClient) -> ApiResponse[list]:
    categories = await client.get(BACKEND_CONFIG.PRODUCT_CATEGORIES_PATH)
    return ResponseBuilder.success(data=categories, message="Product categories loaded.")


async def create_product_category(category_info: ProductCategoryBase, client: BackendClient) -> ApiResponse[dict]:
    payload = _category_payload(category_info)
    created = await client.post(BACKEND_CONFIG.PRODUCT_CATEGORIES_PATH, json=payload)
    logger.info(f"[CATEGORY] Created category {payload['category_code']!r}")
    return ResponseBuilder.success(data=created, message="Product category created.")


async def update_product_category(
        category_id: int,
        category_info: ProductCategoryBase,
        client: BackendClient
) -> ApiResponse[dict]:
    payload = _category_payload(category_info)
    updated = await client.put(f"{BACKEND_CONFIG.PRODUCT_CATEGORIES_PATH}/{category_id}", json=payload)
    logger.info(f"[CATEGORY] Updated category {category_id}")
    return ResponseBuilder.success(data=updated, message="Product category updated.")


async def delete_product_category(category_id: int, client: BackendClient) -> ApiResponse[dict]:
    await client.delete(f"{BACKEND_CONFIG.PRODUCT_CATEGORIES_PATH}/{category_id}")
    logger.info(f"[CATEGORY] Deleted category {category_id}")
    return ResponseBuilder.success(data={"id": category_id, "deleted": True}, message="Product category deleted.")
