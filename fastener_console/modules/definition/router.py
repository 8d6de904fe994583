# fastener_console/modules/definition/router.py
from typing import Any
from fastapi import APIRouter, Depends, Path
from fastener_console.common.response import ApiResponse
from fastener_console.core.api_client import BackendClient
from fastener_console.core.dependencies import get_backend_client
from fastener_console.modules.definition.schemas import CustomerBase, ProductCategoryBase
from fastener_console.modules.definition import service as definition_service

customer_router = APIRouter()
product_category_router = APIRouter()


# customer list
@customer_router.get("")
async def fetch_customer_list(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.fetch_customer_list(client)


# customer detail
@customer_router.get("/{customer_id}")
async def fetch_customer(
        customer_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.fetch_customer(customer_id, client)


# customer trade terms
@customer_router.get("/{customer_id}/trade-terms")
async def fetch_customer_trade_terms(
        customer_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.fetch_customer_trade_terms(customer_id, client)


@customer_router.post("")
async def create_customer(
        customer_info: CustomerBase,
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.create_customer(customer_info, client)


@customer_router.put("/{customer_id}")
async def update_customer(
        customer_info: CustomerBase,
        customer_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.update_customer(customer_id, customer_info, client)


@customer_router.delete("/{customer_id}")
async def delete_customer(
        customer_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await definition_service.delete_customer(customer_id, client)


# product category list
@product_category_router.get("")
async def fetch_product_category_list(
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.fetch_product_category_list(client)


@product_category_router.post("")
async def create_product_category(
        category_info: ProductCategoryBase,
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.create_product_category(category_info, client)


@product_category_router.put("/{category_id}")
async def update_product_category(
        category_info: ProductCategoryBase,
        category_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[Any]:
    return await definition_service.update_product_category(category_id, category_info, client)


@product_category_router.delete("/{category_id}")
async def delete_product_category(
        category_id: int = Path(...),
        client: BackendClient = Depends(get_backend_client)
) -> ApiResponse[dict]:
    return await definition_service.delete_product_category(category_id, client)
