# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastener_console.common.response import ResponseBuilder
from fastener_console.core.config import BACKEND_CONFIG, CORS_CONFIG, LOG_CONFIG, TOKEN_CONFIG
from fastener_console.core.dependencies import get_current_session_global
from fastener_console.core.exceptions import setup_global_exception_handlers
from fastener_console.modules.auth.router import auth_router
from fastener_console.modules.menu.router import menu_router
from fastener_console.modules.role_menu.router import role_router, role_menu_router
from fastener_console.modules.company.router import company_router
from fastener_console.modules.account.router import account_router
from fastener_console.modules.definition.router import customer_router, product_category_router

logging.basicConfig(
    level=LOG_CONFIG.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Console starting, backend at {BACKEND_CONFIG.BASE_URL}")
    yield
    logger.info("Console shutting down")


def create_app():
    app = FastAPI(
        title="Fastener Quoting Console API",
        dependencies=[Depends(get_current_session_global)],  # skipped for EXCLUDED_PATHS
        lifespan=lifespan
    )

    setup_global_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_CONFIG.ALLOW_ORIGINS,
        allow_credentials=True,  # session cookie
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[TOKEN_CONFIG.SESSION_RENEW_HEADER],
    )

    app.include_router(auth_router, prefix="/auth", tags=["Auth"])
    app.include_router(menu_router, prefix="/menus", tags=["menus"])
    app.include_router(role_router, prefix="/roles", tags=["roles"])
    app.include_router(role_menu_router, prefix="/role-menus", tags=["role-menus"])
    app.include_router(company_router, prefix="/companies", tags=["companies"])
    app.include_router(account_router, prefix="/accounts", tags=["accounts"])
    app.include_router(customer_router, prefix="/customers", tags=["customers"])
    app.include_router(product_category_router, prefix="/product-categories", tags=["product-categories"])

    @app.get("/health", tags=["health"])
    def health():
        return ResponseBuilder.success(data={"status": "ok"}, message="ok")

    return app


app = create_app()
