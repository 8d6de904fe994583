# fastener_console/core/navigation_config.py
# static role navigation, used only when the backend has no dynamic menu data
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)


class ROLE_NAVIGATION_CONFIG:
    _entries: Dict[str, List[dict]] = {
        "superadmin": [
            {"name": "Account management", "path": "/dashboard/manage-accounts"},
            {"name": "Company organisation", "path": "/dashboard/definitions/companies"},
            {"name": "All customers", "path": "/dashboard/definitions/customers"},
            {"name": "Product categories", "path": "/dashboard/definitions/product-categories"},
            {"name": "Menu management", "path": "/dashboard/manage-menus"},
            {"name": "Role menus", "path": "/dashboard/role-menus"},
        ],
        "company_admin": [
            {"name": "Account management", "path": "/dashboard/manage-accounts"},
            {"name": "Company organisation", "path": "/dashboard/definitions/companies"},
            {"name": "Customer management", "path": "/dashboard/definitions/customers"},
        ],
        "sales": [
            {"name": "Quotes", "path": "/dashboard/quotes"},
            {"name": "Customers", "path": "/dashboard/definitions/customers"},
            {"name": "Shipment tracking", "path": "/dashboard/shipments"},
        ],
        "engineer": [
            {"name": "Spec review", "path": "/dashboard/spec-review"},
            {"name": "Production tracking", "path": "/dashboard/production"},
        ],
    }

    @classmethod
    def roles(cls) -> List[str]:
        return list(cls._entries.keys())

    @classmethod
    def get_entries(cls, role: str) -> List[dict]:
        """Ordered navigation entries for a role, empty (with a warning) for unknown roles"""
        entries = cls._entries.get(role)
        if entries is None:
            logger.warning(f"[NAV] No static navigation configured for role {role!r}")
            return []
        return [dict(entry) for entry in entries]
