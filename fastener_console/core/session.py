# fastener_console/core/session.py
import logging
from dataclasses import dataclass
from typing import Optional, Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsoleSession:
    """
    The whole client-side session: backend bearer token, role name and home company.
    Created once on login and cleared as one unit on logout or 401.
    """
    token: str
    role: str
    company_id: int = 0

    @classmethod
    def init(cls, token: Optional[str], role: Optional[str], company_id: Any = None) -> "ConsoleSession":
        if not token:
            raise ValueError("token is required to open a session")
        return cls(token=token, role=(role or "").strip(), company_id=_to_company_id(company_id))

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "ConsoleSession":
        return cls.init(claims.get("token"), claims.get("role"), claims.get("company_id"))

    def to_claims(self) -> dict:
        return {"token": self.token, "role": self.role, "company_id": self.company_id}

    @property
    def has_company(self) -> bool:
        return self.company_id > 0


def _to_company_id(value: Any) -> int:
    # a mis-configured session keeps company_id 0 and gets no assignable companies
    if value is None or value == "":
        return 0
    try:
        company_id = int(value)
    except (TypeError, ValueError):
        logger.warning(f"[SESSION] Ignoring non-numeric company_id: {value!r}")
        return 0
    return company_id if company_id > 0 else 0
