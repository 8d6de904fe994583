# fastener_console/modules/company/form.py
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional

from fastener_console.core.exceptions import ValidationError
from fastener_console.modules.company.scope import CompanyScopeResolver

logger = logging.getLogger(__name__)

# fields passed through to the backend untouched
EXTRA_FIELDS = ("currency", "language")


class FormState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    VALIDATING = "validating"
    SAVING = "saving"
    ERROR = "error"


class CompanyEditForm:
    """
    Company create/edit flow: IDLE -> EDITING -> VALIDATING -> SAVING -> IDLE | ERROR.

    A failed validation goes back to EDITING with the reason kept in `error`
    and the entered values untouched. A failed save ends in ERROR; editing
    again from there is allowed.
    """

    def __init__(
            self,
            scope: CompanyScopeResolver,
            role: Optional[str] = None,
            home_company_id: Optional[int] = None,
    ):
        self.scope = scope
        self.role = role
        self.home_company_id = home_company_id
        self.state = FormState.IDLE
        self.company_id: Optional[int] = None
        self.name = ""
        self.parent_id: Optional[int] = None
        self.original_parent_id: Optional[int] = None
        self.extra: dict = {}
        self.error: Optional[str] = None

    def begin(self, company: Optional[Mapping[str, Any]] = None) -> None:
        self._require(FormState.IDLE, FormState.ERROR)
        company = company or {}
        self.company_id = company.get("id")
        self.name = company.get("name") or ""
        self.parent_id = company.get("parent_id")
        self.original_parent_id = self.parent_id
        self.extra = {key: company[key] for key in EXTRA_FIELDS if key in company}
        self.error = None
        self.state = FormState.EDITING

    def update(self, name: Optional[str] = None, parent_id: Any = ..., **extra: Any) -> None:
        """parent_id=None clears the parent, leaving it out keeps the current one"""
        self._require(FormState.EDITING, FormState.ERROR)
        if name is not None:
            self.name = name
        if parent_id is not ...:
            self.parent_id = parent_id
        for key, value in extra.items():
            if key in EXTRA_FIELDS and value is not None:
                self.extra[key] = value
        self.state = FormState.EDITING

    def validate(self) -> None:
        self._require(FormState.EDITING)
        self.state = FormState.VALIDATING
        try:
            if not self.name or not self.name.strip():
                raise ValidationError("Company name is required.", field="name")
            # an existing company keeping its parent is not re-checked
            if self.company_id is None or self.parent_id != self.original_parent_id:
                self.scope.validate_parent(self.company_id, self.parent_id, self.role, self.home_company_id)
        except ValidationError as e:
            self.error = e.message
            self.state = FormState.EDITING
            raise
        self.error = None

    def payload(self) -> dict:
        payload = dict(self.extra)
        payload["name"] = self.name.strip()
        payload["parent_id"] = self.parent_id
        return payload

    async def submit(self, save: Callable[[dict], Awaitable[Any]]) -> Any:
        self.validate()
        self.state = FormState.SAVING
        try:
            result = await save(self.payload())
        except Exception as e:
            self.state = FormState.ERROR
            self.error = str(e)
            logger.warning(f"[COMPANY] Saving company {self.company_id or '(new)'} failed: {e}")
            raise
        self.state = FormState.IDLE
        return result

    def _require(self, *states: FormState) -> None:
        if self.state not in states:
            raise ValidationError(f"Company form cannot do that while {self.state.value}.")
