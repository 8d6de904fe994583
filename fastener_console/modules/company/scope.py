# fastener_console/modules/company/scope.py
from typing import Any, Iterable, List, Mapping, Optional, Set

from fastener_console.core.config import ROLE_CONFIG
from fastener_console.core.exceptions import ValidationError
from fastener_console.utils.tree_index import FlatNode, TreeIndex


class CompanyScopeResolver:
    """
    Which companies a caller may pick when assigning an account or a parent.

    superadmin: every company. Any other role: its home company and everything
    below it. A missing home company means nothing is selectable.
    """

    def __init__(self, index: TreeIndex, superadmin_role: str = ROLE_CONFIG.SUPERADMIN_ROLE):
        self.index = index
        self.superadmin_role = superadmin_role

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "CompanyScopeResolver":
        return cls(TreeIndex.build(records))

    def selectable_companies(
            self,
            role: str,
            home_company_id: Optional[int],
            exclude_subtree_of: Optional[int] = None,
    ) -> List[FlatNode]:
        if role == self.superadmin_role:
            companies = self.index.flatten()
        elif not home_company_id or home_company_id not in self.index:
            return []
        else:
            companies = self.index.flatten(start_id=home_company_id)

        if exclude_subtree_of is not None:
            # a company may not sit under itself or its own descendants
            excluded = self.index.descendant_ids(exclude_subtree_of) | {exclude_subtree_of}
            companies = [item for item in companies if item.node_id not in excluded]
        return companies

    def selectable_ids(self, role: str, home_company_id: Optional[int]) -> Set[int]:
        return {item.node_id for item in self.selectable_companies(role, home_company_id)}

    def parent_options(self, company_id: int, role: str, home_company_id: Optional[int]) -> List[FlatNode]:
        return self.selectable_companies(role, home_company_id, exclude_subtree_of=company_id)

    def can_assign(self, role: str, home_company_id: Optional[int], company_id: int) -> bool:
        return company_id in self.selectable_ids(role, home_company_id)

    def validate_parent(
            self,
            company_id: Optional[int],
            parent_id: Optional[int],
            role: Optional[str] = None,
            home_company_id: Optional[int] = None,
    ) -> None:
        """
        Parent choice check for the company edit form.
        With a role, a non-superadmin must also keep the parent inside its own scope.
        """
        scoped = role is not None and role != self.superadmin_role

        if parent_id is None:
            if scoped:
                raise ValidationError("Choose a parent company within your organisation.", field="parent_id")
            return

        if company_id is not None and parent_id == company_id:
            raise ValidationError("A company cannot be its own parent.", field="parent_id")
        if parent_id not in self.index:
            raise ValidationError(f"Parent company {parent_id} does not exist.", field="parent_id")
        if company_id is not None and parent_id in self.index.descendant_ids(company_id):
            raise ValidationError("A company cannot be moved under one of its sub-companies.", field="parent_id")
        if scoped and not self.can_assign(role, home_company_id, parent_id):
            raise ValidationError("Parent company is outside your organisation.", field="parent_id")
