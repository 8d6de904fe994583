# fastener_console/modules/role_menu/editor.py
import hashlib
import logging
from collections import OrderedDict
from typing import Any, Awaitable, Callable, FrozenSet, Optional

from fastener_console.core.config import EDITOR_CONFIG
from fastener_console.core.exceptions import ValidationError
from fastener_console.modules.menu.resolver import MenuAuthorizationResolver

logger = logging.getLogger(__name__)

FetchMenuIds = Callable[[int], Awaitable[FrozenSet[int]]]
CommitMenuIds = Callable[[int, FrozenSet[int]], Awaitable[Any]]


class RoleMenuEditor:
    """
    Editing state for one role's menu assignment at a time.

    Selecting a role drops unsaved edits and loads that role fresh. Each load
    carries a ticket; a response that arrives after a newer selection is
    discarded so it cannot overwrite the newer role's checked set.
    """

    def __init__(self):
        self.role_id: Optional[int] = None
        self.checked: FrozenSet[int] = frozenset()
        self.saved: FrozenSet[int] = frozenset()
        self.loading = False
        self.loaded = False
        self._ticket = 0

    @property
    def dirty(self) -> bool:
        return self.checked != self.saved

    async def select_role(self, role_id: int, fetch: FetchMenuIds) -> bool:
        """Returns False when the response was stale and got discarded"""
        self._ticket += 1
        ticket = self._ticket
        self.role_id = role_id
        self.checked = frozenset()
        self.saved = frozenset()
        self.loading = True
        self.loaded = False

        try:
            menu_ids = await fetch(role_id)
        except Exception:
            if ticket != self._ticket:
                logger.info(f"[ROLE_MENU] Ignoring failed load for role {role_id}, selection moved on")
                return False
            # nothing was loaded, so toggle and save stay blocked
            self.loading = False
            raise

        if ticket != self._ticket:
            logger.info(f"[ROLE_MENU] Discarding stale menus for role {role_id} (now editing role {self.role_id})")
            return False

        self.checked = frozenset(menu_ids)
        self.saved = self.checked
        self.loading = False
        self.loaded = True
        return True

    def toggle(self, menu_id: int, checked: bool) -> FrozenSet[int]:
        self._ensure_ready()
        self.checked = MenuAuthorizationResolver.toggle(self.checked, menu_id, checked)
        return self.checked

    async def save(self, commit: CommitMenuIds) -> FrozenSet[int]:
        """Replace-all commit of the current checked set; a failure leaves the state as it was"""
        self._ensure_ready()
        role_id, state = self.role_id, self.checked
        await commit(role_id, state)
        if self.role_id == role_id:
            self.saved = state
        return state

    def snapshot(self) -> dict:
        return {
            "role_id": self.role_id,
            "checked": sorted(self.checked),
            "dirty": self.dirty,
            "loading": self.loading,
            "loaded": self.loaded,
        }

    def _ensure_ready(self) -> None:
        if self.role_id is None:
            raise ValidationError("Select a role first.", field="role_id")
        if self.loading:
            raise ValidationError("Role menus are still loading.", field="role_id")
        if not self.loaded:
            raise ValidationError("Role menus failed to load, select the role again.", field="role_id")


class RoleMenuEditorRegistry:
    """One editor per session, bounded, least recently used dropped first"""

    def __init__(self, max_size: int = EDITOR_CONFIG.REGISTRY_SIZE):
        self.max_size = max_size
        self._editors: "OrderedDict[str, RoleMenuEditor]" = OrderedDict()

    @staticmethod
    def key_for(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def get(self, token: str) -> RoleMenuEditor:
        key = self.key_for(token)
        editor = self._editors.get(key)
        if editor is None:
            editor = RoleMenuEditor()
            self._editors[key] = editor
            while len(self._editors) > self.max_size:
                self._editors.popitem(last=False)
        else:
            self._editors.move_to_end(key)
        return editor

    def discard(self, token: str) -> None:
        self._editors.pop(self.key_for(token), None)

    def __len__(self) -> int:
        return len(self._editors)


EDITOR_REGISTRY = RoleMenuEditorRegistry()
