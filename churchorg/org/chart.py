"""
Org chart session: the forest, the selection and the write-then-reload protocol.

Every structural write goes to the store first; only after it succeeds is the
whole forest fetched and rebuilt. A failed write leaves the forest as it was.
"""
import logging
from typing import Callable, Dict, Optional

from churchorg.data.base import StoreError
from churchorg.models import ModelValidationError, OrgUnit, OrgUnitType
from churchorg.org.tree import OrgForest, build_forest, find_unit

logger = logging.getLogger(__name__)

CHILD_TYPES = {
    OrgUnitType.ROOT: OrgUnitType.COMMITTEE,
    OrgUnitType.COMMITTEE: OrgUnitType.DEPARTMENT,
    OrgUnitType.DEPARTMENT: OrgUnitType.TEAM,
}


def infer_child_type(parent: Optional[OrgUnit]) -> OrgUnitType:
    """root -> committee -> department -> team; anything else gets a department."""
    if parent is None:
        return OrgUnitType.DEPARTMENT
    return CHILD_TYPES.get(parent.type, OrgUnitType.DEPARTMENT)


class OrgChartSession:
    """
    View-local state of the org chart.

    Args:
        repository: An OrgRepository (or anything with the same coroutines).
        notify: Called with a user-facing message when an action fails.
    """

    def __init__(self, repository, notify: Optional[Callable[[str], None]] = None):
        self.repository = repository
        self.notify = notify or (lambda message: None)
        self.forest: Optional[OrgForest] = None
        self.loading = False
        self.selected_id: Optional[str] = None
        self.pending_unit_id: Optional[str] = None
        self._expanded: Dict[str, bool] = {}

    @property
    def loaded(self) -> bool:
        return self.forest is not None

    @property
    def selected_unit(self) -> Optional[OrgUnit]:
        return find_unit(self.forest, self.selected_id)

    def find(self, unit_id: str) -> Optional[OrgUnit]:
        return find_unit(self.forest, unit_id)

    async def load_tree(self) -> bool:
        """Fetches every unit and rebuilds the forest; on failure the previous forest stays."""
        self.loading = True
        try:
            units = await self.repository.list_org_units()
        except StoreError as e:
            logger.error("Org tree could not be loaded: %s", e)
            return False
        finally:
            self.loading = False

        self.forest = build_forest(units)
        logger.info("Org tree loaded with %d units", len(self.forest))
        self._resolve_pending_deep_link()
        if self.selected_id is not None and self.selected_id not in self.forest:
            logger.info("Selected unit %s is gone; clearing selection.", self.selected_id)
            self.selected_id = None
        return True

    # Selection and deep links

    def select(self, unit_id: Optional[str]) -> Optional[OrgUnit]:
        unit = find_unit(self.forest, unit_id)
        self.selected_id = unit.entity_id if unit else None
        return unit

    def deselect(self):
        self.selected_id = None

    def open_deep_link(self, unit_id: str) -> Optional[OrgUnit]:
        """
        Selects and reveals a unit named by a link. Before the first load the
        request is kept and retried once after the next successful load.
        An unknown id is ignored.
        """
        if not unit_id:
            return None
        if not self.loaded:
            self.pending_unit_id = unit_id
            return None
        unit = find_unit(self.forest, unit_id)
        if unit is None:
            logger.info("Deep link to unknown unit %s ignored.", unit_id)
            return None
        self.selected_id = unit.entity_id
        self._reveal(unit.entity_id)
        return unit

    def _resolve_pending_deep_link(self):
        unit_id, self.pending_unit_id = self.pending_unit_id, None
        if unit_id:
            self.open_deep_link(unit_id)

    # Expand / collapse

    def is_expanded(self, unit_id: str) -> bool:
        return self._expanded.get(unit_id, True)

    def toggle(self, unit_id: str) -> bool:
        self._expanded[unit_id] = not self.is_expanded(unit_id)
        return self._expanded[unit_id]

    def expand(self, unit_id: str):
        self._expanded[unit_id] = True

    def _reveal(self, unit_id: str):
        """Expands every ancestor of the unit."""
        parent_id = self.forest.units[unit_id].parent_id
        while parent_id is not None and parent_id in self.forest.units:
            self.expand(parent_id)
            parent_id = self.forest.units[parent_id].parent_id

    # Writes

    async def _write(self, action: str, operation) -> bool:
        try:
            await operation
        except StoreError as e:
            logger.error("%s failed: %s", action, e)
            self.notify(f"{action} failed: {e.message}")
            return False
        await self.load_tree()
        return True

    def _reject(self, action: str, reason: str) -> bool:
        logger.warning("%s rejected: %s", action, reason)
        self.notify(f"{action} failed: {reason}")
        return False

    @staticmethod
    def _check_name(name: Optional[str], unit_type: OrgUnitType):
        OrgUnit(name=name, type=unit_type).validate()

    async def add_root(self, name: str) -> bool:
        try:
            self._check_name(name, OrgUnitType.ROOT)
        except ModelValidationError as e:
            return self._reject("Creation", str(e))
        return await self._write(
            "Creation", self.repository.create_org_unit(name.strip(), OrgUnitType.ROOT, None))

    async def add_child(self, parent_id: str, name: str, unit_type: Optional[OrgUnitType] = None) -> bool:
        parent = find_unit(self.forest, parent_id)
        if parent is None:
            return self._reject("Creation", f"unknown parent {parent_id}")
        unit_type = OrgUnitType(unit_type) if unit_type else infer_child_type(parent)
        try:
            self._check_name(name, unit_type)
        except ModelValidationError as e:
            return self._reject("Creation", str(e))

        created = await self._write(
            "Creation", self.repository.create_org_unit(name.strip(), unit_type, parent_id))
        if created:
            self.expand(parent_id)
        return created

    async def rename_unit(self, unit_id: str, name: str) -> bool:
        unit = find_unit(self.forest, unit_id)
        try:
            self._check_name(name, unit.type if unit else OrgUnitType.DEPARTMENT)
        except ModelValidationError as e:
            return self._reject("Update", str(e))
        return await self._write("Update", self.repository.update_org_unit(unit_id, name=name.strip()))

    async def retype_unit(self, unit_id: str, unit_type) -> bool:
        try:
            unit_type = OrgUnitType(unit_type)
        except ValueError:
            return self._reject("Update", f"unknown type {unit_type!r}")
        return await self._write("Update", self.repository.update_org_unit(unit_id, unit_type=unit_type))

    async def move_unit(self, unit_id: str, new_parent_id: Optional[str]) -> bool:
        """Re-parents a unit; `None` makes it top-level. A unit cannot move under itself or its subtree."""
        if self.forest is not None and new_parent_id is not None:
            if new_parent_id == unit_id or new_parent_id in self.forest.descendant_ids(unit_id):
                return self._reject("Move", "a unit cannot be moved under itself")
            if new_parent_id not in self.forest.units:
                return self._reject("Move", f"unknown parent {new_parent_id}")
        moved = await self._write("Move", self.repository.update_org_unit(unit_id, parent_id=new_parent_id))
        if moved and new_parent_id is not None:
            self.expand(new_parent_id)
        return moved

    async def delete_unit(self, unit_id: str) -> bool:
        """Deletes one unit; its children are not touched and may resurface as roots."""
        try:
            await self.repository.delete_org_unit(unit_id)
        except StoreError as e:
            logger.error("Deletion failed: %s", e)
            self.notify(f"Deletion failed: {e.message}")
            return False
        if self.selected_id == unit_id:
            self.deselect()
        self._expanded.pop(unit_id, None)
        await self.load_tree()
        return True
