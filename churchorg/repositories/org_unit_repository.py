from typing import List, Optional

from churchorg.models import OrgUnit, OrgUnitType
from churchorg.repositories.base_repository import BaseRepository

_UNCHANGED = object()


class OrgUnitRepository(BaseRepository):
    def __init__(self, adapter):
        super().__init__(adapter, OrgUnit, 'org_units')

    async def list_org_units(self) -> List[OrgUnit]:
        """All units ordered by sort order ascending, each with its parent id and type."""
        return await self.get_many(sort=[('sort_order', 'ASC')])

    async def list_org_units_by_type(self, unit_type: OrgUnitType) -> List[OrgUnit]:
        return await self.get_many({'type': OrgUnitType(unit_type).value}, sort=[('sort_order', 'ASC')])

    async def count_org_units(self) -> int:
        return await self.get_count()

    async def create_org_unit(self, name: str, unit_type: OrgUnitType, parent_id: Optional[str],
                              sort_order: Optional[int] = None) -> OrgUnit:
        unit = OrgUnit(name=name, type=OrgUnitType(unit_type), parent_id=parent_id, sort_order=sort_order)
        return await self.create(unit)

    async def update_org_unit(self, unit_id: str, name: Optional[str] = None,
                              unit_type: Optional[OrgUnitType] = None, parent_id=_UNCHANGED) -> None:
        """
        Renames, retypes or moves a unit. Pass `parent_id=None` to make it a top-level unit.
        """
        fields = {}
        if name is not None:
            fields['name'] = name
        if unit_type is not None:
            fields['type'] = OrgUnitType(unit_type).value
        if parent_id is not _UNCHANGED:
            fields['parent_id'] = parent_id
        if not fields:
            return
        await self.update({'id': unit_id}, fields)

    async def delete_org_unit(self, unit_id: str) -> None:
        """
        Deletes one unit. Children are left in place: they keep pointing at the
        removed parent unless the store cascades.
        """
        await self.delete({'id': unit_id})
