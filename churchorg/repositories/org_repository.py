"""
Org repository: the single entry point the chart and roster views talk to.
"""
import logging
from typing import Any, Callable, List, Optional

from churchorg.data.base import StoreAdapter
from churchorg.data.supabase import SupabaseAdapter, create_supabase_client
from churchorg.messaging.base import ChangeFeed, Subscription
from churchorg.messaging.supabase_realtime import SupabaseChangeFeed
from churchorg.models import AttendanceRecord, Member, MemberSearchResult, OrgUnit, OrgUnitType, UnitMember
from churchorg.repositories.attendance_repository import AttendanceRepository
from churchorg.repositories.member_repository import MemberRepository
from churchorg.repositories.membership_repository import MembershipRepository
from churchorg.repositories.org_unit_repository import OrgUnitRepository

logger = logging.getLogger(__name__)


class OrgRepository:
    """
    Groups the table repositories behind the operations the org chart needs.

    Multi-step operations are sequential independent writes with no rollback.
    """

    def __init__(self, adapter: StoreAdapter, change_feed: Optional[ChangeFeed] = None):
        self.org_units = OrgUnitRepository(adapter)
        self.members = MemberRepository(adapter)
        self.memberships = MembershipRepository(adapter, change_feed)
        self.attendance = AttendanceRepository(adapter)

    @classmethod
    async def connect(cls, config) -> "OrgRepository":
        """Builds a repository over the Supabase project named by a StoreConfig."""
        config.validate_env_vars()
        client = await create_supabase_client(config)
        return cls(SupabaseAdapter(client), SupabaseChangeFeed(client))

    async def list_org_units(self) -> List[OrgUnit]:
        return await self.org_units.list_org_units()

    async def list_org_units_by_type(self, unit_type: OrgUnitType) -> List[OrgUnit]:
        return await self.org_units.list_org_units_by_type(unit_type)

    async def count_org_units(self) -> int:
        return await self.org_units.count_org_units()

    async def list_members_of_unit(self, unit_id: str) -> List[UnitMember]:
        return await self.memberships.list_members_of_unit(unit_id)

    async def create_org_unit(self, name: str, unit_type: OrgUnitType, parent_id: Optional[str],
                              sort_order: Optional[int] = None) -> OrgUnit:
        return await self.org_units.create_org_unit(name, unit_type, parent_id, sort_order)

    async def update_org_unit(self, unit_id: str, **fields) -> None:
        await self.org_units.update_org_unit(unit_id, **fields)

    async def delete_org_unit(self, unit_id: str) -> None:
        await self.org_units.delete_org_unit(unit_id)

    async def create_member(self, name: str, phone: Optional[str] = None) -> Member:
        return await self.members.create_member(name, phone)

    async def create_membership(self, member_id: str, unit_id: str, position: Optional[str] = None):
        return await self.memberships.create_membership(member_id, unit_id, position)

    async def update_member(self, member_id: str, **fields) -> None:
        await self.members.update_member(member_id, **fields)

    async def update_membership(self, member_id: str, unit_id: str, **fields) -> None:
        await self.memberships.update_membership(member_id, unit_id, **fields)

    async def delete_membership(self, member_id: str, unit_id: str) -> None:
        await self.memberships.delete_membership(member_id, unit_id)

    async def search_members_by_name(self, query: str) -> List[MemberSearchResult]:
        return await self.members.search_members_by_name(query)

    async def subscribe_to_membership_changes(self, unit_id: str,
                                              on_change: Callable[[dict], Any]) -> Subscription:
        return await self.memberships.subscribe_to_membership_changes(unit_id, on_change)

    async def unsubscribe(self, subscription: Subscription) -> None:
        await self.memberships.unsubscribe(subscription)

    async def add_member_to_unit(self, unit_id: str, name: str, phone: Optional[str] = None,
                                 position: Optional[str] = None) -> Member:
        """
        Creates a member, then links it to the unit.

        If the membership write fails the member record stays behind without a
        membership; the error still propagates to the caller.
        """
        member = await self.members.create_member(name, phone)
        try:
            await self.memberships.create_membership(member.entity_id, unit_id, position)
        except Exception:
            logger.error("Member %s was created but could not be linked to unit %s", member.entity_id, unit_id)
            raise
        return member

    async def update_member_in_unit(self, unit_id: str, member_id: str, name: str,
                                    phone: Optional[str] = None, position: Optional[str] = None) -> None:
        """Updates the member's name and phone, then the position of its membership in the unit."""
        Member(name=name).validate()
        await self.members.update_member(member_id, name=name, phone=phone or None)
        await self.memberships.update_membership(member_id, unit_id, position=position or None)

    async def remove_member_from_unit(self, unit_id: str, member_id: str) -> None:
        await self.memberships.delete_membership(member_id, unit_id)

    async def get_attendance_by_date(self, unit_id: str, date: str) -> List[AttendanceRecord]:
        return await self.attendance.get_attendance_by_date(unit_id, date)

    async def upsert_attendance(self, record: AttendanceRecord) -> None:
        await self.attendance.upsert_attendance(record)
