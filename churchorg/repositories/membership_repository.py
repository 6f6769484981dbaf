import logging
import unicodedata
from typing import Any, Callable, List, Optional

from churchorg.data.base import StoreError
from churchorg.messaging.base import ChangeFeed, Subscription
from churchorg.models import Membership, UnitMember
from churchorg.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = "position, member:members(id, name, phone, role)"


def name_sort_key(name: Optional[str]) -> str:
    """Precomposed Hangul syllables sort in dictionary (가나다) order by code point."""
    return unicodedata.normalize('NFC', name or '').casefold()


class MembershipRepository(BaseRepository):
    def __init__(self, adapter, change_feed: Optional[ChangeFeed] = None):
        super().__init__(adapter, Membership, 'memberships')
        self.change_feed = change_feed

    async def list_members_of_unit(self, unit_id: str) -> List[UnitMember]:
        """Members holding an active membership in the unit, sorted by name."""
        rows = await self.adapter.get_many(
            self.table_name,
            {'org_unit_id': unit_id, 'is_active': True},
            columns=ROSTER_COLUMNS,
        )
        members = [UnitMember.from_membership_row(row) for row in rows if row.get('member')]
        return sorted(members, key=lambda m: name_sort_key(m.name))

    async def create_membership(self, member_id: str, unit_id: str, position: Optional[str] = None) -> Membership:
        return await self.create(Membership(member_id=member_id, org_unit_id=unit_id, position=position or None))

    async def update_membership(self, member_id: str, unit_id: str, **fields) -> None:
        await self.update({'member_id': member_id, 'org_unit_id': unit_id}, fields)

    async def delete_membership(self, member_id: str, unit_id: str) -> None:
        """Removes the member from the unit; the member record itself is kept."""
        await self.delete({'member_id': member_id, 'org_unit_id': unit_id})

    async def subscribe_to_membership_changes(self, unit_id: str,
                                              on_change: Callable[[dict], Any]) -> Subscription:
        if self.change_feed is None:
            raise StoreError(f"subscribe to {self.table_name}", "no change feed configured")
        logger.info("Watching memberships of unit %s", unit_id)
        return await self.change_feed.subscribe(self.table_name, on_change, {'org_unit_id': unit_id})

    async def unsubscribe(self, subscription: Subscription) -> None:
        await self.change_feed.unsubscribe(subscription)
