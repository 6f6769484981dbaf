"""
Roster of one org unit, kept fresh by realtime membership notifications.
"""
import asyncio
import logging
from typing import Callable, Dict, List, Optional, Set

from churchorg.data.base import StoreError
from churchorg.messaging.base import Subscription
from churchorg.models import Member, ModelValidationError, OrgUnit, UnitMember
from churchorg.org.aggregation import UnitCategory, classify_unit, summarize_members
from churchorg.org.position import ParsedPosition, format_position, parse_position

logger = logging.getLogger(__name__)


class UnitDetailView:
    """
    Members of the unit currently shown in the detail panel.

    While a unit is open, any insert/update/delete of its memberships, by this
    client or another one, triggers a full re-fetch of the roster. Opening another
    unit (or closing) tears the previous subscription down first.
    """

    def __init__(self, repository, notify: Optional[Callable[[str], None]] = None):
        self.repository = repository
        self.notify = notify or (lambda message: None)
        self.unit: Optional[OrgUnit] = None
        self.members: List[UnitMember] = []
        self.loading = False
        self._subscription: Optional[Subscription] = None
        self._refreshes: Set[asyncio.Task] = set()

    @property
    def unit_id(self) -> Optional[str]:
        return self.unit.entity_id if self.unit else None

    async def open(self, unit: OrgUnit):
        """
        Shows `unit`. If another open or a close happens while this one is still
        awaiting the store, the later call wins and this one leaves no subscription behind.
        """
        await self._unsubscribe()
        self.unit = unit
        self.members = []
        await self.load_members()
        if self.unit is not unit:
            return
        try:
            subscription = await self.repository.subscribe_to_membership_changes(
                unit.entity_id, self._on_membership_change)
        except StoreError as e:
            logger.error("Live updates for unit %s unavailable: %s", unit.entity_id, e)
            return

        if self.unit is not unit:
            logger.info("Unit %s is no longer shown; dropping its subscription.", unit.entity_id)
            await self.repository.unsubscribe(subscription)
            return
        await self._unsubscribe()
        self._subscription = subscription

    async def close(self):
        await self._unsubscribe()
        self.unit = None
        self.members = []

    async def _unsubscribe(self):
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await self.repository.unsubscribe(subscription)

    def _on_membership_change(self, payload: Dict):
        """Realtime callback; runs on the event loop and schedules a roster reload."""
        task = asyncio.get_running_loop().create_task(self.load_members())
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    async def load_members(self) -> bool:
        unit_id = self.unit_id
        if unit_id is None:
            return False
        self.loading = True
        try:
            members = await self.repository.list_members_of_unit(unit_id)
        except StoreError as e:
            logger.error("Members of unit %s could not be loaded: %s", unit_id, e)
            return False
        finally:
            self.loading = False

        if unit_id != self.unit_id:
            logger.info("Discarding roster of unit %s; the view moved on.", unit_id)
            return False
        self.members = members
        return True

    def edit_fields(self, member: UnitMember) -> ParsedPosition:
        """Splits the member's position back into the part and job inputs of the edit form."""
        return parse_position(member.position)

    def summary(self) -> Dict[str, int]:
        """Part counts for choral units, job counts for committees; empty for other units."""
        category = classify_unit(self.unit) if self.unit else None
        if category is None:
            return {}
        counts, total = summarize_members(self.members, category)
        if category is UnitCategory.ADMINISTRATIVE:
            counts = {job: count for job, count in counts.items() if count}
        counts['total'] = total
        return counts

    def _reject(self, action: str, reason) -> bool:
        logger.warning("%s rejected: %s", action, reason)
        self.notify(f"{action} failed: {reason}")
        return False

    def _check_member(self, action: str, name: Optional[str]) -> bool:
        """A unit must be open and the name non-blank before anything is written."""
        if self.unit_id is None:
            return self._reject(action, "no unit selected")
        try:
            Member(name=name).validate()
        except ModelValidationError as e:
            return self._reject(action, e)
        return True

    async def _write(self, action: str, operation) -> bool:
        try:
            await operation
        except StoreError as e:
            logger.error("%s failed for unit %s: %s", action, self.unit_id, e)
            self.notify(f"{action} failed: {e.message}")
            return False
        await self.load_members()
        return True

    async def add_member(self, name: str, phone: Optional[str] = None,
                         part: str = '', job: str = '') -> bool:
        if not self._check_member("Registration", name):
            return False
        return await self._write("Registration", self.repository.add_member_to_unit(
            self.unit_id, name.strip(), phone, format_position(part, job)))

    async def update_member(self, member_id: str, name: str, phone: Optional[str] = None,
                            part: str = '', job: str = '') -> bool:
        if not self._check_member("Update", name):
            return False
        return await self._write("Update", self.repository.update_member_in_unit(
            self.unit_id, member_id, name.strip(), phone, format_position(part, job)))

    async def remove_member(self, member_id: str) -> bool:
        """Removes the membership only; the member stays on the church roster."""
        if self.unit_id is None:
            return self._reject("Deletion", "no unit selected")
        return await self._write("Deletion", self.repository.remove_member_from_unit(self.unit_id, member_id))
