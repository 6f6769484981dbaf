from typing import List, Optional

from churchorg.models import Member, MemberRole, MemberSearchResult
from churchorg.repositories.base_repository import BaseRepository

SEARCH_COLUMNS = "id, name, phone, role, memberships(position, org_units(id, name, type))"


class MemberRepository(BaseRepository):
    def __init__(self, adapter):
        super().__init__(adapter, Member, 'members')

    async def create_member(self, name: str, phone: Optional[str] = None,
                            role: MemberRole = MemberRole.MEMBER) -> Member:
        return await self.create(Member(name=name, phone=phone or None, role=role))

    async def update_member(self, member_id: str, **fields) -> None:
        """Updates member columns, e.g. `update_member(id, name="...", phone="...")`."""
        if 'role' in fields:
            fields['role'] = MemberRole(fields['role']).value
        await self.update({'id': member_id}, fields)

    async def search_members_by_name(self, query: str, limit: int = 10) -> List[MemberSearchResult]:
        """Case-insensitive partial name match, each hit listing the units the member belongs to."""
        if not query:
            return []
        rows = await self.adapter.get_many(
            self.table_name,
            columns=SEARCH_COLUMNS,
            like={'name': f'%{query}%'},
            limit=limit,
        )
        return [MemberSearchResult.from_search_row(row) for row in rows]
