from typing import List

from churchorg.models import AttendanceRecord
from churchorg.repositories.base_repository import BaseRepository


class AttendanceRepository(BaseRepository):
    def __init__(self, adapter):
        super().__init__(adapter, AttendanceRecord, 'attendance')

    async def get_attendance_by_date(self, unit_id: str, date: str) -> List[AttendanceRecord]:
        return await self.get_many({'org_unit_id': unit_id, 'date': date})

    async def upsert_attendance(self, record: AttendanceRecord) -> None:
        """
        One record per (unit, member, date): updates status and note of an existing
        record, inserts otherwise.
        """
        existing = await self.get_one({
            'org_unit_id': record.org_unit_id,
            'member_id': record.member_id,
            'date': record.date,
        })
        if existing:
            await self.update({'id': existing.entity_id}, {'status': record.status.value, 'note': record.note})
        else:
            await self.create(record)
