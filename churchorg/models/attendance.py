"""
AttendanceRecord model
"""

from dataclasses import dataclass
from typing import Optional

from .base_model import BaseModel
from .enums import AttendanceStatus


@dataclass(kw_only=True)
class AttendanceRecord(BaseModel):
    """Attendance of one member of one org unit on one date (ISO `YYYY-MM-DD`)."""

    org_unit_id: Optional[str] = None
    member_id: Optional[str] = None
    date: Optional[str] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    note: Optional[str] = None
