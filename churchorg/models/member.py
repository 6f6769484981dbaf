"""
Member model
"""

from dataclasses import dataclass, field
from typing import Optional

from .base_model import BaseModel
from .enums import MemberRole


@dataclass(kw_only=True)
class Member(BaseModel):
    """A person on the church roster, independent of any org unit."""

    name: Optional[str] = None
    phone: Optional[str] = None
    role: MemberRole = MemberRole.MEMBER
    role_title: Optional[str] = None
    # Free text, e.g. "3월 14일"; never parsed as a date.
    birthday: Optional[str] = None
    active: bool = field(default=True, metadata={'alias': 'is_active'})

    def validate_name(self):
        if not self.name or not self.name.strip():
            return "Member name is required."
        return None
