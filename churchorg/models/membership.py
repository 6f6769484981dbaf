"""
Membership model
"""

from dataclasses import dataclass, field
from typing import Optional

from .base_model import BaseModel


@dataclass(kw_only=True)
class Membership(BaseModel):
    """Links a Member to an OrgUnit with a free-text position such as "소프라노 위원장"."""

    member_id: Optional[str] = None
    org_unit_id: Optional[str] = None
    position: Optional[str] = None
    active: bool = field(default=True, metadata={'alias': 'is_active'})

    def validate_member_id(self):
        if not self.member_id:
            return "Membership requires a member."
        return None

    def validate_org_unit_id(self):
        if not self.org_unit_id:
            return "Membership requires an organization."
        return None
