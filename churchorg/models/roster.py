"""
Read models assembled from joined membership rows
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base_model import BaseModel
from .enums import MemberRole


@dataclass(kw_only=True)
class UnitMember(BaseModel):
    """A member as listed on one org unit's roster, carrying that membership's position."""

    name: Optional[str] = None
    phone: Optional[str] = None
    role: MemberRole = MemberRole.MEMBER
    position: Optional[str] = None

    @classmethod
    def from_membership_row(cls, row: Dict[str, Any]) -> "UnitMember":
        """Flatten `{"position": ..., "member": {...}}` into a single roster entry."""
        data = dict(row.get('member') or {})
        data['position'] = row.get('position')
        return cls.from_dict(data)


@dataclass
class Affiliation:
    unit_id: str
    unit_name: str
    unit_type: Optional[str] = None
    position: Optional[str] = None


@dataclass(kw_only=True)
class MemberSearchResult(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    role: MemberRole = MemberRole.MEMBER
    affiliations: List[Affiliation] = field(default_factory=list)

    @classmethod
    def from_search_row(cls, row: Dict[str, Any]) -> "MemberSearchResult":
        result = cls.from_dict({k: v for k, v in row.items() if k != 'memberships'})
        for membership in row.get('memberships') or []:
            unit = membership.get('org_units')
            if not unit:
                # membership pointing at a deleted unit
                continue
            result.affiliations.append(Affiliation(
                unit_id=unit['id'],
                unit_name=unit['name'],
                unit_type=unit.get('type'),
                position=membership.get('position'),
            ))
        return result
