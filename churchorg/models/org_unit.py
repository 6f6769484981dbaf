"""
OrgUnit model
"""

import re
from dataclasses import dataclass
from typing import Optional

from .base_model import BaseModel
from .enums import OrgUnitType

_ALIAS_PATTERN = re.compile(r'.*\((.*)\)')


@dataclass(kw_only=True)
class OrgUnit(BaseModel):
    """A node of the organization chart."""

    name: Optional[str] = None
    type: OrgUnitType = OrgUnitType.DEPARTMENT
    parent_id: Optional[str] = None
    sort_order: Optional[int] = None
    leader_member_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        """`"Gloria (글로리아)"` displays as `"글로리아"`; names without an alias display unchanged."""
        if not self.name:
            return ''
        return _ALIAS_PATTERN.sub(r'\1', self.name)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def validate_name(self):
        if not self.name or not self.name.strip():
            return "Organization name is required."
        return None

    def validate_type(self):
        if not isinstance(self.type, OrgUnitType):
            return f"Unknown organization type: {self.type!r}."
        return None
