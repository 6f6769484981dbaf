"""
Models for churchorg
"""

from .base_model import BaseModel, ModelValidationError
from .enums import AttendanceStatus, MemberRole, OrgUnitType
from .org_unit import OrgUnit
from .member import Member
from .membership import Membership
from .attendance import AttendanceRecord
from .roster import Affiliation, MemberSearchResult, UnitMember
