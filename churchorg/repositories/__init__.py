from .base_repository import BaseRepository
from .org_unit_repository import OrgUnitRepository
from .member_repository import MemberRepository
from .membership_repository import MembershipRepository
from .attendance_repository import AttendanceRepository
from .org_repository import OrgRepository
