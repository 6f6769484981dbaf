from enum import Enum


class OrgUnitType(str, Enum):
    ROOT = 'root'
    COMMITTEE = 'committee'
    DEPARTMENT = 'department'
    TEAM = 'team'
    CHOIR = 'choir'

    def __str__(self):
        return str(self.value)


class MemberRole(str, Enum):
    MEMBER = 'member'
    LEADER = 'leader'
    ADMIN = 'admin'

    def __str__(self):
        return str(self.value)


class AttendanceStatus(str, Enum):
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'

    def __str__(self):
        return str(self.value)
