"""
Shared fixtures: org unit factories and a mocked OrgRepository.
"""
import pytest

from churchorg.models import OrgUnit, OrgUnitType, UnitMember
from churchorg.repositories import OrgRepository


def unit(entity_id, parent_id=None, unit_type=OrgUnitType.DEPARTMENT, name=None, sort_order=None):
    return OrgUnit(
        entity_id=entity_id,
        name=name or entity_id,
        type=OrgUnitType(unit_type),
        parent_id=parent_id,
        sort_order=sort_order,
    )


def roster(*positions):
    return [
        UnitMember(entity_id=f"m{i}", name=f"member {i}", position=position)
        for i, position in enumerate(positions)
    ]


@pytest.fixture
def sample_units():
    """
    r
    ├── c1 (choir)
    │   └── c1a
    └── c2 (choir)
    """
    return [
        unit("r", None, OrgUnitType.ROOT, sort_order=0),
        unit("c1", "r", OrgUnitType.CHOIR, sort_order=1),
        unit("c2", "r", OrgUnitType.CHOIR, sort_order=2),
        unit("c1a", "c1", OrgUnitType.TEAM, sort_order=3),
    ]


@pytest.fixture
def mock_repository(mocker):
    """OrgRepository double; every coroutine is an AsyncMock."""
    return mocker.Mock(spec=OrgRepository)
