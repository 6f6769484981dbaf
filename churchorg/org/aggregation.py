"""
Per-unit statistics derived from membership positions.

Choral units (choirs, praise teams, and committees named after music) are counted
by vocal part; administrative committees are counted by job title. Each table
carries one row per unit plus a grand-total row that is the column-wise sum.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from churchorg.config import DEFAULT_CHORAL_NAME_KEYWORDS
from churchorg.data.base import StoreError
from churchorg.models import OrgUnit, OrgUnitType, UnitMember
from churchorg.org.position import PARTS, parse_position

logger = logging.getLogger(__name__)

ADMINISTRATIVE_JOBS = ("위원장", "부위원장", "부장", "차장", "회계", "서기")


class UnitCategory(str, Enum):
    CHORAL = 'choral'
    ADMINISTRATIVE = 'administrative'

    def __str__(self):
        return str(self.value)

    @property
    def columns(self) -> Tuple[str, ...]:
        return PARTS if self is UnitCategory.CHORAL else ADMINISTRATIVE_JOBS


class AggregationError(Exception):
    """Raised when any unit's member list cannot be fetched; no partial table is produced."""

    def __init__(self, unit: OrgUnit, cause: Exception):
        self.unit = unit
        self.cause = cause
        super().__init__(f"Could not load members of {unit.name!r}: {cause}")


def has_musical_name(name: Optional[str], keywords: Sequence[str] = DEFAULT_CHORAL_NAME_KEYWORDS) -> bool:
    lowered = (name or '').casefold()
    return any(keyword.casefold() in lowered for keyword in keywords)


def classify_unit(unit: OrgUnit, keywords: Sequence[str] = DEFAULT_CHORAL_NAME_KEYWORDS) -> Optional[UnitCategory]:
    if unit.type in (OrgUnitType.CHOIR, OrgUnitType.TEAM):
        return UnitCategory.CHORAL
    if unit.type == OrgUnitType.COMMITTEE:
        if has_musical_name(unit.name, keywords):
            return UnitCategory.CHORAL
        return UnitCategory.ADMINISTRATIVE
    return None


def split_units(units: Iterable[OrgUnit],
                keywords: Sequence[str] = DEFAULT_CHORAL_NAME_KEYWORDS) -> Tuple[List[OrgUnit], List[OrgUnit]]:
    """Returns (choral, administrative) units, each in input order. Other units are dropped."""
    choral, administrative = [], []
    for unit in units:
        category = classify_unit(unit, keywords)
        if category is UnitCategory.CHORAL:
            choral.append(unit)
        elif category is UnitCategory.ADMINISTRATIVE:
            administrative.append(unit)
    return choral, administrative


@dataclass
class StatisticsRow:
    unit_id: Optional[str]
    unit_name: str
    counts: Dict[str, int]
    total: int


@dataclass
class StatisticsTable:
    category: UnitCategory
    rows: List[StatisticsRow] = field(default_factory=list)
    totals: Optional[StatisticsRow] = None

    @property
    def columns(self) -> Tuple[str, ...]:
        return self.category.columns

    def row_for(self, unit_id: str) -> Optional[StatisticsRow]:
        return next((row for row in self.rows if row.unit_id == unit_id), None)


@dataclass
class StatisticsReport:
    choral: StatisticsTable
    administrative: StatisticsTable


def summarize_members(members: Iterable[UnitMember], category: UnitCategory) -> Tuple[Dict[str, int], int]:
    """Counts members per column of the category; returns (counts, total member count)."""
    counts = {column: 0 for column in category.columns}
    total = 0
    for member in members:
        total += 1
        parsed = parse_position(member.position)
        token = parsed.part if category is UnitCategory.CHORAL else parsed.job
        if token in counts:
            counts[token] += 1
    return counts, total


def sum_rows(rows: Iterable[StatisticsRow], category: UnitCategory, label: str = 'Total') -> StatisticsRow:
    totals = StatisticsRow(unit_id=None, unit_name=label, counts={c: 0 for c in category.columns}, total=0)
    for row in rows:
        for column in category.columns:
            totals.counts[column] += row.counts.get(column, 0)
        totals.total += row.total
    return totals


def _raise_first_failure(results: Sequence):
    for result in results:
        if isinstance(result, Exception):
            raise result


class Aggregator:
    """Fetches every unit's roster concurrently and reduces it into a StatisticsTable."""

    def __init__(self, repository):
        self.repository = repository

    async def _load_members(self, unit: OrgUnit) -> List[UnitMember]:
        try:
            return await self.repository.list_members_of_unit(unit.entity_id)
        except Exception as e:
            raise AggregationError(unit, e) from e

    async def aggregate(self, units: Sequence[OrgUnit], category: UnitCategory) -> StatisticsTable:
        """Waits for every unit's fetch; if any failed, raises the first failure in unit order."""
        rosters = await asyncio.gather(*(self._load_members(unit) for unit in units), return_exceptions=True)
        _raise_first_failure(rosters)

        table = StatisticsTable(category=category)
        for unit, members in zip(units, rosters):
            counts, total = summarize_members(members, category)
            table.rows.append(StatisticsRow(unit.entity_id, unit.display_name, counts, total))
        table.totals = sum_rows(table.rows, category)
        return table

    async def collect(self, keywords: Sequence[str] = DEFAULT_CHORAL_NAME_KEYWORDS) -> StatisticsReport:
        """Loads all units, splits them by category and aggregates both categories concurrently."""
        units = await self.repository.list_org_units()
        choral, administrative = split_units(units, keywords)
        tables = await asyncio.gather(
            self.aggregate(choral, UnitCategory.CHORAL),
            self.aggregate(administrative, UnitCategory.ADMINISTRATIVE),
            return_exceptions=True,
        )
        _raise_first_failure(tables)
        choral_table, administrative_table = tables
        logger.info("Aggregated %d choral and %d administrative units", len(choral), len(administrative))
        return StatisticsReport(choral=choral_table, administrative=administrative_table)


class StatisticsBoard:
    """State of the statistics view: a complete report, or a generic error."""

    def __init__(self, repository, keywords: Sequence[str] = DEFAULT_CHORAL_NAME_KEYWORDS):
        self.aggregator = Aggregator(repository)
        self.keywords = tuple(keywords)
        self.loading = False
        self.report: Optional[StatisticsReport] = None
        self.error: Optional[str] = None

    async def refresh(self) -> bool:
        self.loading = True
        try:
            self.report = await self.aggregator.collect(self.keywords)
            self.error = None
            return True
        except (AggregationError, StoreError) as e:
            logger.error("Statistics could not be loaded: %s", e)
            self.report = None
            self.error = "Statistics could not be loaded."
            return False
        finally:
            self.loading = False
