"""
Tests for unit classification and statistics aggregation
"""
import asyncio

import pytest

from churchorg.data.base import StoreError
from churchorg.models import OrgUnitType
from churchorg.org.aggregation import (
    ADMINISTRATIVE_JOBS,
    AggregationError,
    Aggregator,
    StatisticsBoard,
    UnitCategory,
    classify_unit,
    split_units,
    summarize_members,
)

from conftest import roster, unit


class TestClassification:
    @pytest.mark.parametrize("unit_type", [OrgUnitType.CHOIR, OrgUnitType.TEAM])
    def test_choirs_and_teams_are_choral(self, unit_type):
        assert classify_unit(unit("u", unit_type=unit_type)) is UnitCategory.CHORAL

    def test_musical_committee_is_choral(self):
        committee = unit("u", unit_type=OrgUnitType.COMMITTEE, name="찬양위원회")
        assert classify_unit(committee) is UnitCategory.CHORAL

    def test_keyword_match_ignores_case(self):
        committee = unit("u", unit_type=OrgUnitType.COMMITTEE, name="Praise Committee")
        assert classify_unit(committee) is UnitCategory.CHORAL

    def test_other_committee_is_administrative(self):
        committee = unit("u", unit_type=OrgUnitType.COMMITTEE, name="재정위원회")
        assert classify_unit(committee) is UnitCategory.ADMINISTRATIVE

    def test_custom_keywords(self):
        committee = unit("u", unit_type=OrgUnitType.COMMITTEE, name="음악위원회")
        assert classify_unit(committee, keywords=("음악",)) is UnitCategory.CHORAL

    @pytest.mark.parametrize("unit_type", [OrgUnitType.ROOT, OrgUnitType.DEPARTMENT])
    def test_other_types_are_not_counted(self, unit_type):
        assert classify_unit(unit("u", unit_type=unit_type)) is None

    def test_split_units_keeps_order(self):
        units = [
            unit("root", unit_type=OrgUnitType.ROOT),
            unit("admin1", unit_type=OrgUnitType.COMMITTEE, name="교육위원회"),
            unit("choir1", unit_type=OrgUnitType.CHOIR),
            unit("admin2", unit_type=OrgUnitType.COMMITTEE, name="재정위원회"),
            unit("team1", unit_type=OrgUnitType.TEAM),
        ]
        choral, administrative = split_units(units)

        assert [u.entity_id for u in choral] == ["choir1", "team1"]
        assert [u.entity_id for u in administrative] == ["admin1", "admin2"]


class TestSummarizeMembers:
    def test_choral_counts_parts(self):
        counts, total = summarize_members(roster("소프라노", "소프라노 총무", "알토", "Singer", None),
                                          UnitCategory.CHORAL)

        assert counts == {"소프라노": 2, "알토": 1, "테너": 0, "베이스": 0}
        assert total == 5

    def test_administrative_counts_jobs(self):
        counts, total = summarize_members(roster("위원장", "부위원장", "부장", "대원", "회계"),
                                          UnitCategory.ADMINISTRATIVE)

        assert list(counts) == list(ADMINISTRATIVE_JOBS)
        assert counts["위원장"] == 1
        assert counts["부위원장"] == 1
        assert counts["회계"] == 1
        assert counts["서기"] == 0
        assert total == 5


class TestAggregator:
    def test_choir_scenario(self, mock_repository):
        """
        Two sopranos and one alto in c1 count as {2, 1, 0, 0} with a total of 3.
        """
        rosters = {"c1": roster("소프라노", "소프라노", "알토"), "c2": roster("베이스")}
        mock_repository.list_members_of_unit.side_effect = lambda unit_id: rosters[unit_id]
        units = [unit("c1", "r", OrgUnitType.CHOIR), unit("c2", "r", OrgUnitType.CHOIR)]

        table = asyncio.run(Aggregator(mock_repository).aggregate(units, UnitCategory.CHORAL))

        row = table.row_for("c1")
        assert row.counts == {"소프라노": 2, "알토": 1, "테너": 0, "베이스": 0}
        assert row.total == 3
        assert [r.unit_id for r in table.rows] == ["c1", "c2"]

    def test_grand_total_is_column_sum(self, mock_repository):
        rosters = {
            "a": roster("소프라노", "테너", "테너"),
            "b": roster("알토", "베이스", "소프라노 대장"),
            "c": roster(),
        }
        mock_repository.list_members_of_unit.side_effect = lambda unit_id: rosters[unit_id]
        units = [unit(u, unit_type=OrgUnitType.TEAM) for u in rosters]

        table = asyncio.run(Aggregator(mock_repository).aggregate(units, UnitCategory.CHORAL))

        for column in table.columns:
            assert table.totals.counts[column] == sum(r.counts[column] for r in table.rows)
        assert table.totals.total == sum(r.total for r in table.rows) == 6

    def test_fetches_every_unit(self, mock_repository):
        mock_repository.list_members_of_unit.return_value = []
        units = [unit(f"u{i}", unit_type=OrgUnitType.CHOIR) for i in range(5)]

        asyncio.run(Aggregator(mock_repository).aggregate(units, UnitCategory.CHORAL))

        fetched = sorted(c.args[0] for c in mock_repository.list_members_of_unit.call_args_list)
        assert fetched == [f"u{i}" for i in range(5)]

    def test_idempotent(self, mock_repository):
        rosters = {"a": roster("위원장", "서기"), "b": roster("부위원장", "부장", "부장")}
        mock_repository.list_members_of_unit.side_effect = lambda unit_id: rosters[unit_id]
        units = [unit(u, unit_type=OrgUnitType.COMMITTEE) for u in rosters]
        aggregator = Aggregator(mock_repository)

        first = asyncio.run(aggregator.aggregate(units, UnitCategory.ADMINISTRATIVE))
        second = asyncio.run(aggregator.aggregate(units, UnitCategory.ADMINISTRATIVE))

        assert first == second
        assert first.totals.counts["부장"] == 2

    def test_single_failure_fails_whole_aggregation(self, mock_repository):
        def members(unit_id):
            if unit_id == "bad":
                raise StoreError("select from memberships", "timeout")
            return roster("알토")

        mock_repository.list_members_of_unit.side_effect = members
        units = [unit("ok", unit_type=OrgUnitType.CHOIR), unit("bad", unit_type=OrgUnitType.CHOIR)]

        with pytest.raises(AggregationError) as exc_info:
            asyncio.run(Aggregator(mock_repository).aggregate(units, UnitCategory.CHORAL))
        assert exc_info.value.unit.entity_id == "bad"

    def test_failure_raised_after_every_fetch_settles(self, mock_repository):
        """
        Test that slower fetches still finish and the first failing unit in order is reported
        """
        finished = []

        async def members(unit_id):
            if unit_id.startswith("bad"):
                raise StoreError("select from memberships", f"{unit_id} timed out")
            await asyncio.sleep(0.01)
            finished.append(unit_id)
            return roster("알토")

        mock_repository.list_members_of_unit.side_effect = members
        units = [unit(u, unit_type=OrgUnitType.CHOIR) for u in ("bad1", "slow", "bad2")]

        with pytest.raises(AggregationError) as exc_info:
            asyncio.run(Aggregator(mock_repository).aggregate(units, UnitCategory.CHORAL))

        assert exc_info.value.unit.entity_id == "bad1"
        assert finished == ["slow"]
        assert mock_repository.list_members_of_unit.await_count == 3

    def test_empty_category(self, mock_repository):
        table = asyncio.run(Aggregator(mock_repository).aggregate([], UnitCategory.ADMINISTRATIVE))

        assert table.rows == []
        assert table.totals.total == 0
        mock_repository.list_members_of_unit.assert_not_called()

    def test_collect_splits_categories(self, mock_repository):
        mock_repository.list_org_units.return_value = [
            unit("r", unit_type=OrgUnitType.ROOT),
            unit("choir", "r", OrgUnitType.CHOIR),
            unit("finance", "r", OrgUnitType.COMMITTEE, name="재정위원회"),
        ]
        rosters = {"choir": roster("테너"), "finance": roster("회계", "서기")}
        mock_repository.list_members_of_unit.side_effect = lambda unit_id: rosters[unit_id]

        report = asyncio.run(Aggregator(mock_repository).collect())

        assert [r.unit_id for r in report.choral.rows] == ["choir"]
        assert [r.unit_id for r in report.administrative.rows] == ["finance"]
        assert report.administrative.totals.counts["회계"] == 1


class TestStatisticsBoard:
    def test_refresh_success(self, mock_repository):
        mock_repository.list_org_units.return_value = [unit("c", unit_type=OrgUnitType.CHOIR)]
        mock_repository.list_members_of_unit.return_value = roster("소프라노")
        board = StatisticsBoard(mock_repository)

        assert asyncio.run(board.refresh()) is True
        assert board.error is None
        assert board.report.choral.totals.counts["소프라노"] == 1
        assert board.loading is False

    def test_refresh_failure_reports_error_without_partial_table(self, mock_repository):
        mock_repository.list_org_units.return_value = [
            unit("a", unit_type=OrgUnitType.CHOIR),
            unit("b", unit_type=OrgUnitType.CHOIR),
        ]
        mock_repository.list_members_of_unit.side_effect = StoreError("select from memberships", "offline")
        board = StatisticsBoard(mock_repository)

        assert asyncio.run(board.refresh()) is False
        assert board.report is None
        assert board.error
        assert board.loading is False
