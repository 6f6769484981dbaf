"""Org chart core: positions, forest, statistics and the views that keep them fresh"""
from .position import JOBS, PARTS, ParsedPosition, format_position, parse_position
from .tree import OrgForest, build_forest, find_unit
from .aggregation import (
    ADMINISTRATIVE_JOBS,
    AggregationError,
    Aggregator,
    StatisticsBoard,
    StatisticsReport,
    StatisticsRow,
    StatisticsTable,
    UnitCategory,
    classify_unit,
    split_units,
    summarize_members,
)
from .chart import OrgChartSession, infer_child_type
from .detail import UnitDetailView
