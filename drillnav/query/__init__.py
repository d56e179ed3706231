"""
Drill navigation over analytical queries.

This module provides the drill option generator, the query rewriter, the
period boundary calculator and the per-chart navigator built on top of them.
"""

from .models import (
    ChartAxisConfig,
    ClickEvent,
    CompoundFilter,
    DashboardFilter,
    DrillResult,
    Filter,
    MemberFilter,
    PathEntry,
    Position,
    Query,
    TimeDimension,
)
from .navigation import DrillNavigator
from .options import (
    DetailsOption,
    DrillIcon,
    DrillOption,
    DrillScope,
    DrillType,
    HierarchyDrillDown,
    HierarchyDrillUp,
    TimeDrillDown,
    TimeDrillUp,
    build_drill_options,
)
from .periods import get_period_bounds, parse_period
from .rewriter import build_drill_query

__all__ = [
    "Query",
    "TimeDimension",
    "MemberFilter",
    "CompoundFilter",
    "Filter",
    "ClickEvent",
    "Position",
    "ChartAxisConfig",
    "PathEntry",
    "DrillResult",
    "DashboardFilter",
    "DrillType",
    "DrillScope",
    "DrillIcon",
    "DrillOption",
    "TimeDrillDown",
    "TimeDrillUp",
    "HierarchyDrillDown",
    "HierarchyDrillUp",
    "DetailsOption",
    "build_drill_options",
    "build_drill_query",
    "get_period_bounds",
    "parse_period",
    "DrillNavigator",
]
