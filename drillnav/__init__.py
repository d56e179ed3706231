"""Drill navigation for semantic layer dashboards"""

__version__ = "1.0"

from .config import DEFAULT_SETTINGS, DrillSettings, read_settings
from .errors import *
from .logging import create_logger, get_logger
from .metadata import (
    Cube,
    CubeMeta,
    Dimension,
    Granularity,
    Hierarchy,
    Measure,
    MemberType,
    find_hierarchy_for_dimension,
    get_dimension_label,
    get_granularities,
    get_measure_drill_members,
    is_time_dimension,
)
from .query import (
    ClickEvent,
    DrillNavigator,
    DrillOption,
    DrillResult,
    PathEntry,
    Query,
    build_drill_options,
    build_drill_query,
    get_period_bounds,
)
