"""
Semantic model metadata

Pydantic models of the metadata document (cubes, measures, dimensions,
hierarchies, granularities) and the lookups the drill engine runs over it.
"""

from .base import MetadataObject
from .lookup import (
    HierarchyMatch,
    find_hierarchy_for_dimension,
    get_cube_hierarchies,
    get_current_granularity,
    get_dimension_label,
    get_granularities,
    get_hierarchy,
    get_measure_drill_members,
    is_time_dimension,
)
from .model import (
    DEFAULT_GRANULARITIES,
    GRANULARITY_ORDER,
    Cube,
    CubeMeta,
    Dimension,
    Granularity,
    Hierarchy,
    Measure,
    MemberType,
    granularity_rank,
)

__all__ = [
    "MetadataObject",
    "Granularity",
    "GRANULARITY_ORDER",
    "DEFAULT_GRANULARITIES",
    "granularity_rank",
    "MemberType",
    "Measure",
    "Dimension",
    "Hierarchy",
    "Cube",
    "CubeMeta",
    "HierarchyMatch",
    "is_time_dimension",
    "get_granularities",
    "get_current_granularity",
    "get_measure_drill_members",
    "get_hierarchy",
    "get_cube_hierarchies",
    "find_hierarchy_for_dimension",
    "get_dimension_label",
]
