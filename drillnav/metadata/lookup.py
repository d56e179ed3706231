"""
Lookups over the semantic model metadata document.

All functions are pure: they only read `meta` and never fail for unknown
names, an unknown member simply has no drill members, no hierarchy and
the default granularities.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from ..common import cube_name, field_name
from .model import CubeMeta, Hierarchy

if TYPE_CHECKING:
    from ..config import DrillSettings
    from ..query.models import Query

__all__ = [
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


class HierarchyMatch(NamedTuple):
    """Hierarchy containing a dimension and the dimension's level index."""

    hierarchy: Hierarchy
    level_index: int


def is_time_dimension(name: str, meta: CubeMeta) -> bool:
    """Returns ``True`` if some cube declares `name` as a time dimension."""
    for cube in meta.cubes:
        dimension = cube.dimension(name)
        if dimension and dimension.is_time:
            return True
    return False


def get_granularities(
    name: str, meta: CubeMeta, *, settings: DrillSettings | None = None
) -> list[str]:
    """Granularities declared for the time dimension `name`, or the default
    list when the dimension declares none."""
    for cube in meta.cubes:
        dimension = cube.dimension(name)
        if dimension and dimension.is_time and dimension.granularities:
            return list(dimension.granularities)

    if settings is None:
        from ..config import DEFAULT_SETTINGS as settings

    return list(settings.default_granularities)


def get_current_granularity(query: Query) -> str | None:
    """Granularity of the first time dimension of `query`. Unknown
    granularities never get here, `TimeDimension` rejects them."""
    if not query.time_dimensions:
        return None
    return query.time_dimensions[0].granularity


def get_measure_drill_members(measure_name: str, meta: CubeMeta) -> list[str] | None:
    """Drill members of a measure. Returns ``None`` when the measure is
    unknown or declares no drill members."""
    for cube in meta.cubes:
        measure = cube.measure(measure_name)
        if measure and measure.drill_members:
            return list(measure.drill_members)
    return None


def get_hierarchy(hierarchy_name: str, cube: str, meta: CubeMeta) -> Hierarchy | None:
    """Hierarchy called `hierarchy_name` in `cube`."""
    cube_obj = meta.cube(cube)
    if cube_obj:
        return cube_obj.hierarchy(hierarchy_name)
    return None


def get_cube_hierarchies(cube: str, meta: CubeMeta) -> list[Hierarchy]:
    """All hierarchies of `cube`, empty list for an unknown cube."""
    cube_obj = meta.cube(cube)
    if cube_obj:
        return list(cube_obj.hierarchies)
    return []


def find_hierarchy_for_dimension(name: str, meta: CubeMeta) -> HierarchyMatch | None:
    """Find the hierarchy of the dimension's own cube that has `name` as one
    of its levels. The first matching hierarchy wins."""
    for hierarchy in get_cube_hierarchies(cube_name(name), meta):
        level_index = hierarchy.level_index(name)
        if level_index is not None:
            return HierarchyMatch(hierarchy, level_index)
    return None


def get_dimension_label(name: str, meta: CubeMeta) -> str:
    """Display label of a dimension: title, short title or the bare field
    name."""
    dimension = meta.find_dimension(name)
    if dimension:
        return dimension.get_label()
    return field_name(name)
