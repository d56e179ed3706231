"""
Drill options: the navigation actions offered for a clicked data point.

Options are generated over three independent axes, in this order:

* time - finer or coarser granularities of the query's first time dimension
* hierarchy - next finer or coarser level of each hierarchy dimension in
  the query
* details - one option per drill member of the clicked measure

Each option kind is its own model, so an option can not carry fields that
contradict its type.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import ConfigDict, Field

from ..common import to_label
from ..config import DrillSettings
from ..errors import ArgumentError, MissingDrillTargetError, UnknownDrillTypeError
from ..logging import get_logger
from ..metadata.lookup import (
    find_hierarchy_for_dimension,
    get_dimension_label,
    get_granularities,
    get_measure_drill_members,
)
from ..metadata.model import CubeMeta, Granularity, granularity_rank
from .models import ClickEvent, DashboardFilter, Query, QueryObject

__all__ = [
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
]


class DrillType(str, Enum):
    """Direction of a drill action."""

    DRILL_DOWN = "drillDown"
    DRILL_UP = "drillUp"
    DETAILS = "details"


class DrillScope(str, Enum):
    """Where a drill action applies."""

    PORTLET = "portlet"


class DrillIcon(str, Enum):
    TIME = "time"
    HIERARCHY = "hierarchy"
    TABLE = "table"


class DrillOption(QueryObject):
    """Common fields of all drill options.

    A bare `DrillOption` carries no target; the rewriter returns the query
    unchanged for it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str = Field(..., examples=["Drill to Week", "Roll up to Quarter"])
    type: str
    icon: DrillIcon | None = None
    scope: DrillScope = DrillScope.PORTLET

    @classmethod
    def from_format(cls, obj: Any) -> DrillOption:
        """
        Convert a plain mapping (camelCase or snake_case keys) to the drill
        option variant it describes.

        Raises:
            UnknownDrillTypeError: If the ``type`` is not a drill type
            MissingDrillTargetError: If a details option has no target
                dimension
            ArgumentError: If `obj` is neither an option nor a mapping
        """
        if isinstance(obj, DrillOption):
            return obj
        if not isinstance(obj, Mapping):
            raise ArgumentError(
                f"Unsupported drill option format: {type(obj)} - {obj}"
            )

        drill_type = obj.get("type")
        target_granularity = _pick(obj, "target_granularity", "targetGranularity")
        target_dimension = _pick(obj, "target_dimension", "targetDimension")

        if drill_type == DrillType.DETAILS:
            if not target_dimension:
                raise MissingDrillTargetError(obj.get("measure"))
            return DetailsOption.model_validate(obj)
        elif drill_type == DrillType.DRILL_DOWN:
            if target_granularity:
                return TimeDrillDown.model_validate(obj)
            if target_dimension:
                return HierarchyDrillDown.model_validate(obj)
        elif drill_type == DrillType.DRILL_UP:
            if target_granularity:
                return TimeDrillUp.model_validate(obj)
            if target_dimension:
                return HierarchyDrillUp.model_validate(obj)
        else:
            raise UnknownDrillTypeError(drill_type)

        return DrillOption.model_validate(obj)


def _pick(obj: Mapping, name: str, alias: str) -> Any:
    value = obj.get(name)
    if value is None:
        value = obj.get(alias)
    return value


class TimeDrillDown(DrillOption):
    """Switch the first time dimension to a finer granularity, scoped to the
    clicked period."""

    type: Literal["drillDown"] = "drillDown"
    icon: Literal["time"] = "time"
    target_granularity: Granularity


class TimeDrillUp(DrillOption):
    """Switch the first time dimension to a coarser granularity."""

    type: Literal["drillUp"] = "drillUp"
    icon: Literal["time"] = "time"
    target_granularity: Granularity


class HierarchyDrillDown(DrillOption):
    """Replace a hierarchy dimension by its next finer level, filtered to the
    clicked member."""

    type: Literal["drillDown"] = "drillDown"
    icon: Literal["hierarchy"] = "hierarchy"
    target_dimension: str
    hierarchy: str | None = None


class HierarchyDrillUp(DrillOption):
    """Replace a hierarchy dimension by a coarser level."""

    type: Literal["drillUp"] = "drillUp"
    icon: Literal["hierarchy"] = "hierarchy"
    target_dimension: str
    hierarchy: str | None = None


class DetailsOption(DrillOption):
    """Break the clicked measure down by one of its drill members."""

    type: Literal["details"] = "details"
    icon: Literal["table"] = "table"
    target_dimension: str
    measure: str | None = None


def build_drill_options(
    event: ClickEvent,
    query: Query,
    meta: CubeMeta | None,
    dashboard_filters: list[DashboardFilter] | None = None,
    dashboard_filter_mapping: list[str] | None = None,
    *,
    settings: DrillSettings | None = None,
) -> list[DrillOption]:
    """
    Drill options for a click on a data point of `query`'s chart.

    Args:
        event: The click, `event.clicked_field` names the clicked measure
        query: Query the chart currently displays
        meta: Semantic model metadata; without it no option is offered
        dashboard_filters: Filters of the dashboard the chart is on
        dashboard_filter_mapping: Ids of the dashboard filters applied to
            the chart

    Returns:
        Time options, then hierarchy options, then details options
    """
    if meta is None:
        return []

    options: list[DrillOption] = []
    options += _time_drill_options(query, meta, settings)
    options += _hierarchy_drill_options(query, meta)
    options += _details_drill_options(event.clicked_field, meta)

    get_logger().debug(
        f"Built {len(options)} drill options for '{event.clicked_field}' "
        f"({len(dashboard_filter_mapping or [])} of "
        f"{len(dashboard_filters or [])} dashboard filters mapped)"
    )
    return options


def _time_drill_options(
    query: Query, meta: CubeMeta, settings: DrillSettings | None
) -> list[DrillOption]:
    if not query.time_dimensions:
        return []

    time_dimension = query.time_dimensions[0]
    current = time_dimension.granularity
    available = get_granularities(time_dimension.dimension, meta, settings=settings)

    if not available:
        return []

    # Nothing to roll up from, offer every granularity
    if not current:
        return [
            TimeDrillDown(
                id=f"time-set-{granularity}-portlet",
                label=f"View by {to_label(granularity)}",
                target_granularity=granularity,
            )
            for granularity in available
        ]

    if current in available:
        index = available.index(current)
        finer = available[index + 1 :]
        coarser = list(reversed(available[:index]))
    else:
        rank = granularity_rank(current)
        finer = [g for g in available if granularity_rank(g) > rank]
        coarser = [g for g in reversed(available) if granularity_rank(g) < rank]

    options: list[DrillOption] = [
        TimeDrillDown(
            id=f"time-down-{granularity}-portlet",
            label=f"Drill to {to_label(granularity)}",
            target_granularity=granularity,
        )
        for granularity in finer
    ]
    options += [
        TimeDrillUp(
            id=f"time-up-{granularity}-portlet",
            label=f"Roll up to {to_label(granularity)}",
            target_granularity=granularity,
        )
        for granularity in coarser
    ]
    return options


def _hierarchy_drill_options(query: Query, meta: CubeMeta) -> list[DrillOption]:
    options: list[DrillOption] = []

    for dimension in query.dimensions:
        match = find_hierarchy_for_dimension(dimension, meta)
        if not match:
            continue

        hierarchy = match.hierarchy

        next_dimension = hierarchy.next_level(dimension)
        if next_dimension:
            options.append(
                HierarchyDrillDown(
                    id=f"hierarchy-down-{hierarchy.name}-{next_dimension}",
                    label=f"Drill to {get_dimension_label(next_dimension, meta)}",
                    hierarchy=hierarchy.name,
                    target_dimension=next_dimension,
                )
            )

        previous_dimension = hierarchy.previous_level(dimension)
        if previous_dimension:
            options.append(
                HierarchyDrillUp(
                    id=f"hierarchy-up-{hierarchy.name}-{previous_dimension}",
                    label=f"Roll up to {get_dimension_label(previous_dimension, meta)}",
                    hierarchy=hierarchy.name,
                    target_dimension=previous_dimension,
                )
            )

    return options


def _details_drill_options(measure: str, meta: CubeMeta) -> list[DrillOption]:
    drill_members = get_measure_drill_members(measure, meta)
    if not drill_members:
        return []

    return [
        DetailsOption(
            id=f"details-{measure}-{member}",
            label=f"Show by {get_dimension_label(member, meta)}",
            measure=measure,
            target_dimension=member,
        )
        for member in drill_members
    ]
