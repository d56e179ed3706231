"""
Rewriting of the active query for a selected drill option.

Every rewrite is a pure function of the option, the click, the current
query and the metadata. The input query is never modified; results hold
deep copies.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ..common import generate_id, has_value, to_filter_value, to_label
from ..config import DEFAULT_SETTINGS, DrillSettings
from ..errors import MissingDrillTargetError, UnknownDrillTypeError
from ..logging import get_logger
from ..metadata.lookup import (
    HierarchyMatch,
    find_hierarchy_for_dimension,
    get_dimension_label,
    is_time_dimension,
)
from ..metadata.model import CubeMeta
from .models import (
    ChartAxisConfig,
    ClickEvent,
    DrillResult,
    Filter,
    MemberFilter,
    PathEntry,
    Query,
    TimeDimension,
)
from .options import (
    DetailsOption,
    DrillOption,
    DrillType,
    HierarchyDrillDown,
    HierarchyDrillUp,
    TimeDrillDown,
    TimeDrillUp,
)
from .periods import get_period_bounds

__all__ = ["build_drill_query"]


def build_drill_query(
    option: DrillOption | Mapping[str, Any],
    event: ClickEvent,
    query: Query,
    meta: CubeMeta,
    *,
    settings: DrillSettings | None = None,
) -> DrillResult:
    """
    Build the next query for the selected drill `option`.

    Args:
        option: Selected option, or its plain mapping form
        event: The click the option was generated for
        query: Query the chart currently displays
        meta: Semantic model metadata

    Returns:
        DrillResult with the new query, the breadcrumb entry for the step and,
        for details drills, the chart axes of the detail view

    Raises:
        UnknownDrillTypeError: If the option type is not a drill type
        MissingDrillTargetError: If a details option has no target dimension
    """
    option = DrillOption.from_format(option)
    settings = settings or DEFAULT_SETTINGS

    if option.type == DrillType.DRILL_DOWN:
        result = _drill_down(option, event, query, meta, settings)
    elif option.type == DrillType.DRILL_UP:
        result = _drill_up(option, event, query, meta, settings)
    elif option.type == DrillType.DETAILS:
        result = _details(option, event, query, meta, settings)
    else:
        raise UnknownDrillTypeError(option.type)

    get_logger().debug(
        f"Drill '{option.id}' rewrote query to {result.query.to_dict()}"
    )
    return result


def _drill_down(
    option: DrillOption,
    event: ClickEvent,
    query: Query,
    meta: CubeMeta,
    settings: DrillSettings,
) -> DrillResult:
    x_value = event.x_value

    if isinstance(option, TimeDrillDown) and query.time_dimensions:
        time_dimension, *rest = query.time_dimensions
        # Bounds of the clicked period at the granularity before the drill
        date_range = get_period_bounds(
            to_filter_value(x_value),
            time_dimension.granularity or settings.period_granularity,
        )
        drilled = time_dimension.model_copy(
            update={
                "granularity": option.target_granularity,
                "date_range": list(date_range),
            }
        )
        new_query = _copy_query(query, time_dimensions=[drilled, *rest])

        return _result(
            settings,
            label=to_filter_value(x_value),
            query=new_query,
            filters=[],
            granularity=option.target_granularity,
            clicked_value=x_value,
        )

    elif isinstance(option, HierarchyDrillDown):
        match = _hierarchy_match(option, meta)
        dimensions = _replace_hierarchy_levels(
            query.dimensions, option.target_dimension, match
        )
        if option.target_dimension not in dimensions:
            dimensions.append(option.target_dimension)

        new_filters: list[Filter] = []
        current = _current_hierarchy_dimension(query, option.hierarchy, meta)
        if current and x_value is not None:
            new_filters.append(MemberFilter.equals(current, to_filter_value(x_value)))

        new_query = _copy_query(
            query,
            dimensions=dimensions,
            filters=[*query.filters, *new_filters],
        )

        return _result(
            settings,
            label=to_filter_value(x_value),
            query=new_query,
            filters=new_filters,
            dimension=option.target_dimension,
            hierarchy=option.hierarchy,
            clicked_value=x_value,
        )

    return _result(
        settings,
        label="Drill",
        query=_copy_query(query),
        filters=[],
        clicked_value=x_value,
    )


def _drill_up(
    option: DrillOption,
    event: ClickEvent,
    query: Query,
    meta: CubeMeta,
    settings: DrillSettings,
) -> DrillResult:
    if isinstance(option, TimeDrillUp) and query.time_dimensions:
        time_dimension, *rest = query.time_dimensions
        # The date range is passed through as it is: rolling up keeps the
        # period scope of the drilled view.
        rolled = time_dimension.model_copy(
            update={"granularity": option.target_granularity}
        )
        new_query = _copy_query(query, time_dimensions=[rolled, *rest])

        return _result(
            settings,
            label=f"By {to_label(option.target_granularity)}",
            query=new_query,
            granularity=option.target_granularity,
        )

    elif isinstance(option, HierarchyDrillUp):
        match = _hierarchy_match(option, meta)
        dimensions = _replace_hierarchy_levels(
            query.dimensions, option.target_dimension, match
        )

        filters = list(query.filters)
        if match:
            finer = match.hierarchy.finer_levels(option.target_dimension)
            filters = [
                f
                for f in filters
                if not (isinstance(f, MemberFilter) and f.member in finer)
            ]

        new_query = _copy_query(query, dimensions=dimensions, filters=filters)

        return _result(
            settings,
            label=f"By {get_dimension_label(option.target_dimension, meta)}",
            query=new_query,
            dimension=option.target_dimension,
            hierarchy=option.hierarchy,
        )

    return _result(settings, label="Roll Up", query=_copy_query(query))


def _details(
    option: DrillOption,
    event: ClickEvent,
    query: Query,
    meta: CubeMeta,
    settings: DrillSettings,
) -> DrillResult:
    x_value = event.x_value
    measure = getattr(option, "measure", None) or event.clicked_field

    target = getattr(option, "target_dimension", None)
    if not isinstance(option, DetailsOption) or not target:
        raise MissingDrillTargetError(measure)

    x_axis = query.x_axis_dimension
    original_time = query.time_dimensions[0] if query.time_dimensions else None

    if is_time_dimension(target, meta):
        dimensions = []
        time_dimensions = [
            TimeDimension(
                dimension=target,
                granularity=(
                    original_time.granularity
                    if original_time and original_time.granularity
                    else settings.details_granularity
                ),
                date_range=original_time.date_range if original_time else None,
            )
        ]
    else:
        # Existing time dimensions scope the detail view in time
        dimensions = [target]
        time_dimensions = [td.model_copy(deep=True) for td in query.time_dimensions]

    filters = [f.model_copy(deep=True) for f in query.filters]
    has_click_context = bool(x_axis) and has_value(x_value)
    if has_click_context:
        filters.append(MemberFilter.equals(x_axis, to_filter_value(x_value)))

    new_query = Query(
        measures=[measure],
        dimensions=dimensions,
        time_dimensions=time_dimensions,
        filters=filters,
        limit=settings.details_limit,
    )
    chart_config = ChartAxisConfig(x_axis=[target], y_axis=[measure])

    target_label = get_dimension_label(target, meta)
    if has_click_context:
        x_axis_label = get_dimension_label(x_axis, meta)
        label = f"By {target_label} ({x_axis_label}: {to_filter_value(x_value)})"
    else:
        label = f"By {target_label}"

    return _result(
        settings,
        label=label,
        query=new_query,
        filters=[f.model_copy(deep=True) for f in new_query.filters],
        clicked_value=x_value,
        chart_config=chart_config,
    )


def _hierarchy_match(
    option: HierarchyDrillDown | HierarchyDrillUp, meta: CubeMeta
) -> HierarchyMatch | None:
    if not option.hierarchy:
        return None
    return find_hierarchy_for_dimension(option.target_dimension, meta)


def _replace_hierarchy_levels(
    dimensions: list[str], target: str, match: HierarchyMatch | None
) -> list[str]:
    """Replace every level of the matched hierarchy by `target`, keeping the
    position of the first one."""
    result: list[str] = []
    for dimension in dimensions:
        if match and dimension in match.hierarchy:
            if target in result:
                continue
            dimension = target
        result.append(dimension)
    return result


def _current_hierarchy_dimension(
    query: Query, hierarchy_name: str | None, meta: CubeMeta
) -> str | None:
    """Dimension of `query` that currently represents the hierarchy."""
    for dimension in query.dimensions:
        match = find_hierarchy_for_dimension(dimension, meta)
        if match and match.hierarchy.name == hierarchy_name:
            return dimension
    return None


def _copy_query(query: Query, **update: Any) -> Query:
    """Independent copy of `query` with `update` applied."""
    return query.model_copy(update=copy.deepcopy(update), deep=True)


def _result(
    settings: DrillSettings,
    *,
    label: str,
    query: Query,
    chart_config: ChartAxisConfig | None = None,
    **entry: Any,
) -> DrillResult:
    path_entry = PathEntry(
        id=generate_id(settings.id_prefix),
        label=label,
        query=query.model_copy(deep=True),
        chart_config=chart_config,
        **entry,
    )
    return DrillResult(query=query, path_entry=path_entry, chart_config=chart_config)
