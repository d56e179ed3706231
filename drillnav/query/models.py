"""
Pydantic models of the analytical query, the chart click event and the
drill results.

Queries use the semantic layer's JSON shape (``timeDimensions``,
``dateRange``, ...). Keys the drill engine does not know about, like
``order`` or ``segments``, are kept and carried through rewrites.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..metadata.model import Granularity

__all__ = [
    "QueryObject",
    "TimeDimension",
    "MemberFilter",
    "CompoundFilter",
    "Filter",
    "Query",
    "Position",
    "ClickEvent",
    "ChartAxisConfig",
    "PathEntry",
    "DrillResult",
    "DashboardFilter",
]

EQUALS = "equals"


class QueryObject(BaseModel):
    """Base class of the query side models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_dict(self, **options: Any) -> dict[str, Any]:
        """Convert to the camelCase dictionary representation."""
        return self.model_dump(by_alias=True, exclude_none=True, **options)


class TimeDimension(QueryObject):
    dimension: str
    granularity: Granularity | None = None
    date_range: list[str] | str | None = Field(
        None,
        examples=[["2024-01-01", "2024-01-31"], "last 7 days"],
        description="Inclusive date range or relative range expression",
    )


class MemberFilter(QueryObject):
    """Filter on a single member, e.g. ``Sales.category equals Books``."""

    member: str
    operator: str
    values: list[Any] = Field(default_factory=list)

    @classmethod
    def equals(cls, member: str, value: str) -> MemberFilter:
        return cls(member=member, operator=EQUALS, values=[value])


class CompoundFilter(QueryObject):
    """Logical ``and`` / ``or`` group of filters."""

    model_config = ConfigDict(extra="forbid")

    and_: list[Filter] | None = Field(None, alias="and")
    or_: list[Filter] | None = Field(None, alias="or")


Filter = Union[MemberFilter, CompoundFilter]

CompoundFilter.model_rebuild()


class Query(QueryObject):
    """Analytical query against the semantic layer."""

    model_config = ConfigDict(extra="allow")

    measures: list[str] = Field(default_factory=list)
    dimensions: list[str] = Field(default_factory=list)
    time_dimensions: list[TimeDimension] = Field(default_factory=list)
    filters: list[Filter] = Field(default_factory=list)
    limit: int | None = None

    @property
    def x_axis_dimension(self) -> str | None:
        """Member on the chart's x axis: the first plain dimension, else the
        first time dimension."""
        if self.dimensions:
            return self.dimensions[0]
        if self.time_dimensions:
            return self.time_dimensions[0].dimension
        return None


class Position(BaseModel):
    x: float
    y: float


class ClickEvent(QueryObject):
    """A click on a rendered data point."""

    clicked_field: str = Field(..., examples=["Sales.revenue"])
    x_value: Any = Field(None, examples=["2024-01", "Electronics"])
    data_point: dict[str, Any] = Field(default_factory=dict)
    position: Position | None = None


class ChartAxisConfig(QueryObject):
    x_axis: list[str] = Field(default_factory=list)
    y_axis: list[str] = Field(default_factory=list)


class PathEntry(QueryObject):
    """One breadcrumb of the drill navigation path."""

    id: str
    label: str
    query: Query
    filters: list[Filter] | None = None
    granularity: Granularity | None = None
    dimension: str | None = None
    hierarchy: str | None = None
    clicked_value: Any = None
    chart_config: ChartAxisConfig | None = None


class DrillResult(QueryObject):
    query: Query
    path_entry: PathEntry
    chart_config: ChartAxisConfig | None = None


class DashboardFilter(QueryObject):
    """Dashboard level filter a chart may be mapped to."""

    id: str
    label: str | None = None
    filter: Filter | None = None
    is_universal_time: bool = False
