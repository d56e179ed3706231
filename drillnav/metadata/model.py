"""
Semantic model metadata: cubes with their measures, dimensions and
hierarchies, and the time granularities of time dimensions.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import MetadataObject

__all__ = [
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
]


class Granularity(str, Enum):
    """Time bucketing resolutions, declared coarsest to finest."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"


GRANULARITY_ORDER: list[str] = [g.value for g in Granularity]

DEFAULT_GRANULARITIES: list[str] = ["year", "quarter", "month", "week", "day", "hour"]


def granularity_rank(granularity: str | None) -> int | None:
    """Position of `granularity` in the global order, ``None`` for unknown
    values. Higher rank means finer granularity."""
    try:
        return GRANULARITY_ORDER.index(granularity)
    except ValueError:
        return None


class MemberType(str, Enum):
    """Valid dimension types"""

    STRING = "string"
    NUMBER = "number"
    TIME = "time"
    BOOLEAN = "boolean"


class Measure(MetadataObject):
    """
    Cube measure - an aggregatable numeric field. A measure may declare
    drill members: the dimensions its value can be broken down into when the
    user asks for details.
    """

    type: str | None = Field(None, description="Aggregation type (sum, count, ...)")
    drill_members: list[str] | None = Field(
        None, description="Dimensions the measure can be drilled through into"
    )


class Dimension(MetadataObject):
    """Categorical or temporal cube field."""

    type: MemberType = Field(MemberType.STRING, description="Dimension type")
    granularities: list[Granularity] | None = Field(
        None, description="Supported granularities of a time dimension"
    )

    @property
    def is_time(self) -> bool:
        return self.type == MemberType.TIME


class Hierarchy(MetadataObject):
    """Ordered chain of dimensions from the coarsest to the finest level."""

    levels: list[str] = Field(min_length=1)
    cube_name: str | None = None

    @field_validator("levels")
    @classmethod
    def validate_levels(cls, v: list[str]) -> list[str]:
        """A dimension appears at most once in a hierarchy."""
        if len(v) != len(set(v)):
            raise ValueError("hierarchy has duplicate levels")
        return v

    def __len__(self) -> int:
        return len(self.levels)

    def __contains__(self, dimension: str) -> bool:
        return dimension in self.levels

    def level_index(self, dimension: str) -> int | None:
        """Get order index of `dimension`, ``None`` if it is not a level of
        this hierarchy."""
        try:
            return self.levels.index(dimension)
        except ValueError:
            return None

    def next_level(self, dimension: str) -> str | None:
        """Returns the level finer than `dimension`. If `dimension` is the
        last level or not in the hierarchy, returns ``None``."""
        index = self.level_index(dimension)
        if index is None or index + 1 >= len(self.levels):
            return None
        return self.levels[index + 1]

    def previous_level(self, dimension: str) -> str | None:
        """Returns the level coarser than `dimension`. If `dimension` is the
        first level or not in the hierarchy, returns ``None``."""
        index = self.level_index(dimension)
        if not index:
            return None
        return self.levels[index - 1]

    def finer_levels(self, dimension: str) -> list[str]:
        """Levels strictly below `dimension`."""
        index = self.level_index(dimension)
        if index is None:
            return []
        return self.levels[index + 1 :]


class Cube(MetadataObject):
    """Named collection of measures, dimensions and hierarchies."""

    measures: list[Measure] = Field(default_factory=list)
    dimensions: list[Dimension] = Field(default_factory=list)
    hierarchies: list[Hierarchy] = Field(default_factory=list)
    segments: list[dict] = Field(default_factory=list)

    def measure(self, name: str) -> Measure | None:
        for measure in self.measures:
            if measure.name == name:
                return measure
        return None

    def dimension(self, name: str) -> Dimension | None:
        for dimension in self.dimensions:
            if dimension.name == name:
                return dimension
        return None

    def hierarchy(self, name: str) -> Hierarchy | None:
        for hierarchy in self.hierarchies:
            if hierarchy.name == name:
                return hierarchy
        return None


class CubeMeta(BaseModel):
    """The metadata document: an ordered collection of cubes."""

    model_config = ConfigDict(extra="allow")

    cubes: list[Cube] = Field(default_factory=list)

    def cube(self, name: str) -> Cube | None:
        for cube in self.cubes:
            if cube.name == name:
                return cube
        return None

    def find_measure(self, name: str) -> Measure | None:
        """First measure called `name` in cube order."""
        for cube in self.cubes:
            measure = cube.measure(name)
            if measure:
                return measure
        return None

    def find_dimension(self, name: str) -> Dimension | None:
        """First dimension called `name` in cube order."""
        for cube in self.cubes:
            dimension = cube.dimension(name)
            if dimension:
                return dimension
        return None

    def to_dict(self) -> dict:
        return {"cubes": [cube.to_dict() for cube in self.cubes]}
