"""
Pydantic base class for the semantic model metadata objects.

Metadata documents arrive in the semantic layer's camelCase JSON form
(``shortTitle``, ``drillMembers``, ...). Models accept both the camelCase
aliases and the snake_case field names and serialize back to camelCase.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..common import field_name


class MetadataObject(BaseModel):
    """
    Base class for cubes, members and hierarchies of the semantic model.
    """

    model_config = ConfigDict(
        # Metadata documents are camelCase
        alias_generator=to_camel,
        populate_by_name=True,
        # Keep unknown keys of the document (format, public, ...)
        extra="allow",
        use_enum_values=True,
        validate_assignment=True,
    )

    name: str = Field(..., description="Fully qualified member or cube name")
    title: str | None = Field(None, description="Human-readable title")
    short_title: str | None = Field(None, description="Short human-readable title")
    description: str | None = Field(None, description="Detailed description")
    meta: dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that name is a non-empty string."""
        if not v or not v.strip():
            raise ValueError("name must be a non-empty string")
        return v

    @field_validator("meta", mode="before")
    @classmethod
    def validate_meta(cls, v: Any) -> dict[str, Any]:
        """Ensure meta is always a dictionary."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("meta must be a dictionary")
        return v

    def get_label(self) -> str:
        """Display label: title, then short title, then the bare field
        name."""
        return self.title or self.short_title or field_name(self.name)

    def to_dict(self, **options: Any) -> dict[str, Any]:
        """Convert to the camelCase dictionary representation."""
        return self.model_dump(by_alias=True, exclude_none=True, **options)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
