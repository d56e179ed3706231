"""Utility functions shared by the metadata and query modules."""

from __future__ import annotations

import uuid
from typing import Any

__all__ = [
    "to_label",
    "cube_name",
    "field_name",
    "has_value",
    "to_filter_value",
    "generate_id",
]


def to_label(name: str, capitalize: bool = True) -> str:
    """Converts `name` into label by replacing underscores by spaces. If
    `capitalize` is ``True`` (default) then the first letter of the label is
    capitalized."""

    label = name.replace("_", " ")
    if capitalize:
        label = label[:1].upper() + label[1:]
    return label


def cube_name(member: str) -> str:
    """Cube part of a ``Cube.field`` member name."""
    return member.split(".", 1)[0]


def field_name(member: str) -> str:
    """Bare field name of a ``Cube.field`` member name."""
    return member.rsplit(".", 1)[-1]


def has_value(value: Any) -> bool:
    """Returns ``True`` when a clicked value is present and not empty."""
    return value is not None and value != ""


def to_filter_value(value: Any) -> str:
    """String form of a clicked value as used in filter values and labels."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def generate_id(prefix: str = "drill") -> str:
    """Unique identifier for a breadcrumb entry."""
    return f"{prefix}-{uuid.uuid4().hex}"
