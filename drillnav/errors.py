"""Exceptions used in drillnav."""

from __future__ import annotations

from typing import Any

__all__ = [
    "DrillNavError",
    "UserError",
    "InternalError",
    "ArgumentError",
    "ModelError",
    "ConfigurationError",
    "DrillError",
    "UnknownDrillTypeError",
    "MissingDrillTargetError",
]


class DrillNavError(Exception):
    """Generic error class with optional context."""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.context = context or {}
        self.cause = cause

    def add_context(self, key: str, value: Any) -> DrillNavError:
        """Fluent interface for adding context."""
        self.context[key] = value
        return self

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


class UserError(DrillNavError):
    """Superclass for all errors caused by the library users. Messages of
    this error might be safely passed to the front-end."""

    error_type = "unknown_user_error"


class InternalError(DrillNavError):
    """Superclass for errors that happened internally: configuration issues,
    model inconsistencies, programming errors of the caller."""

    error_type = "internal_error"


class ArgumentError(UserError):
    """Invalid or unsupported argument."""

    error_type = "argument"


class ModelError(InternalError):
    """Raised when there is an error in the semantic model metadata."""

    error_type = "model"


class ConfigurationError(InternalError):
    """Settings could not be read or are invalid."""

    error_type = "configuration"


class DrillError(InternalError):
    """Drill option could not be turned into a query."""

    error_type = "drill"


class UnknownDrillTypeError(DrillError):
    """Drill option has a type the rewriter does not know."""

    error_type = "unknown_drill_type"

    def __init__(self, drill_type: Any, **kwargs):
        super().__init__(f"Unknown drill type: {drill_type}", **kwargs)
        self.drill_type = drill_type
        self.add_context("type", drill_type)


class MissingDrillTargetError(DrillError):
    """Details drill was requested without a concrete drill member."""

    error_type = "missing_drill_target"

    def __init__(self, measure: str | None, **kwargs):
        super().__init__(
            f"No targetDimension specified for details drill on measure {measure}",
            **kwargs,
        )
        self.measure = measure
        self.add_context("measure", measure)
