"""
Drill engine settings.

Settings are usually left at their defaults. An application can override
them from a mapping or from the ``[drill]`` section of an INI file::

    [drill]
    default_granularities = year, quarter, month, day
    details_limit = 250
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from configparser import ConfigParser
from configparser import Error as ConfigParserError
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.types import PositiveInt

from .errors import ArgumentError, ConfigurationError
from .logging import get_logger
from .metadata.model import DEFAULT_GRANULARITIES, Granularity

__all__ = ["DrillSettings", "DEFAULT_SETTINGS", "SETTINGS_SECTION", "read_settings"]

SETTINGS_SECTION = "drill"


class DrillSettings(BaseModel):
    """Tunables of the drill option generator and query rewriter."""

    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=True)

    default_granularities: list[Granularity] = Field(
        default_factory=lambda: list(DEFAULT_GRANULARITIES),
        min_length=1,
        description="Granularities of a time dimension that declares none",
    )
    details_limit: PositiveInt = Field(
        100, description="Row ceiling of a details query"
    )
    details_granularity: Granularity = Field(
        Granularity.DAY,
        description="Granularity of a time drill member when the query has none",
    )
    period_granularity: Granularity = Field(
        Granularity.MONTH,
        description="Granularity of the clicked period when the query has none",
    )
    id_prefix: str = Field("drill", min_length=1, description="Breadcrumb id prefix")

    @field_validator("default_granularities", mode="before")
    @classmethod
    def split_granularities(cls, v: Any) -> Any:
        """Accept comma separated lists as written in INI files."""
        if isinstance(v, str):
            return [item.strip().lower() for item in v.split(",") if item.strip()]
        return v

    @field_validator("details_granularity", "period_granularity", mode="before")
    @classmethod
    def normalize_granularity(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


DEFAULT_SETTINGS = DrillSettings()


def read_settings(
    source: str | os.PathLike | ConfigParser | Mapping[str, Any] | None = None,
) -> DrillSettings:
    """
    Create settings from `source`.

    Args:
        source: ``None`` for defaults, a mapping of setting values, a
            `ConfigParser` or a path to an INI file. Only the ``[drill]``
            section of INI sources is read; a missing section means defaults.

    Returns:
        DrillSettings instance

    Raises:
        ArgumentError: If the source type is not supported
        ConfigurationError: If the file can not be read or values are invalid
    """
    logger = get_logger()

    if source is None:
        return DEFAULT_SETTINGS

    if isinstance(source, ConfigParser):
        values = _section_values(source)
    elif isinstance(source, str | os.PathLike):
        parser = ConfigParser()
        try:
            read_ok = parser.read(source, encoding="utf-8")
        except ConfigParserError as e:
            raise ConfigurationError(
                f"Unable to parse settings file '{source}'", cause=e
            ) from e
        if not read_ok:
            raise ConfigurationError(f"Unable to read settings file '{source}'")
        values = _section_values(parser)
        logger.debug(f"Read drill settings from {source}")
    elif isinstance(source, Mapping):
        values = dict(source)
    else:
        raise ArgumentError(f"Invalid settings source type: {type(source)}")

    try:
        return DrillSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid drill settings: {e}", cause=e) from e


def _section_values(parser: ConfigParser) -> dict[str, str]:
    if not parser.has_section(SETTINGS_SECTION):
        return {}
    return dict(parser.items(SETTINGS_SECTION))
