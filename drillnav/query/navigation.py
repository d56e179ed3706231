"""
Drill navigation state of a single chart.

The option generator and the query rewriter are pure functions: they never
read or keep history. `DrillNavigator` is the caller that owns the
breadcrumb trail: it turns clicks into a menu of options, applies the
selected option, and walks back along the trail. The state lives in memory
only and belongs to one chart.
"""

from __future__ import annotations

from collections.abc import Callable

from ..config import DrillSettings
from ..logging import get_logger
from ..metadata.lookup import get_measure_drill_members
from ..metadata.model import CubeMeta
from .models import (
    ChartAxisConfig,
    ClickEvent,
    DashboardFilter,
    PathEntry,
    Position,
    Query,
)
from .options import (
    DrillOption,
    HierarchyDrillDown,
    HierarchyDrillUp,
    build_drill_options,
)
from .rewriter import build_drill_query

__all__ = ["DrillNavigator"]

QueryChangeCallback = Callable[[Query], None]


class DrillNavigator:
    """
    Drill interaction controller of one chart.

    Args:
        query: Query the chart displays before any drill
        metadata: Semantic model metadata, ``None`` disables drilling
        on_query_change: Called with the new query whenever it changes
        chart_config: Chart axes configured for the chart, restored when
            navigating back to the root
        dashboard_filters: Filters of the dashboard the chart is on
        dashboard_filter_mapping: Ids of the dashboard filters applied to
            the chart
        enabled: Whether drilling is enabled at all
    """

    def __init__(
        self,
        query: Query,
        metadata: CubeMeta | None,
        *,
        on_query_change: QueryChangeCallback | None = None,
        chart_config: ChartAxisConfig | None = None,
        dashboard_filters: list[DashboardFilter] | None = None,
        dashboard_filter_mapping: list[str] | None = None,
        enabled: bool = True,
        settings: DrillSettings | None = None,
    ):
        self.query = query
        self.metadata = metadata
        self.on_query_change = on_query_change
        self.chart_config = chart_config
        self.dashboard_filters = dashboard_filters
        self.dashboard_filter_mapping = dashboard_filter_mapping
        self.enabled = enabled
        self.settings = settings

        self.menu_open = False
        self.menu_position: Position | None = None
        self.menu_options: list[DrillOption] = []
        self.current_chart_config: ChartAxisConfig | None = None

        self._path: list[PathEntry] = []
        self._pending_event: ClickEvent | None = None

        # Root state, captured on the first drill
        self._original_query: Query | None = None
        self._original_granularity: str | None = None
        self._original_chart_config: ChartAxisConfig | None = None

        self.logger = get_logger()

    @property
    def path(self) -> tuple[PathEntry, ...]:
        """Breadcrumb trail, root excluded."""
        return tuple(self._path)

    @property
    def drill_enabled(self) -> bool:
        """Returns ``True`` if the current query offers anything to drill
        into."""
        if not self.enabled or not self.metadata:
            return False

        return bool(
            self.query.time_dimensions
            or self.query.dimensions
            or any(
                get_measure_drill_members(measure, self.metadata) is not None
                for measure in self.query.measures
            )
        )

    @property
    def has_dashboard_filter_match(self) -> bool:
        """Returns ``True`` if a universal time filter of the dashboard is
        mapped to the chart."""
        if not self.dashboard_filters or not self.dashboard_filter_mapping:
            return False

        return any(
            f.is_universal_time and f.id in self.dashboard_filter_mapping
            for f in self.dashboard_filters
        )

    def handle_click(self, event: ClickEvent) -> list[DrillOption]:
        """Compute drill options for a click and open the menu when there are
        any."""
        if not self.enabled or not self.metadata:
            return []

        options = build_drill_options(
            event,
            self.query,
            self.metadata,
            self.dashboard_filters,
            self.dashboard_filter_mapping,
            settings=self.settings,
        )
        if not options:
            return []

        self._pending_event = event
        self.menu_options = options
        self.menu_position = event.position
        self.menu_open = True
        return options

    def select(self, option: DrillOption) -> Query | None:
        """
        Apply the selected option to the pending click.

        Selecting a level that is already on the trail navigates back to it
        instead of drilling again; selecting the original time granularity
        returns to the root.

        Returns:
            The query shown after the selection, ``None`` if there was no
            pending click

        Raises:
            DrillError: If the option can not be turned into a query
        """
        if not self._pending_event or not self.metadata:
            return None

        try:
            target_granularity = getattr(option, "target_granularity", None)
            target_dimension = getattr(option, "target_dimension", None)

            if target_granularity and self._path:
                index = self._find_entry(granularity=target_granularity)
                if index is not None:
                    self._truncate(index + 1)
                    return self.query
                if target_granularity == self._original_granularity:
                    self._reset_to_root()
                    return self.query

            if (
                isinstance(option, HierarchyDrillDown | HierarchyDrillUp)
                and self._path
            ):
                index = self._find_entry(dimension=target_dimension)
                if index is not None:
                    self._truncate(index + 1)
                    return self.query

            self._drill(option, self._pending_event)
            return self.query
        finally:
            self.close_menu()

    def close_menu(self) -> None:
        self.menu_open = False
        self.menu_position = None
        self.menu_options = []
        self._pending_event = None

    def navigate_back(self) -> None:
        """Navigate one level up the trail."""
        if not self._path:
            return
        self.navigate_to_level(len(self._path) - 1)

    def navigate_to_level(self, index: int) -> None:
        """Keep the first `index` breadcrumbs and show the last of them;
        ``0`` (or less) returns to the root."""
        if index <= 0:
            if self._path:
                self._reset_to_root()
        elif index < len(self._path):
            self._truncate(index)

    def _drill(self, option: DrillOption, event: ClickEvent) -> None:
        try:
            result = build_drill_query(
                option, event, self.query, self.metadata, settings=self.settings
            )
        except Exception as e:
            self.logger.error(f"Error building drill query for '{option.id}': {e}")
            raise

        if not self._path:
            self._original_query = self.query
            self._original_chart_config = self.chart_config
            target_granularity = getattr(option, "target_granularity", None)
            if target_granularity and self.query.time_dimensions:
                self._original_granularity = self.query.time_dimensions[0].granularity

        self._path.append(result.path_entry)
        if result.chart_config:
            self.current_chart_config = result.chart_config

        self.logger.info(
            f"Drilled '{option.label}', {len(self._path)} level(s) deep"
        )
        self._set_query(result.query)

    def _find_entry(
        self, *, granularity: str | None = None, dimension: str | None = None
    ) -> int | None:
        for i, entry in enumerate(self._path):
            if granularity is not None and entry.granularity == granularity:
                return i
            if dimension is not None and entry.dimension == dimension:
                return i
        return None

    def _truncate(self, length: int) -> None:
        """Keep the first `length` breadcrumbs and show the last of them."""
        if length >= len(self._path):
            return

        self._path = self._path[:length]
        entry = self._path[-1]
        self.current_chart_config = entry.chart_config
        self.logger.info(f"Navigated back to '{entry.label}'")
        self._set_query(entry.query)

    def _reset_to_root(self) -> None:
        query = self._original_query or self.query

        self._path = []
        self.current_chart_config = self._original_chart_config
        self._original_chart_config = None
        self._original_granularity = None
        self._original_query = None

        self.logger.info("Navigated back to the root query")
        self._set_query(query)

    def _set_query(self, query: Query) -> None:
        self.query = query
        if self.on_query_change:
            self.on_query_change(query)
