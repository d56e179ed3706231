"""Tests for the drill query rewriter."""

import pytest

from drillnav.config import DrillSettings
from drillnav.errors import MissingDrillTargetError, UnknownDrillTypeError
from drillnav.query import (
    DrillOption,
    HierarchyDrillDown,
    HierarchyDrillUp,
    MemberFilter,
    TimeDrillDown,
    TimeDrillUp,
    build_drill_options,
    build_drill_query,
)
from tests.common import click, create_test_meta, query


@pytest.fixture
def meta():
    return create_test_meta()


def option_by_id(options, option_id):
    for option in options:
        if option.id == option_id:
            return option
    raise AssertionError(f"No option '{option_id}' in {[o.id for o in options]}")


class TestTimeDrill:
    def test_drill_down_to_week(self, meta):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "month"}],
        )
        event = click("Sales.revenue", "2024-01-15")
        option = TimeDrillDown(
            id="time-down-week-portlet", label="Drill to Week", target_granularity="week"
        )

        result = build_drill_query(option, event, q, meta)

        time_dimension = result.query.time_dimensions[0]
        assert time_dimension.dimension == "Sales.orderDate"
        assert time_dimension.granularity == "week"
        assert time_dimension.date_range == ["2024-01-01", "2024-01-31"]
        assert result.query.measures == ["Sales.revenue"]

        entry = result.path_entry
        assert entry.label == "2024-01-15"
        assert entry.granularity == "week"
        assert entry.filters == []
        assert entry.clicked_value == "2024-01-15"
        assert entry.id.startswith("drill-")
        assert result.chart_config is None

    def test_drill_down_from_year(self, meta):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "year"}],
        )
        option = TimeDrillDown(id="x", label="x", target_granularity="quarter")

        result = build_drill_query(option, click("Sales.revenue", "2023"), q, meta)

        assert result.query.time_dimensions[0].date_range == ["2023-01-01", "2023-12-31"]

    def test_drill_down_without_granularity(self, meta):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[{"dimension": "Sales.orderDate"}],
        )
        option = TimeDrillDown(id="x", label="x", target_granularity="day")

        result = build_drill_query(option, click("Sales.revenue", "2024-02-10"), q, meta)
        assert result.query.time_dimensions[0].date_range == ["2024-02-01", "2024-02-29"]

        settings = DrillSettings(period_granularity="week")
        result = build_drill_query(
            option, click("Sales.revenue", "2024-02-10"), q, meta, settings=settings
        )
        assert result.query.time_dimensions[0].date_range == ["2024-02-05", "2024-02-11"]

    def test_drill_down_keeps_other_time_dimensions(self, meta):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[
                {"dimension": "Sales.orderDate", "granularity": "month"},
                {"dimension": "Sales.shippedDate", "dateRange": "last year"},
            ],
        )
        option = TimeDrillDown(id="x", label="x", target_granularity="day")

        result = build_drill_query(option, click("Sales.revenue", "2024-03"), q, meta)

        assert len(result.query.time_dimensions) == 2
        assert result.query.time_dimensions[1].dimension == "Sales.shippedDate"
        assert result.query.time_dimensions[1].date_range == "last year"

    def test_drill_down_unparseable_value(self, meta):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "month"}],
        )
        option = TimeDrillDown(id="x", label="x", target_granularity="day")

        result = build_drill_query(option, click("Sales.revenue", "Total"), q, meta)
        assert result.query.time_dimensions[0].date_range == ["Total", "Total"]

    def test_drill_up_keeps_date_range(self, meta):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[
                {
                    "dimension": "Sales.orderDate",
                    "granularity": "week",
                    "dateRange": ["2024-01-01", "2024-01-31"],
                }
            ],
        )
        option = TimeDrillUp(
            id="time-up-quarter-portlet",
            label="Roll up to Quarter",
            target_granularity="quarter",
        )

        result = build_drill_query(option, click("Sales.revenue", "2024-01-08"), q, meta)

        time_dimension = result.query.time_dimensions[0]
        assert time_dimension.granularity == "quarter"
        assert time_dimension.date_range == ["2024-01-01", "2024-01-31"]
        assert result.path_entry.label == "By Quarter"
        assert result.path_entry.granularity == "quarter"
        assert result.path_entry.clicked_value is None

    def test_time_option_without_time_dimension(self, meta):
        q = query(measures=["Sales.revenue"], dimensions=["Sales.category"])

        down = build_drill_query(
            TimeDrillDown(id="x", label="x", target_granularity="day"),
            click("Sales.revenue", "Books"),
            q,
            meta,
        )
        up = build_drill_query(
            TimeDrillUp(id="x", label="x", target_granularity="year"),
            click("Sales.revenue", "Books"),
            q,
            meta,
        )

        assert down.query == q
        assert down.path_entry.label == "Drill"
        assert up.query == q
        assert up.path_entry.label == "Roll Up"


class TestHierarchyDrill:
    def test_drill_down(self, meta):
        q = query(
            measures=["Sales.count"],
            dimensions=["Sales.category"],
            filters=[{"member": "Sales.region", "operator": "equals", "values": ["EMEA"]}],
        )
        option = HierarchyDrillDown(
            id="hierarchy-down-product-Sales.subcategory",
            label="Drill to Subcategory",
            hierarchy="product",
            target_dimension="Sales.subcategory",
        )

        result = build_drill_query(option, click("Sales.count", "Electronics"), q, meta)

        assert result.query.dimensions == ["Sales.subcategory"]
        assert result.query.filters == [
            MemberFilter(member="Sales.region", operator="equals", values=["EMEA"]),
            MemberFilter(member="Sales.category", operator="equals", values=["Electronics"]),
        ]
        entry = result.path_entry
        assert entry.label == "Electronics"
        assert entry.dimension == "Sales.subcategory"
        assert entry.hierarchy == "product"
        assert entry.filters == [MemberFilter.equals("Sales.category", "Electronics")]

    def test_drill_down_keeps_position(self, meta):
        q = query(
            measures=["Sales.count"],
            dimensions=["Sales.orderId", "Sales.region", "Sales.customerName"],
        )
        option = HierarchyDrillDown(
            id="x", label="x", hierarchy="location", target_dimension="Sales.country"
        )

        result = build_drill_query(option, click("Sales.count", "EMEA"), q, meta)

        assert result.query.dimensions == [
            "Sales.orderId",
            "Sales.country",
            "Sales.customerName",
        ]

    def test_drill_down_without_value(self, meta):
        q = query(measures=["Sales.count"], dimensions=["Sales.region"])
        option = HierarchyDrillDown(
            id="x", label="x", hierarchy="location", target_dimension="Sales.country"
        )

        result = build_drill_query(option, click("Sales.count", None), q, meta)

        assert result.query.filters == []
        assert result.path_entry.label == ""

    def test_drill_down_boolean_value(self, meta):
        q = query(measures=["Sales.count"], dimensions=["Sales.region"])
        option = HierarchyDrillDown(
            id="x", label="x", hierarchy="location", target_dimension="Sales.country"
        )

        result = build_drill_query(option, click("Sales.count", False), q, meta)

        assert result.query.filters[0].values == ["false"]

    def test_drill_down_without_hierarchy_name_appends(self, meta):
        q = query(measures=["Sales.count"], dimensions=["Sales.region"])
        option = HierarchyDrillDown(id="x", label="x", target_dimension="Sales.country")

        result = build_drill_query(option, click("Sales.count", "EMEA"), q, meta)

        assert result.query.dimensions == ["Sales.region", "Sales.country"]
        assert result.query.filters == []

    def test_drill_up_removes_finer_filters(self, meta):
        q = query(
            measures=["Sales.count"],
            dimensions=["Sales.city"],
            filters=[
                {"member": "Sales.region", "operator": "equals", "values": ["EMEA"]},
                {"member": "Sales.country", "operator": "equals", "values": ["France"]},
                {"member": "Sales.category", "operator": "equals", "values": ["Books"]},
            ],
        )
        option = HierarchyDrillUp(
            id="hierarchy-up-location-Sales.region",
            label="Roll up to Region",
            hierarchy="location",
            target_dimension="Sales.region",
        )

        result = build_drill_query(option, click("Sales.count", "Paris"), q, meta)

        assert result.query.dimensions == ["Sales.region"]
        assert [f.member for f in result.query.filters] == [
            "Sales.region",
            "Sales.category",
        ]
        assert result.path_entry.label == "By Region"
        assert result.path_entry.dimension == "Sales.region"

    def test_down_then_up_restores_dimensions_only(self, meta):
        q = query(measures=["Sales.count"], dimensions=["Sales.category"])
        event = click("Sales.count", "Electronics")

        options = build_drill_options(event, q, meta)
        down = build_drill_query(
            option_by_id(options, "hierarchy-down-product-Sales.subcategory"),
            event,
            q,
            meta,
        )

        event = click("Sales.count", "Laptops")
        options = build_drill_options(event, down.query, meta)
        up = build_drill_query(
            option_by_id(options, "hierarchy-up-product-Sales.category"),
            event,
            down.query,
            meta,
        )

        assert up.query.dimensions == q.dimensions
        # The filter added on the way down is on the target level itself and
        # stays in place
        assert up.query.filters == [MemberFilter.equals("Sales.category", "Electronics")]
        assert up.query.filters != q.filters

    def test_compound_filters_are_kept(self, meta):
        q = query(
            measures=["Sales.count"],
            dimensions=["Sales.country"],
            filters=[
                {
                    "or": [
                        {"member": "Sales.city", "operator": "equals", "values": ["Paris"]},
                        {"member": "Sales.city", "operator": "equals", "values": ["Lyon"]},
                    ]
                }
            ],
        )
        option = HierarchyDrillUp(
            id="x", label="x", hierarchy="location", target_dimension="Sales.region"
        )

        result = build_drill_query(option, click("Sales.count", "France"), q, meta)

        assert result.query.filters == q.filters


class TestDetails:
    def test_details_by_member(self, meta):
        q = query(
            measures=["Sales.revenue", "Sales.count"],
            dimensions=["Sales.category"],
            timeDimensions=[
                {
                    "dimension": "Sales.orderDate",
                    "granularity": "month",
                    "dateRange": ["2024-01-01", "2024-12-31"],
                }
            ],
            filters=[{"member": "Sales.region", "operator": "equals", "values": ["EMEA"]}],
        )
        event = click("Sales.revenue", "Electronics")
        option = option_by_id(
            build_drill_options(event, q, meta), "details-Sales.revenue-Sales.orderId"
        )

        result = build_drill_query(option, event, q, meta)

        assert result.query.measures == ["Sales.revenue"]
        assert result.query.dimensions == ["Sales.orderId"]
        assert result.query.time_dimensions == q.time_dimensions
        assert result.query.filters == [
            MemberFilter.equals("Sales.region", "EMEA"),
            MemberFilter.equals("Sales.category", "Electronics"),
        ]
        assert result.query.limit == 100
        assert result.chart_config.x_axis == ["Sales.orderId"]
        assert result.chart_config.y_axis == ["Sales.revenue"]
        assert result.path_entry.chart_config == result.chart_config
        assert result.path_entry.label == "By Order ID (Category: Electronics)"
        assert result.path_entry.filters == result.query.filters

    def test_details_on_time_member(self, meta):
        q = query(measures=["Sales.totalOrders"], dimensions=["Sales.category"])
        event = click("Sales.totalOrders", "Books")
        option = option_by_id(
            build_drill_options(event, q, meta),
            "details-Sales.totalOrders-Sales.orderDate",
        )

        result = build_drill_query(option, event, q, meta)

        assert result.query.dimensions == []
        assert len(result.query.time_dimensions) == 1
        time_dimension = result.query.time_dimensions[0]
        assert time_dimension.dimension == "Sales.orderDate"
        assert time_dimension.granularity == "day"
        assert time_dimension.date_range is None
        assert "dateRange" not in result.query.to_dict()["timeDimensions"][0]

    def test_details_on_time_member_keeps_period(self, meta):
        q = query(
            measures=["Sales.totalOrders"],
            timeDimensions=[
                {
                    "dimension": "Sales.orderDate",
                    "granularity": "week",
                    "dateRange": ["2024-01-01", "2024-01-31"],
                }
            ],
        )
        option = {
            "id": "details-Sales.totalOrders-Sales.orderDate",
            "label": "Show by Order Date",
            "type": "details",
            "measure": "Sales.totalOrders",
            "targetDimension": "Sales.orderDate",
        }

        result = build_drill_query(option, click("Sales.totalOrders", None), q, meta)

        time_dimension = result.query.time_dimensions[0]
        assert time_dimension.granularity == "week"
        assert time_dimension.date_range == ["2024-01-01", "2024-01-31"]
        assert result.query.filters == []
        assert result.path_entry.label == "By Order Date"

    def test_details_without_click_context(self, meta):
        q = query(measures=["Sales.revenue"])
        option = {
            "id": "x",
            "label": "x",
            "type": "details",
            "targetDimension": "Sales.customerName",
        }
        settings = DrillSettings(details_limit=25)

        result = build_drill_query(
            option, click("Sales.revenue", "Acme"), q, meta, settings=settings
        )

        # No x axis to filter on, the measure falls back to the clicked field
        assert result.query.measures == ["Sales.revenue"]
        assert result.query.filters == []
        assert result.query.limit == 25
        assert result.path_entry.label == "By Customer Name"

    def test_details_without_target(self, meta):
        q = query(measures=["Sales.revenue"])
        option = {"id": "x", "label": "x", "type": "details", "measure": "Sales.revenue"}

        with pytest.raises(MissingDrillTargetError):
            build_drill_query(option, click("Sales.revenue", "Acme"), q, meta)


def test_unknown_drill_type(meta):
    q = query(measures=["Sales.revenue"])
    option = {"id": "x", "label": "x", "type": "sideways"}

    with pytest.raises(UnknownDrillTypeError):
        build_drill_query(option, click("Sales.revenue", "Acme"), q, meta)


def test_unknown_type_on_option_object(meta):
    q = query(measures=["Sales.revenue"])
    option = DrillOption(id="x", label="x", type="sideways")

    with pytest.raises(UnknownDrillTypeError):
        build_drill_query(option, click("Sales.revenue", "Acme"), q, meta)


def test_input_query_is_not_modified(meta):
    q = query(
        measures=["Sales.revenue"],
        dimensions=["Sales.category"],
        timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "month"}],
        filters=[{"member": "Sales.region", "operator": "equals", "values": ["EMEA"]}],
        order={"Sales.revenue": "desc"},
    )
    before = q.model_copy(deep=True)
    event = click("Sales.revenue", "2024-01")

    for option in build_drill_options(event, q, meta):
        build_drill_query(option, event, q, meta)

    assert q == before


def test_result_is_independent_of_path_entry(meta):
    q = query(measures=["Sales.count"], dimensions=["Sales.region"])
    option = HierarchyDrillDown(
        id="x", label="x", hierarchy="location", target_dimension="Sales.country"
    )

    result = build_drill_query(option, click("Sales.count", "EMEA"), q, meta)
    result.query.dimensions.append("Sales.city")

    assert result.path_entry.query.dimensions == ["Sales.country"]


def test_unknown_query_keys_are_kept(meta):
    q = query(
        measures=["Sales.revenue"],
        timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "month"}],
        order={"Sales.revenue": "desc"},
    )
    option = TimeDrillDown(id="x", label="x", target_granularity="week")

    result = build_drill_query(option, click("Sales.revenue", "2024-01"), q, meta)

    assert result.query.to_dict()["order"] == {"Sales.revenue": "desc"}


def test_path_entry_ids_are_unique(meta):
    q = query(
        measures=["Sales.revenue"],
        timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "month"}],
    )
    option = TimeDrillDown(id="x", label="x", target_granularity="week")
    event = click("Sales.revenue", "2024-01")

    first = build_drill_query(option, event, q, meta)
    second = build_drill_query(option, event, q, meta)

    assert first.query == second.query
    assert first.path_entry.id != second.path_entry.id


class TestFilterValues:
    def setup_method(self):
        self.meta = create_test_meta()
        self.filters = [
            {"member": "Sales.revenue", "operator": "gt", "values": [100]},
            {"member": "Sales.isReturned", "operator": "equals", "values": [False]},
            {"member": "Sales.city", "operator": "set", "values": [None]},
        ]

    def expected_filters(self):
        return [MemberFilter.model_validate(f) for f in self.filters]

    def test_query_accepts_non_string_values(self):
        q = query(measures=["Sales.revenue"], filters=self.filters)
        assert q.filters[0].values == [100]
        assert q.filters[1].values == [False]
        assert q.filters[2].values == [None]

    def test_time_drill_down_keeps_filters(self):
        q = query(
            measures=["Sales.revenue"],
            timeDimensions=[{"dimension": "Sales.orderDate", "granularity": "month"}],
            filters=self.filters,
        )
        option = TimeDrillDown(id="x", label="x", target_granularity="week")

        result = build_drill_query(option, click("Sales.revenue", "2024-01"), q, self.meta)

        assert result.query.filters == self.expected_filters()
        assert result.query.to_dict()["filters"][0]["values"] == [100]

    def test_hierarchy_drill_up_keeps_filters(self):
        q = query(
            measures=["Sales.revenue"],
            dimensions=["Sales.subcategory"],
            filters=self.filters,
        )
        option = HierarchyDrillUp(
            id="x", label="x", hierarchy="product", target_dimension="Sales.category"
        )

        result = build_drill_query(option, click("Sales.revenue", "Laptops"), q, self.meta)

        assert result.query.filters == self.expected_filters()

    def test_details_keeps_filters(self):
        q = query(
            measures=["Sales.revenue"],
            dimensions=["Sales.category"],
            filters=self.filters,
        )
        option = {
            "id": "x",
            "label": "x",
            "type": "details",
            "measure": "Sales.revenue",
            "targetDimension": "Sales.orderId",
        }

        result = build_drill_query(option, click("Sales.revenue", "Books"), q, self.meta)

        assert result.query.filters == [
            *self.expected_filters(),
            MemberFilter.equals("Sales.category", "Books"),
        ]


class TestRepeatedDimensions:
    def test_drill_down_keeps_repeated_dimensions(self, meta):
        q = query(
            measures=["Sales.count"],
            dimensions=["Sales.orderId", "Sales.region", "Sales.orderId"],
        )
        option = HierarchyDrillDown(
            id="x", label="x", hierarchy="location", target_dimension="Sales.country"
        )

        result = build_drill_query(option, click("Sales.count", "EMEA"), q, meta)

        assert result.query.dimensions == [
            "Sales.orderId",
            "Sales.country",
            "Sales.orderId",
        ]

    def test_drill_up_keeps_repeated_dimensions(self, meta):
        q = query(
            measures=["Sales.count"],
            dimensions=["Sales.city", "Sales.orderId", "Sales.country", "Sales.orderId"],
        )
        option = HierarchyDrillUp(
            id="x", label="x", hierarchy="location", target_dimension="Sales.region"
        )

        result = build_drill_query(option, click("Sales.count", "Paris"), q, meta)

        # Hierarchy levels collapse into the target, other dimensions stay
        assert result.query.dimensions == [
            "Sales.region",
            "Sales.orderId",
            "Sales.orderId",
        ]
