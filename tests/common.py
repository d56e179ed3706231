"""Metadata and query builders shared by the tests."""

from drillnav.metadata import CubeMeta
from drillnav.query import ClickEvent, Query


def create_test_meta() -> CubeMeta:
    """Sales cube with two hierarchies and measures with drill members."""
    return CubeMeta.model_validate(
        {
            "cubes": [
                {
                    "name": "Sales",
                    "title": "Sales",
                    "measures": [
                        {
                            "name": "Sales.revenue",
                            "type": "sum",
                            "title": "Revenue",
                            "shortTitle": "Revenue",
                            "drillMembers": [
                                "Sales.orderId",
                                "Sales.productName",
                                "Sales.customerName",
                            ],
                        },
                        {
                            "name": "Sales.count",
                            "type": "count",
                            "title": "Order Count",
                            "shortTitle": "Count",
                        },
                        {
                            "name": "Sales.totalOrders",
                            "type": "count",
                            "title": "Total Orders",
                            "drillMembers": ["Sales.orderDate", "Sales.orderId"],
                        },
                    ],
                    "dimensions": [
                        {"name": "Sales.category", "type": "string", "title": "Category"},
                        {
                            "name": "Sales.subcategory",
                            "type": "string",
                            "title": "Subcategory",
                        },
                        {"name": "Sales.product", "type": "string", "title": "Product"},
                        {"name": "Sales.region", "type": "string", "title": "Region"},
                        {"name": "Sales.country", "type": "string", "title": "Country"},
                        {"name": "Sales.city", "type": "string", "title": "City"},
                        {
                            "name": "Sales.orderDate",
                            "type": "time",
                            "title": "Order Date",
                            "shortTitle": "Date",
                            "granularities": ["year", "quarter", "month", "week", "day"],
                        },
                        {"name": "Sales.orderId", "type": "string", "title": "Order ID"},
                        {
                            "name": "Sales.productName",
                            "type": "string",
                            "title": "Product Name",
                        },
                        {
                            "name": "Sales.customerName",
                            "type": "string",
                            "title": "Customer Name",
                        },
                        {"name": "Sales.isReturned", "type": "boolean"},
                    ],
                    "hierarchies": [
                        {
                            "name": "product",
                            "title": "Product Hierarchy",
                            "levels": [
                                "Sales.category",
                                "Sales.subcategory",
                                "Sales.product",
                            ],
                            "cubeName": "Sales",
                        },
                        {
                            "name": "location",
                            "title": "Location Hierarchy",
                            "levels": ["Sales.region", "Sales.country", "Sales.city"],
                            "cubeName": "Sales",
                        },
                    ],
                }
            ]
        }
    )


def create_simple_meta() -> CubeMeta:
    """Orders cube with a time dimension that declares no granularities."""
    return CubeMeta.model_validate(
        {
            "cubes": [
                {
                    "name": "Orders",
                    "title": "Orders",
                    "measures": [],
                    "dimensions": [
                        {
                            "name": "Orders.createdAt",
                            "type": "time",
                            "shortTitle": "Created",
                        },
                        {"name": "Orders.status", "type": "string"},
                    ],
                }
            ]
        }
    )


def click(clicked_field: str, x_value, **data_point) -> ClickEvent:
    return ClickEvent(
        clicked_field=clicked_field,
        x_value=x_value,
        data_point={**data_point, clicked_field: 100},
        position={"x": 100, "y": 100},
    )


def query(**kwargs) -> Query:
    """Query from camelCase keyword arguments, as the front-end sends it."""
    return Query.model_validate(kwargs)
