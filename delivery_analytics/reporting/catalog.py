"""Catalog of the business reports: what each one returns and which knobs it takes."""

from typing import Dict, List, Any, Optional, Union

from delivery_analytics.core import config
from delivery_analytics.core.exceptions import ReportNotFoundError
from delivery_analytics.reporting.schemas import ColumnFormat, ParameterType


class ReportParameter:
    """Definition of a tunable report parameter."""

    def __init__(
        self,
        name: str,
        param_type: ParameterType,
        default: Union[int, float, str],
        description: Optional[str] = None,
        min_value: Optional[float] = None,
    ):
        self.name = name
        self.type = param_type
        self.default = default
        self.description = description
        self.min_value = min_value


class ReportColumn:
    """Definition of an output column."""

    def __init__(self, name: str, format_type: ColumnFormat = ColumnFormat.TEXT):
        self.name = name
        self.format_type = format_type


class ReportDefinition:
    """Definition of a report.

    `method` names the AnalyticsQueryEngine method that produces the rows;
    parameter names match that method's keyword arguments.
    """

    def __init__(
        self,
        key: str,
        number: int,
        title: str,
        description: str,
        columns: List[ReportColumn],
        parameters: Optional[List[ReportParameter]] = None,
        method: Optional[str] = None,
    ):
        self.key = key
        self.number = number
        self.title = title
        self.description = description
        self.columns = columns
        self.parameters = parameters or []
        self.method = method or key

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def defaults(self) -> Dict[str, Any]:
        return {param.name: param.default for param in self.parameters}

    def get_parameter(self, name: str) -> Optional[ReportParameter]:
        return next((param for param in self.parameters if param.name == name), None)


# Shorthands for the registrations below
TEXT = ColumnFormat.TEXT
NUMBER = ColumnFormat.NUMBER
CURRENCY = ColumnFormat.CURRENCY
PERCENTAGE = ColumnFormat.PERCENTAGE


def _columns(*specs) -> List[ReportColumn]:
    return [ReportColumn(name, fmt) for name, fmt in specs]


class ReportCatalog:
    """Ordered registry of report definitions, keyed by report key."""

    def __init__(self, definitions: Optional[List[ReportDefinition]] = None):
        self._definitions: Dict[str, ReportDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: ReportDefinition) -> None:
        if definition.key in self._definitions:
            raise ValueError(f"Report '{definition.key}' is already registered")
        self._definitions[definition.key] = definition

    def get(self, key: str) -> ReportDefinition:
        try:
            return self._definitions[key]
        except KeyError:
            raise ReportNotFoundError(f"Report '{key}' not found") from None

    def all(self) -> List[ReportDefinition]:
        return sorted(self._definitions.values(), key=lambda d: d.number)

    def keys(self) -> List[str]:
        return [d.key for d in self.all()]

    def __contains__(self, key: str) -> bool:
        return key in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


REPORT_DEFINITIONS = [
    ReportDefinition(
        key="top_dishes_by_customer",
        number=1,
        title="Top Ordered Dishes",
        description="A customer's most frequently ordered dishes per year, top N by dense rank.",
        parameters=[
            ReportParameter("customer_name", ParameterType.STRING, config.DEFAULT_CUSTOMER_NAME,
                            "Customer to analyse"),
            ReportParameter("top_n", ParameterType.INTEGER, config.TOP_DISHES_LIMIT,
                            "Number of dense ranks to keep per year", min_value=1),
        ],
        columns=_columns(
            ("customer_name", TEXT), ("order_year", TEXT), ("dish_name", TEXT), ("total_orders", NUMBER),
        ),
    ),
    ReportDefinition(
        key="popular_time_slots",
        number=2,
        title="Popular Time Slots",
        description="Orders per two-hour slot of the day, busiest first.",
        columns=_columns(("start_time", TEXT), ("end_time", TEXT), ("total_orders", NUMBER)),
    ),
    ReportDefinition(
        key="order_value_analysis",
        number=3,
        title="Order Value Analysis",
        description="Average order value of customers with more than the minimum number of orders.",
        parameters=[
            ReportParameter("min_orders", ParameterType.INTEGER, config.AOV_MIN_ORDERS,
                            "Customers must have strictly more orders than this"),
        ],
        columns=_columns(("customer_name", TEXT), ("total_orders", NUMBER), ("aov", CURRENCY)),
    ),
    ReportDefinition(
        key="high_value_customers",
        number=4,
        title="High-Value Customers",
        description="Customers whose total spend exceeds the threshold.",
        parameters=[
            ReportParameter("min_spent", ParameterType.NUMBER, config.HIGH_VALUE_MIN_SPENT,
                            "Spend threshold (exclusive)"),
        ],
        columns=_columns(("customer_id", TEXT), ("customer_name", TEXT), ("total_spent", CURRENCY)),
    ),
    ReportDefinition(
        key="orders_without_delivery",
        number=5,
        title="Orders Without Delivery",
        description="Orders per restaurant that were never delivered.",
        columns=_columns(
            ("restaurant_id", TEXT), ("restaurant_name", TEXT), ("city", TEXT), ("not_delivered", NUMBER),
        ),
    ),
    ReportDefinition(
        key="restaurant_revenue_ranking",
        number=6,
        title="Restaurant Revenue Ranking",
        description="Top-revenue restaurant per city over the trailing year before the latest order.",
        columns=_columns(("city", TEXT), ("restaurant_name", TEXT), ("revenue", CURRENCY), ("rank", NUMBER)),
    ),
    ReportDefinition(
        key="most_popular_dish_by_city",
        number=7,
        title="Most Popular Dish by City",
        description="The most ordered dish in every city; ties are all listed.",
        columns=_columns(("city", TEXT), ("dish_name", TEXT), ("total_orders", NUMBER), ("rank", NUMBER)),
    ),
    ReportDefinition(
        key="customer_churn",
        number=8,
        title="Customer Churn",
        description="Customers who ordered in the active year but not in the churn year.",
        parameters=[
            ReportParameter("active_year", ParameterType.INTEGER, config.CHURN_ACTIVE_YEAR),
            ReportParameter("churn_year", ParameterType.INTEGER, config.CHURN_YEAR),
        ],
        columns=_columns(("customer_id", TEXT), ("customer_name", TEXT)),
    ),
    ReportDefinition(
        key="cancellation_rate_comparison",
        number=9,
        title="Cancellation Rate Comparison",
        description="Not-delivered percentage per restaurant for two years side by side.",
        parameters=[
            ReportParameter("previous_year", ParameterType.INTEGER, config.CANCELLATION_PREVIOUS_YEAR),
            ReportParameter("current_year", ParameterType.INTEGER, config.CANCELLATION_CURRENT_YEAR),
        ],
        columns=_columns(
            ("restaurant_id", TEXT),
            ("restaurant_name", TEXT),
            ("previous_year_cancel_ratio", PERCENTAGE),
            ("current_year_cancel_ratio", PERCENTAGE),
        ),
    ),
    ReportDefinition(
        key="rider_average_delivery_time",
        number=10,
        title="Rider Average Delivery Time",
        description="Mean minutes from order to delivery per rider, delivered orders only.",
        columns=_columns(("rider_id", TEXT), ("rider_name", TEXT), ("avg_delivery_time_mins", NUMBER)),
    ),
    ReportDefinition(
        key="restaurant_growth_ratio",
        number=11,
        title="Restaurant Growth Ratio",
        description="Month-over-month growth of delivered orders per restaurant.",
        columns=_columns(
            ("restaurant_id", TEXT),
            ("month", TEXT),
            ("prev_month_orders", NUMBER),
            ("current_month_orders", NUMBER),
            ("growth_ratio", PERCENTAGE),
        ),
    ),
    ReportDefinition(
        key="customer_segmentation",
        number=12,
        title="Customer Segmentation",
        description="Gold and Silver customers split on total spend against the global average order value.",
        columns=_columns(("customer_category", TEXT), ("total_orders", NUMBER), ("total_revenue", CURRENCY)),
    ),
    ReportDefinition(
        key="rider_monthly_earnings",
        number=13,
        title="Rider Monthly Earnings",
        description="Revenue of orders each rider carried per month and the rider's commission.",
        parameters=[
            ReportParameter("commission_rate", ParameterType.NUMBER, config.RIDER_COMMISSION_RATE,
                            "Share of revenue paid to the rider"),
        ],
        columns=_columns(
            ("rider_id", TEXT), ("month", TEXT), ("revenue", CURRENCY), ("rider_earning", CURRENCY),
        ),
    ),
    ReportDefinition(
        key="order_frequency_by_day",
        number=14,
        title="Order Frequency by Day",
        description="Peak day of the week for every restaurant.",
        columns=_columns(
            ("restaurant_name", TEXT), ("day_of_week", TEXT), ("total_orders", NUMBER), ("rank", NUMBER),
        ),
    ),
    ReportDefinition(
        key="customer_lifetime_value",
        number=15,
        title="Customer Lifetime Value",
        description="Total revenue per customer over all orders.",
        columns=_columns(("customer_id", TEXT), ("customer_name", TEXT), ("clv", CURRENCY)),
    ),
    ReportDefinition(
        key="monthly_sales_trend",
        number=16,
        title="Monthly Sales Trend",
        description="Sales per month next to the previous month with sales.",
        columns=_columns(
            ("year", TEXT), ("month", TEXT), ("total_sale", CURRENCY), ("prev_month_sale", CURRENCY),
        ),
    ),
    ReportDefinition(
        key="city_revenue_ranking",
        number=17,
        title="City Revenue Ranking",
        description="Cities ranked by revenue within one calendar year.",
        parameters=[
            ReportParameter("year", ParameterType.INTEGER, config.CITY_RANKING_YEAR),
        ],
        columns=_columns(("city", TEXT), ("total_revenue", CURRENCY), ("city_rank", NUMBER)),
    ),
]

report_catalog = ReportCatalog(REPORT_DEFINITIONS)
