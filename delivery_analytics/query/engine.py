# delivery_analytics/query/engine.py
"""Analytical query engine: one set-oriented SQL query per business report."""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import List, Dict, Any, Optional

from sqlalchemy import Float, and_, case, cast, desc, extract, func, or_, select
from sqlalchemy.orm import Session

from delivery_analytics.core import config
from delivery_analytics.query.ranking import dense_rank, standard_rank, top_ranked, previous_row
from delivery_analytics.store.models import Restaurant, Customer, Rider, Order, Delivery
from delivery_analytics.utils import round_half_up, month_label, weekday_name

logger = logging.getLogger(__name__)

# Shared date/time parts of an order
ORDER_YEAR = extract("year", Order.order_date)
ORDER_MONTH = extract("month", Order.order_date)
ORDER_WEEKDAY = extract("dow", Order.order_date)
ORDER_HOUR = extract("hour", Order.order_time)

# An order counts as not delivered when it has no delivery row at all, or the
# delivery row carries any status other than Delivered. Needs an outer join.
NOT_DELIVERED = or_(
    Delivery.delivery_id.is_(None),
    Delivery.delivery_status != config.DELIVERED_STATUS,
)


def minutes_of_day(time_column) -> Any:
    """Minutes since midnight for a TIME column."""
    return (
        extract("hour", time_column) * 60
        + extract("minute", time_column)
        + extract("second", time_column) / 60.0
    )


def percent_of(numerator, denominator) -> Any:
    """numerator / denominator * 100, NULL when the denominator is zero."""
    return cast(numerator, Float) * 100.0 / func.nullif(denominator, 0)


class AnalyticsQueryEngine:
    """Runs the business reports against the store.

    Every report is a pure read: it builds one SELECT, executes it on the
    session and returns plain dict rows with the report's column names, in
    the report's order. Nothing is written and nothing is cached.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fetch(self, stmt) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.db.execute(stmt).mappings().all()]

    # ===== CUSTOMER REPORTS =====

    def top_dishes_by_customer(
        self, customer_name: str = config.DEFAULT_CUSTOMER_NAME, top_n: int = config.TOP_DISHES_LIMIT
    ) -> List[Dict[str, Any]]:
        """Most ordered dishes of one customer per year, top N by dense rank."""
        total_orders = func.count(Order.order_id)
        ranked = (
            select(
                Customer.customer_name.label("customer_name"),
                ORDER_YEAR.label("order_year"),
                Order.order_item.label("dish_name"),
                total_orders.label("total_orders"),
                dense_rank(
                    order_by=total_orders.desc(),
                    partition_by=[Customer.customer_id, ORDER_YEAR],
                ).label("dish_rank"),
            )
            .join(Order, Order.customer_id == Customer.customer_id)
            .where(Customer.customer_name == customer_name)
            .group_by(Customer.customer_id, Customer.customer_name, ORDER_YEAR, Order.order_item)
        )
        stmt = top_ranked(
            ranked,
            rank_column="dish_rank",
            max_rank=top_n,
            columns=["customer_name", "order_year", "dish_name", "total_orders"],
        )
        cols = stmt.selected_columns
        stmt = stmt.order_by(cols.order_year, cols.total_orders.desc(), cols.dish_name)
        return self._fetch(stmt)

    def order_value_analysis(self, min_orders: int = config.AOV_MIN_ORDERS) -> List[Dict[str, Any]]:
        """Average order value of customers with more than `min_orders` orders."""
        total_orders = func.count(Order.order_id)
        stmt = (
            select(
                Customer.customer_name,
                total_orders.label("total_orders"),
                func.avg(Order.total_amount).label("aov"),
            )
            .join(Order, Order.customer_id == Customer.customer_id)
            .group_by(Customer.customer_id, Customer.customer_name)
            .having(total_orders > min_orders)
            .order_by(desc("aov"), Customer.customer_id)
        )
        return [{**row, "aov": round_half_up(row["aov"])} for row in self._fetch(stmt)]

    def high_value_customers(self, min_spent: float = config.HIGH_VALUE_MIN_SPENT) -> List[Dict[str, Any]]:
        """Customers whose total spend exceeds `min_spent`."""
        total_spent = func.sum(Order.total_amount)
        stmt = (
            select(Customer.customer_id, Customer.customer_name, total_spent.label("total_spent"))
            .join(Order, Order.customer_id == Customer.customer_id)
            .group_by(Customer.customer_id, Customer.customer_name)
            .having(total_spent > min_spent)
            .order_by(desc("total_spent"), Customer.customer_id)
        )
        return [{**row, "total_spent": round_half_up(row["total_spent"])} for row in self._fetch(stmt)]

    def customer_churn(
        self, active_year: int = config.CHURN_ACTIVE_YEAR, churn_year: int = config.CHURN_YEAR
    ) -> List[Dict[str, Any]]:
        """Customers who ordered in `active_year` but not at all in `churn_year`."""
        churned_ids = (
            select(Order.customer_id).where(ORDER_YEAR == active_year)
            .except_(select(Order.customer_id).where(ORDER_YEAR == churn_year))
        )
        stmt = (
            select(Customer.customer_id, Customer.customer_name)
            .where(Customer.customer_id.in_(churned_ids))
            .order_by(Customer.customer_id)
        )
        return self._fetch(stmt)

    def customer_segmentation(self) -> List[Dict[str, Any]]:
        """Gold/Silver split against the global average order value."""
        global_aov = select(func.avg(Order.total_amount)).scalar_subquery()
        spend = (
            select(
                Order.customer_id,
                func.count(Order.order_id).label("total_orders"),
                func.sum(Order.total_amount).label("total_spent"),
            )
            .group_by(Order.customer_id)
            .subquery("customer_spend")
        )
        categorized = select(
            case((spend.c.total_spent > global_aov, "Gold"), else_="Silver").label("customer_category"),
            spend.c.total_orders,
            spend.c.total_spent,
        ).subquery("categorized")
        stmt = (
            select(
                categorized.c.customer_category,
                func.sum(categorized.c.total_orders).label("total_orders"),
                func.sum(categorized.c.total_spent).label("total_revenue"),
            )
            .group_by(categorized.c.customer_category)
            .order_by(categorized.c.customer_category)
        )
        return [{**row, "total_revenue": round_half_up(row["total_revenue"])} for row in self._fetch(stmt)]

    def customer_lifetime_value(self) -> List[Dict[str, Any]]:
        """Total revenue per customer over all their orders."""
        clv = func.sum(Order.total_amount)
        stmt = (
            select(Customer.customer_id, Customer.customer_name, clv.label("clv"))
            .join(Order, Order.customer_id == Customer.customer_id)
            .group_by(Customer.customer_id, Customer.customer_name)
            .order_by(desc("clv"), Customer.customer_id)
        )
        return [{**row, "clv": round_half_up(row["clv"])} for row in self._fetch(stmt)]

    # ===== ORDER PATTERN REPORTS =====

    def popular_time_slots(self, slot_hours: int = config.TIME_SLOT_HOURS) -> List[Dict[str, Any]]:
        """Orders per fixed-width time-of-day bucket, busiest first."""
        bucketed = select(
            Order.order_id,
            (ORDER_HOUR - ORDER_HOUR % slot_hours).label("start_time"),
        ).subquery("bucketed")
        total_orders = func.count(bucketed.c.order_id)
        stmt = (
            select(bucketed.c.start_time, total_orders.label("total_orders"))
            .group_by(bucketed.c.start_time)
            .order_by(total_orders.desc(), bucketed.c.start_time)
        )
        return [
            {
                "start_time": row["start_time"],
                "end_time": row["start_time"] + slot_hours,
                "total_orders": row["total_orders"],
            }
            for row in self._fetch(stmt)
        ]

    def most_popular_dish_by_city(self) -> List[Dict[str, Any]]:
        """Most ordered dish in every city; tied dishes are all kept."""
        total_orders = func.count(Order.order_id)
        ranked = (
            select(
                Restaurant.city,
                Order.order_item.label("dish_name"),
                total_orders.label("total_orders"),
                dense_rank(order_by=total_orders.desc(), partition_by=Restaurant.city).label("rank"),
            )
            .join(Restaurant, Restaurant.restaurant_id == Order.restaurant_id)
            .group_by(Restaurant.city, Order.order_item)
        )
        stmt = top_ranked(ranked, rank_column="rank", max_rank=1)
        cols = stmt.selected_columns
        return self._fetch(stmt.order_by(cols.city, cols.dish_name))

    def order_frequency_by_day(self) -> List[Dict[str, Any]]:
        """Peak weekday of every restaurant."""
        total_orders = func.count(Order.order_id)
        ranked = (
            select(
                Restaurant.restaurant_name,
                ORDER_WEEKDAY.label("day_index"),
                total_orders.label("total_orders"),
                standard_rank(order_by=total_orders.desc(), partition_by=Order.restaurant_id).label("rank"),
            )
            .join(Restaurant, Restaurant.restaurant_id == Order.restaurant_id)
            .group_by(Order.restaurant_id, Restaurant.restaurant_name, ORDER_WEEKDAY)
        )
        stmt = top_ranked(ranked, rank_column="rank", max_rank=1)
        cols = stmt.selected_columns
        stmt = stmt.order_by(cols.restaurant_name, cols.day_index)
        return [
            {
                "restaurant_name": row["restaurant_name"],
                "day_of_week": weekday_name(row["day_index"]),
                "total_orders": row["total_orders"],
                "rank": row["rank"],
            }
            for row in self._fetch(stmt)
        ]

    def monthly_sales_trend(self) -> List[Dict[str, Any]]:
        """Monthly sales next to the previous month present in the data."""
        total_sale = func.sum(Order.total_amount)
        stmt = (
            select(
                ORDER_YEAR.label("year"),
                ORDER_MONTH.label("month"),
                total_sale.label("total_sale"),
                previous_row(total_sale, order_by=[ORDER_YEAR, ORDER_MONTH]).label("prev_month_sale"),
            )
            .group_by(ORDER_YEAR, ORDER_MONTH)
            .order_by(ORDER_YEAR, ORDER_MONTH)
        )
        return [
            {
                **row,
                "total_sale": round_half_up(row["total_sale"]),
                "prev_month_sale": round_half_up(row["prev_month_sale"]),
            }
            for row in self._fetch(stmt)
        ]

    # ===== RESTAURANT REPORTS =====

    def orders_without_delivery(self) -> List[Dict[str, Any]]:
        """Not-delivered orders per restaurant (missing delivery or non-Delivered status)."""
        not_delivered = func.count(Order.order_id)
        stmt = (
            select(
                Restaurant.restaurant_id,
                Restaurant.restaurant_name,
                Restaurant.city,
                not_delivered.label("not_delivered"),
            )
            .select_from(Order)
            .join(Restaurant, Restaurant.restaurant_id == Order.restaurant_id)
            .outerjoin(Delivery, Delivery.order_id == Order.order_id)
            .where(NOT_DELIVERED)
            .group_by(Restaurant.restaurant_id, Restaurant.restaurant_name, Restaurant.city)
            .order_by(not_delivered.desc(), Restaurant.restaurant_id)
        )
        return self._fetch(stmt)

    def latest_order_date(self):
        """Most recent order date in the store, or None when there are no orders."""
        return self.db.execute(select(func.max(Order.order_date))).scalar()

    def restaurant_revenue_ranking(
        self, window_days: int = config.TRAILING_WINDOW_DAYS
    ) -> List[Dict[str, Any]]:
        """Top-revenue restaurant per city over the trailing window before the latest order."""
        anchor = self.latest_order_date()
        if anchor is None:
            return []
        window_start = anchor - timedelta(days=window_days)
        logger.debug(f"Revenue ranking window {window_start} to {anchor}")

        revenue = func.sum(Order.total_amount)
        ranked = (
            select(
                Restaurant.city,
                Restaurant.restaurant_name,
                revenue.label("revenue"),
                standard_rank(order_by=revenue.desc(), partition_by=Restaurant.city).label("rank"),
            )
            .join(Restaurant, Restaurant.restaurant_id == Order.restaurant_id)
            .where(Order.order_date >= window_start)
            .group_by(Restaurant.city, Restaurant.restaurant_id, Restaurant.restaurant_name)
        )
        stmt = top_ranked(ranked, rank_column="rank", max_rank=1)
        cols = stmt.selected_columns
        stmt = stmt.order_by(cols.city, cols.restaurant_name)
        return [{**row, "revenue": round_half_up(row["revenue"])} for row in self._fetch(stmt)]

    def _cancel_ratio_for_year(self, year: int, name: str):
        """Per-restaurant not-delivered percentage for one calendar year."""
        total_orders = func.count(Order.order_id)
        not_delivered = func.count(case((NOT_DELIVERED, Order.order_id)))
        return (
            select(
                Order.restaurant_id,
                percent_of(not_delivered, total_orders).label("cancel_ratio"),
            )
            .outerjoin(Delivery, Delivery.order_id == Order.order_id)
            .where(ORDER_YEAR == year)
            .group_by(Order.restaurant_id)
            .subquery(name)
        )

    def cancellation_rate_comparison(
        self,
        previous_year: int = config.CANCELLATION_PREVIOUS_YEAR,
        current_year: int = config.CANCELLATION_CURRENT_YEAR,
    ) -> List[Dict[str, Any]]:
        """Not-delivered ratio per restaurant for two years side by side.

        Restaurants without orders in either year drop out (inner join).
        """
        previous = self._cancel_ratio_for_year(previous_year, "previous_ratio")
        current = self._cancel_ratio_for_year(current_year, "current_ratio")
        stmt = (
            select(
                Restaurant.restaurant_id,
                Restaurant.restaurant_name,
                previous.c.cancel_ratio.label("previous_year_cancel_ratio"),
                current.c.cancel_ratio.label("current_year_cancel_ratio"),
            )
            .select_from(previous)
            .join(current, current.c.restaurant_id == previous.c.restaurant_id)
            .join(Restaurant, Restaurant.restaurant_id == previous.c.restaurant_id)
            .order_by(Restaurant.restaurant_id)
        )
        return [
            {
                **row,
                "previous_year_cancel_ratio": round_half_up(row["previous_year_cancel_ratio"]),
                "current_year_cancel_ratio": round_half_up(row["current_year_cancel_ratio"]),
            }
            for row in self._fetch(stmt)
        ]

    def restaurant_growth_ratio(self) -> List[Dict[str, Any]]:
        """Month-over-month growth of delivered orders per restaurant.

        Compared against the restaurant's previous month with activity; the first
        month of every restaurant has nothing to compare with and is left out.
        """
        monthly = (
            select(
                Order.restaurant_id,
                ORDER_YEAR.label("year"),
                ORDER_MONTH.label("month"),
                func.count(Order.order_id).label("current_month_orders"),
            )
            .join(Delivery, Delivery.order_id == Order.order_id)
            .where(Delivery.delivery_status == config.DELIVERED_STATUS)
            .group_by(Order.restaurant_id, ORDER_YEAR, ORDER_MONTH)
            .subquery("monthly_delivered")
        )
        lagged = select(
            monthly.c.restaurant_id,
            monthly.c.year,
            monthly.c.month,
            previous_row(
                monthly.c.current_month_orders,
                order_by=[monthly.c.year, monthly.c.month],
                partition_by=monthly.c.restaurant_id,
            ).label("prev_month_orders"),
            monthly.c.current_month_orders,
        ).subquery("lagged")
        growth = percent_of(
            lagged.c.current_month_orders - lagged.c.prev_month_orders, lagged.c.prev_month_orders
        )
        stmt = (
            select(
                lagged.c.restaurant_id,
                lagged.c.year,
                lagged.c.month,
                lagged.c.prev_month_orders,
                lagged.c.current_month_orders,
                growth.label("growth_ratio"),
            )
            .where(lagged.c.prev_month_orders.isnot(None))
            .order_by(lagged.c.restaurant_id, lagged.c.year, lagged.c.month)
        )
        return [
            {
                "restaurant_id": row["restaurant_id"],
                "month": month_label(row["year"], row["month"]),
                "prev_month_orders": row["prev_month_orders"],
                "current_month_orders": row["current_month_orders"],
                "growth_ratio": round_half_up(row["growth_ratio"]),
            }
            for row in self._fetch(stmt)
        ]

    def city_revenue_ranking(self, year: int = config.CITY_RANKING_YEAR) -> List[Dict[str, Any]]:
        """Cities ranked by revenue within one calendar year."""
        total_revenue = func.sum(Order.total_amount)
        stmt = (
            select(
                Restaurant.city,
                total_revenue.label("total_revenue"),
                standard_rank(order_by=total_revenue.desc()).label("city_rank"),
            )
            .join(Restaurant, Restaurant.restaurant_id == Order.restaurant_id)
            .where(ORDER_YEAR == year)
            .group_by(Restaurant.city)
            .order_by("city_rank", Restaurant.city)
        )
        return [{**row, "total_revenue": round_half_up(row["total_revenue"])} for row in self._fetch(stmt)]

    # ===== RIDER REPORTS =====

    def rider_average_delivery_time(self) -> List[Dict[str, Any]]:
        """Mean minutes from order to delivery per rider, delivered orders only."""
        elapsed = minutes_of_day(Delivery.delivery_time) - minutes_of_day(Order.order_time)
        # Delivered past midnight
        elapsed = case((elapsed < 0, elapsed + 1440), else_=elapsed)
        stmt = (
            select(
                Rider.rider_id,
                Rider.rider_name,
                func.avg(elapsed).label("avg_delivery_time_mins"),
            )
            .select_from(Delivery)
            .join(Order, Order.order_id == Delivery.order_id)
            .join(Rider, Rider.rider_id == Delivery.rider_id)
            .where(
                and_(
                    Delivery.delivery_status == config.DELIVERED_STATUS,
                    Delivery.delivery_time.isnot(None),
                )
            )
            .group_by(Rider.rider_id, Rider.rider_name)
            .order_by(Rider.rider_id)
        )
        return [
            {**row, "avg_delivery_time_mins": round_half_up(row["avg_delivery_time_mins"])}
            for row in self._fetch(stmt)
        ]

    def rider_monthly_earnings(
        self, commission_rate: float = config.RIDER_COMMISSION_RATE
    ) -> List[Dict[str, Any]]:
        """Revenue of orders each rider carried per month, and the rider's commission on it."""
        revenue = func.sum(Order.total_amount)
        stmt = (
            select(
                Delivery.rider_id,
                ORDER_YEAR.label("year"),
                ORDER_MONTH.label("month"),
                revenue.label("revenue"),
            )
            .select_from(Order)
            .join(Delivery, Delivery.order_id == Order.order_id)
            .group_by(Delivery.rider_id, ORDER_YEAR, ORDER_MONTH)
            .order_by(Delivery.rider_id, ORDER_YEAR, ORDER_MONTH)
        )
        return [
            {
                "rider_id": row["rider_id"],
                "month": month_label(row["year"], row["month"]),
                "revenue": round_half_up(row["revenue"]),
                "rider_earning": _commission(row["revenue"], commission_rate),
            }
            for row in self._fetch(stmt)
        ]


def _commission(revenue: Optional[float], rate: float) -> Optional[float]:
    if revenue is None:
        return None
    return round_half_up(Decimal(str(revenue)) * Decimal(str(rate)))
