"""
Unit tests for the analytics query engine.
Every report runs against the sample dataset from conftest; expected rows are
worked out by hand from that dataset.
"""

import pytest

from delivery_analytics.query import AnalyticsQueryEngine
from delivery_analytics.store.loader import DatasetLoader


def _base_store(orders, deliveries=()):
    """A one-restaurant, one-customer, one-rider store around the given rows"""
    return {
        "restaurants": [{"restaurant_id": 1, "restaurant_name": "Spice Route", "city": "Mumbai"}],
        "customers": [{"customer_id": 1, "customer_name": "Arjun Mehta"}],
        "riders": [{"rider_id": 1, "rider_name": "Vikram Singh"}],
        "orders": list(orders),
        "deliveries": list(deliveries),
    }


def _order(order_id, order_date, order_time="12:00:00", amount=100, item="Biryani"):
    return {
        "order_id": order_id, "customer_id": 1, "restaurant_id": 1, "order_item": item,
        "order_date": order_date, "order_time": order_time, "total_amount": amount,
    }


def _delivery(delivery_id, order_id, delivery_time, status="Delivered"):
    return {
        "delivery_id": delivery_id, "order_id": order_id, "delivery_status": status,
        "delivery_time": delivery_time, "rider_id": 1,
    }


@pytest.fixture
def engine_for(db_session):
    """Load a custom dataset and return an engine over it"""
    def _load(dataset):
        DatasetLoader(db_session).load(dataset)
        return AnalyticsQueryEngine(db_session)
    return _load


@pytest.fixture
def query_engine(db_session, loaded_store):
    return AnalyticsQueryEngine(db_session)


class TestCustomerReports:
    """Reports 1, 3, 4, 8, 12 and 15"""

    def test_top_dishes_by_customer_defaults(self, query_engine):
        """Arjun Mehta's dishes per year, most ordered first"""
        rows = query_engine.top_dishes_by_customer()

        assert rows == [
            {"customer_name": "Arjun Mehta", "order_year": 2023, "dish_name": "Biryani", "total_orders": 2},
            {"customer_name": "Arjun Mehta", "order_year": 2023, "dish_name": "Masala Dosa", "total_orders": 1},
            {"customer_name": "Arjun Mehta", "order_year": 2023, "dish_name": "Paneer Tikka", "total_orders": 1},
            {"customer_name": "Arjun Mehta", "order_year": 2024, "dish_name": "Biryani", "total_orders": 1},
            {"customer_name": "Arjun Mehta", "order_year": 2024, "dish_name": "Butter Chicken", "total_orders": 1},
        ]

    def test_top_dishes_keeps_ties_within_dense_rank(self, query_engine):
        """top_n counts distinct ranks, so tied dishes all survive"""
        rows = query_engine.top_dishes_by_customer(top_n=1)

        assert [(r["order_year"], r["dish_name"]) for r in rows] == [
            (2023, "Biryani"),
            (2024, "Biryani"),
            (2024, "Butter Chicken"),
        ]

    def test_top_dishes_default_keeps_five_distinct_ranks(self, engine_for):
        """Counts 7,6,6,5,4,3,2,1: the tie shares rank 2, so G and H fall past rank 5"""
        counts = {"A": 7, "B": 6, "C": 6, "D": 5, "E": 4, "F": 3, "G": 2, "H": 1}
        items = [item for item, count in counts.items() for _ in range(count)]
        orders = [_order(i, "2023-03-01", item=item) for i, item in enumerate(items, start=1)]

        rows = engine_for(_base_store(orders)).top_dishes_by_customer()

        assert [(r["dish_name"], r["total_orders"]) for r in rows] == [
            ("A", 7), ("B", 6), ("C", 6), ("D", 5), ("E", 4), ("F", 3),
        ]

    def test_top_dishes_sorted_desc_per_year(self, query_engine):
        rows = query_engine.top_dishes_by_customer(customer_name="Priya Sharma")

        for year in {r["order_year"] for r in rows}:
            counts = [r["total_orders"] for r in rows if r["order_year"] == year]
            assert counts == sorted(counts, reverse=True)

    def test_top_dishes_unknown_customer_is_empty(self, query_engine):
        assert query_engine.top_dishes_by_customer(customer_name="Nobody") == []

    def test_order_value_analysis_default_threshold(self, query_engine):
        """Nobody in the sample comes near 750 orders"""
        assert query_engine.order_value_analysis() == []

    def test_order_value_analysis(self, query_engine):
        rows = query_engine.order_value_analysis(min_orders=2)

        assert rows == [
            {"customer_name": "Arjun Mehta", "total_orders": 6, "aov": 311.67},
            {"customer_name": "Priya Sharma", "total_orders": 3, "aov": 223.33},
        ]

    def test_order_value_analysis_threshold_is_exclusive(self, query_engine):
        rows = query_engine.order_value_analysis(min_orders=3)
        assert [r["customer_name"] for r in rows] == ["Arjun Mehta"]

    def test_high_value_customers(self, query_engine):
        assert query_engine.high_value_customers() == []

        rows = query_engine.high_value_customers(min_spent=600)
        assert rows == [
            {"customer_id": 1, "customer_name": "Arjun Mehta", "total_spent": 1870.0},
            {"customer_id": 2, "customer_name": "Priya Sharma", "total_spent": 670.0},
        ]

    def test_high_value_customers_threshold_is_exclusive(self, query_engine):
        rows = query_engine.high_value_customers(min_spent=670)
        assert [r["customer_id"] for r in rows] == [1]

    def test_customer_churn(self, query_engine):
        """Rahul ordered in 2023 only"""
        assert query_engine.customer_churn() == [{"customer_id": 3, "customer_name": "Rahul Verma"}]

    def test_customer_churn_other_years(self, query_engine):
        """Everybody who ordered in 2024 is 'churned' against 2025"""
        rows = query_engine.customer_churn(active_year=2024, churn_year=2025)
        assert [r["customer_id"] for r in rows] == [1, 2]

    def test_customer_segmentation(self, query_engine):
        """Global AOV is 266; Arjun and Priya spent more, Rahul less"""
        rows = query_engine.customer_segmentation()

        assert rows == [
            {"customer_category": "Gold", "total_orders": 9, "total_revenue": 2540.0},
            {"customer_category": "Silver", "total_orders": 1, "total_revenue": 120.0},
        ]

    def test_customer_segmentation_totals_match_store(self, query_engine, loaded_store):
        rows = query_engine.customer_segmentation()

        assert sum(r["total_orders"] for r in rows) == loaded_store.orders
        assert sum(r["total_revenue"] for r in rows) == pytest.approx(2660.0)

    def test_customer_lifetime_value(self, query_engine):
        rows = query_engine.customer_lifetime_value()

        assert rows == [
            {"customer_id": 1, "customer_name": "Arjun Mehta", "clv": 1870.0},
            {"customer_id": 2, "customer_name": "Priya Sharma", "clv": 670.0},
            {"customer_id": 3, "customer_name": "Rahul Verma", "clv": 120.0},
        ]

    def test_customer_lifetime_value_is_deterministic(self, query_engine):
        assert query_engine.customer_lifetime_value() == query_engine.customer_lifetime_value()


class TestOrderPatternReports:
    """Reports 2, 7, 14 and 16"""

    def test_popular_time_slots(self, query_engine):
        rows = query_engine.popular_time_slots()

        assert rows == [
            {"start_time": 12, "end_time": 14, "total_orders": 3},
            {"start_time": 18, "end_time": 20, "total_orders": 3},
            {"start_time": 20, "end_time": 22, "total_orders": 2},
            {"start_time": 8, "end_time": 10, "total_orders": 1},
            {"start_time": 10, "end_time": 12, "total_orders": 1},
        ]

    def test_popular_time_slots_cover_every_order(self, query_engine, loaded_store):
        rows = query_engine.popular_time_slots()
        assert sum(r["total_orders"] for r in rows) == loaded_store.orders

    def test_most_popular_dish_by_city(self, query_engine):
        rows = query_engine.most_popular_dish_by_city()

        assert rows == [
            {"city": "Bengaluru", "dish_name": "Masala Dosa", "total_orders": 2, "rank": 1},
            {"city": "Mumbai", "dish_name": "Biryani", "total_orders": 4, "rank": 1},
        ]

    def test_most_popular_dish_by_city_lists_ties(self, engine_for):
        engine = engine_for(_base_store([
            _order(1, "2023-01-02", item="Biryani"),
            _order(2, "2023-01-03", item="Kebab"),
        ]))

        rows = engine.most_popular_dish_by_city()
        assert [r["dish_name"] for r in rows] == ["Biryani", "Kebab"]
        assert all(r["rank"] == 1 for r in rows)

    def test_order_frequency_by_day(self, query_engine):
        """Spice Route peaks on Sunday; the others tie across several days"""
        rows = query_engine.order_frequency_by_day()

        assert rows == [
            {"restaurant_name": "Dosa Corner", "day_of_week": "Wednesday", "total_orders": 1, "rank": 1},
            {"restaurant_name": "Dosa Corner", "day_of_week": "Thursday", "total_orders": 1, "rank": 1},
            {"restaurant_name": "Dosa Corner", "day_of_week": "Friday", "total_orders": 1, "rank": 1},
            {"restaurant_name": "Spice Route", "day_of_week": "Sunday", "total_orders": 2, "rank": 1},
            {"restaurant_name": "Tandoor House", "day_of_week": "Tuesday", "total_orders": 1, "rank": 1},
            {"restaurant_name": "Tandoor House", "day_of_week": "Friday", "total_orders": 1, "rank": 1},
        ]

    def test_monthly_sales_trend(self, query_engine):
        rows = query_engine.monthly_sales_trend()

        assert rows == [
            {"year": 2023, "month": 1, "total_sale": 300.0, "prev_month_sale": None},
            {"year": 2023, "month": 2, "total_sale": 570.0, "prev_month_sale": 300.0},
            {"year": 2023, "month": 3, "total_sale": 550.0, "prev_month_sale": 570.0},
            {"year": 2023, "month": 5, "total_sale": 180.0, "prev_month_sale": 550.0},
            {"year": 2023, "month": 6, "total_sale": 120.0, "prev_month_sale": 180.0},
            {"year": 2024, "month": 1, "total_sale": 850.0, "prev_month_sale": 120.0},
            {"year": 2024, "month": 2, "total_sale": 90.0, "prev_month_sale": 850.0},
        ]

    def test_monthly_sales_trend_skips_gaps(self, query_engine):
        """May 2023 looks back to March because April has no sales"""
        may = next(r for r in query_engine.monthly_sales_trend() if (r["year"], r["month"]) == (2023, 5))
        assert may["prev_month_sale"] == 550.0


class TestRestaurantReports:
    """Reports 5, 6, 9, 11 and 17"""

    def test_orders_without_delivery(self, query_engine):
        """Missing delivery rows and non-Delivered statuses both count"""
        rows = query_engine.orders_without_delivery()

        assert rows == [
            {"restaurant_id": 3, "restaurant_name": "Dosa Corner", "city": "Bengaluru", "not_delivered": 2},
            {"restaurant_id": 2, "restaurant_name": "Tandoor House", "city": "Mumbai", "not_delivered": 1},
        ]

    def test_orders_without_delivery_counts_missing_and_cancelled(self, engine_for):
        engine = engine_for(_base_store(
            [_order(1, "2023-01-02"), _order(2, "2023-01-03"), _order(3, "2023-01-04")],
            [_delivery(1, 2, None, status="Cancelled"), _delivery(2, 3, "12:30:00")],
        ))

        rows = engine.orders_without_delivery()
        assert rows == [
            {"restaurant_id": 1, "restaurant_name": "Spice Route", "city": "Mumbai", "not_delivered": 2},
        ]

    def test_restaurant_revenue_ranking(self, query_engine):
        """Order 1 is older than a year before 2024-02-14 and drops out"""
        rows = query_engine.restaurant_revenue_ranking()

        assert rows == [
            {"city": "Bengaluru", "restaurant_name": "Dosa Corner", "revenue": 360.0, "rank": 1},
            {"city": "Mumbai", "restaurant_name": "Spice Route", "revenue": 1570.0, "rank": 1},
        ]

    def test_restaurant_revenue_ranking_empty_store(self, db_session):
        assert AnalyticsQueryEngine(db_session).restaurant_revenue_ranking() == []

    def test_cancellation_rate_comparison(self, query_engine):
        """Tandoor House has no 2024 orders and is left out"""
        rows = query_engine.cancellation_rate_comparison()

        assert rows == [
            {"restaurant_id": 1, "restaurant_name": "Spice Route",
             "previous_year_cancel_ratio": 0.0, "current_year_cancel_ratio": 0.0},
            {"restaurant_id": 3, "restaurant_name": "Dosa Corner",
             "previous_year_cancel_ratio": 50.0, "current_year_cancel_ratio": 100.0},
        ]

    def test_cancellation_rate_same_year_on_both_sides(self, query_engine):
        """Comparing a year with itself repeats its ratio"""
        rows = query_engine.cancellation_rate_comparison(previous_year=2023, current_year=2023)

        assert [
            (r["restaurant_id"], r["previous_year_cancel_ratio"], r["current_year_cancel_ratio"])
            for r in rows
        ] == [(1, 0.0, 0.0), (2, 50.0, 50.0), (3, 50.0, 50.0)]

    def test_restaurant_growth_ratio(self, query_engine):
        """Only Spice Route has more than one month of delivered orders"""
        rows = query_engine.restaurant_growth_ratio()

        assert rows == [
            {"restaurant_id": 1, "month": "2023-02", "prev_month_orders": 1,
             "current_month_orders": 1, "growth_ratio": 0.0},
            {"restaurant_id": 1, "month": "2023-03", "prev_month_orders": 1,
             "current_month_orders": 1, "growth_ratio": 0.0},
            {"restaurant_id": 1, "month": "2024-01", "prev_month_orders": 1,
             "current_month_orders": 2, "growth_ratio": 100.0},
        ]

    def test_restaurant_growth_ratio_decline(self, engine_for):
        engine = engine_for(_base_store(
            [_order(1, "2023-01-02"), _order(2, "2023-01-03"), _order(3, "2023-01-04"), _order(4, "2023-02-01")],
            [_delivery(i, i, "12:30:00") for i in range(1, 5)],
        ))

        rows = engine.restaurant_growth_ratio()
        assert len(rows) == 1
        assert rows[0]["growth_ratio"] == -66.67

    def test_city_revenue_ranking(self, query_engine):
        rows = query_engine.city_revenue_ranking()

        assert rows == [
            {"city": "Mumbai", "total_revenue": 1450.0, "city_rank": 1},
            {"city": "Bengaluru", "total_revenue": 270.0, "city_rank": 2},
        ]

    def test_city_revenue_ranking_other_year(self, query_engine):
        rows = query_engine.city_revenue_ranking(year=2024)
        assert [(r["city"], r["total_revenue"]) for r in rows] == [("Mumbai", 850.0), ("Bengaluru", 90.0)]


class TestRiderReports:
    """Reports 10 and 13"""

    def test_rider_average_delivery_time(self, query_engine):
        rows = query_engine.rider_average_delivery_time()

        assert rows == [
            {"rider_id": 1, "rider_name": "Vikram Singh", "avg_delivery_time_mins": 36.0},
            {"rider_id": 2, "rider_name": "Anita Rao", "avg_delivery_time_mins": 42.5},
        ]

    def test_single_delivery_time(self, engine_for):
        engine = engine_for(_base_store([_order(1, "2023-01-02", "10:00:00")], [_delivery(1, 1, "10:45:00")]))

        assert engine.rider_average_delivery_time() == [
            {"rider_id": 1, "rider_name": "Vikram Singh", "avg_delivery_time_mins": 45.0},
        ]

    def test_delivery_past_midnight(self, engine_for):
        engine = engine_for(_base_store([_order(1, "2023-01-02", "23:50:00")], [_delivery(1, 1, "00:20:00")]))

        assert engine.rider_average_delivery_time()[0]["avg_delivery_time_mins"] == 30.0

    def test_rider_monthly_earnings(self, query_engine):
        rows = query_engine.rider_monthly_earnings()

        assert rows == [
            {"rider_id": 1, "month": "2023-01", "revenue": 300.0, "rider_earning": 24.0},
            {"rider_id": 1, "month": "2023-02", "revenue": 320.0, "rider_earning": 25.6},
            {"rider_id": 1, "month": "2023-03", "revenue": 400.0, "rider_earning": 32.0},
            {"rider_id": 1, "month": "2024-01", "revenue": 850.0, "rider_earning": 68.0},
            {"rider_id": 2, "month": "2023-02", "revenue": 250.0, "rider_earning": 20.0},
            {"rider_id": 2, "month": "2023-03", "revenue": 150.0, "rider_earning": 12.0},
            {"rider_id": 2, "month": "2023-05", "revenue": 180.0, "rider_earning": 14.4},
            {"rider_id": 2, "month": "2024-02", "revenue": 90.0, "rider_earning": 7.2},
        ]

    def test_rider_monthly_earnings_custom_rate(self, query_engine):
        rows = query_engine.rider_monthly_earnings(commission_rate=0.1)
        assert rows[0]["rider_earning"] == 30.0


class TestEmptyStore:
    """Every report answers an empty store with no rows"""

    @pytest.mark.parametrize("method", [
        "top_dishes_by_customer", "popular_time_slots", "order_value_analysis", "high_value_customers",
        "orders_without_delivery", "restaurant_revenue_ranking", "most_popular_dish_by_city",
        "customer_churn", "cancellation_rate_comparison", "rider_average_delivery_time",
        "restaurant_growth_ratio", "customer_segmentation", "rider_monthly_earnings",
        "order_frequency_by_day", "customer_lifetime_value", "monthly_sales_trend", "city_revenue_ranking",
    ])
    def test_no_rows(self, db_session, method):
        assert getattr(AnalyticsQueryEngine(db_session), method)() == []
