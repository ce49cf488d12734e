"""
Test configuration and shared fixtures for the delivery analytics test suite.
Provides database setup, a test client and a small, fully worked sample dataset.
"""

import pytest
from typing import Any, Dict, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from delivery_analytics.app import create_app
from delivery_analytics.core import database
from delivery_analytics.core.database import create_all_tables, enable_sqlite_foreign_keys, get_db
from delivery_analytics.store.loader import DatasetLoader
from delivery_analytics.store.schemas import StoreSummary


# ===== DATABASE SETUP =====

@pytest.fixture
def engine():
    """In-memory SQLite engine with foreign keys enforced, fresh per test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    create_all_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def route_sessions_to_test_engine(monkeypatch, session_factory):
    """Code that opens its own sessions (log writer, tasks) uses the test engine"""
    monkeypatch.setattr(database, "SessionLocal", session_factory)


@pytest.fixture
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """FastAPI test client with the request session bound to the test database"""
    app = create_app(initialize_database=False)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ===== SAMPLE DATA FIXTURES =====

def make_order(order_id, customer_id, restaurant_id, item, order_date, order_time, amount, status="Completed"):
    return {
        "order_id": order_id,
        "customer_id": customer_id,
        "restaurant_id": restaurant_id,
        "order_item": item,
        "order_date": order_date,
        "order_time": order_time,
        "order_status": status,
        "total_amount": amount,
    }


def make_delivery(delivery_id, order_id, status, delivery_time, rider_id):
    return {
        "delivery_id": delivery_id,
        "order_id": order_id,
        "delivery_status": status,
        "delivery_time": delivery_time,
        "rider_id": rider_id,
    }


@pytest.fixture
def sample_dataset() -> Dict[str, List[Dict[str, Any]]]:
    """
    Two cities, three restaurants, three customers, two riders, ten orders.

    Order 7 has no delivery row, order 6 has a Cancelled delivery and order 9
    a Not Delivered one. Order 1 (2023-01-15) falls outside the trailing year
    before the latest order (2024-02-14). Rahul Verma orders only in 2023, and
    no order falls in April 2023.
    """
    return {
        "restaurants": [
            {"restaurant_id": 1, "restaurant_name": "Spice Route", "city": "Mumbai",
             "opening_hours": "11:00 AM - 11:00 PM"},
            {"restaurant_id": 2, "restaurant_name": "Tandoor House", "city": "Mumbai"},
            {"restaurant_id": 3, "restaurant_name": "Dosa Corner", "city": "Bengaluru"},
        ],
        "customers": [
            {"customer_id": 1, "customer_name": "Arjun Mehta", "reg_date": "2022-01-10"},
            {"customer_id": 2, "customer_name": "Priya Sharma", "reg_date": "2022-03-05"},
            {"customer_id": 3, "customer_name": "Rahul Verma", "reg_date": "2023-02-01"},
        ],
        "riders": [
            {"rider_id": 1, "rider_name": "Vikram Singh", "sign_up": "2022-01-01"},
            {"rider_id": 2, "rider_name": "Anita Rao", "sign_up": "2022-06-01"},
        ],
        "orders": [
            make_order(1, 1, 1, "Biryani", "2023-01-15", "12:30:00", 300),
            make_order(2, 1, 1, "Biryani", "2023-02-20", "19:15:00", 320),
            make_order(3, 1, 2, "Paneer Tikka", "2023-02-21", "20:00:00", 250),
            make_order(4, 1, 3, "Masala Dosa", "2023-03-10", "13:00:00", 150),
            make_order(5, 2, 1, "Biryani", "2023-03-12", "19:45:00", 400),
            make_order(6, 2, 2, "Paneer Tikka", "2023-05-05", "21:10:00", 180, status="Cancelled"),
            make_order(7, 3, 3, "Masala Dosa", "2023-06-01", "08:30:00", 120),
            make_order(8, 1, 1, "Butter Chicken", "2024-01-10", "19:00:00", 500),
            make_order(9, 2, 3, "Idli", "2024-02-14", "10:00:00", 90),
            make_order(10, 1, 1, "Biryani", "2024-01-25", "12:00:00", 350),
        ],
        "deliveries": [
            make_delivery(1, 1, "Delivered", "13:00:00", 1),
            make_delivery(2, 2, "Delivered", "19:45:00", 1),
            make_delivery(3, 3, "Delivered", "20:45:00", 2),
            make_delivery(4, 4, "Delivered", "13:40:00", 2),
            make_delivery(5, 5, "Delivered", "20:30:00", 1),
            make_delivery(6, 6, "Cancelled", None, 2),
            make_delivery(8, 8, "Delivered", "19:50:00", 1),
            make_delivery(9, 9, "Not Delivered", None, 2),
            make_delivery(10, 10, "Delivered", "12:25:00", 1),
        ],
    }


@pytest.fixture
def loaded_store(db_session, sample_dataset) -> StoreSummary:
    """The sample dataset committed to the test database"""
    return DatasetLoader(db_session).load(sample_dataset)


# ===== UTILITY FIXTURES =====

@pytest.fixture
def api_headers():
    """Standard API headers for testing"""
    return {
        "Content-Type": "application/json",
        "Accept": "application/json"
    }
