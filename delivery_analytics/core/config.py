# delivery_analytics/core/config.py
"""Environment-driven settings and the fixed business constants used by reports."""

import os
from dotenv import load_dotenv

load_dotenv()

# ===== ENVIRONMENT =====

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./delivery_analytics.db")
APPLICATION_ID = os.environ.get("APPLICATION_ID", "Unknown")
DEV_MODE = os.getenv("DELIVERY_ANALYTICS_DEV_MODE", "false").lower() == "true"

CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

# ===== REPORT CONSTANTS =====
# Defaults for report parameters; every one can be overridden per run.

DEFAULT_CUSTOMER_NAME = "Arjun Mehta"
TOP_DISHES_LIMIT = 5
AOV_MIN_ORDERS = 750
HIGH_VALUE_MIN_SPENT = 100000
RIDER_COMMISSION_RATE = 0.08
TRAILING_WINDOW_DAYS = 365
CHURN_ACTIVE_YEAR = 2023
CHURN_YEAR = 2024
CANCELLATION_PREVIOUS_YEAR = 2023
CANCELLATION_CURRENT_YEAR = 2024
CITY_RANKING_YEAR = 2023

TIME_SLOT_HOURS = 2
DELIVERED_STATUS = "Delivered"
