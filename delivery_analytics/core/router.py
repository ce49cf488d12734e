"""
Module for registering routes in the FastAPI application.
"""

from fastapi import FastAPI

from delivery_analytics.store.router import router as store_router
from delivery_analytics.reporting.router import router as report_router
from delivery_analytics.logging.router import router as log_router


def register_routes(app: FastAPI) -> None:
    """
    Registers all the routes for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    app.include_router(store_router, prefix="/api")
    app.include_router(report_router, prefix="/api")
    app.include_router(log_router, prefix="/api")
