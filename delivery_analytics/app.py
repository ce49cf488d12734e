"""FastAPI application factory for the delivery analytics service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from delivery_analytics.core.database import init_db
from delivery_analytics.core.router import register_routes
from delivery_analytics.logging.exception_handlers import register_exception_handlers
from delivery_analytics.logging.middleware import LoggingMiddleware


def create_app(initialize_database: bool = True) -> FastAPI:
    app = FastAPI(
        title="Delivery Analytics",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    if initialize_database:
        init_db()

    # Request logger; validation and unhandled errors are logged by the handlers
    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)

    @app.get("/api/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok"}

    return app
