"""Application wiring for MediStock.

``create_app`` brings the pieces together: logging first, then the database
tables, middleware, the JSON routers, error handlers and the Prometheus
``/metrics`` endpoint. ``app`` is the instance uvicorn serves
(``uvicorn medistock.main:app``).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from .core.config import settings
from .core.errors import register_exception_handlers
from .core.logging import configure_logging
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware

# Registers the table on Base.metadata before create_all runs.
from .models import transaction as _transaction  # noqa: F401
from .routers import api_inventory, api_transactions

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    app.include_router(api_transactions.router)
    app.include_router(api_inventory.router)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    Instrumentator().instrument(app).expose(app, include_in_schema=False)
    logger.info("app.ready", extra={"extra_data": {"env": settings.APP_ENV}})
    return app


app = create_app()
