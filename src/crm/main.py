"""
FastAPI application for the customer API.

``create_app`` configures logging, mounts the customer routes under
``/api/v1`` next to a root ``/ping`` and, for the postgres backend,
applies ``schema.sql`` at startup.  Run it with::

    uvicorn crm.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import config
from .db import get_conn, init_schema
from .errors import StorageUnavailableError
from .logging_config import setup_logging
from .routes import ping_router, router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if config.CUSTOMER_STORAGE == "postgres":
        conn = get_conn()
        try:
            init_schema(conn)
        finally:
            conn.close()
        logger.info("Customer schema ready")
    logger.info("Customer storage backend: %s", config.CUSTOMER_STORAGE)
    yield


async def storage_unavailable_handler(_request: Request, exc: StorageUnavailableError):
    logger.error("Storage unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Customer storage is unavailable"})


def create_app() -> FastAPI:
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)

    app = FastAPI(title="Customer API", version="0.1.0", lifespan=lifespan)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.include_router(ping_router)
    app.include_router(router, prefix="/api/v1")
    return app


app = create_app()
