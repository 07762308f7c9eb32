"""
Employee Records API Server
CRUD over employee records stored in a relational table
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, STORE_BACKEND, DB_AUTO_CREATE_SCHEMA, LOG_LEVEL
from database.connection import create_db_pool, init_schema, close_db_pool
from database.memory_store import InMemoryEmployeeStore
from database.store import EmployeeStore, PostgresEmployeeStore
from api.routes import health, employees
from utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


async def build_store() -> EmployeeStore:
    """Build the configured record store; startup fails if the database is unreachable"""
    if STORE_BACKEND == "memory":
        logger.warning("Using in-memory employee store; records are lost on restart")
        return InMemoryEmployeeStore()

    db_pool = await create_db_pool()
    if DB_AUTO_CREATE_SCHEMA:
        try:
            await init_schema(db_pool)
        except Exception:
            await close_db_pool(db_pool)
            raise
    return PostgresEmployeeStore(db_pool)


def create_app(store: Optional[EmployeeStore] = None) -> FastAPI:
    """
    Create the FastAPI application

    Args:
        store: Record store handed to request handlers; when omitted one is
            built from configuration at startup and closed at shutdown
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = store is None
        app.state.employee_store = await build_store() if owns_store else store
        logger.info(f"Employee store ready: {type(app.state.employee_store).__name__}")
        yield
        if owns_store:
            await app.state.employee_store.close()

    app = FastAPI(
        title="Employee Records API",
        description="List, create, update and delete employee records",
        version="1.0.0",
        lifespan=lifespan
    )

    # Available before lifespan runs, e.g. under transports that skip it
    if store is not None:
        app.state.employee_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Trace-ID"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(employees.router, prefix="/api/employees", tags=["Employees"])

    return app


# FastAPI app instance is exported for use by uvicorn
app = create_app()
