"""
Database connection and pool management
"""

import asyncpg
import logging
from config.settings import (
    DATABASE_URL,
    DB_POOL_MIN_SIZE,
    DB_POOL_MAX_SIZE,
    DB_COMMAND_TIMEOUT,
)

logger = logging.getLogger(__name__)

EMPLOYEES_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS employees (
        id SERIAL PRIMARY KEY,
        first_name VARCHAR(100) NOT NULL,
        last_name VARCHAR(100) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        phone VARCHAR(30) NOT NULL,
        department VARCHAR(50) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""


async def create_db_pool(dsn: str = DATABASE_URL) -> asyncpg.Pool:
    """Create the connection pool and verify the database answers"""
    db_pool = await asyncpg.create_pool(
        dsn,
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        command_timeout=DB_COMMAND_TIMEOUT,
        statement_cache_size=0  # pgbouncer compatibility
    )

    # Test connection
    try:
        async with db_pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except Exception:
        await db_pool.close()
        raise

    logger.info("Database pool initialized successfully")
    return db_pool


async def init_schema(db_pool: asyncpg.Pool):
    """Create the employees table when it does not exist yet"""
    async with db_pool.acquire() as conn:
        await conn.execute(EMPLOYEES_TABLE_DDL)
    logger.info("Employees table is ready")


async def close_db_pool(db_pool: asyncpg.Pool):
    """Close database connection pool"""
    if db_pool:
        await db_pool.close()
    logger.info("Database connections closed")
