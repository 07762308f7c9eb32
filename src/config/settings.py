"""
Configuration settings for the Employee Records API
"""

import os
import logging

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Server
PORT = int(os.getenv("PORT", 3000))

# Database connection parts (DATABASE_URL wins when set)
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", 5432))
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "employee_db")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 1))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))
DB_AUTO_CREATE_SCHEMA = _env_bool("DB_AUTO_CREATE_SCHEMA", True)

# "postgres" for the relational store, "memory" for local runs without a database
STORE_BACKEND = os.getenv("STORE_BACKEND", "postgres").strip().lower()
if STORE_BACKEND not in ("postgres", "memory"):
    raise ValueError(f"STORE_BACKEND must be 'postgres' or 'memory', got: {STORE_BACKEND}")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]

# Client settings
EMPLOYEE_API_URL = os.getenv("EMPLOYEE_API_URL", f"http://localhost:{PORT}/api/employees")
CLIENT_TIMEOUT = float(os.getenv("CLIENT_TIMEOUT", 30.0))

logger.debug(f"Store backend: {STORE_BACKEND}, database host: {DB_HOST}:{DB_PORT}/{DB_NAME}")
