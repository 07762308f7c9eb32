"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request

from database.store import StoreError

router = APIRouter()


@router.get("/")
async def health_check(request: Request):
    """Report healthy only when the record store answers"""
    store = request.app.state.employee_store

    try:
        await store.ping()
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected",
        "store": type(store).__name__
    }
