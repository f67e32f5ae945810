from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from typing import Dict
from app.core.errors import DatabaseConnectionError

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check():
    """
    Basic health check endpoint.
    
    Returns:
        Dict with status indicating the service is healthy
    """
    return {"status": "healthy"}


@router.get("/ready", response_model=Dict[str, str])
async def readiness_check(request: Request):
    """
    Report whether the database can be reached. Connects on first use.
    """
    try:
        await request.app.state.db.acquire()
    except DatabaseConnectionError:
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
