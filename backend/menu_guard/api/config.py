"""Public client configuration endpoint."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from menu_guard.infrastructure.config import get_public_config

logger = logging.getLogger(__name__)

router = APIRouter(tags=["config"])


@router.get("/config")
async def public_config() -> JSONResponse:
    """Map key and Supabase project settings needed by browser clients.

    Returns 500 when any of the three values is missing.
    """
    try:
        config = get_public_config()
    except ValueError as e:
        logger.error("Public config incomplete", extra={"error": str(e)})
        return JSONResponse(status_code=500, content={"error": str(e)})
    return JSONResponse(status_code=200, content=config)
