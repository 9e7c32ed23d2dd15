"""REST gateway endpoint.

A single `POST /api` endpoint receives `{"type": ..., "data": ...}`
envelopes and dispatches them to the menu operations. API keys stay on
the server; the client only ever talks to this endpoint.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from menu_guard.application.gateway.dispatcher import GatewayDispatcher
from menu_guard.domain.analysis.exceptions import GatewayInputError
from menu_guard.infrastructure.providers.factory import (
    get_ai_provider,
    get_places_provider,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gateway"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


class EnvelopeError(GatewayInputError):
    """Request body is not a valid `{type, data}` envelope."""

    pass


def get_dispatcher(request: Request) -> GatewayDispatcher:
    """Dispatcher built in the app lifespan (providers already entered)."""
    dispatcher: Optional[GatewayDispatcher] = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        dispatcher = GatewayDispatcher(get_ai_provider(), get_places_provider())
        request.app.state.dispatcher = dispatcher
    return dispatcher


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def parse_envelope(request: Request) -> Dict[str, Any]:
    """
    Decode and validate the request envelope.

    Raises:
        EnvelopeError: Body is not JSON, not an object, has no `type`, or
            its `data` is not an object
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise EnvelopeError("Request body must be valid JSON.") from e

    if not isinstance(body, dict):
        raise EnvelopeError("Request body must be a JSON object.")
    operation = body.get("type")
    if not isinstance(operation, str) or not operation:
        raise EnvelopeError("Request type is required.")
    data = body.get("data")
    if data is not None and not isinstance(data, dict):
        raise EnvelopeError("Request data must be an object.")
    return {"type": operation, "data": data or {}}


@router.api_route("/api", methods=ALL_METHODS)
async def gateway(
    request: Request,
    dispatcher: GatewayDispatcher = Depends(get_dispatcher),
) -> Any:
    """Dispatch one gateway operation.

    Returns:
        200 with the operation result, 400 for client errors, 405 for
        non-POST methods, 500 for upstream or unexpected failures

    Example:
        ```bash
        curl -X POST http://localhost:8080/api \\
          -H "Content-Type: application/json" \\
          -d '{"type": "analyze", "data": {"allergies": "Peanuts", "menuText": "Pad Thai"}}'
        ```
    """
    if request.method != "POST":
        return _error(405, "Method not allowed")

    operation: Any = None
    try:
        envelope = await parse_envelope(request)
        operation = envelope["type"]
        result = await dispatcher.dispatch(operation, envelope["data"])
    except GatewayInputError as e:
        logger.warning(
            "Gateway request rejected",
            extra={"operation": operation, "error": str(e)},
        )
        return _error(400, str(e))
    except Exception as e:
        logger.error(
            "Gateway operation failed",
            extra={"operation": operation, "error": str(e)},
            exc_info=True,
        )
        return _error(500, str(e) or "An unknown error occurred.")

    return JSONResponse(status_code=200, content=result)
