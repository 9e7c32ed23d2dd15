"""Menu Guard backend application.

Run with:
    uvicorn menu_guard.app:app --app-dir backend --port 8080
"""

import logging as _logging
import os
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, Final, Optional

from fastapi import FastAPI, Request
from strawberry.fastapi import GraphQLRouter

from menu_guard.api.config import router as config_router
from menu_guard.api.gateway import router as gateway_router
from menu_guard.application.gateway.dispatcher import GatewayDispatcher
from menu_guard.graphql_api.context import GraphQLContext, create_context
from menu_guard.graphql_api.schema import schema
from menu_guard.infrastructure.auth.auth_middleware import AuthMiddleware
from menu_guard.infrastructure.auth.factory import get_auth_provider
from menu_guard.infrastructure.config import (
    get_google_maps_api_key,
    get_openai_api_key,
    load_environment,
    mask_secret,
)
from menu_guard.infrastructure.persistence.factory import (
    get_history_repository,
    get_profile_repository,
)
from menu_guard.infrastructure.providers.factory import (
    create_ai_provider,
    create_places_provider,
)

load_environment()

# --- Basic logging configuration (minimal) ---
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_logging.basicConfig(
    level=getattr(_logging, _LOG_LEVEL, _logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

_lg = _logging.getLogger("startup")
if _lg.level == 0:  # not set explicitly
    _lg.setLevel(getattr(_logging, _LOG_LEVEL, _logging.INFO))

APP_VERSION = os.getenv("APP_VERSION", "0.0.0-dev")


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifecycle: enter provider clients, build the dispatcher.

    Providers are created uninitialized by the factories and entered here
    via `async with`, so HTTP sessions live for the whole server lifetime
    and are closed on shutdown.
    """
    logger = _logging.getLogger("startup")

    logger.info(
        "startup.config",
        extra={
            "openai_key": mask_secret(get_openai_api_key()),
            "google_maps_key": mask_secret(get_google_maps_api_key()),
        },
    )

    ai_provider = create_ai_provider()
    places_provider = create_places_provider()

    async with AsyncExitStack() as stack:
        initialized_ai = await stack.enter_async_context(ai_provider)  # type: ignore[arg-type]
        initialized_places: Optional[Any] = None
        if places_provider is not None:
            initialized_places = await stack.enter_async_context(
                places_provider  # type: ignore[arg-type]
            )

        app.state.dispatcher = GatewayDispatcher(initialized_ai, initialized_places)

        logger.info(
            "lifespan.clients_ready",
            extra={
                "ai": type(initialized_ai).__name__,
                "places": type(initialized_places).__name__,
            },
        )
        logger.info("lifespan.ready", extra={"status": "serving"})
        yield

        logger.info("lifespan.shutdown", extra={"status": "cleanup"})
        app.state.dispatcher = None


app = FastAPI(
    title="Menu Guard Backend",
    version=APP_VERSION,
    lifespan=lifespan,
)
app.add_middleware(AuthMiddleware)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
async def version() -> dict[str, str]:
    return {"version": APP_VERSION}


async def get_graphql_context(request: Request) -> GraphQLContext:
    return create_context(
        profile_repository=get_profile_repository(),
        history_repository=get_history_repository(),
        auth_provider=get_auth_provider(),
        request=request,
    )


graphql_app: Final[GraphQLRouter[Any, Any]] = GraphQLRouter(
    schema, context_getter=get_graphql_context
)
app.include_router(graphql_app, prefix="/graphql")
app.include_router(gateway_router)
app.include_router(config_router)
