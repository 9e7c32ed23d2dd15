"""Bearer-token middleware shared by the gateway, config and GraphQL routes."""

import logging
import os
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from menu_guard.domain.account.exceptions import InvalidTokenError
from menu_guard.domain.account.ports.auth_provider import IAuthProvider
from menu_guard.infrastructure.auth.factory import get_auth_provider

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": message})


class AuthMiddleware(BaseHTTPMiddleware):
    """Resolve the caller's identity once per request.

    Sets `request.state.access_token` (raw token or None) and
    `request.state.auth_claims` (verified claims or None). Menu analysis is
    open to guests, so a request without a token goes through unless
    AUTH_REQUIRED=true. A token that is present but fails verification is
    always rejected with 401.
    """

    def __init__(self, app: Any, auth_provider: Optional[IAuthProvider] = None) -> None:
        super().__init__(app)
        self._auth_provider = auth_provider
        self.auth_required = os.getenv("AUTH_REQUIRED", "false").lower() == "true"

    @property
    def auth_provider(self) -> IAuthProvider:
        # Resolved lazily so tests can reset the provider singleton
        return self._auth_provider or get_auth_provider()

    async def dispatch(self, request: Request, call_next: Any) -> Any:
        token = self._extract_token(request.headers.get("Authorization"))
        request.state.access_token = token
        request.state.auth_claims = None

        if token is None:
            if self.auth_required:
                return _unauthorized("Missing authorization token")
            return await call_next(request)

        try:
            request.state.auth_claims = await self.auth_provider.verify_token(token)
        except InvalidTokenError as e:
            logger.info("Rejected bearer token", extra={"reason": str(e)})
            return _unauthorized(str(e))

        return await call_next(request)

    @staticmethod
    def _extract_token(auth_header: Optional[str]) -> Optional[str]:
        """Token from `Bearer <token>`; anything else counts as no token."""
        if not auth_header:
            return None
        parts = auth_header.split()
        if len(parts) == 2 and parts[0].lower() == BEARER_SCHEME:
            return parts[1]
        return None
