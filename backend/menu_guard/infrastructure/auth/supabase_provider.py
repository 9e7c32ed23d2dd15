"""Supabase authentication provider implementation."""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from supabase import Client, create_client

from menu_guard.domain.account.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    UserAlreadyRegisteredError,
)
from menu_guard.domain.account.ports.auth_provider import IAuthProvider
from menu_guard.domain.account.value_objects.auth import AuthIdentity, AuthSession

logger = logging.getLogger(__name__)


class SupabaseAuthProvider(IAuthProvider):
    """Supabase Auth provider.

    The supabase-py client is synchronous; calls run in a worker thread.
    Logout and password reset use the admin API and need the service role
    key.

    Environment Variables:
    - SUPABASE_URL: Project URL
    - SUPABASE_SERVICE_ROLE_KEY: Service role key (falls back to
      SUPABASE_ANON_KEY, which limits logout and password reset)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        client: Optional[Client] = None,
    ):
        if client is not None:
            self._client = client
            return

        url = url or os.getenv("SUPABASE_URL")
        key = key or os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required")
        self._client = create_client(url, key)

    @staticmethod
    def _identity(user: Any) -> AuthIdentity:
        return AuthIdentity(id=str(user.id), email=user.email or "")

    async def sign_up(self, email: str, password: str) -> AuthIdentity:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_up, {"email": email, "password": password}
            )
        except Exception as e:
            if "already registered" in str(e).lower():
                raise UserAlreadyRegisteredError(email) from e
            raise AuthenticationError(str(e)) from e

        if response.user is None:
            raise AuthenticationError("Signup did not return a user")
        return self._identity(response.user)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_in_with_password,
                {"email": email, "password": password},
            )
        except Exception as e:
            raise AuthenticationError(str(e)) from e

        if response.session is None or response.user is None:
            raise AuthenticationError("Invalid login credentials")
        return AuthSession(
            access_token=response.session.access_token,
            identity=self._identity(response.user),
        )

    async def sign_out(self, access_token: str) -> None:
        try:
            await asyncio.to_thread(self._client.auth.admin.sign_out, access_token)
        except Exception as e:
            raise AuthenticationError(str(e)) from e

    async def request_password_reset(
        self, email: str, redirect_to: Optional[str] = None
    ) -> None:
        options = {"redirect_to": redirect_to} if redirect_to else {}
        try:
            await asyncio.to_thread(
                self._client.auth.reset_password_for_email, email, options
            )
        except Exception as e:
            raise AuthenticationError(str(e)) from e

    async def reset_password(self, recovery_token: str, new_password: str) -> AuthIdentity:
        claims = await self.verify_token(recovery_token)
        try:
            response = await asyncio.to_thread(
                self._client.auth.admin.update_user_by_id,
                claims["sub"],
                {"password": new_password},
            )
        except Exception as e:
            raise AuthenticationError(str(e)) from e
        return self._identity(response.user)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            response = await asyncio.to_thread(self._client.auth.get_user, token)
        except Exception as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}") from e

        if response is None or response.user is None:
            raise InvalidTokenError("Invalid token")
        return {"sub": str(response.user.id), "email": response.user.email or ""}
