"""Factory for the authentication provider."""

import os
from typing import Optional

from menu_guard.domain.account.ports.auth_provider import IAuthProvider
from menu_guard.infrastructure.auth.local_provider import LocalAuthProvider

_auth_provider: Optional[IAuthProvider] = None


def create_auth_provider() -> IAuthProvider:
    """
    Create auth provider based on AUTH_PROVIDER.

    Environment Variables:
        AUTH_PROVIDER: 'local' (default) or 'supabase'
    """
    mode = os.getenv("AUTH_PROVIDER", "local").lower()

    if mode == "supabase":
        from menu_guard.infrastructure.auth.supabase_provider import SupabaseAuthProvider

        return SupabaseAuthProvider()

    return LocalAuthProvider()


def get_auth_provider() -> IAuthProvider:
    """Get singleton auth provider instance."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = create_auth_provider()
    return _auth_provider


def reset_auth_provider() -> None:
    """Reset singleton (for testing)."""
    global _auth_provider
    _auth_provider = None
