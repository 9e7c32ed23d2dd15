"""Authentication provider port (interface)."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from menu_guard.domain.account.value_objects.auth import AuthIdentity, AuthSession


class IAuthProvider(ABC):
    """Authentication provider interface.

    Abstracts the external identity service (signup, password login,
    password recovery, token verification). Profiles are not created here.

    Examples:
        >>> # Implementation example (not actual usage)
        >>> class SupabaseAuthProvider(IAuthProvider):
        ...     async def sign_in(self, email, password):
        ...         ...
    """

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthIdentity:
        """Create an identity.

        Raises:
            UserAlreadyRegisteredError: Email already registered
            AuthenticationError: Provider rejected the signup
        """
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Password login.

        Raises:
            AuthenticationError: Invalid credentials
        """
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """Invalidate a session token."""
        pass

    @abstractmethod
    async def request_password_reset(
        self, email: str, redirect_to: Optional[str] = None
    ) -> None:
        """Start password recovery (delivers a recovery token out of band)."""
        pass

    @abstractmethod
    async def reset_password(self, recovery_token: str, new_password: str) -> AuthIdentity:
        """Set a new password using a recovery session token.

        Raises:
            InvalidTokenError: Token invalid or expired
        """
        pass

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify an access token and return its claims (`sub`, `email`).

        Raises:
            InvalidTokenError: Token invalid, expired or revoked
        """
        pass
