"""Authentication commands: signup, login, logout, password recovery."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from menu_guard.application.account.queries.get_profile import GetProfileQuery
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.ports.auth_provider import IAuthProvider
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.domain.account.value_objects.auth import AuthIdentity, AuthSession

logger = logging.getLogger(__name__)


@dataclass
class SignUpCommand:
    """Create an auth identity.

    No profile is created here; it appears on the first authenticated read.
    """

    auth: IAuthProvider

    async def execute(self, email: str, password: str) -> AuthIdentity:
        return await self.auth.sign_up(email, password)


@dataclass
class LogInCommand:
    """Password login followed by the self-healing profile read.

    Examples:
        >>> command = LogInCommand(auth, profiles, history)
        >>> session, profile = await command.execute("ada@example.com", "pw")
    """

    auth: IAuthProvider
    profiles: IProfileRepository
    history: IHistoryRepository

    async def execute(self, email: str, password: str) -> Tuple[AuthSession, UserProfile]:
        session = await self.auth.sign_in(email, password)
        profile = await GetProfileQuery(self.profiles, self.history).execute(session.identity)
        logger.info("User logged in", extra={"user_id": session.identity.id})
        return session, profile


@dataclass
class LogOutCommand:
    auth: IAuthProvider

    async def execute(self, access_token: str) -> None:
        await self.auth.sign_out(access_token)


@dataclass
class RequestPasswordResetCommand:
    auth: IAuthProvider

    async def execute(self, email: str, redirect_to: Optional[str] = None) -> None:
        await self.auth.request_password_reset(email, redirect_to)


@dataclass
class ResetPasswordCommand:
    """Set a new password with a recovery token, then load the profile."""

    auth: IAuthProvider
    profiles: IProfileRepository
    history: IHistoryRepository

    async def execute(self, recovery_token: str, new_password: str) -> UserProfile:
        identity = await self.auth.reset_password(recovery_token, new_password)
        return await GetProfileQuery(self.profiles, self.history).execute(identity)
