"""Account domain GraphQL mutations."""

from typing import List, Optional

import strawberry
from strawberry.types import Info

from menu_guard.application.account.commands.authentication import (
    LogInCommand,
    LogOutCommand,
    RequestPasswordResetCommand,
    ResetPasswordCommand,
    SignUpCommand,
)
from menu_guard.application.account.commands.history import (
    AddAnalysisToHistoryCommand,
    DeleteAnalysisFromHistoryCommand,
)
from menu_guard.application.account.commands.pro_upgrade import (
    InitiateProUpgradeCommand,
    UpgradeToProCommand,
)
from menu_guard.application.account.commands.update_profile import UpdateProfileCommand
from menu_guard.domain.account.exceptions import NotAuthenticatedError
from menu_guard.graphql_api.types_account import (
    AnalysisResultItemInput,
    AuthPayloadType,
    CheckoutSessionType,
    UserProfileType,
)


def _repositories(info: Info) -> dict:
    return {
        "profiles": info.context.get("profile_repository"),
        "history": info.context.get("history_repository"),
    }


@strawberry.type
class AccountMutations:
    """Account write operations.

    Mutations other than signUp, logIn, requestPasswordReset and
    resetPassword need a bearer token. Domain errors are returned as
    GraphQL errors with their message.

    Examples:
        mutation {
          account {
            logIn(email: "ada@example.com", password: "...") {
              accessToken
              profile { username }
            }
          }
        }
    """

    @strawberry.mutation
    async def sign_up(self, info: Info, email: str, password: str) -> bool:
        """Create an account. The profile is created on first read."""
        await SignUpCommand(info.context.get("auth_provider")).execute(email, password)
        return True

    @strawberry.mutation
    async def log_in(self, info: Info, email: str, password: str) -> AuthPayloadType:
        command = LogInCommand(auth=info.context.get("auth_provider"), **_repositories(info))
        session, profile = await command.execute(email, password)
        return AuthPayloadType.from_domain(session, profile)

    @strawberry.mutation
    async def log_out(self, info: Info) -> bool:
        token = info.context.get("access_token")
        if not token:
            raise NotAuthenticatedError()
        await LogOutCommand(info.context.get("auth_provider")).execute(token)
        return True

    @strawberry.mutation
    async def request_password_reset(
        self, info: Info, email: str, redirect_to: Optional[str] = None
    ) -> bool:
        await RequestPasswordResetCommand(info.context.get("auth_provider")).execute(
            email, redirect_to
        )
        return True

    @strawberry.mutation
    async def reset_password(
        self, info: Info, recovery_token: str, new_password: str
    ) -> UserProfileType:
        command = ResetPasswordCommand(
            auth=info.context.get("auth_provider"), **_repositories(info)
        )
        profile = await command.execute(recovery_token, new_password)
        return UserProfileType.from_domain(profile)

    @strawberry.mutation
    async def update_profile(
        self,
        info: Info,
        username: Optional[str] = None,
        allergies: Optional[str] = None,
        preferences: Optional[str] = None,
    ) -> UserProfileType:
        command = UpdateProfileCommand(**_repositories(info))
        profile = await command.execute(
            info.context.require_identity(),
            username=username,
            allergies=allergies,
            preferences=preferences,
        )
        return UserProfileType.from_domain(profile)

    @strawberry.mutation
    async def add_analysis_to_history(
        self,
        info: Info,
        results: List[AnalysisResultItemInput],
        allergies: str,
        preferences: str,
        input_text: str,
    ) -> UserProfileType:
        """Store a completed analysis; enforces the monthly quota."""
        command = AddAnalysisToHistoryCommand(**_repositories(info))
        profile = await command.execute(
            info.context.require_identity(),
            results=[item.to_domain() for item in results],
            allergies=allergies,
            preferences=preferences,
            input_text=input_text,
        )
        return UserProfileType.from_domain(profile)

    @strawberry.mutation
    async def delete_analysis_from_history(
        self, info: Info, history_id: int
    ) -> UserProfileType:
        command = DeleteAnalysisFromHistoryCommand(**_repositories(info))
        profile = await command.execute(info.context.require_identity(), history_id)
        return UserProfileType.from_domain(profile)

    @strawberry.mutation
    async def initiate_pro_upgrade(self, info: Info) -> CheckoutSessionType:
        url = await InitiateProUpgradeCommand().execute(info.context.require_identity())
        return CheckoutSessionType(checkout_url=url)

    @strawberry.mutation
    async def upgrade_to_pro(self, info: Info) -> UserProfileType:
        command = UpgradeToProCommand(**_repositories(info))
        profile = await command.execute(info.context.require_identity())
        return UserProfileType.from_domain(profile)
