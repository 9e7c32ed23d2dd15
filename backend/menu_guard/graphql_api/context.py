"""GraphQL context factory for dependency injection."""

from typing import Any, Dict, Optional

from fastapi import Request
from strawberry.fastapi import BaseContext

from menu_guard.domain.account.exceptions import NotAuthenticatedError
from menu_guard.domain.account.ports.auth_provider import IAuthProvider
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.domain.account.value_objects.auth import AuthIdentity


class GraphQLContext(BaseContext):
    """GraphQL context with account dependencies.

    Resolvers access dependencies using `info.context.get("name")`.

    Attributes:
        profile_repository: Profile persistence
        history_repository: Analysis history persistence
        auth_provider: Identity service
        request: FastAPI request (auth claims set by AuthMiddleware)
        auth_claims: Verified token claims (None for guests)
    """

    def __init__(
        self,
        profile_repository: IProfileRepository,
        history_repository: IHistoryRepository,
        auth_provider: IAuthProvider,
        request: Optional[Request] = None,
    ) -> None:
        super().__init__()
        self.profile_repository = profile_repository
        self.history_repository = history_repository
        self.auth_provider = auth_provider
        self.request = request
        self.auth_claims: Optional[Dict[str, Any]] = (
            getattr(request.state, "auth_claims", None) if request else None
        )
        self.access_token: Optional[str] = (
            getattr(request.state, "access_token", None) if request else None
        )

    def get(self, key: str) -> Any:
        """Get dependency by name (None if not found)."""
        return getattr(self, key, None)

    def require_identity(self) -> AuthIdentity:
        """
        Identity of the signed-in caller.

        Raises:
            NotAuthenticatedError: Guest request
        """
        if not self.auth_claims:
            raise NotAuthenticatedError()
        return AuthIdentity.from_claims(self.auth_claims)


def create_context(
    profile_repository: IProfileRepository,
    history_repository: IHistoryRepository,
    auth_provider: IAuthProvider,
    request: Optional[Request] = None,
) -> GraphQLContext:
    return GraphQLContext(
        profile_repository=profile_repository,
        history_repository=history_repository,
        auth_provider=auth_provider,
        request=request,
    )
