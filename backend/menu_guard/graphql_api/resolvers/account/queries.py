"""Account domain GraphQL queries."""

from typing import Optional

import strawberry
from strawberry.types import Info

from menu_guard.application.account.queries.get_profile import GetProfileQuery
from menu_guard.graphql_api.types_account import UserProfileType


@strawberry.type
class AccountQueries:
    """Account read operations.

    Examples:
        query {
          account {
            me { username allergies isPro analysesRemaining }
          }
        }
    """

    @strawberry.field
    async def me(self, info: Info) -> Optional[UserProfileType]:
        """Profile of the signed-in user; null for guests.

        The first read after signup creates the default profile.
        """
        if not info.context.get("auth_claims"):
            return None

        query = GetProfileQuery(
            profiles=info.context.get("profile_repository"),
            history=info.context.get("history_repository"),
        )
        profile = await query.execute(info.context.require_identity())
        return UserProfileType.from_domain(profile)
