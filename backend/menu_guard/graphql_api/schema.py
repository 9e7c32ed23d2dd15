"""GraphQL schema definition."""

import strawberry

from menu_guard.graphql_api.resolvers.account.mutations import AccountMutations
from menu_guard.graphql_api.resolvers.account.queries import AccountQueries


@strawberry.type
class Query:
    @strawberry.field
    def account(self) -> AccountQueries:
        """Account queries (profile)."""
        return AccountQueries()


@strawberry.type
class Mutation:
    @strawberry.field
    def account(self) -> AccountMutations:
        """Account mutations (auth, profile, history, Pro upgrade)."""
        return AccountMutations()


def create_schema() -> strawberry.Schema:
    return strawberry.Schema(query=Query, mutation=Mutation)


schema = create_schema()
