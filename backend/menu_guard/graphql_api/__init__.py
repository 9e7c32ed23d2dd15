"""GraphQL account surface (strawberry)."""
