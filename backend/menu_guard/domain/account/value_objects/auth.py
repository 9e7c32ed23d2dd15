"""Authentication value objects."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class AuthIdentity:
    """Authenticated identity as asserted by the auth provider.

    Examples:
        >>> AuthIdentity.from_claims({"sub": "42", "email": "ada@example.com"}).id
        '42'
    """

    id: str
    email: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Identity id cannot be empty")

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "AuthIdentity":
        """Build from verified token claims (`sub`, optional `email`)."""
        sub = claims.get("sub")
        if not sub:
            raise ValueError("Missing 'sub' in token claims")
        return cls(id=str(sub), email=str(claims.get("email") or ""))


@dataclass(frozen=True)
class AuthSession:
    """Session returned by a successful sign-in."""

    access_token: str
    identity: AuthIdentity
    token_type: str = "bearer"
