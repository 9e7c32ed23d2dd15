"""Local authentication provider implementation.

Self-contained identity service for development, tests and single-node
deployments: HS256 JWTs signed with AUTH_JWT_SECRET, passlib password
hashes, in-memory credentials.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set

import jwt
from jwt.exceptions import ExpiredSignatureError
from jwt.exceptions import InvalidTokenError as JWTError
from passlib.context import CryptContext

from menu_guard.domain.account.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    UserAlreadyRegisteredError,
)
from menu_guard.domain.account.ports.auth_provider import IAuthProvider
from menu_guard.domain.account.value_objects.auth import AuthIdentity, AuthSession
from menu_guard.infrastructure.config import get_auth_jwt_secret, get_auth_token_ttl_s

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_PURPOSE = "access"
RECOVERY_PURPOSE = "recovery"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass
class _Credential:
    identity: AuthIdentity
    password_hash: str


@dataclass(frozen=True)
class RecoveryMessage:
    """Password recovery delivered out of band (kept in `outbox`)."""

    email: str
    recovery_token: str
    redirect_to: Optional[str] = None


class LocalAuthProvider(IAuthProvider):
    """Local authentication provider.

    Features:
    - Email/password signup and login (pbkdf2_sha256 hashes)
    - Access tokens with `sub`, `email`, `jti`, `exp`
    - Logout revokes the token's `jti`
    - Recovery tokens (purpose "recovery"), appended to `outbox`

    Examples:
        >>> provider = LocalAuthProvider(secret="test-secret")
        >>> await provider.sign_up("ada@example.com", "correct horse")
        >>> session = await provider.sign_in("ada@example.com", "correct horse")
        >>> (await provider.verify_token(session.access_token))["email"]
        'ada@example.com'
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        token_ttl_s: Optional[int] = None,
        recovery_ttl_s: int = 3600,
    ):
        self._secret = secret or get_auth_jwt_secret()
        self._token_ttl = timedelta(seconds=token_ttl_s or get_auth_token_ttl_s())
        self._recovery_ttl = timedelta(seconds=recovery_ttl_s)
        self._credentials: Dict[str, _Credential] = {}
        self._revoked: Set[str] = set()
        self.outbox: List[RecoveryMessage] = []

    @staticmethod
    def _normalize(email: str) -> str:
        return email.strip().lower()

    def _issue(self, identity: AuthIdentity, purpose: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": identity.id,
            "email": identity.email,
            "jti": uuid.uuid4().hex,
            "purpose": purpose,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def _decode(self, token: str, purpose: str) -> Dict[str, Any]:
        try:
            claims: Dict[str, Any] = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}") from e

        if claims.get("purpose") != purpose:
            raise InvalidTokenError("Token has the wrong purpose")
        if claims.get("jti") in self._revoked:
            raise InvalidTokenError("Token has been revoked")
        return claims

    async def sign_up(self, email: str, password: str) -> AuthIdentity:
        key = self._normalize(email)
        if not key or not password:
            raise AuthenticationError("Email and password are required.")
        if key in self._credentials:
            raise UserAlreadyRegisteredError(key)

        identity = AuthIdentity(id=str(uuid.uuid4()), email=key)
        self._credentials[key] = _Credential(identity, pwd_context.hash(password))
        logger.info("User signed up", extra={"user_id": identity.id})
        return identity

    async def sign_in(self, email: str, password: str) -> AuthSession:
        credential = self._credentials.get(self._normalize(email))
        if credential is None or not pwd_context.verify(password, credential.password_hash):
            raise AuthenticationError("Invalid login credentials")

        token = self._issue(credential.identity, ACCESS_PURPOSE, self._token_ttl)
        return AuthSession(access_token=token, identity=credential.identity)

    async def sign_out(self, access_token: str) -> None:
        claims = self._decode(access_token, ACCESS_PURPOSE)
        self._revoked.add(claims["jti"])
        logger.info("User signed out", extra={"user_id": claims.get("sub")})

    async def request_password_reset(
        self, email: str, redirect_to: Optional[str] = None
    ) -> None:
        """Unknown emails are accepted silently; no account enumeration."""
        credential = self._credentials.get(self._normalize(email))
        if credential is None:
            logger.info("Password reset requested for unknown email")
            return
        token = self._issue(credential.identity, RECOVERY_PURPOSE, self._recovery_ttl)
        self.outbox.append(RecoveryMessage(credential.identity.email, token, redirect_to))

    async def reset_password(self, recovery_token: str, new_password: str) -> AuthIdentity:
        if not new_password:
            raise AuthenticationError("New password is required.")
        claims = self._decode(recovery_token, RECOVERY_PURPOSE)
        credential = self._credentials.get(self._normalize(claims.get("email", "")))
        if credential is None or credential.identity.id != claims.get("sub"):
            raise InvalidTokenError("Recovery token does not match a user")

        credential.password_hash = pwd_context.hash(new_password)
        self._revoked.add(claims["jti"])
        return credential.identity

    async def verify_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, ACCESS_PURPOSE)
