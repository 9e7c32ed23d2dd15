"""Account domain exceptions."""

from typing import Optional


class AccountError(Exception):
    """Base exception for account domain errors."""

    pass


class AuthenticationError(AccountError):
    """Credentials or token were rejected by the auth provider."""

    pass


class InvalidTokenError(AuthenticationError):
    """Token is invalid, expired, revoked or of the wrong purpose."""

    pass


class UserAlreadyRegisteredError(AccountError):
    """Signup for an email that already has an identity."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User already registered")


class NotAuthenticatedError(AccountError):
    """Operation requires a signed-in user."""

    def __init__(self, message: str = "User not authenticated."):
        super().__init__(message)


class ProfileNotFoundError(AccountError):
    """Profile row does not exist."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Profile not found: {user_id}")


class ProfileCreationError(AccountError):
    """Self-healing profile creation failed."""

    def __init__(self) -> None:
        super().__init__("Could not create your profile. Please contact support.")


class HistoryEntryNotFoundError(AccountError):
    """History row does not exist or belongs to another user."""

    def __init__(self, history_id: int):
        self.history_id = history_id
        super().__init__(
            "Could not delete the analysis from your history. Please try again."
        )


class QuotaError(AccountError):
    """Base for monthly analysis quota failures."""

    pass


class AnalysisLimitExceededError(QuotaError):
    """Non-Pro user reached the monthly analysis limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"You have reached your monthly analysis limit of {limit}. "
            "Upgrade to Pro for unlimited analyses."
        )


class QuotaUnknownError(QuotaError):
    """Non-Pro user without a configured limit."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id
        super().__init__("Unable to determine your analysis limit. Please contact support.")
