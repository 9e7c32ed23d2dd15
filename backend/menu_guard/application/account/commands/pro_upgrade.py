"""Pro upgrade commands (simulated checkout)."""

import base64
import logging
from dataclasses import dataclass

from menu_guard.application.account.queries.get_profile import GetProfileQuery
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import NotAuthenticatedError
from menu_guard.domain.account.ports.history_repository import IHistoryRepository
from menu_guard.domain.account.ports.profile_repository import IProfileRepository
from menu_guard.domain.account.value_objects.auth import AuthIdentity

logger = logging.getLogger(__name__)

CHECKOUT_URL_PREFIX = "https://checkout.stripe.com/pay/cs_test_"


@dataclass
class InitiateProUpgradeCommand:
    """Build a simulated checkout URL; no payment provider is called."""

    async def execute(self, identity: AuthIdentity) -> str:
        if not identity.email:
            raise NotAuthenticatedError("User not authenticated for upgrade.")
        session_id = base64.b64encode(identity.email.encode("utf-8")).decode("ascii")[:30]
        logger.info("Pro upgrade initiated", extra={"user_id": identity.id})
        return f"{CHECKOUT_URL_PREFIX}{session_id}"


@dataclass
class UpgradeToProCommand:
    """Flip the Pro flag and clear the monthly limit."""

    profiles: IProfileRepository
    history: IHistoryRepository

    async def execute(self, identity: AuthIdentity) -> UserProfile:
        query = GetProfileQuery(self.profiles, self.history)
        profile = await query.execute(identity)
        profile.upgrade_to_pro()
        await self.profiles.save(profile)
        logger.info("User upgraded to Pro", extra={"user_id": identity.id})
        return await query.execute(identity)
