"""Provider Factory for external services.

Environment-based provider selection with graceful fallback to stubs.
Strategy:
- .env (runtime): MENU_AI_PROVIDER=openai, PLACES_PROVIDER=google
- .env.test (pytest): MENU_AI_PROVIDER=stub, PLACES_PROVIDER=stub
- Default: stub AI provider, Google places (disabled without an API key)

Usage:
    from menu_guard.infrastructure.providers.factory import (
        get_ai_provider,
        get_places_provider,
    )
"""

import logging
import os
from typing import Optional

from menu_guard.domain.analysis.ports.ai_provider import IMenuAIProvider
from menu_guard.domain.places.ports import IPlacesProvider
from menu_guard.infrastructure.ai.openai.client import OpenAIMenuClient
from menu_guard.infrastructure.ai.stub_provider import StubMenuAIProvider
from menu_guard.infrastructure.config import (
    get_google_maps_api_key,
    get_openai_api_key,
    get_openai_model,
    mask_secret,
)
from menu_guard.infrastructure.external_apis.google_places.client import (
    GooglePlacesClient,
)
from menu_guard.infrastructure.external_apis.google_places.stub_client import (
    StubPlacesProvider,
)

logger = logging.getLogger(__name__)


def create_ai_provider() -> IMenuAIProvider:
    """Create AI provider based on MENU_AI_PROVIDER env var.

    Environment variable: MENU_AI_PROVIDER
    Values:
        - "openai": OpenAI chat completions (requires OPENAI_API_KEY)
        - "stub": Stub provider (default)

    Raises:
        ValueError: MENU_AI_PROVIDER=openai without OPENAI_API_KEY
    """
    mode = os.getenv("MENU_AI_PROVIDER", "stub").lower()

    if mode == "openai":
        api_key = get_openai_api_key()
        if not api_key:
            raise ValueError(
                "MENU_AI_PROVIDER=openai but OPENAI_API_KEY not set. "
                "Set OPENAI_API_KEY in .env or use MENU_AI_PROVIDER=stub"
            )
        logger.info(
            "Using OpenAI menu provider",
            extra={"model": get_openai_model(), "api_key": mask_secret(api_key)},
        )
        return OpenAIMenuClient(api_key=api_key, model=get_openai_model())

    return StubMenuAIProvider()


def create_places_provider() -> Optional[IPlacesProvider]:
    """Create places provider based on PLACES_PROVIDER env var.

    Environment variable: PLACES_PROVIDER
    Values:
        - "google": Google Places API (default; needs GOOGLE_MAPS_API_KEY)
        - "stub": Stub provider

    Returns:
        Provider instance, or None when Google is selected without a key
        (nearby search then fails with a configuration error)
    """
    mode = os.getenv("PLACES_PROVIDER", "google").lower()

    if mode == "stub":
        return StubPlacesProvider()

    api_key = get_google_maps_api_key()
    if not api_key:
        logger.warning("GOOGLE_MAPS_API_KEY not set, nearby search disabled")
        return None
    return GooglePlacesClient(api_key=api_key)


# Singleton instances (lazy initialization)
_ai_provider: Optional[IMenuAIProvider] = None
_places_provider: Optional[IPlacesProvider] = None
_places_resolved = False


def get_ai_provider() -> IMenuAIProvider:
    """Get singleton AI provider instance."""
    global _ai_provider
    if _ai_provider is None:
        _ai_provider = create_ai_provider()
    return _ai_provider


def get_places_provider() -> Optional[IPlacesProvider]:
    """Get singleton places provider instance (None if unconfigured)."""
    global _places_provider, _places_resolved
    if not _places_resolved:
        _places_provider = create_places_provider()
        _places_resolved = True
    return _places_provider


def reset_providers() -> None:
    """Reset all singleton provider instances.

    Useful for testing to force re-creation with different env vars.
    """
    global _ai_provider, _places_provider, _places_resolved
    _ai_provider = None
    _places_provider = None
    _places_resolved = False
