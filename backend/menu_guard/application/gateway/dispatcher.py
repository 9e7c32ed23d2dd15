"""Gateway dispatcher - routes `{type, payload}` envelopes to commands."""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from menu_guard.application.gateway.commands.analyze_menu import AnalyzeMenuCommand
from menu_guard.application.gateway.commands.continue_chat import ContinueChatCommand
from menu_guard.application.gateway.commands.find_nearby import (
    FindNearbyRestaurantsCommand,
)
from menu_guard.application.gateway.commands.suggest_alternative import (
    SuggestAlternativeCommand,
)
from menu_guard.application.gateway.commands.summarize import SummarizeCommand
from menu_guard.domain.analysis.exceptions import GatewayInputError, UnknownOperationError
from menu_guard.domain.analysis.ports.ai_provider import IMenuAIProvider
from menu_guard.domain.places.ports import IPlacesProvider

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Awaitable[Any]]


@dataclass
class GatewayDispatcher:
    """
    Single entry point for the five gateway operations.

    Operations are independent; no state is kept between requests.

    Example:
        >>> dispatcher = GatewayDispatcher(ai_provider, places_provider)
        >>> await dispatcher.dispatch("summarize", {"results": [], "allergies": "", "preferences": ""})
        {'summary': '...'}
    """

    ai_provider: IMenuAIProvider
    places_provider: Optional[IPlacesProvider] = None
    handlers: Dict[str, Handler] = field(init=False)

    def __post_init__(self) -> None:
        self.handlers = {
            "analyze": AnalyzeMenuCommand(self.ai_provider).handle,
            "summarize": SummarizeCommand(self.ai_provider).handle,
            "alternative": SuggestAlternativeCommand(self.ai_provider).handle,
            "chat": ContinueChatCommand(self.ai_provider).handle,
            "places": FindNearbyRestaurantsCommand(self.places_provider).handle,
        }

    @property
    def operations(self) -> list:
        return list(self.handlers)

    async def dispatch(self, operation: Any, payload: Any) -> Any:
        """
        Run one operation.

        Raises:
            UnknownOperationError: `operation` is not supported
            GatewayInputError: Payload is not an object or fails validation
            Exception: Upstream failures propagate unchanged
        """
        handler = self.handlers.get(operation) if isinstance(operation, str) else None
        if handler is None:
            raise UnknownOperationError(operation)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise GatewayInputError("Request payload must be an object.")

        logger.debug("Dispatching gateway operation", extra={"operation": operation})
        return await handler(payload)
