"""Suggest safe alternative command."""

from dataclasses import dataclass
from typing import Any, Dict, List

from menu_guard.application.gateway.prompts import alternative_prompt
from menu_guard.domain.analysis.exceptions import GatewayInputError
from menu_guard.domain.analysis.ports.ai_provider import IMenuAIProvider


@dataclass
class SuggestAlternativeCommand:
    """Suggest a single safer swap for an item the diner cannot eat."""

    provider: IMenuAIProvider

    async def execute(
        self,
        allergies: str,
        preferences: str,
        unsafe_item_name: str,
        menu_context: Dict[str, Any],
        safe_items: List[str],
    ) -> str:
        if not unsafe_item_name:
            raise GatewayInputError("An unsafe item name is required.")
        prompt = alternative_prompt(
            allergies, preferences, unsafe_item_name, menu_context, safe_items
        )
        return await self.provider.generate_text(prompt)

    async def handle(self, data: Dict[str, Any]) -> Dict[str, str]:
        menu_context = data.get("menuContext") or {}
        if not isinstance(menu_context, dict):
            raise GatewayInputError("menuContext must be an object.")
        safe_items = data.get("safeItems") or []
        if not isinstance(safe_items, list):
            raise GatewayInputError("safeItems must be a list.")
        alternative = await self.execute(
            allergies=str(data.get("allergies") or ""),
            preferences=str(data.get("preferences") or ""),
            unsafe_item_name=str(data.get("unsafeItemName") or ""),
            menu_context=menu_context,
            safe_items=[str(item) for item in safe_items],
        )
        return {"alternative": alternative}
