"""Analyze menu command."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from menu_guard.application.gateway.prompts import (
    analysis_system_instruction,
    menu_content_prompt,
)
from menu_guard.domain.analysis.entities.analysis_result import AnalysisResultItem
from menu_guard.domain.analysis.ports.ai_provider import IMenuAIProvider
from menu_guard.domain.analysis.value_objects.menu_source import AnalysisRequest

logger = logging.getLogger(__name__)


@dataclass
class AnalyzeMenuCommand:
    """Classify every item of a menu for the diner's profile.

    The menu source is validated before the provider is called, so a
    request without text, image or URL never reaches the external API.

    Examples:
        >>> command = AnalyzeMenuCommand(provider)
        >>> items = await command.execute(AnalysisRequest(
        ...     allergies="Peanuts", menu_text="Pad Thai - rice noodles, peanuts, egg"))
    """

    provider: IMenuAIProvider

    async def execute(self, request: AnalysisRequest) -> List[AnalysisResultItem]:
        source = request.menu_source()

        logger.info(
            "Analyzing menu",
            extra={"source_kind": source.kind.value, "has_preferences": bool(request.preferences)},
        )

        items = await self.provider.analyze_menu(
            source=source,
            system_instruction=analysis_system_instruction(
                request.allergies, request.preferences
            ),
            prompt=menu_content_prompt(source),
        )

        logger.info("Menu analysis complete", extra={"item_count": len(items)})
        return items

    async def handle(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Gateway entry point: wire payload in, wire items out."""
        items = await self.execute(AnalysisRequest.from_wire(data))
        return [item.to_dict() for item in items]
