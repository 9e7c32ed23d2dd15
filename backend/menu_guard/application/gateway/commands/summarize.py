"""Summarize safe options command."""

from dataclasses import dataclass
from typing import Any, Dict

from menu_guard.application.gateway.prompts import summary_prompt
from menu_guard.domain.analysis.ports.ai_provider import IMenuAIProvider


@dataclass
class SummarizeCommand:
    """Short friendly summary of an analysis, highlighting safe options.

    The results list is passed through to the prompt as-is.
    """

    provider: IMenuAIProvider

    async def execute(self, results: Any, allergies: str, preferences: str) -> str:
        return await self.provider.generate_text(summary_prompt(results, allergies, preferences))

    async def handle(self, data: Dict[str, Any]) -> Dict[str, str]:
        summary = await self.execute(
            data.get("results") or [],
            str(data.get("allergies") or ""),
            str(data.get("preferences") or ""),
        )
        return {"summary": summary}
