"""Stub menu AI provider for testing.

Returns deterministic classifications without calling external APIs.
Useful for integration/E2E tests and local development.
"""

import re
from typing import List

from menu_guard.domain.analysis.entities.analysis_result import (
    AnalysisResultItem,
    SafetyLevel,
)
from menu_guard.domain.analysis.value_objects.menu_source import MenuSource, MenuSourceKind
from menu_guard.domain.chat.entities import ChatMessage

_ALLERGIES_LINE = re.compile(r"^- Allergies:\s*(.*)$", re.MULTILINE)


def _allergens_from_instruction(system_instruction: str) -> List[str]:
    match = _ALLERGIES_LINE.search(system_instruction)
    if not match:
        return []
    return [part.strip().lower() for part in match.group(1).split(",") if part.strip()]


def _stem(word: str) -> str:
    return word[:-1] if word.endswith("s") else word


class StubMenuAIProvider:
    """
    Stub implementation of IMenuAIProvider for testing.

    Text menus are read one item per line ("Name - description"); an item is
    unsafe when its line mentions one of the diner's allergens. Image and
    URL sources yield an empty analysis.
    Supports async context manager protocol for lifespan compatibility.
    """

    async def __aenter__(self) -> "StubMenuAIProvider":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        return None

    async def analyze_menu(
        self,
        source: MenuSource,
        system_instruction: str,
        prompt: str,
    ) -> List[AnalysisResultItem]:
        if source.kind is not MenuSourceKind.TEXT:
            return []

        allergens = _allergens_from_instruction(system_instruction)
        items = []
        for line in source.value.splitlines():
            line = line.strip()
            if not line:
                continue
            name = line.split(" - ", 1)[0].strip()
            lowered = line.lower()
            found = [a for a in allergens if _stem(a) in lowered]
            if found:
                items.append(
                    AnalysisResultItem(
                        item_name=name,
                        safety_level=SafetyLevel.UNSAFE,
                        reasoning=f"Contains {', '.join(found)}.",
                        identified_allergens=found,
                    )
                )
            else:
                items.append(
                    AnalysisResultItem(
                        item_name=name,
                        safety_level=SafetyLevel.SAFE,
                        reasoning="No listed allergens found in the description.",
                    )
                )
        return items

    async def generate_text(self, prompt: str) -> str:
        return "Stub response: there are safe options on this menu."

    async def continue_chat(self, seed: List[ChatMessage], message: str) -> str:
        return f"Stub reply to: {message}"
