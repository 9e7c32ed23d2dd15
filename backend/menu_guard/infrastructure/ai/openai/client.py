"""OpenAI Client - Implements IMenuAIProvider port.

Key Features:
- Structured outputs (native Pydantic support) for menu analysis
- Vision input for menu photos (inline data URLs)
- Plain completions for summaries, alternatives and chat
"""

# mypy: warn-unused-ignores=False

import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from menu_guard.domain.analysis.entities.analysis_result import (
    AnalysisResultItem,
    SafetyLevel,
)
from menu_guard.domain.analysis.value_objects.menu_source import MenuSource, MenuSourceKind
from menu_guard.domain.chat.entities import ChatMessage, ChatRole
from menu_guard.infrastructure.ai.openai.models import MenuAnalysisResponse

logger = logging.getLogger(__name__)

_ROLE_MAP = {ChatRole.USER: "user", ChatRole.MODEL: "assistant"}


class OpenAIMenuClient:
    """
    OpenAI client implementing IMenuAIProvider port.

    Follows Dependency Inversion Principle:
    - Domain defines IMenuAIProvider interface (port)
    - Infrastructure provides OpenAIMenuClient implementation (adapter)

    No retry and no circuit breaking: every call is a single attempt and
    failures propagate to the gateway boundary.

    Example:
        >>> client = OpenAIMenuClient(api_key="sk-...")
        >>> items = await client.analyze_menu(source, instruction, prompt)
        >>> print(f"Classified {len(items)} items")
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-2024-08-06",
        temperature: float = 0.2,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Model name (must support structured outputs and vision)
            temperature: Sampling temperature
            client: Preconfigured AsyncOpenAI (tests)
        """
        self._client = client or AsyncOpenAI(api_key=api_key)
        self._model = model
        self._temperature = temperature

    async def __aenter__(self) -> "OpenAIMenuClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self._client.close()

    async def analyze_menu(
        self,
        source: MenuSource,
        system_instruction: str,
        prompt: str,
    ) -> List[AnalysisResultItem]:
        """
        Classify every item of a menu.

        Implements IMenuAIProvider.analyze_menu() port.

        URL sources are passed in the prompt only; the model is not given
        the page contents.

        Returns:
            Classified items; empty list when the model returns nothing
        """
        start_time = time.time()

        logger.info(
            "Analyzing menu",
            extra={"source_kind": source.kind.value, "model": self._model},
        )

        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        if source.kind is MenuSourceKind.IMAGE and source.image is not None:
            content.insert(
                0,
                {"type": "image_url", "image_url": {"url": source.image.as_data_url()}},
            )

        response = await self._client.beta.chat.completions.parse(
            model=self._model,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": content},
            ],  # type: ignore[arg-type]
            response_format=MenuAnalysisResponse,
            temperature=self._temperature,
        )
        self._log_usage(response)

        parsed = response.choices[0].message.parsed
        if parsed is None:
            logger.warning("OpenAI returned empty parsed response")
            return []

        items = self._to_domain_items(parsed)

        logger.info(
            "Menu analysis complete",
            extra={
                "item_count": len(items),
                "processing_time_ms": int((time.time() - start_time) * 1000),
            },
        )
        return items

    async def generate_text(self, prompt: str) -> str:
        """Single-turn completion, returns the reply text."""
        return await self._complete([{"role": "user", "content": prompt}])

    async def continue_chat(self, seed: List[ChatMessage], message: str) -> str:
        """Replay the seed conversation then send `message`."""
        messages = [
            {"role": _ROLE_MAP[turn.role], "content": turn.content} for turn in seed
        ]
        messages.append({"role": "user", "content": message})
        return await self._complete(messages)

    async def _complete(self, messages: List[Dict[str, Any]]) -> str:
        logger.debug(
            "Calling OpenAI completion",
            extra={"model": self._model, "message_count": len(messages)},
        )
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,  # type: ignore[arg-type]
            temperature=self._temperature,
        )
        self._log_usage(response)
        return response.choices[0].message.content or ""

    def _log_usage(self, response: Any) -> None:
        usage = getattr(response, "usage", None)
        if not usage:
            return
        logger.info(
            "OpenAI response received",
            extra={
                "model": self._model,
                "total_tokens": usage.total_tokens,
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
            },
        )

    @staticmethod
    def _to_domain_items(response: MenuAnalysisResponse) -> List[AnalysisResultItem]:
        """Map the Pydantic response to domain AnalysisResultItem entities."""
        return [
            AnalysisResultItem(
                item_name=item.item_name,
                safety_level=SafetyLevel(item.safety_level),
                reasoning=item.reasoning,
                identified_allergens=list(item.identified_allergens),
            )
            for item in response.items
        ]
