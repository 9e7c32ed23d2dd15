"""Port (interface) for generative AI providers.

This port defines the contract that external language-model providers
(e.g., OpenAI) must implement to be used by the gateway.
"""

from typing import List, Protocol

from menu_guard.domain.analysis.entities.analysis_result import AnalysisResultItem
from menu_guard.domain.analysis.value_objects.menu_source import MenuSource
from menu_guard.domain.chat.entities import ChatMessage


class IMenuAIProvider(Protocol):
    """
    Interface for generative AI providers.

    This port follows the Dependency Inversion Principle:
    - Domain layer defines the interface (port)
    - Infrastructure layer implements it (adapter)

    Implementations can be:
    - OpenAI chat completions with structured outputs
    - Stub provider (for testing and local development)
    """

    async def analyze_menu(
        self,
        source: MenuSource,
        system_instruction: str,
        prompt: str,
    ) -> List[AnalysisResultItem]:
        """
        Classify every item of a menu.

        Args:
            source: Selected menu source (image sources carry inline data)
            system_instruction: Instruction embedding the diner's profile
            prompt: User-turn text describing the menu content

        Returns:
            Classified items in menu order; empty list for an empty response

        Raises:
            Exception: Implementation-specific errors (network, API, parsing)
        """
        ...

    async def generate_text(self, prompt: str) -> str:
        """Single-turn text generation."""
        ...

    async def continue_chat(self, seed: List[ChatMessage], message: str) -> str:
        """
        Continue a conversation.

        Args:
            seed: Prior turns, oldest first, excluding the new message
            message: The new user turn

        Returns:
            Model reply text
        """
        ...
