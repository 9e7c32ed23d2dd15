"""Continue chat command."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from menu_guard.domain.analysis.ports.ai_provider import IMenuAIProvider
from menu_guard.domain.chat.entities import ChatTurn

logger = logging.getLogger(__name__)


@dataclass
class ContinueChatCommand:
    """Send the newest user turn of a conversation to the model.

    The new message is derived from the history server-side; a standalone
    `message`, when sent, must match the last history turn.
    """

    provider: IMenuAIProvider

    async def execute(self, history: Any, message: Optional[str] = None) -> str:
        turn = ChatTurn.from_history(history, message)
        logger.debug("Continuing chat", extra={"seed_turns": len(turn.seed)})
        return await self.provider.continue_chat(turn.seed, turn.message)

    async def handle(self, data: Dict[str, Any]) -> Dict[str, str]:
        message = data.get("message")
        reply = await self.execute(
            data.get("history"), message if isinstance(message, str) else None
        )
        return {"reply": reply}
