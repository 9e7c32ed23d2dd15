"""Chat entities - follow-up conversation about an analyzed menu."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from menu_guard.domain.analysis.entities.analysis_result import AnalysisResultItem
from menu_guard.domain.analysis.exceptions import (
    ChatHistoryMismatchError,
    InvalidChatHistoryError,
)

INITIAL_ASSISTANT_MESSAGE = (
    "Of course! I've reviewed the menu based on your allergies and preferences. "
    "The analysis is displayed above. What questions do you have? For example, "
    'you could ask "Why is the House Burger marked as caution?" or '
    '"What are the best vegan options?".'
)


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ChatMessage:
    """One conversation turn."""

    role: ChatRole
    content: str

    def __post_init__(self) -> None:
        if not isinstance(self.role, ChatRole):
            object.__setattr__(self, "role", ChatRole(self.role))

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: Any) -> "ChatMessage":
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            raise InvalidChatHistoryError()
        try:
            role = ChatRole(data.get("role"))
        except ValueError as e:
            raise InvalidChatHistoryError(f"Invalid chat role: {data.get('role')}") from e
        return cls(role=role, content=data["content"])


@dataclass(frozen=True)
class ChatTurn:
    """
    Validated split of a conversation into seed history and new message.

    The last element of the history is the new user turn; it is sent as the
    active message and never duplicated into the seed.

    Example:
        >>> turn = ChatTurn.from_history([
        ...     {"role": "user", "content": "hi"},
        ...     {"role": "model", "content": "hello"},
        ...     {"role": "user", "content": "what is safe?"},
        ... ], message="what is safe?")
        >>> [m.content for m in turn.seed], turn.message
        (['hi', 'hello'], 'what is safe?')
    """

    seed: List[ChatMessage]
    message: str

    @classmethod
    def from_history(cls, history: Any, message: Optional[str] = None) -> "ChatTurn":
        """
        Derive the turn from the full history.

        Args:
            history: Full conversation including the new user message
            message: Optional standalone copy of the new message

        Raises:
            InvalidChatHistoryError: History empty, malformed, or not ending
                with a user turn
            ChatHistoryMismatchError: `message` differs from the last turn
        """
        if not isinstance(history, list) or not history:
            raise InvalidChatHistoryError()

        turns = [ChatMessage.from_dict(item) for item in history]
        last = turns[-1]
        if last.role is not ChatRole.USER:
            raise InvalidChatHistoryError("The last chat turn must be a user message.")
        if message is not None and message != last.content:
            raise ChatHistoryMismatchError()

        return cls(seed=turns[:-1], message=last.content)


def start_menu_chat(
    allergies: str,
    preferences: str,
    results: Sequence[AnalysisResultItem],
) -> List[ChatMessage]:
    """Priming conversation shown after a successful analysis."""
    analysis_json = json.dumps([item.to_dict() for item in results])
    return [
        ChatMessage(
            role=ChatRole.USER,
            content=(
                "Here is the initial analysis of a menu I provided. "
                f"My allergies are ({allergies}) and my preferences are ({preferences}). "
                f"The menu analysis is: {analysis_json}"
            ),
        ),
        ChatMessage(role=ChatRole.MODEL, content=INITIAL_ASSISTANT_MESSAGE),
    ]
