"""AnalysisResultItem entity - per-item safety classification.

These entities represent the output of a menu analysis: one entry for every
item found on the menu, classified against the diner's allergy profile.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class SafetyLevel(str, Enum):
    """Closed classification of a menu item for a given profile."""

    SAFE = "safe"
    CAUTION = "caution"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class AnalysisResultItem:
    """
    Entity: Single classified menu item.

    Produced by the external model; the only invariant enforced locally is
    the shape (closed safety level, string allergens).

    Example:
        AnalysisResultItem(
            item_name="Pad Thai",
            safety_level=SafetyLevel.UNSAFE,
            reasoning="Contains peanuts.",
            identified_allergens=["peanuts"],
        )
    """

    item_name: str
    safety_level: SafetyLevel
    reasoning: str
    identified_allergens: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Normalize safety level passed as plain string."""
        if not isinstance(self.safety_level, SafetyLevel):
            object.__setattr__(self, "safety_level", SafetyLevel(self.safety_level))

    def is_safe(self) -> bool:
        return self.safety_level is SafetyLevel.SAFE

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys, as stored and served)."""
        return {
            "itemName": self.item_name,
            "safetyLevel": self.safety_level.value,
            "reasoning": self.reasoning,
            "identifiedAllergens": list(self.identified_allergens),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResultItem":
        """Build from wire representation.

        Raises:
            KeyError: If a required key is missing
            ValueError: If safetyLevel is not a known level
        """
        return cls(
            item_name=data["itemName"],
            safety_level=SafetyLevel(data["safetyLevel"]),
            reasoning=data["reasoning"],
            identified_allergens=list(data["identifiedAllergens"]),
        )


def _is_result_item(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    allergens = item.get("identifiedAllergens")
    return (
        isinstance(item.get("itemName"), str)
        and item.get("safetyLevel") in {level.value for level in SafetyLevel}
        and isinstance(item.get("reasoning"), str)
        and isinstance(allergens, list)
        and all(isinstance(allergen, str) for allergen in allergens)
    )


def is_analysis_result_list(data: Any) -> bool:
    """
    Runtime shape check for a stored analysis result.

    Args:
        data: Decoded JSON value (typically a persisted `result` blob)

    Returns:
        True if data is a list of well-formed result items

    Example:
        >>> is_analysis_result_list([{"itemName": "Soup", "safetyLevel": "safe",
        ...     "reasoning": "ok", "identifiedAllergens": []}])
        True
        >>> is_analysis_result_list({"itemName": "Soup"})
        False
    """
    if not isinstance(data, list):
        return False
    return all(_is_result_item(item) for item in data)


def data_error_item(reason: str) -> AnalysisResultItem:
    """Synthetic item rendered in place of an unreadable stored result."""
    return AnalysisResultItem(
        item_name="Data Error",
        safety_level=SafetyLevel.UNSAFE,
        reasoning=reason,
        identified_allergens=[],
    )


STORED_RESULT_INVALID = (
    "The result from the database was in an invalid format and could not be displayed."
)
SAVED_RESULT_UNREADABLE = "Could not read analysis result after saving."


def decode_result(data: Any, reason: str = STORED_RESULT_INVALID) -> List[AnalysisResultItem]:
    """
    Decode a stored result blob, never raising.

    Args:
        data: Raw stored value
        reason: Reasoning text for the synthetic item on invalid data

    Returns:
        Parsed items in stored order, or a single "Data Error" item
    """
    if not is_analysis_result_list(data):
        return [data_error_item(reason)]
    return [AnalysisResultItem.from_dict(item) for item in data]
