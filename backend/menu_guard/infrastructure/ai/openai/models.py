"""Pydantic models for OpenAI structured outputs.

These models define the schema for structured outputs from OpenAI API.
Used with beta.chat.completions.parse() for native Pydantic support.
"""

from typing import List, Literal

from pydantic import BaseModel, Field


class MenuItemAnalysis(BaseModel):
    """
    Single menu item classified for the diner.

    Maps to domain entity AnalysisResultItem.
    """

    item_name: str = Field(..., description="The name of the menu item.")
    safety_level: Literal["safe", "caution", "unsafe"] = Field(
        ...,
        description="The safety level of the item for the user.",
    )
    reasoning: str = Field(
        ...,
        description="A brief explanation for the assigned safety level.",
    )
    identified_allergens: List[str] = Field(
        default_factory=list,
        description="A list of specific allergens identified in the item that match "
        "the user's profile.",
    )


class MenuAnalysisResponse(BaseModel):
    """
    Root model for menu analysis structured outputs.

    Structured outputs need an object at the root, so the item array is
    wrapped in `items`.
    """

    items: List[MenuItemAnalysis] = Field(
        default_factory=list,
        description="Every item found on the menu, in menu order. Empty if the "
        "menu is empty or unreadable.",
    )
