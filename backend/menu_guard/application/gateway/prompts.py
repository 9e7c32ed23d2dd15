"""Prompt templates for the Menu Guard gateway operations."""

import json
from typing import Any, Dict, Sequence

from menu_guard.domain.analysis.value_objects.menu_source import MenuSource, MenuSourceKind

ANALYSIS_SYSTEM_TEMPLATE = """You are "Menu Guard," an expert AI assistant specializing in \
food allergies and dietary restrictions. Your task is to analyze a restaurant menu for a \
user with specific needs.

User Profile:
- Allergies: {allergies}
- Dietary Preferences: {preferences}

Your instructions are:
1.  Carefully examine every item on the provided menu.
2.  For each item, determine its safety level: 'safe', 'caution', or 'unsafe'.
3.  Provide a concise 'reasoning' for your classification.
4.  If unsafe or caution, list the specific 'identifiedAllergens'.
5.  Return the analysis as a JSON array that conforms to the provided schema. Do not \
include any extra text or explanations outside of the JSON structure. If the menu is \
empty or unreadable, return an empty array."""


def analysis_system_instruction(allergies: str, preferences: str) -> str:
    return ANALYSIS_SYSTEM_TEMPLATE.format(
        allergies=allergies,
        preferences=preferences or "None",
    )


def menu_content_prompt(source: MenuSource) -> str:
    """User-turn text describing which menu to analyze."""
    if source.kind is MenuSourceKind.URL:
        return f"Analyze the menu from this URL: {source.value}"
    if source.kind is MenuSourceKind.IMAGE:
        return "Analyze the menu in this image."
    return f"Analyze this menu text: \n\n```\n{source.value}\n```"


def summary_prompt(results: Any, allergies: str, preferences: str) -> str:
    return (
        f"Based on this JSON analysis of a menu: {json.dumps(results)}, write a short, "
        "friendly, and encouraging summary for a user whose allergies are "
        f'"{allergies}" and preferences are "{preferences}". Start by highlighting the '
        "best-looking safe options. Keep it to 2-3 sentences."
    )


def alternative_prompt(
    allergies: str,
    preferences: str,
    unsafe_item_name: str,
    menu_context: Dict[str, Any],
    safe_items: Sequence[str],
) -> str:
    safe_items_context = (
        f"Here is a list of items already known to be safe: {', '.join(safe_items)}."
        if safe_items
        else ""
    )
    url = menu_context.get("url")
    if url:
        menu_data_source = f"the menu at this URL: {url}"
    else:
        menu_data_source = f"this menu text: \n```\n{menu_context.get('text') or ''}\n```"
    return (
        f'A user with allergies "{allergies}" and preferences "{preferences}" cannot eat '
        f'"{unsafe_item_name}". Based on {menu_data_source}, suggest a single, specific, '
        "safer alternative item. Briefly explain why it's a better choice. "
        f"{safe_items_context}"
    ).strip()
