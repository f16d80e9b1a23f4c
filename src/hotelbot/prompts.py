"""
System prompts for the Hotel bot.
"""
from __future__ import annotations

from hotelbot.config import get_config


def get_system_prompt() -> str:
    """Returns the system prompt provided by the active config."""
    return get_config().get_system_prompt()
