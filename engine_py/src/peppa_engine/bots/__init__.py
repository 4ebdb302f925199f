"""
Bot strategies, selected per seat by AI type tag.
"""

from ..constants import AI_GEM, AI_GPT52, AI_HAL
from .base import BaseBot
from .gem import GemBot
from .gpt52 import Gpt52Bot
from .hal import HalBot

BOT_CLASSES = {
    AI_HAL: HalBot,
    AI_GEM: GemBot,
    AI_GPT52: Gpt52Bot,
}


def create_bot(ai_type: str) -> BaseBot:
    """New strategy instance for one seat of one session."""
    try:
        return BOT_CLASSES[ai_type]()
    except KeyError:
        raise ValueError(f"Unknown AI type: {ai_type}") from None


__all__ = ["BaseBot", "HalBot", "GemBot", "Gpt52Bot", "create_bot", "BOT_CLASSES"]
