# engine_py/src/peppa_engine/errors.py

from .constants import ERROR_BOT


class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class BotError(GameError):
    """A strategy could not produce a decision from the given state."""
    def __init__(self, message: str):
        super().__init__(ERROR_BOT, message)
