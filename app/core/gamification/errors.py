"""
Errors raised by the gamification components for invalid input.
"""
from typing import Any


class GamificationInputError(ValueError):
    """Input rejected before any mutation."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.value = value

    def as_detail(self) -> dict:
        return {"field": self.field, "msg": self.message, "value": self.value}


class UnknownSubjectError(GamificationInputError):
    def __init__(self, subject: Any):
        super().__init__("subject", "Invalid subject", subject)


class UnknownGameError(LookupError):
    def __init__(self, subject: str, game_id: str):
        super().__init__(f"Game '{game_id}' not found in {subject}")
        self.subject = subject
        self.game_id = game_id
