"""AI backend selection."""

from enum import Enum


class AIOption(str, Enum):
    """Backends selectable through AI_SELECTED."""

    GPT = "GPT"
    GEMINI = "GEMINI"
    CLAUDE = "CLAUDE"
