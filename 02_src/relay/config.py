"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .errors import ConfigError
from .models import AIOption

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_PATH = LOGS_DIR / "relay.log"
DEFAULT_ENV_PATH = PROJECT_ROOT / ".env"


PathLike = Union[str, Path]


def resolve_env_path(env_value: PathLike | None = None) -> Path:
    """Resolve ENV_FILE to an absolute path."""
    if not env_value:
        return DEFAULT_ENV_PATH

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_option(name: str, default: AIOption) -> AIOption:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return AIOption(raw.strip().upper())
    except ValueError as e:
        choices = ", ".join(option.value for option in AIOption)
        raise ConfigError(f"{name} must be one of {choices}, got {raw!r}") from e


@dataclass
class Settings:
    """Startup-time tunables and credentials."""

    ai_selected: AIOption = AIOption.GPT
    max_retries: int = 3
    buffer_timeout_ms: int = 10_000
    typing_delay_per_char_ms: int = 100
    strict_delivery: bool = False
    ai_timeout_seconds: float | None = None

    openai_key: str | None = None
    openai_assistant: str | None = None
    gemini_key: str | None = None
    gemini_prompt: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    anthropic_api_key: str | None = None
    claude_model: str = "claude-3-5-sonnet-20241022"
    claude_system_prompt: str | None = None

    bridge_url: str = "http://localhost:21465"
    bridge_token: str | None = None
    api_host: str = "localhost"
    api_port: int = 3000
    env_file: Path = field(default_factory=lambda: DEFAULT_ENV_PATH)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from process environment variables."""
        return cls(
            ai_selected=_env_option("AI_SELECTED", AIOption.GPT),
            max_retries=_env_int("MAX_RETRIES", 3),
            buffer_timeout_ms=_env_int("MESSAGE_BUFFER_TIMEOUT_MS", 10_000),
            typing_delay_per_char_ms=_env_int("TYPING_DELAY_PER_CHAR_MS", 100),
            strict_delivery=_env_bool("STRICT_DELIVERY"),
            ai_timeout_seconds=_env_float("AI_TIMEOUT_SECONDS"),
            openai_key=os.getenv("OPENAI_KEY") or None,
            openai_assistant=os.getenv("OPENAI_ASSISTANT") or None,
            gemini_key=os.getenv("GEMINI_KEY") or None,
            gemini_prompt=os.getenv("GEMINI_PROMPT") or None,
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            claude_model=os.getenv("CLAUDE_MODEL", "claude-3-5-sonnet-20241022"),
            claude_system_prompt=os.getenv("CLAUDE_SYSTEM_PROMPT") or None,
            bridge_url=os.getenv("BRIDGE_URL", "http://localhost:21465"),
            bridge_token=os.getenv("BRIDGE_TOKEN") or None,
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=_env_int("API_PORT", 3000),
            env_file=resolve_env_path(os.getenv("ENV_FILE")),
        )

    @property
    def buffer_timeout_seconds(self) -> float:
        return self.buffer_timeout_ms / 1000

    @property
    def typing_delay_per_char_seconds(self) -> float:
        return self.typing_delay_per_char_ms / 1000

    def validate(self) -> None:
        """
        Check that the selected backend is usable and numbers are in range.

        Raises:
            ConfigError: On the first problem found.
        """
        for name in ("max_retries", "buffer_timeout_ms", "typing_delay_per_char_ms", "api_port"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative")

        if self.ai_timeout_seconds is not None and self.ai_timeout_seconds <= 0:
            raise ConfigError("ai_timeout_seconds must be positive when set")

        if self.ai_selected is AIOption.GPT and not (self.openai_key and self.openai_assistant):
            raise ConfigError("OPENAI_KEY or OPENAI_ASSISTANT environment variable not set")
        if self.ai_selected is AIOption.GEMINI and not self.gemini_key:
            raise ConfigError(
                "GEMINI_KEY environment variable not set. "
                "Create a key at https://aistudio.google.com/app/apikey"
            )
        if self.ai_selected is AIOption.CLAUDE and not self.anthropic_api_key:
            raise ConfigError("ANTHROPIC_API_KEY environment variable not set")
