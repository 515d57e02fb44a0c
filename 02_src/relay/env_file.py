"""Reading, masking and updating the managed ``.env`` file."""

from pathlib import Path
from typing import Any, Mapping

from dotenv import dotenv_values

from .errors import ConfigError
from .models import AIOption

# Keys the config API exposes and lets the operator change
MANAGED_ENV_KEYS = [
    "AI_SELECTED",
    "OPENAI_KEY",
    "OPENAI_ASSISTANT",
    "GEMINI_KEY",
    "GEMINI_PROMPT",
    "ANTHROPIC_API_KEY",
    "MAX_RETRIES",
    "MESSAGE_BUFFER_TIMEOUT_MS",
    "API_PORT",
]

SENSITIVE_ENV_KEYS = ["OPENAI_KEY", "GEMINI_KEY", "OPENAI_ASSISTANT", "ANTHROPIC_API_KEY"]
NON_NEGATIVE_INT_KEYS = ["MAX_RETRIES", "MESSAGE_BUFFER_TIMEOUT_MS", "API_PORT"]

MASKED_VALUE_PLACEHOLDER = "********"

_NEEDS_QUOTES = (" ", "\n", "#", "=")


def read_env_file(path: Path) -> dict[str, str]:
    """Parse ``path``; a missing file reads as empty."""
    if not path.exists():
        return {}
    return {key: value or "" for key, value in dotenv_values(path).items()}


def serialize_env(config: Mapping[str, str]) -> str:
    """
    Serialize ``config`` in .env syntax.

    Values are double quoted when they contain spaces, newlines, ``#`` or
    ``=``, or start or end with a quote. Inner double quotes are escaped.
    """
    lines = []
    for key, value in config.items():
        value = value or ""
        if any(c in value for c in _NEEDS_QUOTES) or value.startswith('"') or value.endswith('"'):
            escaped = value.replace('"', '\\"')
            lines.append(f'{key}="{escaped}"')
        else:
            lines.append(f"{key}={value}")
    return "".join(line + "\n" for line in lines)


def write_env_file(path: Path, config: Mapping[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_env(config), encoding="utf-8")


def managed_subset(config: Mapping[str, str]) -> dict[str, str]:
    return {key: config[key] for key in MANAGED_ENV_KEYS if key in config}


def mask_sensitive_values(config: Mapping[str, str]) -> dict[str, str]:
    """Replace every non-empty secret with the placeholder."""
    masked = dict(config)
    for key in SENSITIVE_ENV_KEYS:
        if masked.get(key):
            masked[key] = MASKED_VALUE_PLACEHOLDER
    return masked


def apply_config_update(
    current: Mapping[str, str], updates: Mapping[str, Any]
) -> tuple[dict[str, str], bool]:
    """
    Merge managed keys from ``updates`` into ``current``.

    Unmanaged keys in ``updates`` are ignored. A secret sent back as the mask
    placeholder keeps its current value.

    Returns:
        The merged configuration and whether anything changed.

    Raises:
        ConfigError: When a value fails validation; nothing is merged.
    """
    merged = dict(current)
    changed = False

    for key in MANAGED_ENV_KEYS:
        if key not in updates:
            continue
        value = "" if updates[key] is None else str(updates[key])

        if key in SENSITIVE_ENV_KEYS and value == MASKED_VALUE_PLACEHOLDER:
            continue

        if key == "AI_SELECTED" and value not in {option.value for option in AIOption}:
            raise ConfigError(f"Invalid value for {key}")

        if key in NON_NEGATIVE_INT_KEYS:
            try:
                number = int(value)
            except ValueError:
                number = -1
            if number < 0:
                raise ConfigError(f"{key} must be a non-negative number")

        if merged.get(key) != value:
            merged[key] = value
            changed = True

    return merged, changed
