"""Build the AI backend selected at startup."""

from ..config import Settings
from ..models import AIOption
from .backends import ClaudeBackend, GeminiBackend, IAIBackend, OpenAIAssistantBackend


def create_backend(settings: Settings) -> IAIBackend:
    """Build the backend named by ``settings.ai_selected``."""
    if settings.ai_selected is AIOption.GPT:
        return OpenAIAssistantBackend(
            api_key=settings.openai_key or "",
            assistant_id=settings.openai_assistant or "",
        )
    if settings.ai_selected is AIOption.GEMINI:
        return GeminiBackend(
            api_key=settings.gemini_key or "",
            model=settings.gemini_model,
            prompt=settings.gemini_prompt,
        )
    if settings.ai_selected is AIOption.CLAUDE:
        return ClaudeBackend(
            api_key=settings.anthropic_api_key,
            model=settings.claude_model,
            system=settings.claude_system_prompt,
        )
    raise ValueError(f"Unsupported AI backend: {settings.ai_selected}")
