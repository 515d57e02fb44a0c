"""AI backends: OpenAI assistants, Google Gemini chats and Anthropic Claude."""

import asyncio
from collections import defaultdict
from typing import Protocol

import anthropic
import openai
from google import genai
from google.genai import types

from ..errors import AIBackendTransientError
from ..logging_config import get_logger

logger = get_logger(__name__)


class IAIBackend(Protocol):
    """Turns a conversation's aggregated text into an answer."""

    async def invoke(self, conversation_id: str, text: str) -> str:
        """Generate the answer for ``text``; may raise on transient failure."""
        ...


class OpenAIAssistantBackend:
    """OpenAI Assistants API; one thread per conversation."""

    def __init__(self, api_key: str, assistant_id: str):
        if not api_key or not assistant_id:
            raise ValueError("OPENAI_KEY and OPENAI_ASSISTANT are required")

        self._assistant_id = assistant_id
        self._client = openai.AsyncOpenAI(api_key=api_key)
        # One thread per conversation seen, kept for the life of the process
        self._threads: dict[str, str] = {}
        # A thread rejects new messages while a run is active on it
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def invoke(self, conversation_id: str, text: str) -> str:
        async with self._locks[conversation_id]:
            try:
                thread_id = await self._thread_for(conversation_id)
                await self._client.beta.threads.messages.create(
                    thread_id=thread_id, role="user", content=text
                )
                run = await self._client.beta.threads.runs.create_and_poll(
                    thread_id=thread_id, assistant_id=self._assistant_id
                )
                if run.status != "completed":
                    raise AIBackendTransientError(
                        f"Assistant run {run.id} ended with status {run.status}"
                    )
                page = await self._client.beta.threads.messages.list(
                    thread_id=thread_id, run_id=run.id, order="desc", limit=1
                )
            except openai.OpenAIError as e:
                raise AIBackendTransientError(f"OpenAI API error: {e}") from e

        if not page.data:
            return ""
        return "".join(
            block.text.value for block in page.data[0].content if block.type == "text"
        )

    async def _thread_for(self, conversation_id: str) -> str:
        thread_id = self._threads.get(conversation_id)
        if thread_id is None:
            thread = await self._client.beta.threads.create()
            thread_id = thread.id
            self._threads[conversation_id] = thread_id
            logger.info("New assistant thread %s for chat %s", thread_id, conversation_id)
        return thread_id


class GeminiBackend:
    """Google Gemini; one chat session per conversation."""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash", prompt: str | None = None):
        if not api_key:
            raise ValueError("GEMINI_KEY is required")

        self._model = model
        self._prompt = prompt
        self._client = genai.Client(api_key=api_key)
        # One session per conversation seen, kept for the life of the process
        self._chats: dict = {}
        # A chat session appends both turns of a send to its history
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def invoke(self, conversation_id: str, text: str) -> str:
        async with self._locks[conversation_id]:
            chat = self._chats.get(conversation_id)
            if chat is None:
                config = (
                    types.GenerateContentConfig(system_instruction=self._prompt)
                    if self._prompt
                    else None
                )
                chat = self._client.aio.chats.create(model=self._model, config=config)
                self._chats[conversation_id] = chat

            try:
                response = await chat.send_message(text)
            except Exception as e:
                raise AIBackendTransientError(f"Gemini API error: {e}") from e

        return response.text or ""


class ClaudeBackend:
    """Anthropic Claude API with in-memory per-conversation history."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-sonnet-20241022",
        system: str | None = None,
        history_limit: int = 40,
    ):
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY is required")

        self._model = model
        self._system = system
        self._history_limit = history_limit
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        # One history per conversation seen; each is capped at history_limit messages
        self._histories: defaultdict[str, list[dict]] = defaultdict(list)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def invoke(self, conversation_id: str, text: str) -> str:
        async with self._locks[conversation_id]:
            history = self._histories[conversation_id]
            messages = history + [{"role": "user", "content": text}]
            answer = await self.complete(messages=messages, system=self._system)

            # History only grows on success so user/assistant turns keep alternating
            history.extend(
                [
                    {"role": "user", "content": text},
                    {"role": "assistant", "content": answer},
                ]
            )
            excess = len(history) - self._history_limit
            if excess > 0:
                # Drop whole turns so the history still starts with a user message
                del history[: excess + excess % 2]
        return answer

    async def complete(
        self,
        messages: list[dict],  # [{"role": "user", "content": "..."}]
        system: str | None = None,
        max_tokens: int = 1024,
    ) -> str:
        """Generate completion using Claude API."""
        kwargs = {"system": system} if system else {}
        try:
            response = await self._client.messages.create(
                model=self._model,
                messages=messages,
                max_tokens=max_tokens,
                **kwargs,
            )
        except anthropic.AnthropicError as e:
            raise AIBackendTransientError(f"Claude API error: {e}") from e

        return "".join(block.text for block in response.content if block.type == "text")
