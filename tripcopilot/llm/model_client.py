"""
OpenAI Model Client
Thin async wrapper over the OpenAI Responses API.

The conversation is flattened to a "role: content" transcript and sent
as a single input string, with the system prompt as instructions.
"""

from typing import Optional, Sequence

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from ..config import settings
from ..errors import ModelProviderError
from ..schemas.ai_schemas import ChatMessage, ChatRole, ModelResult
from .fallback import EMPTY_MODEL_ANSWER


def build_transcript(messages: Sequence[ChatMessage]) -> str:
    """
    Flatten turns into "user: ..." / "assistant: ..." blocks

    Example:
        >>> build_transcript([ChatMessage(role="user", content=" hi ")])
        'user: hi'
    """
    lines = []
    for message in messages:
        role = ChatRole.ASSISTANT.value if message.role == ChatRole.ASSISTANT else ChatRole.USER.value
        lines.append(f"{role}: {message.content.strip()}")
    return "\n\n".join(lines)


class ModelClient:
    """
    Calls the language model for chat answers

    Timeouts and retries are owned by the SDK client.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None
    ):
        self.client = client or AsyncOpenAI(
            api_key=api_key or settings.OPENAI_API_KEY,
            timeout=timeout or settings.OPENAI_TIMEOUT,
            max_retries=settings.OPENAI_MAX_RETRIES if max_retries is None else max_retries,
        )

    async def respond(
        self,
        model: str,
        system_prompt: str,
        messages: Sequence[ChatMessage]
    ) -> ModelResult:
        """
        Get one answer for the conversation

        Args:
            model: Model name
            system_prompt: Rendered system prompt
            messages: Conversation turns

        Returns:
            ModelResult with trimmed text (placeholder if empty) and raw usage

        Raises:
            ModelProviderError: on any provider failure
        """
        try:
            response = await self.client.responses.create(
                model=model,
                instructions=system_prompt,
                input=build_transcript(messages),
            )
        except OpenAIError as e:
            logger.error(f"OpenAI responses call failed ({model}): {e}")
            raise ModelProviderError(f"openai responses error: {e}") from e

        text = (response.output_text or "").strip() or EMPTY_MODEL_ANSWER

        usage = {}
        if response.usage is not None:
            usage = response.usage.model_dump(mode="json")

        return ModelResult(text=text, token_usage=usage)
