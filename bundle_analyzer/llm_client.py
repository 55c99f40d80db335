import asyncio
import logging
from typing import Protocol

import openai

from bundle_analyzer.config import Settings

logger = logging.getLogger(__name__)

COMMUNICATION_ERROR_MESSAGE = "Failed to communicate with the analysis model."


class CommunicationError(Exception):
    def __init__(self, message: str = COMMUNICATION_ERROR_MESSAGE):
        super().__init__(message)


class ModelGateway(Protocol):
    async def send(self, prompt: str) -> str: ...


def create_openai_client(settings: Settings) -> openai.AsyncOpenAI:
    """Create an AsyncOpenAI client pointed at the Gemini OpenAI-compatible endpoint."""
    return openai.AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
    )


class AnalysisGateway:
    """Sends a rendered prompt to the model and returns the raw completion text."""

    def __init__(self, client: openai.AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    async def send(self, prompt: str) -> str:
        logger.debug(f"LLM call - model={self.model}, prompt={len(prompt)} chars")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            logger.error(f"LLM API error - model={self.model}: {exc!r}")
            raise CommunicationError() from exc

        if not response.choices:
            logger.error(f"LLM returned no choices - model={self.model}")
            raise CommunicationError()

        raw = response.choices[0].message.content or ""
        logger.debug(f"LLM raw response ({len(raw)} chars)")

        usage = response.usage
        if usage:
            logger.debug(
                f"LLM token usage - model={self.model}, "
                f"prompt={usage.prompt_tokens}, completion={usage.completion_tokens}, "
                f"total={usage.total_tokens}"
            )
        return raw


class RetryingGateway:
    """Wraps a gateway and retries CommunicationError with exponential backoff."""

    def __init__(self, inner: ModelGateway, max_retries: int, backoff_seconds: float = 1.0):
        self.inner = inner
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds

    async def send(self, prompt: str) -> str:
        for attempt in range(self.max_retries + 1):
            try:
                return await self.inner.send(prompt)
            except CommunicationError:
                if attempt >= self.max_retries:
                    raise
                delay = self.backoff_seconds * (2 ** attempt)
                logger.warning(
                    f"LLM call attempt {attempt + 1} failed - retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)


def build_gateway(settings: Settings, client: openai.AsyncOpenAI) -> ModelGateway:
    gateway: ModelGateway = AnalysisGateway(client, settings.model)
    if settings.max_retries > 0:
        logger.info(f"LLM retries enabled: max_retries={settings.max_retries}")
        gateway = RetryingGateway(gateway, settings.max_retries, settings.retry_backoff)
    return gateway
