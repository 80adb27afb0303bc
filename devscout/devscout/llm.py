import logging
import time

from anthropic import AsyncAnthropic

from .config import AnthropicConfig


logger = logging.getLogger(__name__)


class LLMClient:
    """Thin wrapper over the Anthropic messages API."""

    def __init__(self, config: AnthropicConfig, client: AsyncAnthropic | None = None):
        self.config = config
        self.client = client or AsyncAnthropic(api_key=config.api_key)

    async def complete(self, prompt: str) -> str:
        """Single-turn completion. Returns the concatenated text blocks."""
        started = time.monotonic()
        message = await self.client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(block.text for block in message.content if block.type == "text")
        logger.debug(
            "LLM %s: %d chars in, %d chars out, %d ms",
            self.config.model, len(prompt), len(text), int((time.monotonic() - started) * 1000),
        )
        return text
