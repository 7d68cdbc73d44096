"""Concrete implementation of the AIModel interface using the Groq API.

Hides the specifics of the Groq client library and translates requests/
responses between the domain model and the Groq API format.
"""

import asyncio
import logging
import time
from typing import Any, List, Optional

from groq import Groq as GroqSDKClient, APIError, APIResponseValidationError, AuthenticationError, RateLimitError

from stardust.domain.interfaces.ai_model import AIModel
from stardust.domain.models.ai import ChatMessage, StructuredAIResponse
from stardust.domain.models.common import TokenUsage

logger = logging.getLogger(__name__)


class GroqClient(AIModel):
    """Groq implementation of the AIModel interface."""

    DEFAULT_MODEL = "llama-3.3-70b-versatile"
    provider_name = "groq"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, temperature: float = 0.3):
        """Initializes the Groq client.

        Args:
            api_key: Groq API key. The SDK reads GROQ_API_KEY if None.
            model: The Groq model to use.
            temperature: Sampling temperature for classification requests.
        """
        self.client = GroqSDKClient(api_key=api_key)
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature
        logger.info(f"GroqClient initialized for model: {self.model}")

    def _parse_groq_response(self, response: Any) -> StructuredAIResponse:
        try:
            choice = response.choices[0]
            content = choice.message.content or ""

            token_usage = None
            if response.usage:
                token_usage = TokenUsage(
                    prompt_tokens=response.usage.prompt_tokens,
                    completion_tokens=response.usage.completion_tokens,
                    total_tokens=response.usage.total_tokens
                )

            return StructuredAIResponse(
                content=content,
                token_usage=token_usage,
                model_name=response.model,
            )
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            logger.error(f"Failed to parse Groq response structure: {e}", exc_info=True)
            logger.debug(f"Raw Groq response object: {response}")
            raise ValueError(f"Invalid response structure from Groq: {e}") from e

    async def send_messages(self, messages: List[ChatMessage]) -> StructuredAIResponse:
        """Sends messages to the configured Groq model asynchronously."""
        logger.debug(f"Sending {len(messages)} messages to Groq model: {self.model}")
        start_time = time.perf_counter()
        try:
            # The official Groq SDK client is synchronous
            chat_completion = await asyncio.to_thread(
                self.client.chat.completions.create,
                messages=messages,
                model=self.model,
                temperature=self.temperature,
            )
        except AuthenticationError as e:
            logger.error(f"Groq Authentication Error: {e}")
            raise
        except RateLimitError as e:
            logger.warning(f"Groq Rate Limit Error encountered: {e}")
            raise
        except APIResponseValidationError as e:
            logger.error(f"Groq response validation error: {e}")
            raise
        except APIError as e:
            logger.warning(f"Groq API Error encountered (Status: {getattr(e, 'status_code', 'N/A')}): {e}")
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000
        structured_response = self._parse_groq_response(chat_completion)
        structured_response.latency_ms = latency_ms

        logger.debug(f"Received response from Groq in {latency_ms:.2f}ms. Usage: {structured_response.token_usage}")
        return structured_response
