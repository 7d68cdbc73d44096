"""Concrete implementation of the AIModel interface using the OpenAI API.

Hides the specifics of the OpenAI client library and translates requests/
responses between the domain model and the OpenAI API format.
"""

import asyncio
import logging
import time
from typing import Any, List, Optional

from openai import OpenAI, APIError, APIResponseValidationError, AuthenticationError, RateLimitError

from stardust.domain.interfaces.ai_model import AIModel
from stardust.domain.models.ai import ChatMessage, StructuredAIResponse
from stardust.domain.models.common import TokenUsage

logger = logging.getLogger(__name__)


class GptClient(AIModel):
    """OpenAI implementation of the AIModel interface."""

    DEFAULT_MODEL = "gpt-4o-mini"
    provider_name = "openai"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, temperature: float = 0.3):
        """Initializes the OpenAI client.

        Args:
            api_key: OpenAI API key. The SDK reads OPENAI_API_KEY if None.
            model: The OpenAI model to use.
            temperature: Sampling temperature for classification requests.
        """
        self.client = OpenAI(api_key=api_key)
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature
        logger.info(f"GptClient initialized for model: {self.model}")

    def _parse_openai_response(self, response: Any) -> StructuredAIResponse:
        """Parses the response object from an OpenAI API call."""
        try:
            choice = response.choices[0]
            content = choice.message.content or ""
            if choice.finish_reason == "length":
                logger.warning("OpenAI response was cut off at the token limit")

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
            logger.error(f"Failed to parse OpenAI response structure: {e}", exc_info=True)
            logger.debug(f"Raw OpenAI response object: {response}")
            raise ValueError(f"Invalid response structure from OpenAI: {e}") from e

    async def send_messages(self, messages: List[ChatMessage]) -> StructuredAIResponse:
        """Sends messages to the configured OpenAI model asynchronously."""
        logger.debug(f"Sending {len(messages)} messages to OpenAI model: {self.model}")
        start_time = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=messages,
                temperature=self.temperature,
            )
        except AuthenticationError as e:
            logger.error(f"OpenAI Authentication Error: {e}")
            raise
        except RateLimitError as e:
            logger.warning(f"OpenAI Rate Limit Error encountered: {e}")
            raise
        except APIResponseValidationError as e:
            logger.error(f"OpenAI response validation error: {e}")
            raise
        except APIError as e:
            logger.warning(f"OpenAI API Error encountered: {e}")
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000
        structured_response = self._parse_openai_response(response)
        structured_response.latency_ms = latency_ms

        logger.debug(f"Received response from OpenAI in {latency_ms:.2f}ms. Usage: {structured_response.token_usage}")
        return structured_response
