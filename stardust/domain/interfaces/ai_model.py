"""Interface for AI Language Models (LLMs).

Defines the contract for sending messages to different AI providers
(e.g., OpenAI GPT, Groq Llama).
"""

import abc
from typing import List

from ..models.ai import ChatMessage, StructuredAIResponse


class AIModel(abc.ABC):
    """Abstract Base Class for AI language model interactions."""

    provider_name: str = "unknown"

    @abc.abstractmethod
    async def send_messages(self, messages: List[ChatMessage]) -> StructuredAIResponse:
        """Sends a list of messages to the AI model asynchronously.

        Args:
            messages: A list of ChatMessage objects representing the conversation.

        Returns:
            A StructuredAIResponse containing the AI's reply and metadata.

        Raises:
            Exception: Provider errors are propagated unchanged so the retry
                layer can decide whether to try again.
        """
        pass
