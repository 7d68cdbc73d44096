"""Domain models related to AI interactions."""

from dataclasses import dataclass
from typing import Optional, TypedDict

from .common import MessageRole, TokenUsage


class ChatMessage(TypedDict):
    """Represents a message structure expected by AI model APIs."""
    role: MessageRole
    content: str


@dataclass
class StructuredAIResponse:
    """Structured response from an AI model, including metadata."""
    content: str
    token_usage: Optional[TokenUsage] = None
    model_name: Optional[str] = None # Which model generated the response
    latency_ms: Optional[float] = None # Time taken for the API call
