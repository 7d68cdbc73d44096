"""Defines common Value Objects used across different domain contexts.

These objects represent simple values such as repository identifiers,
category names, and prompts.
"""

from typing import NewType, Dict, List, TypedDict

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
RepoId = NewType("RepoId", str)                 # "owner/name"
CategoryName = NewType("CategoryName", str)     # Catalog label, e.g. "Lang: Python"
PromptText = NewType("PromptText", str)         # Fully assembled prompt
FilePath = NewType("FilePath", str)

# === Classification Context ===
ClassificationResult = Dict[RepoId, List[CategoryName]]

# === AI Interaction Context ===
MessageRole = NewType("MessageRole", str)       # 'user', 'assistant', 'system'


class TokenUsage(TypedDict):
    """Represents token usage information from an AI call."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
