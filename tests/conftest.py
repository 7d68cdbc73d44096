import pytest
from typer.testing import CliRunner
from pathlib import Path
from typing import Callable, List, Optional, Union

from stardust.domain.interfaces.ai_model import AIModel
from stardust.domain.models.ai import ChatMessage, StructuredAIResponse
from stardust.domain.models.catalog import Category, CategoryCatalog
from stardust.infrastructure.config.settings import clear_test_config


class ScriptedModel(AIModel):
    """AIModel double that replays canned replies and records every request.

    A reply may be a string (returned as content), an exception (raised) or
    a callable taking the messages and returning either of those.
    """

    provider_name = "scripted"

    def __init__(self, replies: List[Union[str, BaseException, Callable]]):
        self.replies = list(replies)
        self.requests: List[List[ChatMessage]] = []

    async def send_messages(self, messages: List[ChatMessage]) -> StructuredAIResponse:
        self.requests.append(messages)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if callable(reply) and not isinstance(reply, BaseException):
            reply = reply(messages)
        if isinstance(reply, BaseException):
            raise reply
        return StructuredAIResponse(content=reply, model_name="scripted-model")

    @property
    def prompts(self) -> List[str]:
        return [messages[-1]["content"] for messages in self.requests]


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def catalog() -> CategoryCatalog:
    return CategoryCatalog([
        Category("Lang: Python", "Python projects", ("python", "py")),
        Category("AI: LLM", "Large language models", ("llm", "gpt")),
        Category("Web: Frontend", "Frontend development", ("react", "vue")),
    ])


@pytest.fixture
def scripted_model() -> Callable[..., ScriptedModel]:
    def factory(*replies: Union[str, BaseException, Callable]) -> ScriptedModel:
        return ScriptedModel(list(replies))
    return factory


@pytest.fixture(autouse=True)
def reset_test_config():
    """Keeps configuration overrides from leaking between tests."""
    clear_test_config()
    yield
    clear_test_config()


@pytest.fixture
def input_files(tmp_path: Path):
    """Writes a repository list and a catalog the way a user would."""
    repos_file = tmp_path / "repos.yaml"
    repos_file.write_text(
        "- id: owner/alpha\n"
        "  description: A Python LLM toolkit\n"
        "  language: Python\n"
        "  stars: 120\n"
        "- owner/beta\n",
        encoding="utf-8",
    )
    catalog_file = tmp_path / "catalog.json"
    catalog_file.write_text(
        '{"categories": ['
        '{"name": "Lang: Python", "description": "Python projects", "keywords": ["python"]},'
        '{"name": "AI: LLM", "description": "Large language models"}'
        ']}',
        encoding="utf-8",
    )
    return repos_file, catalog_file
