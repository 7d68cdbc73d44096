"""Main entry point for the stardust application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import dataclasses
import logging
from pathlib import Path
from typing import Annotated, Any, Coroutine, Dict, Optional, TypeVar

import typer

# --- Core Layer ---
from stardust.core.command_handler import CommandHandler
from stardust.core.services.classification_service import ClassificationService

# --- Domain Layer ---
from stardust.domain.interfaces.ai_model import AIModel
from stardust.domain.models.resilience import RetryPolicy

# --- Infrastructure Layer ---
from stardust.infrastructure.ai.groq.groq_client import GroqClient
from stardust.infrastructure.ai.openai.gpt_client import GptClient
from stardust.infrastructure.cli.display import ConsoleDisplay
from stardust.infrastructure.config.settings import (
    ClassifierSettings,
    get_config,
    get_groq_api_key,
    get_openai_api_key,
    load_classifier_settings,
    load_configuration,
)
from stardust.infrastructure.filesystem.local_fs import LocalFileSystem
from stardust.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, resolve_log_level, setup_logging
from stardust.infrastructure.resilience.api_retry import ApiRetryService
from stardust.infrastructure.resilience.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUPPORTED_PROVIDERS = ("openai", "groq")


# --- Dependency Injection Container (Manual) ---

def create_ai_model(settings: ClassifierSettings) -> AIModel:
    """Instantiates the client for the configured provider.

    Raises:
        ValueError: For an unknown provider.
    """
    if settings.provider == "openai":
        return GptClient(api_key=get_openai_api_key(), model=settings.model, temperature=settings.temperature)
    if settings.provider == "groq":
        return GroqClient(api_key=get_groq_api_key(), model=settings.model, temperature=settings.temperature)
    raise ValueError(
        f"Unknown AI provider '{settings.provider}'. Choose one of: {', '.join(SUPPORTED_PROVIDERS)}"
    )


def create_dependencies(provider: Optional[str] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.

    Args:
        provider: Overrides the configured ``ai.provider``.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load configuration first, then configure logging from it
    load_configuration()
    setup_logging(
        log_level=resolve_log_level(get_config('logging.level', 'WARNING'), logging.WARNING),
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
    )

    settings = load_classifier_settings()
    if provider:
        settings = dataclasses.replace(settings, provider=provider.lower())
    dependencies['settings'] = settings

    # 2. Infrastructure adapters
    dependencies['ui'] = ConsoleDisplay()
    dependencies['file_system'] = LocalFileSystem()
    dependencies['ai_model'] = create_ai_model(settings)
    logger.info(f"AI provider selected: {dependencies['ai_model'].__class__.__name__}")

    # 3. Resilience services
    dependencies['rate_limiter'] = RateLimiter.from_requests_per_minute(settings.requests_per_minute)
    dependencies['api_retry_service'] = ApiRetryService(
        rate_limiter=dependencies['rate_limiter'],
        policy=RetryPolicy(
            max_retries=settings.max_retries,
            initial_delay_ms=settings.retry_delay_ms,
            max_delay_ms=max(settings.max_retry_delay_ms, settings.retry_delay_ms),
        ),
        provider_name=settings.provider,
    )

    # 4. Core services
    dependencies['classification_service'] = ClassificationService(
        ai_model=dependencies['ai_model'],
        api_retry_service=dependencies['api_retry_service'],
        settings=settings,
    )
    dependencies['command_handler'] = CommandHandler(
        classification_service=dependencies['classification_service'],
        file_system=dependencies['file_system'],
        ui=dependencies['ui'],
    )

    logger.info("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="stardust",
    help="stardust: classify GitHub repositories into a category catalog with an LLM.",
    add_completion=False,
)


# --- Helper for Running Async Commands ---
def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Runs an async command handler from a sync Typer command."""
    return asyncio.run(coro)


# --- CLI Commands ---

ProviderOption = Annotated[
    Optional[str],
    typer.Option("--provider", "-p", help="AI provider to use ('openai' or 'groq'). Uses ai.provider if not set.")
]


@app.callback()
def main_callback() -> None:
    """Classify GitHub repositories into a fixed category catalog."""


@app.command()
def classify(
    repos: Annotated[Path, typer.Option("--repos", "-r",
                                        exists=True, file_okay=True, dir_okay=False,
                                        readable=True, resolve_path=True,
                                        help="YAML/JSON file listing the repositories.")],
    catalog: Annotated[Path, typer.Option("--catalog", "-c",
                                          exists=True, file_okay=True, dir_okay=False,
                                          readable=True, resolve_path=True,
                                          help="YAML/JSON file with the category catalog.")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o",
                                                   dir_okay=False, resolve_path=True,
                                                   help="Also write the results as JSON to this file.")] = None,
    provider: ProviderOption = None,
    single: Annotated[bool, typer.Option("--single",
                                         help="Classify each repository with its own, more detailed prompt.")] = False,
):
    """Classify repositories and print the id -> categories map as JSON."""
    try:
        dependencies = create_dependencies(provider)
    except Exception as e:
        logger.error(f"Fatal Error during application initialization: {e}", exc_info=True)
        ConsoleDisplay().display_error(f"Application Initialization Failed: {e}")
        raise typer.Exit(code=1)

    handler: CommandHandler = dependencies['command_handler']
    succeeded = run_async(handler.handle_classify(
        str(repos), str(catalog), str(output) if output else None, single=single
    ))
    if not succeeded:
        raise typer.Exit(code=1)


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
