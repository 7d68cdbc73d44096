"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.stardust/config.yaml). Nested YAML sections are
flattened into dotted keys, so::

    classify:
      batch_size: 10

is read back with ``get_config('classify.batch_size')`` and can be
overridden by the ``CLASSIFY_BATCH_SIZE`` environment variable.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".stardust"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; real environment variables take precedence
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
        else:
            logger.debug(f"No variables loaded from {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets everything loaded so the next load_configuration starts over."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce_env_value(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (KEY_NAME for key.name)
    3. YAML config
    4. Default value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper().replace(".", "_")
    if env_key in os.environ:
        return _coerce_env_value(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def get_int_config(key: str, default: int) -> int:
    """Like get_config, but falls back to ``default`` when the value is not an integer."""
    value = get_config(key, default)
    if isinstance(value, bool):
        logger.warning(f"Config '{key}' has non-integer value {value!r}. Using default {default}.")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Config '{key}' has non-integer value {value!r}. Using default {default}.")
        return default


def get_float_config(key: str, default: float) -> float:
    value = get_config(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Config '{key}' has non-numeric value {value!r}. Using default {default}.")
        return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_openai_api_key() -> Optional[str]:
    """Convenience function to get the OpenAI API key."""
    key = get_config("openai.api_key")
    return str(key) if key is not None else None


def get_groq_api_key() -> Optional[str]:
    key = get_config("groq.api_key")
    return str(key) if key is not None else None


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


# --- Classifier Settings ---

@dataclass(frozen=True)
class ClassifierSettings:
    """Resolved settings for a classification run.

    Delays are in milliseconds.
    """
    max_categories_per_repo: int = 3
    min_categories_per_repo: int = 1
    batch_size: int = 20
    parallel_batches: int = 1
    batch_delay_ms: int = 2000
    requests_per_minute: int = 15
    max_retries: int = 3
    retry_delay_ms: int = 1000
    max_retry_delay_ms: int = 10000
    readme_max_length: int = 10000
    readme_max_length_single: int = 10000
    provider: str = "openai"
    model: Optional[str] = None
    temperature: float = 0.3

    def __post_init__(self) -> None:
        for name in ("batch_size", "parallel_batches", "max_categories_per_repo"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")


def load_classifier_settings() -> ClassifierSettings:
    """Builds ClassifierSettings from the loaded configuration."""
    defaults = ClassifierSettings()
    model = get_config("ai.model")
    settings = ClassifierSettings(
        max_categories_per_repo=get_int_config("max_categories_per_repo", defaults.max_categories_per_repo),
        min_categories_per_repo=get_int_config("min_categories_per_repo", defaults.min_categories_per_repo),
        batch_size=get_int_config("classify.batch_size", defaults.batch_size),
        parallel_batches=get_int_config("classify.parallel_batches", defaults.parallel_batches),
        batch_delay_ms=get_int_config("batch_delay", defaults.batch_delay_ms),
        requests_per_minute=get_int_config("ai.requests_per_minute", defaults.requests_per_minute),
        max_retries=get_int_config("max_retries", defaults.max_retries),
        retry_delay_ms=get_int_config("retry_delay", defaults.retry_delay_ms),
        max_retry_delay_ms=get_int_config("max_retry_delay", defaults.max_retry_delay_ms),
        readme_max_length=get_int_config("readme_max_length", defaults.readme_max_length),
        readme_max_length_single=get_int_config("readme_max_length_single", defaults.readme_max_length_single),
        provider=str(get_config("ai.provider", defaults.provider)).lower(),
        model=str(model) if model is not None else None,
        temperature=get_float_config("ai.temperature", defaults.temperature),
    )
    logger.debug(f"Classifier settings: {settings}")
    return settings
