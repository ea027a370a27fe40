"""Configuration loader with YAML and environment variable support.

Reads optional settings from ~/.config/thnk/config.yaml, applies THNK_*
environment overrides, then reads the API key from the selected provider's
environment variable. The key is read once, here, at startup.

Environment variables:
- THNK_PROVIDER: Override llm.provider ("anthropic" or "openai")
- THNK_LLM_MODEL: Override llm.model
- THNK_LLM_ENDPOINT: Override llm.endpoint
- CLAUDE_API_KEY: API key when the provider is anthropic
- OPENAI_API_KEY: API key when the provider is openai
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from thnk.llm.client import ConfigurationMissing
from thnk.llm.providers import PROVIDERS
from thnk.models.config import Config, read_config_file
from thnk.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "thnk" / "config.yaml"


def load_config(
    config_path: Optional[Path] = None, provider: Optional[str] = None
) -> Config:
    """Load configuration with environment variable overrides.

    Args:
        config_path: Path to config file. If None, uses ~/.config/thnk/config.yaml
            when it exists
        provider: Provider name taking precedence over file and environment

    Returns:
        Validated Config object

    Raises:
        ConfigurationMissing: If no API key is available for the provider
        FileNotFoundError: If an explicit config_path doesn't exist
        PermissionError: If the config file is group/world accessible
        ValueError: If the provider is unknown or config is invalid
    """
    if config_path is not None:
        data = read_config_file(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = read_config_file(DEFAULT_CONFIG_PATH)
    else:
        data = {}

    data = _apply_env_overrides(data)

    if provider:
        data["llm"]["provider"] = provider

    provider_name = data["llm"].setdefault("provider", "anthropic")
    if provider_name not in PROVIDERS:
        raise ValueError(
            f"Unknown provider: {provider_name}. "
            f"Must be one of: {', '.join(sorted(PROVIDERS))}"
        )

    api_key_env = PROVIDERS[provider_name].api_key_env
    if env_api_key := os.getenv(api_key_env):
        data["llm"]["api_key"] = env_api_key

    if not data["llm"].get("api_key"):
        logger.error("config_api_key_missing", provider=provider_name, env_var=api_key_env)
        raise ConfigurationMissing(api_key_env)

    logger.info("config_loaded", provider=provider_name)
    return Config(**data)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply THNK_* environment variable overrides to configuration data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    if "llm" not in data or data["llm"] is None:
        data["llm"] = {}

    if env_provider := os.getenv("THNK_PROVIDER"):
        data["llm"]["provider"] = env_provider

    if env_model := os.getenv("THNK_LLM_MODEL"):
        data["llm"]["model"] = env_model

    if env_endpoint := os.getenv("THNK_LLM_ENDPOINT"):
        data["llm"]["endpoint"] = env_endpoint

    return data
