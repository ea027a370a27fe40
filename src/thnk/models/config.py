"""Configuration models for thnk."""

from pydantic import BaseModel, Field, HttpUrl
from pathlib import Path
from typing import Literal, Optional
import yaml
import os
import stat


class LLMConfig(BaseModel):
    """Configuration for the analysis provider connection."""

    provider: Literal["anthropic", "openai"] = Field(
        default="anthropic",
        description="Which chat-completion API to call"
    )

    api_key: str = Field(
        ...,
        min_length=1,
        description="API key for authentication"
    )

    model: Optional[str] = Field(
        default=None,
        description="Model identifier (defaults to the provider's model)"
    )

    endpoint: Optional[HttpUrl] = Field(
        default=None,
        description="Full endpoint URL (defaults to the provider's endpoint)"
    )

    max_tokens: int = Field(
        default=2000,
        ge=1,
        description="Maximum output tokens"
    )

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (OpenAI only)"
    )

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=30.0,
        description="Connect/read timeout per request in seconds"
    )

    total_timeout: float = Field(
        default=60.0,
        gt=0,
        le=60.0,
        description="Upper bound on a whole request in seconds"
    )

    model_config = {"frozen": True}


class RetryConfig(BaseModel):
    """Retry settings for transient provider errors."""

    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Total attempts including the first"
    )

    base_delay: float = Field(
        default=2.0,
        ge=0.0,
        description="Delay before retry k is k * base_delay seconds"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for thnk."""

    llm: LLMConfig = Field(..., description="Provider settings")
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Retry settings")

    model_config = {"frozen": True}


def read_config_file(path: Path) -> dict:
    """
    Read raw configuration data from a YAML file.

    Validates file permissions before loading since the file may hold an
    API key.

    Args:
        path: Path to config.yaml file

    Returns:
        Parsed YAML mapping (empty dict for an empty file)

    Raises:
        PermissionError: If file is group/world accessible
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found at {path}")

    mode = os.stat(path).st_mode
    if mode & (stat.S_IRWXG | stat.S_IRWXO):
        raise PermissionError(
            f"Config file has overly permissive permissions: {oct(mode)}\n"
            f"Run: chmod 600 {path}"
        )

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")

    return data
