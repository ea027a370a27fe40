"""LLM provider implementations and factory."""

from typing import Dict, Optional, Type

from thnk.llm.client import LLMProvider
from thnk.llm.prompt_logger import PromptLogger
from thnk.llm.providers.anthropic import AnthropicProvider
from thnk.llm.providers.openai_compat import OpenAIProvider
from thnk.models.config import LLMConfig

PROVIDERS: Dict[str, Type[LLMProvider]] = {
    AnthropicProvider.name: AnthropicProvider,
    OpenAIProvider.name: OpenAIProvider,
}


def create_provider(
    config: LLMConfig, prompt_logger: Optional[PromptLogger] = None
) -> LLMProvider:
    """Instantiate the provider selected by ``config.provider``."""
    provider_cls = PROVIDERS[config.provider]
    return provider_cls(
        api_key=config.api_key,
        model=config.model,
        endpoint=str(config.endpoint) if config.endpoint else None,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        request_timeout=config.request_timeout,
        total_timeout=config.total_timeout,
        prompt_logger=prompt_logger,
    )


__all__ = ["AnthropicProvider", "OpenAIProvider", "PROVIDERS", "create_provider"]
