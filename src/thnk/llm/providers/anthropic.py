"""Anthropic Messages API provider."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from thnk.llm.client import LLMProvider


class _ContentBlock(BaseModel):
    type: str = "text"
    text: str = ""


class _MessagesResponse(BaseModel):
    content: List[_ContentBlock] = Field(..., min_length=1)


class AnthropicProvider(LLMProvider):
    """Provider for the Anthropic Messages API.

    The system prompt travels in the top-level ``system`` field and the user
    prompt is sent as a single typed text block. Status 529 signals overload.
    """

    name = "anthropic"
    api_key_env = "CLAUDE_API_KEY"
    default_endpoint = "https://api.anthropic.com/v1/messages"
    default_model = "claude-3-5-sonnet-20241022"
    overload_status_codes = frozenset({529})

    api_version = "2023-06-01"

    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": user_prompt}],
                }
            ],
        }

    def log_messages(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [{"role": "system", "content": payload["system"]}, *payload["messages"]]

    def build_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

    def extract_text(self, data: Any) -> str:
        envelope = _MessagesResponse.model_validate(data)
        for block in envelope.content:
            if block.type == "text":
                return block.text
        return ""
