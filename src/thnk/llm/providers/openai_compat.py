"""OpenAI-compatible chat completions provider.

Works with OpenAI and any API implementing the chat completions format.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from thnk.llm.client import LLMProvider


class _Message(BaseModel):
    role: str = "assistant"
    content: Optional[str] = None


class _Choice(BaseModel):
    message: _Message


class _ChatCompletionResponse(BaseModel):
    choices: List[_Choice] = Field(..., min_length=1)


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI chat completions.

    Sends system and user prompts as separate messages. Statuses 502 and 503
    signal a temporarily unavailable service.
    """

    name = "openai"
    api_key_env = "OPENAI_API_KEY"
    default_endpoint = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-4-1106-preview"
    overload_status_codes = frozenset({502, 503})

    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def build_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def extract_text(self, data: Any) -> str:
        envelope = _ChatCompletionResponse.model_validate(data)
        return envelope.choices[0].message.content or ""
