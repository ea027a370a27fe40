"""LLM provider interface and error taxonomy for emotional analysis.

Every provider issues exactly one HTTPS POST per call to ``complete`` and
returns the text of the model's reply. Vendors differ only in how the request
is built and how the response envelope is unwrapped; status-code mapping,
timeouts and transport error handling live here.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Optional

import httpx
from pydantic import ValidationError

from thnk.llm.prompt_logger import PromptLogger
from thnk.utils.logging import get_logger


logger = get_logger(__name__)


class LLMError(Exception):
    """Base exception for analysis errors.

    Attributes:
        user_message: Readable explanation suitable for showing to the user
    """

    user_message = "Something went wrong while analyzing your entry."


class ConfigurationMissing(LLMError):
    """API key (or other required setting) is absent at startup."""

    def __init__(self, env_var: str):
        super().__init__(f"Required environment variable {env_var} is not set")
        self.env_var = env_var

    @property
    def user_message(self) -> str:
        return f"API key not configured. Set the {self.env_var} environment variable."


class InvalidRequest(LLMError):
    """Request could not be built (bad URL, unencodable body, empty transcript)."""

    user_message = "The request could not be sent."


class LLMAPIError(LLMError):
    """Provider answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return f"API error with status code: {self.status_code}"


class RateLimited(LLMAPIError):
    """HTTP 429: too many requests."""

    def __init__(self, message: str = "Rate limit exceeded", status_code: int = 429):
        super().__init__(message, status_code)

    @property
    def user_message(self) -> str:
        return "API rate limit exceeded. Please try again in a moment."


class ServiceOverloaded(LLMAPIError):
    """Provider-specific overload status (e.g. 529, 503, 502)."""

    @property
    def user_message(self) -> str:
        return "The analysis service is temporarily overloaded. Please try again shortly."


class InsufficientCredits(LLMAPIError):
    """HTTP 402: account has no remaining credits."""

    def __init__(self, message: str = "Insufficient credits", status_code: int = 402):
        super().__init__(message, status_code)

    @property
    def user_message(self) -> str:
        return "Insufficient API credits. Please check your provider account."


class NetworkError(LLMError):
    """Transport-level failure, including timeouts."""

    user_message = "Network error. Check your connection and try again."


class DecodingFailed(LLMError):
    """Response envelope was not the JSON shape the provider documents."""

    user_message = "Failed to decode the response from the analysis service."


class InvalidResponse(LLMError):
    """Response envelope decoded but contained no text."""

    user_message = "The analysis service returned an empty response."


class InvalidJSONResponse(LLMError):
    """Model output contained no usable JSON object span."""

    user_message = "The analysis could not be read. Please try again."


class LLMProvider(ABC):
    """Chat-completion provider for emotional analysis.

    Subclasses describe the vendor's wire format; this base class performs
    the request and maps failures onto the error taxonomy above.

    Class attributes:
        name: Provider identifier used in config and logs
        api_key_env: Environment variable holding the API key
        default_endpoint: Endpoint URL used when config doesn't override it
        default_model: Model identifier used when config doesn't override it
        overload_status_codes: Statuses mapped to ServiceOverloaded
    """

    name: str = ""
    api_key_env: str = ""
    default_endpoint: str = ""
    default_model: str = ""
    overload_status_codes: FrozenSet[int] = frozenset()

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        request_timeout: float = 30.0,
        total_timeout: float = 60.0,
        prompt_logger: Optional[PromptLogger] = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API authentication key (must be non-empty)
            model: Model identifier (default: provider's default_model)
            endpoint: Full endpoint URL (default: provider's default_endpoint)
            max_tokens: Maximum output tokens
            temperature: Sampling temperature (ignored by providers that don't take it)
            request_timeout: Connect/read/write/pool timeout in seconds
            total_timeout: Upper bound on one whole request in seconds
            prompt_logger: Optional logger for prompts and raw responses

        Raises:
            ConfigurationMissing: If api_key is empty
        """
        if not api_key:
            raise ConfigurationMissing(self.api_key_env)

        self.api_key = api_key
        self.model = model or self.default_model
        self.endpoint = endpoint or self.default_endpoint
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = httpx.Timeout(request_timeout)
        self.total_timeout = total_timeout
        self.prompt_logger = prompt_logger

    @abstractmethod
    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        """Build the JSON request body."""

    @abstractmethod
    def build_headers(self) -> Dict[str, str]:
        """Build auth and version headers."""

    @abstractmethod
    def extract_text(self, data: Any) -> str:
        """
        Unwrap the reply text from a decoded response envelope.

        Raises:
            pydantic.ValidationError: If the envelope has the wrong shape
        """

    def log_messages(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Messages to record in the prompt log, system instructions included."""
        return payload.get("messages", [])

    def map_status(self, response: httpx.Response) -> LLMError:
        """Translate a non-2xx response into the matching error."""
        status = response.status_code
        message = f"API error: {status} - {response.text}"

        if status == 429:
            return RateLimited(message)
        if status == 402:
            return InsufficientCredits(message)
        if status in self.overload_status_codes:
            return ServiceOverloaded(message, status_code=status)
        return LLMAPIError(message, status_code=status)

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one analysis request and return the reply text.

        Args:
            system_prompt: Role and methodology instructions
            user_prompt: History context and the current transcript

        Returns:
            Raw text produced by the model

        Raises:
            InvalidRequest: If the URL or payload is malformed
            NetworkError: On transport failure or timeout
            RateLimited, ServiceOverloaded, InsufficientCredits, LLMAPIError:
                On non-2xx responses
            DecodingFailed: If the envelope can't be decoded
            InvalidResponse: If the envelope holds no text
        """
        payload = self.build_payload(system_prompt, user_prompt)

        try:
            body = json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise InvalidRequest(f"Failed to encode request: {e}") from e

        if self.prompt_logger:
            self.prompt_logger.log_request(
                stage="analysis",
                messages=self.log_messages(payload),
                model=self.model,
                metadata={"provider": self.name},
            )

        logger.info(
            "llm_request_started",
            provider=self.name,
            model=self.model,
            endpoint=self.endpoint,
            prompt_length=len(system_prompt) + len(user_prompt),
        )
        logger.debug("llm_request_payload", provider=self.name, payload=payload)

        try:
            response = await asyncio.wait_for(
                self._post(body), timeout=self.total_timeout
            )
        except asyncio.TimeoutError as e:
            logger.error("llm_request_timeout", provider=self.name, timeout=self.total_timeout)
            raise NetworkError(f"Request exceeded {self.total_timeout}s") from e
        except httpx.TimeoutException as e:
            logger.error("llm_request_timeout", provider=self.name, error=str(e))
            raise NetworkError(f"Request timeout: {e}") from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidRequest(f"Invalid API URL: {self.endpoint}") from e
        except httpx.RequestError as e:
            logger.error("llm_network_error", provider=self.name, error=str(e))
            raise NetworkError(f"Network error: {e}") from e

        if not response.is_success:
            error = self.map_status(response)
            logger.error(
                "llm_http_error",
                provider=self.name,
                status_code=response.status_code,
                error_type=type(error).__name__,
            )
            if self.prompt_logger:
                self.prompt_logger.log_response(stage="analysis", response={}, error=error)
            raise error

        try:
            data = response.json()
            text = self.extract_text(data)
        except (ValueError, ValidationError) as e:
            logger.error("llm_decoding_failed", provider=self.name, error=str(e))
            raise DecodingFailed(f"Failed to decode response: {e}") from e

        if self.prompt_logger:
            self.prompt_logger.log_response(stage="analysis", response=data, raw_content=text)

        if not text.strip():
            raise InvalidResponse("Response contained no text")

        logger.info("llm_request_completed", provider=self.name, response_length=len(text))
        logger.debug("llm_response_text", provider=self.name, text=text)

        return text

    async def _post(self, body: bytes) -> httpx.Response:
        headers = {"Content-Type": "application/json", **self.build_headers()}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, content=body, headers=headers)
