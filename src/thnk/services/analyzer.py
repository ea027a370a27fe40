"""Emotional analysis orchestration.

Ties together prompt building, the provider call with retries, and response
parsing. One ``analyze`` call handles one transcript; calls share no mutable
state, so independent transcripts may be analysed concurrently.
"""

from datetime import datetime
from typing import Callable, Optional, Sequence

from thnk.llm.client import InvalidRequest, LLMError, LLMProvider
from thnk.llm.prompts import build_system_prompt, build_user_prompt
from thnk.llm.response_parser import parse_analysis_response
from thnk.llm.retry import RetryStatus, call_with_retry
from thnk.models.analysis import AnalysisResult
from thnk.models.config import RetryConfig
from thnk.models.entry import EmotionalEntry, recent_entries
from thnk.utils.logging import get_logger


logger = get_logger(__name__)

# Most prior entries ever considered for context
HISTORY_LIMIT = 10


class EmotionAnalyzer:
    """Analyse transcripts with an LLM provider.

    Example:
        >>> analyzer = EmotionAnalyzer(create_provider(config.llm), config.retry)
        >>> result = await analyzer.analyze("Long day, but dinner with friends helped.")
        >>> result.primary_emotion
        'grateful'
    """

    def __init__(
        self,
        provider: LLMProvider,
        retry_config: Optional[RetryConfig] = None,
        on_retry: Optional[Callable[[RetryStatus], None]] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            provider: Provider performing single requests
            retry_config: Attempt count and backoff (default: 3 attempts, 2s unit)
            on_retry: Optional callback for retry progress events
        """
        self.provider = provider
        self.retry_config = retry_config or RetryConfig()
        self.on_retry = on_retry

    async def analyze(
        self,
        transcript: str,
        previous_entries: Sequence[EmotionalEntry] = (),
        now: Optional[datetime] = None,
    ) -> AnalysisResult:
        """
        Analyse one transcript in the context of recent entries.

        Args:
            transcript: Text of the voice note
            previous_entries: Prior entries in any order (newest 10 are used)
            now: Reference time for relative timestamps in the prompt

        Returns:
            Parsed analysis, or the fallback result if the reply was unparseable

        Raises:
            InvalidRequest: If the transcript is empty
            LLMError: If the request fails terminally
        """
        if not transcript or not transcript.strip():
            raise InvalidRequest("Transcript is empty")

        history = recent_entries(previous_entries, limit=HISTORY_LIMIT)

        system_prompt = build_system_prompt()
        user_prompt = build_user_prompt(transcript, history, now)

        logger.info(
            "analysis_started",
            provider=self.provider.name,
            transcript_length=len(transcript),
            history_count=len(history),
        )

        try:
            raw_text = await call_with_retry(
                lambda: self.provider.complete(system_prompt, user_prompt),
                max_attempts=self.retry_config.max_attempts,
                base_delay=self.retry_config.base_delay,
                on_retry=self.on_retry,
            )
            result = parse_analysis_response(raw_text)
        except LLMError as e:
            logger.error(
                "analysis_failed",
                provider=self.provider.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        logger.info(
            "analysis_completed",
            provider=self.provider.name,
            emotion=result.primary_emotion,
            suggestion_count=len(result.suggestions),
        )
        return result
