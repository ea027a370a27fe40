"""End-to-end analysis: prompt, HTTP exchange, retry, parsing and history."""

import asyncio
import json
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from thnk.llm.client import ServiceOverloaded
from thnk.llm.providers import create_provider
from thnk.models.config import LLMConfig, RetryConfig
from thnk.models.entry import EmotionalEntry
from thnk.services.analyzer import EmotionAnalyzer
from thnk.services.patterns import analyze_patterns


pytestmark = pytest.mark.integration


def anthropic_reply(payload):
    return httpx.Response(200, json={"content": [{"type": "text", "text": payload}]})


PROSE_REPLY = (
    'Sure! {"emotion":"Anxious","summary":"Worried about deadlines",'
    '"analysis":"Hey, thanks for sharing...","suggestions":["Breathe"]} Hope this helps'
)


@pytest.fixture
def http_post():
    """AsyncMock standing in for AsyncClient.post."""
    with patch("thnk.llm.client.httpx.AsyncClient") as mock_client_class:
        client = MagicMock()
        client.post = AsyncMock()
        mock_client_class.return_value.__aenter__.return_value = client
        yield client.post


@pytest.fixture
def analyzer():
    provider = create_provider(LLMConfig(provider="anthropic", api_key="sk-test"))
    return EmotionAnalyzer(provider, RetryConfig(base_delay=0.0))


@pytest.mark.asyncio
async def test_prose_wrapped_reply(analyzer, http_post):
    http_post.return_value = anthropic_reply(PROSE_REPLY)

    result = await analyzer.analyze("The deadline moved up again and I can't sleep.")

    assert result.primary_emotion == "anxious"
    assert result.summary == "Worried about deadlines"
    assert result.analysis == "Hey, thanks for sharing..."
    assert result.suggestions == ["Breathe"]


@pytest.mark.asyncio
async def test_overload_retried_then_succeeds(analyzer, http_post):
    http_post.side_effect = [
        httpx.Response(529, text="Overloaded"),
        anthropic_reply(PROSE_REPLY),
    ]

    result = await analyzer.analyze("Another long day.")

    assert result.primary_emotion == "anxious"
    assert http_post.await_count == 2


@pytest.mark.asyncio
async def test_overload_exhausts_attempts(analyzer, http_post):
    http_post.return_value = httpx.Response(529, text="Overloaded")

    with pytest.raises(ServiceOverloaded):
        await analyzer.analyze("Another long day.")

    assert http_post.await_count == 3


@pytest.mark.asyncio
async def test_history_round_trip(analyzer, http_post):
    now = datetime.now()
    first_reply = json.dumps({
        "emotion": "stressed",
        "summary": "Too many meetings at work",
        "analysis": "Hey, thanks for sharing. Work is stacking up.",
        "suggestions": ["Block focus time", "Decline one meeting"],
    })
    http_post.return_value = anthropic_reply(first_reply)

    first = await analyzer.analyze("Back to back meetings all day.", now=now)
    entry = EmotionalEntry.from_result(
        "Back to back meetings all day.", first, timestamp=now - timedelta(hours=3)
    )

    http_post.return_value = anthropic_reply(PROSE_REPLY)
    await analyzer.analyze("Still thinking about work.", [entry], now=now)

    body = json.loads(http_post.call_args[1]["content"])
    user_text = body["messages"][0]["content"][0]["text"]
    assert "- 3h ago: stressed - Too many meetings at work" in user_text
    assert "Context: Hey, thanks for sharing. Work is stacking up...." in user_text


@pytest.mark.asyncio
async def test_concurrent_analyses_are_independent(analyzer, http_post):
    async def reply(url, content, headers):
        text = json.loads(content)["messages"][0]["content"][0]["text"]
        emotion = "joy" if "great" in text else "sad"
        await asyncio.sleep(0)
        return anthropic_reply(json.dumps({
            "emotion": emotion,
            "summary": emotion,
            "analysis": "Hey, thanks for sharing.",
            "suggestions": [],
        }))

    http_post.side_effect = reply

    happy, sad = await asyncio.gather(
        analyzer.analyze("What a great morning."),
        analyzer.analyze("I miss them."),
    )

    assert happy.primary_emotion == "joy"
    assert sad.primary_emotion == "sad"


def test_results_feed_pattern_summary():
    now = datetime(2024, 5, 15, 15, 0)
    entries = [
        EmotionalEntry(
            timestamp=now.replace(hour=h),
            primary_emotion=emotion,
            analysis="A deadline at work",
        )
        for h, emotion in ((8, "anxious"), (9, "anxious"), (10, "anxious"), (13, "calm"))
    ]

    analysis = analyze_patterns(entries, now)

    daily = analysis.daily_patterns[0]
    assert daily.emotion == "anxious"
    assert daily.frequency == 3
    assert "You tend to feel anxious in the morning" in daily.insights
    assert daily.triggers == ["work-related"]
    assert analysis.trajectory.dominant_emotion == "anxious"
    assert "It looks like things have shifted in a positive direction" in analysis.trajectory.insights
