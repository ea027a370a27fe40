"""Unit tests for prompt templates."""

from datetime import timedelta

import pytest

from thnk.llm.prompts import (
    CONTEXT_WINDOW,
    build_analysis_prompt,
    build_context_block,
    build_system_prompt,
    build_user_prompt,
    time_ago,
)
from thnk.models.entry import recent_entries


CONTEXT_HEADER = "Recent emotional patterns"


class TestSystemPrompt:
    """Test the fixed system instructions."""

    def test_contains_persona_and_format(self):
        prompt = build_system_prompt()

        assert "future self" in prompt
        assert 'Always open with "Hey, thanks for sharing"' in prompt
        assert '"emotion": "single_word"' in prompt
        assert '"suggestions": [' in prompt

    def test_is_deterministic(self):
        assert build_system_prompt() == build_system_prompt()


class TestTimeAgo:
    """Test relative timestamps."""

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(seconds=0), "0m ago"),
            (timedelta(minutes=59), "59m ago"),
            (timedelta(hours=1), "1h ago"),
            (timedelta(hours=23, minutes=59), "23h ago"),
            (timedelta(days=1), "1d ago"),
            (timedelta(days=6), "6d ago"),
            (timedelta(days=7), "1w ago"),
            (timedelta(days=30), "4w ago"),
        ],
    )
    def test_buckets(self, now, delta, expected):
        assert time_ago(now - delta, now) == expected

    def test_future_timestamp_is_now(self, now):
        assert time_ago(now + timedelta(hours=2), now) == "0m ago"

    def test_missing_timestamp_is_now(self, now):
        assert time_ago(None, now) == "0m ago"


class TestUserPrompt:
    """Test the user prompt and history context."""

    def test_no_history_has_no_context_section(self, now):
        prompt = build_user_prompt("Today was fine.", [], now)

        assert CONTEXT_HEADER not in prompt
        assert prompt.startswith("Here's their voice note transcript:")
        assert '**Current entry:**\n"Today was fine."' in prompt

    def test_transcript_included_verbatim(self, now):
        transcript = 'I said "no" and {meant} it.\nThen I left.'

        prompt = build_user_prompt(transcript, [], now)

        assert f'"{transcript}"' in prompt

    def test_single_entry_line(self, now, make_entry):
        entry = make_entry(
            now - timedelta(hours=3),
            emotion="anxious",
            summary="Worried about the launch",
        )

        prompt = build_user_prompt("Still worried.", [entry], now)

        assert CONTEXT_HEADER in prompt
        assert "- 3h ago: anxious - Worried about the launch" in prompt

    def test_context_precedes_current_entry(self, now, make_entry):
        prompt = build_user_prompt("Now.", [make_entry(now - timedelta(days=1))], now)

        assert prompt.index(CONTEXT_HEADER) < prompt.index("**Current entry:**")

    def test_only_five_most_recent_entries(self, now, make_entry):
        entries = [
            make_entry(now - timedelta(days=i), summary=f"Entry from day {i}")
            for i in range(1, 8)
        ]

        prompt = build_user_prompt("Hello.", recent_entries(entries), now)

        for i in range(1, CONTEXT_WINDOW + 1):
            assert f"Entry from day {i}" in prompt
        assert "Entry from day 6" not in prompt
        assert "Entry from day 7" not in prompt

    def test_newest_entry_rendered_first(self, now, make_entry):
        older = make_entry(now - timedelta(days=2), summary="Older")
        newer = make_entry(now - timedelta(hours=1), summary="Newer")

        prompt = build_user_prompt("Hello.", recent_entries([older, newer]), now)

        assert prompt.index("Newer") < prompt.index("Older")

    def test_missing_emotion_and_summary(self, now, make_entry):
        entry = make_entry(now - timedelta(minutes=5), emotion=None, summary=None)

        block = build_context_block([entry], now)

        assert "- 5m ago: unknown - " in block

    def test_analysis_snippet_truncated(self, now, make_entry):
        analysis = "a" * 150
        entry = make_entry(now - timedelta(hours=1), analysis=analysis)

        block = build_context_block([entry], now)

        assert f"  Context: {'a' * 100}..." in block
        assert "a" * 101 not in block

    def test_no_snippet_without_analysis(self, now, make_entry):
        block = build_context_block([make_entry(now, analysis="")], now)

        assert "Context:" not in block

    def test_empty_block_for_no_entries(self, now):
        assert build_context_block([], now) == ""


class TestAnalysisPrompt:
    """Test the single-string prompt."""

    def test_system_then_user(self, now):
        prompt = build_analysis_prompt("Quiet day.", [], now)

        assert prompt.startswith(build_system_prompt())
        assert prompt.endswith(build_user_prompt("Quiet day.", [], now))
