"""Shared test fixtures for all test modules."""

from datetime import datetime
from typing import Optional

import pytest

from thnk.models.entry import EmotionalEntry


@pytest.fixture
def now():
    """Fixed reference time: a Wednesday afternoon."""
    return datetime(2024, 5, 15, 15, 0, 0)


@pytest.fixture
def make_entry():
    """Factory for EmotionalEntry records with sensible defaults."""

    def _make(
        timestamp: Optional[datetime],
        emotion: Optional[str] = "calm",
        summary: str = "A short summary",
        analysis: str = "",
        transcript: str = "transcript",
    ) -> EmotionalEntry:
        return EmotionalEntry(
            timestamp=timestamp,
            transcript=transcript,
            primary_emotion=emotion,
            summary=summary,
            analysis=analysis,
            suggestions=["Rest", "Walk"],
        )

    return _make
