"""Pattern and trajectory models produced by the pattern summarizer."""

from collections import defaultdict
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from thnk.models.entry import EmotionalEntry


class TimeRange(str, Enum):
    """Window of history a pattern was computed over."""

    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"

    @property
    def display_name(self) -> str:
        return {
            TimeRange.TODAY: "Today",
            TimeRange.THIS_WEEK: "This Week",
            TimeRange.THIS_MONTH: "This Month",
        }[self]


class EmotionPattern(BaseModel):
    """A repeated emotion within a time window.

    Attributes:
        emotion: Emotion label shared by the grouped entries
        frequency: Number of entries with this emotion in the window
        time_range: Window the entries were drawn from
        insights: Human-readable observations about the repetition
        triggers: Up to 3 trigger categories found in the entries' analyses
    """

    id: UUID = Field(default_factory=uuid4)
    emotion: str
    frequency: int = Field(..., ge=2)
    time_range: TimeRange
    insights: List[str] = Field(default_factory=list)
    triggers: List[str] = Field(default_factory=list, max_length=3)

    model_config = {"frozen": True}


class EmotionChange(BaseModel):
    """Transition between two consecutive entries with different emotions."""

    from_emotion: str
    to_emotion: str
    time_between: float = Field(..., description="Seconds between the two entries")
    possible_trigger: Optional[str] = None

    model_config = {"frozen": True}


class EmotionalTrajectory(BaseModel):
    """Ordered emotion transitions within a day."""

    id: UUID = Field(default_factory=uuid4)
    date: datetime
    entries: List[EmotionalEntry]
    dominant_emotion: str
    emotion_changes: List[EmotionChange] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class PatternAnalysis(BaseModel):
    """Patterns for every window plus today's trajectory."""

    daily_patterns: List[EmotionPattern] = Field(default_factory=list)
    weekly_patterns: List[EmotionPattern] = Field(default_factory=list)
    monthly_patterns: List[EmotionPattern] = Field(default_factory=list)
    trajectory: Optional[EmotionalTrajectory] = None

    model_config = {"frozen": True}

    @property
    def has_significant_patterns(self) -> bool:
        return bool(self.daily_patterns or self.weekly_patterns or self.monthly_patterns)

    @property
    def most_frequent_emotion(self) -> Optional[str]:
        """Emotion with the highest summed frequency across all windows."""
        all_patterns = self.daily_patterns + self.weekly_patterns + self.monthly_patterns
        if not all_patterns:
            return None

        totals: dict[str, int] = defaultdict(int)
        for pattern in all_patterns:
            totals[pattern.emotion] += pattern.frequency

        return max(totals, key=totals.__getitem__)
