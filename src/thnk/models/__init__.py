"""Pydantic data models for thnk."""

from thnk.models.analysis import AnalysisPayload, AnalysisResult
from thnk.models.entry import EmotionalEntry
from thnk.models.patterns import (
    EmotionalTrajectory,
    EmotionChange,
    EmotionPattern,
    PatternAnalysis,
    TimeRange,
)

__all__ = [
    "AnalysisPayload",
    "AnalysisResult",
    "EmotionalEntry",
    "EmotionalTrajectory",
    "EmotionChange",
    "EmotionPattern",
    "PatternAnalysis",
    "TimeRange",
]
