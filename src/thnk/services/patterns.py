"""Pattern summaries over journal history.

Groups entries by emotion within a time window, derives simple insights
(frequency, time of day, recurrence), spots trigger categories by keyword,
and traces how emotions shifted over a day.
"""

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from thnk.models.entry import EmotionalEntry
from thnk.models.patterns import (
    EmotionalTrajectory,
    EmotionChange,
    EmotionPattern,
    PatternAnalysis,
    TimeRange,
)
from thnk.utils.logging import get_logger


logger = get_logger(__name__)

TRIGGER_KEYWORDS: Dict[str, tuple] = {
    "work-related": ("work", "deadline", "meeting"),
    "relationships": ("relationship", "friend", "family"),
    "financial": ("money", "financial", "budget"),
    "health/energy": ("health", "tired", "sleep"),
}

MAX_TRIGGERS = 3

POSITIVE_EMOTIONS = frozenset({"joy", "happy", "content", "calm", "peaceful", "excited", "grateful"})
NEGATIVE_EMOTIONS = frozenset({"sad", "angry", "anxious", "frustrated", "stressed", "worried"})

# A negative-to-positive change faster than this counts as a quick recovery
QUICK_RECOVERY_SECONDS = 3600

WINDOW_DAYS = {
    TimeRange.THIS_WEEK: 7,
    TimeRange.THIS_MONTH: 30,
}


def _emotion(entry: EmotionalEntry) -> str:
    return entry.primary_emotion or "unknown"


def local_time(timestamp: datetime) -> datetime:
    """Convert an aware timestamp to naive local time; naive ones pass through."""
    if timestamp.tzinfo is not None:
        return timestamp.astimezone().replace(tzinfo=None)
    return timestamp


def time_of_day(hour: int) -> str:
    """Bucket an hour (0-23) into morning, afternoon, evening or night."""
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def entries_in_range(
    entries: Iterable[EmotionalEntry],
    time_range: TimeRange,
    now: Optional[datetime] = None,
) -> List[EmotionalEntry]:
    """
    Select entries inside a time window, oldest first.

    Today means the calendar day of ``now``; this week and this month are the
    last 7 and 30 days up to ``now``. Entries without a timestamp are skipped.
    Timestamps with an offset are compared in local time, so history exported
    in UTC mixes with naive local times.
    """
    now = local_time(now or datetime.now())

    if time_range is TimeRange.TODAY:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        selected = [e for e in entries if e.timestamp and start <= local_time(e.timestamp) < end]
    else:
        start = now - timedelta(days=WINDOW_DAYS[time_range])
        selected = [e for e in entries if e.timestamp and start <= local_time(e.timestamp) <= now]

    return sorted(selected, key=lambda e: local_time(e.timestamp))


def _time_of_day_insight(entries: Sequence[EmotionalEntry], emotion: str) -> Optional[str]:
    buckets = Counter(time_of_day(local_time(e.timestamp).hour) for e in entries if e.timestamp)
    if not buckets:
        return None

    ranked = buckets.most_common()
    bucket, count = ranked[0]
    is_strict_max = len(ranked) == 1 or ranked[1][1] < count

    if count >= 2 and is_strict_max:
        return f"You tend to feel {emotion} in the {bucket}"
    return None


def generate_insights(
    emotion: str,
    frequency: int,
    time_range: TimeRange,
    entries: Sequence[EmotionalEntry],
) -> List[str]:
    """Build the insight strings for one emotion's entries within a window."""
    insights = []

    if frequency >= 3 and time_range is TimeRange.TODAY:
        insights.append(f"You've been feeling {emotion} frequently today")

    time_insight = _time_of_day_insight(entries, emotion)
    if time_insight:
        insights.append(time_insight)

    if len(entries) >= 3:
        insights.append("This emotion has been recurring over time")

    return insights


def identify_triggers(entries: Iterable[EmotionalEntry]) -> List[str]:
    """
    Find trigger categories mentioned in the entries' analyses.

    Returns:
        Up to 3 distinct category labels
    """
    found: Dict[str, None] = {}

    for entry in entries:
        if not entry.analysis:
            continue
        text = entry.analysis.lower()
        for label, keywords in TRIGGER_KEYWORDS.items():
            if any(word in text for word in keywords):
                found[label] = None

    return list(found)[:MAX_TRIGGERS]


def analyze_emotion_patterns(
    entries: Sequence[EmotionalEntry], time_range: TimeRange
) -> List[EmotionPattern]:
    """
    Summarize emotions that repeat within a window.

    Args:
        entries: Entries already restricted to ``time_range``
        time_range: Window the entries belong to

    Returns:
        One pattern per emotion seen at least twice, most frequent first
    """
    if len(entries) < 2:
        return []

    groups: Dict[str, List[EmotionalEntry]] = defaultdict(list)
    for entry in entries:
        groups[_emotion(entry)].append(entry)

    patterns = []
    for emotion, emotion_entries in groups.items():
        if len(emotion_entries) < 2:
            continue

        frequency = len(emotion_entries)
        patterns.append(
            EmotionPattern(
                emotion=emotion,
                frequency=frequency,
                time_range=time_range,
                insights=generate_insights(emotion, frequency, time_range, emotion_entries),
                triggers=identify_triggers(emotion_entries),
            )
        )

    return sorted(patterns, key=lambda p: p.frequency, reverse=True)


def trajectory_insights(changes: Sequence[EmotionChange]) -> List[str]:
    """Describe a day's emotional shifts in plain language."""
    insights = []

    if not changes:
        insights.append("Your emotional state has been consistent today")
    elif len(changes) >= 3:
        insights.append("You've experienced several emotional shifts today")

    if changes and changes[-1].to_emotion.lower() in POSITIVE_EMOTIONS:
        insights.append("It looks like things have shifted in a positive direction")

    quick_recovery = any(
        c.from_emotion.lower() in NEGATIVE_EMOTIONS
        and c.to_emotion.lower() in POSITIVE_EMOTIONS
        and c.time_between < QUICK_RECOVERY_SECONDS
        for c in changes
    )
    if quick_recovery:
        insights.append("You showed good emotional resilience today")

    return insights


def create_emotional_trajectory(
    entries: Sequence[EmotionalEntry], now: Optional[datetime] = None
) -> Optional[EmotionalTrajectory]:
    """
    Trace emotion changes across a day's entries.

    Args:
        entries: The day's entries in any order
        now: Date stamped on the trajectory (default: current time)

    Returns:
        The trajectory, or None with fewer than 3 entries
    """
    if len(entries) < 3:
        return None

    ordered = sorted(
        entries,
        key=lambda e: e.timestamp.timestamp() if e.timestamp else float("-inf"),
    )

    changes = []
    for previous, current in zip(ordered, ordered[1:]):
        if not (previous.primary_emotion and current.primary_emotion):
            continue
        if not (previous.timestamp and current.timestamp):
            continue
        if previous.primary_emotion == current.primary_emotion:
            continue

        changes.append(
            EmotionChange(
                from_emotion=previous.primary_emotion,
                to_emotion=current.primary_emotion,
                time_between=current.timestamp.timestamp() - previous.timestamp.timestamp(),
            )
        )

    # Untagged entries count as "unknown"
    dominant = Counter(_emotion(e) for e in ordered).most_common(1)[0][0]

    return EmotionalTrajectory(
        date=now or datetime.now(),
        entries=list(ordered),
        dominant_emotion=dominant,
        emotion_changes=changes,
        insights=trajectory_insights(changes),
    )


def analyze_patterns(
    entries: Sequence[EmotionalEntry], now: Optional[datetime] = None
) -> PatternAnalysis:
    """
    Compute daily, weekly and monthly patterns plus today's trajectory.

    Args:
        entries: Full history in any order
        now: Reference time (default: current time)
    """
    now = now or datetime.now()

    today = entries_in_range(entries, TimeRange.TODAY, now)
    week = entries_in_range(entries, TimeRange.THIS_WEEK, now)
    month = entries_in_range(entries, TimeRange.THIS_MONTH, now)

    analysis = PatternAnalysis(
        daily_patterns=analyze_emotion_patterns(today, TimeRange.TODAY),
        weekly_patterns=analyze_emotion_patterns(week, TimeRange.THIS_WEEK),
        monthly_patterns=analyze_emotion_patterns(month, TimeRange.THIS_MONTH),
        trajectory=create_emotional_trajectory(today, now),
    )

    logger.info(
        "patterns_analyzed",
        today_count=len(today),
        week_count=len(week),
        month_count=len(month),
        significant=analysis.has_significant_patterns,
    )
    return analysis


def recent_pattern_context(
    emotion: str,
    entries: Iterable[EmotionalEntry],
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Describe when an emotion was last recorded.

    Returns:
        "You last felt <emotion> N minutes/hours/days ago", or None if the
        emotion never appears with a timestamp
    """
    timestamps = [
        e.timestamp for e in entries if e.primary_emotion == emotion and e.timestamp
    ]
    if not timestamps:
        return None

    now = now or datetime.now()
    most_recent = max(timestamps, key=lambda t: t.timestamp())
    elapsed = max(0.0, now.timestamp() - most_recent.timestamp())

    if elapsed < 3600:
        ago = f"{int(elapsed // 60)} minutes ago"
    elif elapsed < 86400:
        ago = f"{int(elapsed // 3600)} hours ago"
    else:
        ago = f"{int(elapsed // 86400)} days ago"

    return f"You last felt {emotion} {ago}"
