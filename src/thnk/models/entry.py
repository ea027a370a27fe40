"""Journal entry model consumed as analysis history."""

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, TypeAdapter

from thnk.models.analysis import AnalysisResult


class EmotionalEntry(BaseModel):
    """A previously analysed journal entry.

    Entries are owned by the persistence layer; this package only reads them
    to build prompt context and pattern statistics. Every field except ``id``
    may be missing on records written by older app versions.
    """

    id: UUID = Field(default_factory=uuid4)
    timestamp: Optional[datetime] = None
    transcript: Optional[str] = None
    primary_emotion: Optional[str] = None
    summary: Optional[str] = None
    analysis: Optional[str] = None
    suggestions: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @classmethod
    def from_result(
        cls,
        transcript: str,
        result: AnalysisResult,
        timestamp: Optional[datetime] = None,
    ) -> "EmotionalEntry":
        """Create the record a persistence collaborator would store for a result."""
        return cls(
            timestamp=timestamp or datetime.now(),
            transcript=transcript,
            primary_emotion=result.primary_emotion,
            summary=result.summary,
            analysis=result.analysis,
            suggestions=list(result.suggestions),
        )


_entries_adapter = TypeAdapter(List[EmotionalEntry])


def load_entries(path: Path) -> List[EmotionalEntry]:
    """
    Load entries from a JSON file containing an array of entry objects.

    Args:
        path: Path to the JSON history file

    Returns:
        Entries in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid JSON or entries fail validation
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    return _entries_adapter.validate_python(data)


def recent_entries(entries: Iterable[EmotionalEntry], limit: int = 10) -> List[EmotionalEntry]:
    """
    Return at most ``limit`` entries ordered newest-first.

    Entries without a timestamp sort last.
    """
    ordered = sorted(
        entries,
        key=lambda e: e.timestamp.timestamp() if e.timestamp else float("-inf"),
        reverse=True,
    )
    return ordered[:limit]
