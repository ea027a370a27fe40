"""Analysis result models."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, StrictStr, field_validator


class AnalysisPayload(BaseModel):
    """
    Shape of the JSON object the model is asked to return.

    Field names match the prompt's output contract, not AnalysisResult.
    """

    emotion: StrictStr
    summary: StrictStr
    analysis: StrictStr
    suggestions: List[StrictStr]

    model_config = {"frozen": True}

    @field_validator("emotion")
    @classmethod
    def require_emotion(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("emotion must not be blank")
        if len(v.split()) > 1:
            raise ValueError(f"emotion must be a single word, got {v!r}")
        return v


class AnalysisResult(BaseModel):
    """Structured emotional analysis of one transcript.

    Attributes:
        id: Unique identifier for this result
        primary_emotion: Single lowercase word for the dominant feeling
        summary: Short summary of the entry
        analysis: Multi-paragraph reflection (paragraphs separated by blank lines)
        suggestions: Ordered list of concrete next steps
    """

    id: UUID = Field(default_factory=uuid4)

    primary_emotion: str = Field(
        ...,
        description="Single lowercase word for the dominant emotion"
    )

    summary: str = Field(..., description="Brief summary of the entry")

    analysis: str = Field(..., description="Main reflective response")

    suggestions: List[str] = Field(
        default_factory=list,
        description="Concrete next steps (2-4 requested from the model)"
    )

    model_config = {"frozen": True}

    @field_validator("primary_emotion")
    @classmethod
    def normalize_emotion(cls, v: str) -> str:
        """Store the emotion label as one stripped lowercase word."""
        v = v.strip().lower()
        if not v:
            raise ValueError("primary_emotion must not be blank")
        if len(v.split()) > 1:
            raise ValueError(f"primary_emotion must be a single word, got {v!r}")
        return v

    @classmethod
    def from_payload(cls, payload: AnalysisPayload, max_suggestions: int = 4) -> "AnalysisResult":
        """Build a result from a validated model payload."""
        return cls(
            primary_emotion=payload.emotion,
            summary=payload.summary,
            analysis=payload.analysis,
            suggestions=list(payload.suggestions[:max_suggestions]),
        )

    def formatted_for_sharing(self, now: Optional[datetime] = None) -> str:
        """Render the result as plain text for pasting into a notes app.

        Args:
            now: Timestamp shown in the title line (default: current time)

        Returns:
            Multi-line plain-text reflection
        """
        timestamp = (now or datetime.now()).strftime("%b %d, %Y at %I:%M %p")
        suggestion_lines = "\n".join(f"• {s}" for s in self.suggestions)

        return (
            f"thnk Reflection - {timestamp}\n"
            f"\n"
            f"Emotion: {self.primary_emotion.capitalize()}\n"
            f"Summary: {self.summary}\n"
            f"\n"
            f"Analysis:\n"
            f"{self.analysis}\n"
            f"\n"
            f"Suggested Actions:\n"
            f"{suggestion_lines}\n"
            f"\n"
            f"---\n"
            f"Created with thnk"
        )
