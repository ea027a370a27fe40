"""Canned analysis for use without a provider.

Picks one of four prepared reflections by keyword. Used when the caller opts
out of the network, e.g. ``thnk analyze --offline`` for demos.
"""

from typing import Dict, List, NamedTuple, Tuple

from thnk.models.analysis import AnalysisResult


class _CannedReflection(NamedTuple):
    summary: str
    analysis: str
    suggestions: List[str]


# Checked in order; the first emotion with a matching keyword wins
KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("anxious", ("anxious", "stressed", "worried")),
    ("joy", ("happy", "joy", "excited", "good")),
    ("sad", ("sad", "disappointed", "hurt")),
)

DEFAULT_EMOTION = "reflective"

REFLECTIONS: Dict[str, _CannedReflection] = {
    "anxious": _CannedReflection(
        summary="Feeling overwhelmed by multiple pressures and struggling to find clarity in the midst of stress",
        analysis=(
            "Hey, thanks for sharing. There's real tension in what you're describing, and what you're "
            "feeling makes sense. When everything piles up, every item starts to feel equally urgent, "
            "which makes it harder to think clearly.\n\n"
            "Even in this anxious moment you're reaching out and trying to process what's happening. "
            "Part of you already knows this feeling won't last forever. The anxiety is loud right now, "
            "but it isn't the whole story.\n\n"
            "You've handled difficult seasons before, and there's more resilience in you than this "
            "moment is letting you see."
        ),
        suggestions=[
            "Take 5 deep breaths and name three things you can control right now",
            "Write down everything on your mind, then circle only what needs attention today",
            "Schedule a 20-minute walk outside to give your nervous system a break",
            "Text one person who always helps you see things more clearly",
        ],
    ),
    "joy": _CannedReflection(
        summary="Experiencing genuine joy and wanting to savor this moment of lightness and gratitude",
        analysis=(
            "Hey, thanks for sharing. There's a lightness in this that's worth noticing. This happiness "
            "isn't only about what's happening around you; something in you is recognizing goodness.\n\n"
            "Moments like this are meant to be received fully, not rushed through. Noticing and "
            "celebrating the good is its own quiet resistance against cynicism.\n\n"
            "Let this remind you who you are when you're not weighed down by worry. It's worth "
            "remembering when harder days come."
        ),
        suggestions=[
            "Call someone who would genuinely celebrate this with you",
            "Write down exactly what made this moment special so you can revisit it later",
            "Take a photo or create some kind of memory marker for this feeling",
            "Spend a few minutes in gratitude for this unexpected gift",
        ],
    ),
    "sad": _CannedReflection(
        summary="Processing deep disappointment and trying to make sense of feelings that feel heavy and difficult",
        analysis=(
            "Hey, thanks for sharing. There's heaviness in this, and the sadness deserves space. It isn't "
            "something to rush through or fix quickly. Disappointment makes us question what we thought "
            "we could count on, and that disorientation is part of why it's so hard.\n\n"
            "Underneath the sadness is someone who still cares deeply. That capacity to care is a good "
            "thing, even when it hurts.\n\n"
            "This pain is pointing at what matters to you, and that's worth listening to even when it's "
            "hard to carry."
        ),
        suggestions=[
            "Give yourself permission to feel this fully without trying to fix it yet",
            "Reach out to someone who can sit with you in this without trying to cheer you up",
            "Write about what this disappointment is teaching you about what you value",
            "Do something gentle for yourself that acknowledges this is a hard day",
        ],
    ),
    DEFAULT_EMOTION: _CannedReflection(
        summary="Taking intentional time to process thoughts and emotions with curiosity rather than judgment",
        analysis=(
            "Hey, thanks for sharing. You're in a contemplative space right now, and there's maturity in "
            "how you're approaching it. Rather than just reacting to what you feel, you're trying to "
            "understand it.\n\n"
            "This kind of reflection isn't always comfortable. Sometimes it means sitting with questions "
            "that don't have easy answers, but that's how you come to know yourself.\n\n"
            "Taking time to process rather than pushing through is a practice that leads to real growth "
            "over time."
        ),
        suggestions=[
            "Spend some time journaling about what you're discovering in this reflective space",
            "Take a quiet walk where you can think without distractions",
            "Notice which questions are emerging and sit with them rather than rushing to answers",
            "Set aside a few quiet minutes tonight to revisit what's stirring",
        ],
    ),
}


def detect_emotion(transcript: str) -> str:
    """Pick an emotion label from keywords in the transcript."""
    text = transcript.lower()
    for emotion, keywords in KEYWORDS:
        if any(word in text for word in keywords):
            return emotion
    return DEFAULT_EMOTION


def canned_analysis(transcript: str) -> AnalysisResult:
    """Return the prepared reflection matching the transcript's keywords."""
    emotion = detect_emotion(transcript)
    reflection = REFLECTIONS[emotion]
    return AnalysisResult(
        primary_emotion=emotion,
        summary=reflection.summary,
        analysis=reflection.analysis,
        suggestions=list(reflection.suggestions),
    )
