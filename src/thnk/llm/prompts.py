"""Analysis prompt templates and builders.

This module contains the canonical prompt used for emotional analysis.
Every provider receives the same system and user prompts; providers that
take a single prompt string use ``build_analysis_prompt``.
"""

from datetime import datetime
from textwrap import dedent
from typing import Optional, Sequence

from thnk.models.entry import EmotionalEntry

# Number of prior entries rendered into the context block
CONTEXT_WINDOW = 5

# Characters of a prior entry's analysis quoted as context
SNIPPET_LENGTH = 100

RESPONSE_FORMAT = dedent("""
    {
      "emotion": "single_word",
      "summary": "meaningful summary capturing the essence in 15-20 words",
      "analysis": "Hey, thanks for sharing. [First paragraph with initial thoughts and validation.]\\n\\n[Second paragraph with deeper insights and connections.]\\n\\n[Third paragraph with gentle challenge or wisdom.]",
      "suggestions": ["meaningful action 1", "concrete step 2", "thoughtful practice 3", "specific next step 4"]
    }
""").strip()


def build_system_prompt() -> str:
    """Build the fixed role and methodology instructions."""
    return dedent("""
        You are a wise mentor who is the user's future self (15-20 years older).

        Your role:
        - Same personality and speaking style as the user, but with added wisdom and perspective
        - Act as an older, wiser friend and mentor

        Methodology:
        - Use cognitive-behavioral principles without naming them
        - Focus on pattern recognition and gentle challenging

        Response rules:
        - Always open with "Hey, thanks for sharing"
        - Match the weight and length of the user's entry (brief for brief, substantial for substantial)
        - Use conversational narrative format
        - Avoid headings, bullet points, listed breakdowns, item-by-item recaps

        Core objectives:
        - Identify patterns the user doesn't see
        - Make new connections between their thoughts
        - Uncover what's being left unsaid
        - Find one opportunity to gently challenge their thinking or patterns
        - Weave their thoughts into a cohesive story with insights

        Tone guidelines:
        - Casual but not overly casual
        - Avoid therapist-speak and clinical language
        - Maintain a warm, conversational, insightful tone

        Strict restrictions:
        - NEVER reference your own life, experiences, or memories
        - NO first-person statements about yourself
        - AVOID simply repeating back what they said

        Response format:
        Respond with a JSON object containing:
        - emotion: single lowercase word for the primary emotion
        - summary: brief 10-15 word summary that captures the essence
        - analysis: your main thoughtful response (use \\n to separate paragraphs)
        - suggestions: array of 2-4 concrete, meaningful next steps

        Respond ONLY with valid JSON in this exact format:
    """).strip() + "\n" + RESPONSE_FORMAT


def time_ago(timestamp: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a timestamp was, in the largest fitting unit.

    Args:
        timestamp: Moment to describe (None is treated as now)
        now: Reference time (default: current time)

    Returns:
        "Nm ago" under an hour, "Nh ago" under a day, "Nd ago" under a week,
        otherwise "Nw ago"

    Example:
        >>> time_ago(datetime(2024, 1, 1, 9, 0), now=datetime(2024, 1, 1, 12, 30))
        '3h ago'
    """
    now = now or datetime.now()
    if timestamp is None:
        timestamp = now

    elapsed = max(0.0, now.timestamp() - timestamp.timestamp())

    if elapsed < 3600:
        return f"{int(elapsed // 60)}m ago"
    if elapsed < 86400:
        return f"{int(elapsed // 3600)}h ago"
    if elapsed < 604800:
        return f"{int(elapsed // 86400)}d ago"
    return f"{int(elapsed // 604800)}w ago"


def build_context_block(
    previous_entries: Sequence[EmotionalEntry], now: Optional[datetime] = None
) -> str:
    """
    Render the recent-patterns block for the most recent prior entries.

    Args:
        previous_entries: Prior entries ordered newest-first
        now: Reference time for relative timestamps

    Returns:
        The block text, or "" when there are no prior entries
    """
    if not previous_entries:
        return ""

    lines = ["**Recent emotional patterns for context (USE THESE FOR PATTERN RECOGNITION):**"]

    for entry in previous_entries[:CONTEXT_WINDOW]:
        emotion = entry.primary_emotion or "unknown"
        summary = entry.summary or ""
        lines.append(f"- {time_ago(entry.timestamp, now)}: {emotion} - {summary}")

        snippet = (entry.analysis or "")[:SNIPPET_LENGTH]
        if snippet:
            lines.append(f"  Context: {snippet}...")

    lines.append("")
    lines.append("**Pay attention to:**")
    lines.append("- Are there recurring themes or triggers?")
    lines.append("- Is this part of a pattern you've seen before?")
    lines.append("- How does this connect to their recent emotional journey?")
    lines.append("- What growth or struggles do you notice over time?")

    return "\n".join(lines)


def build_user_prompt(
    transcript: str,
    previous_entries: Sequence[EmotionalEntry] = (),
    now: Optional[datetime] = None,
) -> str:
    """Build the user prompt: history context, transcript and format reminder.

    Args:
        transcript: Text of the current voice note
        previous_entries: Prior entries ordered newest-first (only 5 are used)
        now: Reference time for relative timestamps

    Returns:
        User prompt text
    """
    sections = ["Here's their voice note transcript:"]

    context = build_context_block(previous_entries, now)
    if context:
        sections.append(context)

    sections.append(f'**Current entry:**\n"{transcript}"')
    sections.append(dedent("""
        Remember:
        - Respond as their wise, older self with deep insight
        - Make meaningful connections and identify patterns from their history
        - Give them substantial reflection, not just surface observations
        - Your analysis should roughly match the length of their entry
        - Be specific to their situation and emotional journey

        Respond only with valid JSON in this exact format:
    """).strip() + "\n" + RESPONSE_FORMAT)

    return "\n\n".join(sections)


def build_analysis_prompt(
    transcript: str,
    previous_entries: Sequence[EmotionalEntry] = (),
    now: Optional[datetime] = None,
) -> str:
    """Build the complete analysis prompt as a single string.

    Args:
        transcript: Text of the current voice note
        previous_entries: Prior entries ordered newest-first (only 5 are used)
        now: Reference time for relative timestamps

    Returns:
        System instructions followed by the user prompt
    """
    return build_system_prompt() + "\n\n" + build_user_prompt(transcript, previous_entries, now)
