#!/usr/bin/env python3
"""thnk CLI - Reflect on voice journal transcripts.

This is the main entry point for the thnk command-line tool.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from thnk.cli import progress
from thnk.config.loader import load_config
from thnk.llm.client import LLMError
from thnk.llm.prompt_logger import PromptLogger
from thnk.llm.prompts import build_analysis_prompt
from thnk.llm.providers import create_provider
from thnk.models.analysis import AnalysisResult
from thnk.models.entry import EmotionalEntry, load_entries, recent_entries
from thnk.models.patterns import EmotionPattern, PatternAnalysis
from thnk.services.analyzer import HISTORY_LIMIT, EmotionAnalyzer
from thnk.services.offline import canned_analysis
from thnk.services.patterns import analyze_patterns
from thnk.utils.logging import LOG_LEVELS, configure_logging, get_logger


logger = get_logger(__name__)
console = Console()


def read_transcript(transcript: Optional[str], file: Optional[Path]) -> str:
    """
    Resolve the transcript from the argument or a file.

    Raises:
        click.UsageError: If neither or both are given, or the text is empty
    """
    if transcript and file:
        raise click.UsageError("Give either TRANSCRIPT or --file, not both")
    if file:
        transcript = file.read_text(encoding="utf-8")
    if not transcript or not transcript.strip():
        raise click.UsageError("A non-empty transcript is required (argument or --file)")
    return transcript.strip()


def read_history(history: Optional[Path]) -> List[EmotionalEntry]:
    """
    Load prior entries from a JSON history file.

    Raises:
        click.ClickException: If the file can't be read or validated
    """
    if history is None:
        return []

    try:
        entries = load_entries(history)
    except (OSError, ValueError) as e:
        logger.error("history_load_error", path=str(history), error=str(e))
        raise click.ClickException(f"Failed to load history from {history}:\n{e}")

    logger.info("history_loaded", path=str(history), count=len(entries))
    return entries


def render_result(result: AnalysisResult) -> None:
    """Print an analysis result."""
    console.print(f"[bold]Emotion:[/bold] {escape(result.primary_emotion.capitalize())}")
    console.print(f"[bold]Summary:[/bold] {escape(result.summary)}")
    console.print()
    for paragraph in result.analysis.split("\n\n"):
        console.print(escape(paragraph.strip()))
        console.print()
    console.print("[bold]Suggested actions:[/bold]")
    for i, suggestion in enumerate(result.suggestions, 1):
        console.print(f"  {i}. {escape(suggestion)}")


def _patterns_table(title: str, patterns: List[EmotionPattern]) -> Table:
    table = Table(title=title)
    table.add_column("Emotion")
    table.add_column("Count", justify="right")
    table.add_column("Insights")
    table.add_column("Triggers")

    for pattern in patterns:
        table.add_row(
            pattern.emotion,
            str(pattern.frequency),
            "\n".join(pattern.insights),
            ", ".join(pattern.triggers),
        )
    return table


def render_patterns(analysis: PatternAnalysis) -> None:
    """Print pattern tables and today's trajectory."""
    if not analysis.has_significant_patterns:
        console.print("No repeated emotions yet. Keep journaling!")
    else:
        for title, patterns in (
            ("Today", analysis.daily_patterns),
            ("This Week", analysis.weekly_patterns),
            ("This Month", analysis.monthly_patterns),
        ):
            if patterns:
                console.print(_patterns_table(title, patterns))
        console.print(f"[bold]Most frequent emotion:[/bold] {analysis.most_frequent_emotion}")

    trajectory = analysis.trajectory
    if trajectory:
        console.print()
        console.print(f"[bold]Today's trajectory[/bold] (mostly {trajectory.dominant_emotion})")
        for change in trajectory.emotion_changes:
            minutes = int(change.time_between // 60)
            console.print(f"  {change.from_emotion} -> {change.to_emotion} after {minutes} min")
        for insight in trajectory.insights:
            console.print(f"  • {escape(insight)}")


@click.group()
@click.version_option(version="0.1.0", prog_name="thnk")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level for ~/.cache/thnk/logs/thnk.log (default: THNK_LOG_LEVEL or INFO)",
)
def cli(log_level: Optional[str]):
    """thnk: Reflect on voice journal entries with LLM-powered emotional analysis."""
    configure_logging(level=log_level)


@cli.command()
@click.argument("transcript", required=False)
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the transcript from a text file",
)
@click.option(
    "--history",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of prior entries used as context",
)
@click.option(
    "--provider",
    type=click.Choice(["anthropic", "openai"]),
    help="LLM provider (default: from config or THNK_PROVIDER, else anthropic)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/thnk/config.yaml)",
)
@click.option("--offline", is_flag=True, help="Use a canned reflection instead of calling the API")
@click.option(
    "--prompt-log",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Append prompts and raw responses to this file",
)
@click.option("--share", is_flag=True, help="Print the result formatted for sharing")
@click.pass_context
def analyze(
    ctx: click.Context,
    transcript: Optional[str],
    file: Optional[Path],
    history: Optional[Path],
    provider: Optional[str],
    config_path: Optional[Path],
    offline: bool,
    prompt_log: Optional[Path],
    share: bool,
):
    """
    Analyse a journal transcript.

    Examples:
        thnk analyze "Rough day, the deadline moved up again"
        thnk analyze --file note.txt --history entries.json
        thnk analyze --offline "feeling good about today"
    """
    text = read_transcript(transcript, file)
    entries = read_history(history)
    if entries:
        progress.show_history_loaded(min(len(entries), HISTORY_LIMIT))

    logger.info("analyze_command_started", offline=offline, history_count=len(entries))

    if offline:
        if provider or config_path or prompt_log:
            progress.show_warning("--offline ignores --provider, --config and --prompt-log")
        result = canned_analysis(text)
    else:
        try:
            config = load_config(config_path, provider=provider)
        except LLMError as e:
            progress.show_error(e.user_message)
            ctx.exit(1)
        except (FileNotFoundError, PermissionError) as e:
            logger.error("config_load_error", error=str(e))
            raise click.ClickException(str(e))
        except ValueError as e:
            logger.error("config_validation_error", error=str(e))
            raise click.ClickException(f"Configuration validation failed:\n{e}")

        prompt_logger = PromptLogger(log_file=prompt_log) if prompt_log else None
        llm = create_provider(config.llm, prompt_logger=prompt_logger)
        analyzer = EmotionAnalyzer(llm, config.retry, on_retry=progress.show_retry)

        progress.show_analyzing(llm.name, llm.model)
        try:
            result = asyncio.run(analyzer.analyze(text, entries))
        except LLMError as e:
            progress.show_error(e.user_message)
            ctx.exit(1)
        finally:
            if prompt_logger:
                prompt_logger.close()

    if share:
        click.echo(result.formatted_for_sharing())
    else:
        render_result(result)


@cli.command()
@click.argument("transcript", required=False)
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the transcript from a text file",
)
@click.option(
    "--history",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of prior entries used as context",
)
def prompt(transcript: Optional[str], file: Optional[Path], history: Optional[Path]):
    """Print the analysis prompt that would be sent, without calling the API."""
    text = read_transcript(transcript, file)
    entries = recent_entries(read_history(history), limit=HISTORY_LIMIT)
    click.echo(build_analysis_prompt(text, entries))


@cli.command()
@click.option(
    "--history",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="JSON file of prior entries",
)
def patterns(history: Path):
    """Summarize repeated emotions and today's trajectory."""
    entries = read_history(history)
    render_patterns(analyze_patterns(entries))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
