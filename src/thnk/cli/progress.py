"""Progress feedback display for CLI operations."""

import click

from thnk.llm.retry import RetryStatus


def show_analyzing(provider: str, model: str) -> None:
    """Show analysis start.

    Args:
        provider: Provider name
        model: Model being used
    """
    click.echo(f"Analyzing entry... (using {provider} model: {model})", err=True)


def show_history_loaded(count: int) -> None:
    """Show how many prior entries were loaded as context."""
    click.echo(f"Loaded {count} prior entries for context", err=True)


def show_retry(status: RetryStatus) -> None:
    """Show a retry notice.

    Args:
        status: Retry event from the retry controller
    """
    click.echo(f"Warning: {status.error.user_message} ({status.message})", err=True)


def show_error(message: str) -> None:
    """Show error message.

    Args:
        message: Error message to display
    """
    click.echo(f"Error: {message}", err=True)


def show_warning(message: str) -> None:
    """Show warning message.

    Args:
        message: Warning message to display
    """
    click.echo(f"Warning: {message}", err=True)
