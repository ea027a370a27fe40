"""Prompt and response dump for inspecting analysis requests.

Writes a human-readable transcript of every prompt sent to the provider and
the raw text that came back. Useful when tuning the analysis prompt or
investigating why a response fell back to the generic result.
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO


class PromptLogger:
    """Logger for LLM prompts and responses."""

    def __init__(
        self,
        output: Optional[TextIO] = None,
        log_file: Optional[Path] = None,
        include_timestamps: bool = True,
    ):
        """Initialize prompt logger.

        Args:
            output: Output stream (default: stderr)
            log_file: Optional file path to write to instead of the stream
            include_timestamps: Include timestamps in output
        """
        self.output = output or sys.stderr
        self.log_file = log_file
        self.include_timestamps = include_timestamps
        self._interaction_count = 0

        self._file_handle: Optional[TextIO] = None
        if log_file:
            self._file_handle = open(log_file, "a", encoding="utf-8")

    def close(self) -> None:
        """Close the log file, if one was opened."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

    def log_request(
        self,
        stage: str,
        messages: List[Dict[str, Any]],
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a request.

        Args:
            stage: Stage identifier (e.g., "analysis")
            messages: Chat messages sent to the provider
            model: Model name
            metadata: Optional extra context (provider, attempt, ...)
        """
        self._interaction_count += 1

        output = []
        output.append("=" * 80)
        output.append(f"[{self._interaction_count}] LLM REQUEST - {stage}")

        if self.include_timestamps:
            output.append(f"Timestamp: {datetime.now().isoformat()}")

        output.append(f"Model: {model}")

        if metadata:
            output.append(f"Metadata: {json.dumps(metadata, indent=2)}")

        output.append("")
        output.append("Messages:")
        output.append("-" * 80)

        for i, message in enumerate(messages, 1):
            output.append(f"[Message {i}] Role: {message.get('role', 'unknown')}")
            output.append(_message_text(message.get("content", "")))
            output.append("-" * 80)

        output.append("")

        self._write("\n".join(output))

    def log_response(
        self,
        stage: str,
        response: Dict[str, Any],
        error: Optional[Exception] = None,
        raw_content: Optional[str] = None,
    ) -> None:
        """Log a response.

        Args:
            stage: Stage identifier (e.g., "analysis")
            response: Decoded response envelope (only its keys are logged)
            error: Exception if the request failed
            raw_content: Text extracted from the envelope
        """
        output = []
        output.append(f"[{self._interaction_count}] LLM RESPONSE - {stage}")

        if self.include_timestamps:
            output.append(f"Timestamp: {datetime.now().isoformat()}")

        if error:
            output.append(f"ERROR: {type(error).__name__}: {error}")
        else:
            output.append("Status: Success")

        if response:
            output.append(f"Envelope keys: {', '.join(sorted(response))}")

        output.append("")

        if raw_content is not None:
            output.append("Raw LLM Content:")
            output.append("-" * 80)
            output.append(raw_content)
            output.append("-" * 80)

        output.append("=" * 80)
        output.append("")

        self._write("\n".join(output))

    def _write(self, text: str) -> None:
        if self._file_handle:
            self._file_handle.write(text + "\n")
            self._file_handle.flush()
        else:
            self.output.write(text + "\n")
            self.output.flush()


def _message_text(content: Any) -> str:
    """Flatten string or typed-block message content for display."""
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, dict):
            parts.append(str(block.get("text", "")))
        else:
            parts.append(str(block))
    return "\n".join(parts)
