"""Tests for prompt logging functionality."""

from io import StringIO

from thnk.llm.prompt_logger import PromptLogger


class TestPromptLogger:
    """Test cases for PromptLogger."""

    def test_init_with_custom_output(self):
        """Should accept custom output stream."""
        output = StringIO()
        logger = PromptLogger(output=output)
        assert logger.output == output

    def test_log_request_basic(self):
        """Should log basic request information."""
        output = StringIO()
        logger = PromptLogger(output=output, include_timestamps=False)

        logger.log_request(
            stage="analysis",
            messages=[
                {"role": "system", "content": "You are a wise mentor"},
                {"role": "user", "content": "Rough day."},
            ],
            model="gpt-4",
            metadata={"provider": "openai"},
        )

        result = output.getvalue()
        assert "[1] LLM REQUEST - analysis" in result
        assert "Model: gpt-4" in result
        assert '"provider": "openai"' in result
        assert "[Message 1] Role: system" in result
        assert "You are a wise mentor" in result
        assert "[Message 2] Role: user" in result
        assert "Timestamp:" not in result

    def test_log_request_typed_blocks(self):
        """Should flatten Anthropic-style content blocks."""
        output = StringIO()
        logger = PromptLogger(output=output, include_timestamps=False)

        logger.log_request(
            stage="analysis",
            messages=[{"role": "user", "content": [{"type": "text", "text": "Block text"}]}],
            model="claude",
        )

        assert "Block text" in output.getvalue()

    def test_log_response_success(self):
        """Should log envelope keys and raw content."""
        output = StringIO()
        logger = PromptLogger(output=output, include_timestamps=False)

        logger.log_request(stage="analysis", messages=[], model="m")
        logger.log_response(
            stage="analysis",
            response={"id": "msg_1", "content": []},
            raw_content='{"emotion": "calm"}',
        )

        result = output.getvalue()
        assert "[1] LLM RESPONSE - analysis" in result
        assert "Status: Success" in result
        assert "Envelope keys: content, id" in result
        assert '{"emotion": "calm"}' in result

    def test_log_response_error(self):
        """Should log errors."""
        output = StringIO()
        logger = PromptLogger(output=output, include_timestamps=False)

        logger.log_response(stage="analysis", response={}, error=ValueError("boom"))

        result = output.getvalue()
        assert "ERROR: ValueError: boom" in result
        assert "Status: Success" not in result

    def test_interaction_count_increments(self):
        """Should number each request."""
        output = StringIO()
        logger = PromptLogger(output=output, include_timestamps=False)

        logger.log_request(stage="analysis", messages=[], model="m")
        logger.log_request(stage="analysis", messages=[], model="m")

        assert "[2] LLM REQUEST - analysis" in output.getvalue()

    def test_log_file_appends(self, tmp_path):
        """Should append to the log file instead of the stream."""
        log_file = tmp_path / "prompts.log"
        output = StringIO()
        logger = PromptLogger(output=output, log_file=log_file, include_timestamps=True)

        logger.log_request(stage="analysis", messages=[], model="m")
        logger.close()

        content = log_file.read_text()
        assert "LLM REQUEST" in content
        assert "Timestamp:" in content
        assert output.getvalue() == ""
