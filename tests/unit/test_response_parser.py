"""Unit tests for model-output parsing."""

import json

import pytest

from thnk.llm.client import InvalidJSONResponse
from thnk.llm.response_parser import (
    FALLBACK_SUGGESTIONS,
    iter_balanced_objects,
    naive_span,
    parse_analysis_response,
)


def payload(**overrides):
    data = {
        "emotion": "anxious",
        "summary": "Worried about the launch",
        "analysis": "Hey, thanks for sharing.\n\nThere's a lot here.",
        "suggestions": ["Breathe", "Write it down", "Call a friend"],
    }
    data.update(overrides)
    return json.dumps(data)


class TestParseAnalysisResponse:
    """Test parse_analysis_response."""

    def test_extracts_object_surrounded_by_prose(self):
        raw = 'noise {"emotion":"joy","summary":"s","analysis":"a","suggestions":["x"]} trailing'

        result = parse_analysis_response(raw)

        assert result.primary_emotion == "joy"
        assert result.summary == "s"
        assert result.analysis == "a"
        assert result.suggestions == ["x"]

    def test_plain_json(self):
        result = parse_analysis_response(payload())

        assert result.primary_emotion == "anxious"
        assert result.suggestions == ["Breathe", "Write it down", "Call a friend"]

    def test_json_in_code_fence(self):
        raw = "Here you go:\n```json\n" + payload(emotion="hopeful") + "\n```"

        result = parse_analysis_response(raw)

        assert result.primary_emotion == "hopeful"

    def test_emotion_is_normalized_to_lowercase(self):
        result = parse_analysis_response(payload(emotion="  Grateful "))

        assert result.primary_emotion == "grateful"

    def test_suggestions_capped_at_four(self):
        result = parse_analysis_response(payload(suggestions=["a", "b", "c", "d", "e"]))

        assert result.suggestions == ["a", "b", "c", "d"]

    def test_braces_inside_string_values(self):
        raw = "Sure! " + payload(analysis="Sometimes {it} feels like } too much")

        result = parse_analysis_response(raw)

        assert result.analysis == "Sometimes {it} feels like } too much"

    def test_skips_leading_object_with_wrong_shape(self):
        raw = 'Example: {"note": "ignore me"} Answer: ' + payload(emotion="calm")

        result = parse_analysis_response(raw)

        assert result.primary_emotion == "calm"

    def test_each_result_gets_fresh_id(self):
        first = parse_analysis_response(payload())
        second = parse_analysis_response(payload())

        assert first.id != second.id

    @pytest.mark.parametrize("raw", ["", "no json at all", "only an opening {", "only a closing }"])
    def test_missing_braces_raise(self, raw):
        with pytest.raises(InvalidJSONResponse):
            parse_analysis_response(raw)

    def test_closing_before_opening_raises(self):
        with pytest.raises(InvalidJSONResponse):
            parse_analysis_response("}{")

    def test_malformed_json_falls_back(self):
        raw = "I think you're feeling {tired, but hopeful}"

        result = parse_analysis_response(raw)

        assert result.primary_emotion == "reflective"
        assert result.summary == "Processing your thoughts"
        assert result.analysis == raw
        assert result.suggestions == FALLBACK_SUGGESTIONS

    def test_wrong_shape_falls_back(self):
        raw = json.dumps({"emotion": "joy", "summary": "s", "analysis": "a", "suggestions": "x"})

        result = parse_analysis_response(raw)

        assert result.primary_emotion == "reflective"

    def test_blank_emotion_falls_back(self):
        result = parse_analysis_response(payload(emotion="   "))

        assert result.primary_emotion == "reflective"

    def test_multi_word_emotion_falls_back(self):
        result = parse_analysis_response(payload(emotion="Deeply Sad"))

        assert result.primary_emotion == "reflective"
        assert result.summary == "Processing your thoughts"

    def test_padded_single_word_emotion_accepted(self):
        result = parse_analysis_response(payload(emotion=" Sad "))

        assert result.primary_emotion == "sad"

    def test_fallback_truncates_long_text(self):
        raw = "{" + "x" * 600 + "}"

        result = parse_analysis_response(raw)

        assert len(result.analysis) == 503
        assert result.analysis.endswith("...")
        assert result.analysis[:500] == raw[:500]

    @pytest.mark.parametrize(
        "raw",
        [
            "{",
            "{}",
            "{{{{",
            "}}}}{{{{}",
            '{"emotion": null}',
            "{" * 5000 + "}" * 5000,
            '{"a": "\\',
            "[1, 2, {3}]",
            '{"emotion": "joy", "summary": 1, "analysis": [], "suggestions": [null]}',
        ],
    )
    def test_never_raises_other_errors(self, raw):
        try:
            result = parse_analysis_response(raw)
        except InvalidJSONResponse:
            return
        assert result.primary_emotion


class TestBraceScanning:
    """Test the span helpers."""

    def test_naive_span_uses_first_and_last_brace(self):
        assert naive_span('a {"x": 1} b {"y": 2} c') == '{"x": 1} b {"y": 2}'

    def test_balanced_objects_in_order(self):
        text = 'a {"x": {"n": 1}} b {"y": "}"} c'

        assert list(iter_balanced_objects(text)) == ['{"x": {"n": 1}}', '{"y": "}"}']

    def test_unterminated_object_not_yielded(self):
        assert list(iter_balanced_objects('{"x": 1')) == []

    def test_escaped_quote_inside_string(self):
        text = '{"x": "say \\"}\\" now"}'

        assert list(iter_balanced_objects(text)) == [text]
