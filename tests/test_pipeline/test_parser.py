"""Tests for the Result Parser."""

import json

import pytest

from src.errors import MalformedOutputError
from src.models.quiz import QuestionType
from src.pipeline.parser import parse_quiz_items, serialize_quiz_items, strip_code_fence

MCQ_OUTPUT = (
    '{"questions":[{"stem":"S","type":"mcq","options":["a","b","c","d"],'
    '"answer":"A","ref":"p1"}]}'
)


class TestStripCodeFence:
    """Test code fence removal."""

    def test_removes_json_fence(self):
        """Test that a ```json fence is removed."""
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_bare_fence(self):
        """Test that a plain ``` fence is removed."""
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leaves_unfenced_content(self):
        """Test that unfenced content is only stripped of whitespace."""
        assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'

    def test_single_line_fence(self):
        """Test a fence without newlines."""
        assert strip_code_fence('```json{"a": 1}```') == '{"a": 1}'

    def test_fenced_block_after_prose(self):
        """Test that prose before and after a fenced block is dropped."""
        raw = 'Here is the quiz:\n```json\n{"a": 1}\n```\nGood luck!'

        assert strip_code_fence(raw) == '{"a": 1}'

    def test_removes_stray_fence_token(self):
        """Test that an unterminated fence token is removed."""
        assert strip_code_fence('```json\n{"a": 1}') == '{"a": 1}'


class TestParseQuizItems:
    """Test parsing of generator output."""

    def test_fenced_empty_set(self):
        """Test that a fenced empty list is a valid, empty result."""
        items = parse_quiz_items('```json\n{"questions":[]}\n```')

        assert len(items) == 0

    def test_single_mcq_item(self):
        """Test parsing one mcq item."""
        items = parse_quiz_items(MCQ_OUTPUT)

        assert len(items) == 1
        item = items.questions[0]
        assert item.type == QuestionType.MCQ
        assert len(item.options) == 4
        assert item.answer == "A"
        assert item.ref == "p1"

    def test_preserves_generator_order(self):
        """Test that items keep the order the generator produced."""
        raw = json.dumps(
            {
                "questions": [
                    {"stem": f"Statement {i}", "type": "trueFalse", "answer": "True", "ref": ""}
                    for i in (3, 1, 2)
                ]
            }
        )
        items = parse_quiz_items(raw)

        assert [q.stem for q in items.questions] == ["Statement 3", "Statement 1", "Statement 2"]

    def test_idempotent_on_own_output(self, three_mcq_reply: str):
        """Test that parse(serialize(parse(x))) == parse(x)."""
        first = parse_quiz_items(three_mcq_reply)
        second = parse_quiz_items(serialize_quiz_items(first))

        assert second == first

    def test_idempotent_for_mixed_types(self, sample_item_set):
        """Test round trip with items that carry no options."""
        raw = serialize_quiz_items(sample_item_set)

        assert parse_quiz_items(raw) == sample_item_set

    @pytest.mark.parametrize(
        "raw",
        [
            "not json at all",
            '{"questions": [',
            "",
        ],
    )
    def test_malformed_json_raises(self, raw: str):
        """Test that invalid JSON is rejected."""
        with pytest.raises(MalformedOutputError):
            parse_quiz_items(raw)

    def test_missing_questions_key_raises(self):
        """Test that output without "questions" is rejected."""
        with pytest.raises(MalformedOutputError):
            parse_quiz_items('{"items": []}')

    def test_non_list_questions_raises(self):
        """Test that a non-list "questions" value is rejected."""
        with pytest.raises(MalformedOutputError):
            parse_quiz_items('{"questions": {"stem": "S"}}')

    def test_non_object_payload_raises(self):
        """Test that a top-level array is rejected."""
        with pytest.raises(MalformedOutputError):
            parse_quiz_items("[]")

    def test_invalid_element_fails_whole_parse(self):
        """Test that one invalid item fails the parse and names its position."""
        raw = json.dumps(
            {
                "questions": [
                    {"stem": "Good", "type": "trueFalse", "answer": "True"},
                    {"type": "trueFalse", "answer": "False"},
                ]
            }
        )

        with pytest.raises(MalformedOutputError, match="Question 2"):
            parse_quiz_items(raw)

    def test_non_object_element_raises(self):
        """Test that a string element is rejected."""
        with pytest.raises(MalformedOutputError):
            parse_quiz_items('{"questions": ["just a string"]}')

    def test_mcq_with_bad_answer_raises(self):
        """Test that an mcq answer outside A-D fails the parse."""
        raw = MCQ_OUTPUT.replace('"answer":"A"', '"answer":"Z"')

        with pytest.raises(MalformedOutputError):
            parse_quiz_items(raw)

    def test_boolean_true_false_answer(self):
        """Test that a JSON boolean answer on a trueFalse item is accepted."""
        items = parse_quiz_items(
            '{"questions":[{"stem":"S","type":"trueFalse","answer":true,"ref":"p1"},'
            '{"stem":"T","type":"trueFalse","answer":false}]}'
        )

        assert [item.answer for item in items.questions] == ["True", "False"]

    def test_quiz_wrapped_in_prose(self):
        """Test a fenced reply with an introduction still parses."""
        items = parse_quiz_items(f"Here is the quiz:\n```json\n{MCQ_OUTPUT}\n```")

        assert len(items) == 1
        assert items.questions[0].type == QuestionType.MCQ
