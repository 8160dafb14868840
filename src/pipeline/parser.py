"""Result Parser - Extracts the validated item list from raw generator output."""

import json
import re

from pydantic import ValidationError

from src.errors import MalformedOutputError
from src.models.quiz import QuizItem, QuizItemSet

_FENCED_BLOCK = re.compile(r"```[A-Za-z]*[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_FENCE_TOKEN = re.compile(r"```[A-Za-z]*")


def strip_code_fence(content: str) -> str:
    """
    Remove markdown code fences from generator output.

    When the output holds a fenced block, only the block body is kept, so
    prose around it ("Here is the quiz:") is dropped. Stray fence tokens
    outside a complete block are removed wherever they appear.

    Args:
        content: Raw generator output

    Returns:
        Content without ```json / ``` fence tokens
    """
    match = _FENCED_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    return _FENCE_TOKEN.sub("", content).strip()


def parse_quiz_items(raw_output: str) -> QuizItemSet:
    """
    Parse generator output into a QuizItemSet.

    Every element must be a valid item: one invalid element fails the whole
    parse rather than returning a partial quiz. Generator order is kept.

    Args:
        raw_output: Text returned by the remote generator

    Returns:
        QuizItemSet with the parsed items

    Raises:
        MalformedOutputError: If the output is not JSON, has no "questions"
            list or contains an invalid item
    """
    content = strip_code_fence(raw_output or "")

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"Generator output is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedOutputError("Generator output is not a JSON object")
    if "questions" not in payload:
        raise MalformedOutputError('Generator output has no "questions" field')

    questions = payload["questions"]
    if not isinstance(questions, list):
        raise MalformedOutputError('"questions" must be a list')

    items = []
    for index, element in enumerate(questions):
        if not isinstance(element, dict):
            raise MalformedOutputError(f"Question {index + 1} is not an object")
        try:
            items.append(QuizItem.model_validate(element))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'item'}: {err['msg']}"
                for err in e.errors()
            )
            raise MalformedOutputError(
                f"Question {index + 1} is invalid: {problems}"
            ) from e

    return QuizItemSet(questions=items)


def serialize_quiz_items(items: QuizItemSet) -> str:
    """Render an item set in the generator's output shape."""
    return items.model_dump_json(exclude_none=True)
