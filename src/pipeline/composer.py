"""Request Composer - Turns generation options into a task specification."""

from typing import NamedTuple

from src.errors import InvalidOptionsError
from src.models.quiz import GenerationOptions, QuestionType


class CalibrationLevel(NamedTuple):
    """Cognitive level the generator calibrates its items to."""

    name: str
    instruction: str


DIFFICULTY_CALIBRATION: dict[str, CalibrationLevel] = {
    "easy": CalibrationLevel(
        "Beginner",
        "Focus on recall and basic understanding of the material as presented.",
    ),
    "medium": CalibrationLevel(
        "Intermediate",
        "Focus on application and light analysis, requiring the reader to "
        "connect concepts.",
    ),
    "hard": CalibrationLevel(
        "Expert",
        "Focus on synthesis, evaluation and edge-case reasoning, challenging the "
        "reader to apply the material to new scenarios.",
    ),
}

QUESTION_TYPE_LABELS: dict[QuestionType, str] = {
    QuestionType.MCQ: "Multiple Choice",
    QuestionType.TRUE_FALSE: "True/False",
    QuestionType.SHORT_ANSWER: "Short Answer",
}

# Keyed by the wire value so the rules never repeat the labels above
QUESTION_TYPE_RULES: dict[QuestionType, str] = {
    QuestionType.MCQ: (
        'type "mcq": write a stem and exactly 4 plausible options labeled A-D, '
        "with a single correct option. Give the letter of the correct option as "
        "the answer."
    ),
    QuestionType.TRUE_FALSE: (
        'type "trueFalse": write a single, clear assertion. The answer is either '
        '"True" or "False".'
    ),
    QuestionType.SHORT_ANSWER: (
        'type "shortAnswer": write a question whose expected open response is '
        "concise, around 30 words. Give a model answer of that length."
    ),
}

OUTPUT_SCHEMA = """{
  "questions": [
    {
      "stem": "Full text of the question",
      "type": "mcq | trueFalse | shortAnswer",
      "options": ["Four choices, only for mcq items"],
      "answer": "The correct answer; for mcq the letter A, B, C or D",
      "ref": "Page number or section of the source document"
    }
  ]
}"""

MIN_QUESTIONS = 1
MAX_QUESTIONS = 20


def resolve_calibration(difficulty: str) -> CalibrationLevel:
    """
    Look up the calibration level for a difficulty value.

    Args:
        difficulty: One of easy, medium or hard

    Returns:
        CalibrationLevel for that difficulty

    Raises:
        InvalidOptionsError: If the difficulty is not recognised
    """
    key = str(difficulty).strip().lower()
    try:
        return DIFFICULTY_CALIBRATION[key]
    except KeyError:
        allowed = ", ".join(DIFFICULTY_CALIBRATION)
        raise InvalidOptionsError(
            f"Unknown difficulty '{difficulty}'; expected one of: {allowed}"
        ) from None


def selected_types(options: GenerationOptions) -> list[QuestionType]:
    """Selected question types in canonical order."""
    chosen = set(options.question_types)
    return [t for t in QuestionType if t in chosen]


def format_focus_instruction(focus_hint: str | None) -> str:
    """Instruction narrowing the subject area, or an empty string."""
    hint = (focus_hint or "").strip()
    if not hint:
        return ""
    return (
        "IMPORTANT: The user has specified a focus area. Prioritize generating "
        f'questions from the parts of the document related to: "{hint}".'
    )


def compose_task_spec(options: GenerationOptions, focus_hint: str | None = "") -> str:
    """
    Build the task specification sent to the remote generator.

    The result is deterministic for a given set of inputs.

    Args:
        options: Generation options chosen by the user
        focus_hint: Optional subject area to prioritise

    Returns:
        Natural-language task specification ending in the output contract

    Raises:
        InvalidOptionsError: If no type is selected, the difficulty is unknown
            or the item count is out of range
    """
    level = resolve_calibration(options.difficulty)

    types = selected_types(options)
    if not types:
        raise InvalidOptionsError("At least one question type must be selected")

    if not MIN_QUESTIONS <= options.num_questions <= MAX_QUESTIONS:
        raise InvalidOptionsError(
            f"Number of questions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}"
        )

    type_labels = ", ".join(QUESTION_TYPE_LABELS[t] for t in types)
    type_rules = "\n".join(f"    *   {QUESTION_TYPE_RULES[t]}" for t in types)

    sections = ["You are a professional assessment-item writer."]

    focus_instruction = format_focus_instruction(focus_hint)
    if focus_instruction:
        sections.append(focus_instruction)

    sections.append(
        f"""TASK:
1.  Read the attached source document.
2.  Calibrate the depth and phrasing of every item to the {level.name} level: {level.instruction}
3.  Write the requested number of items, following these rules per item type:
{type_rules}"""
    )

    sections.append(
        """RULES:
*   Do not repeat the source text verbatim; paraphrase it.
*   Draw items from different sections of the document to ensure broad coverage.
*   Make distractors plausible and avoid grammatical clues to the correct answer.
*   In the "ref" field, give a page number or other reference from the source."""
    )

    sections.append(
        f"""Generate the items with the following parameters, returning the output as a single, valid JSON object.

PARAMETERS:
*   LEVEL: {level.name}
*   ITEM TYPES: {type_labels}
*   NUMBER OF ITEMS: {options.num_questions}

The JSON object must have a single key "questions" containing an array of item objects with this exact structure:
{OUTPUT_SCHEMA}"""
    )

    return "\n\n".join(sections)
