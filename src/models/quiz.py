"""Pydantic models for quiz generation data structures."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

OPTION_LETTERS = ("A", "B", "C", "D")


class QuestionType(str, Enum):
    """Item types the generator can produce."""

    MCQ = "mcq"
    TRUE_FALSE = "trueFalse"
    SHORT_ANSWER = "shortAnswer"


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class JobRunState(str, Enum):
    """Status of a remote generation run."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

    @classmethod
    def from_remote(cls, status: str) -> "JobRunState":
        """
        Map a raw remote run status onto a JobRunState.

        Unknown statuses are treated as still running so the caller keeps
        polling until its timeout.

        Args:
            status: Status string reported by the remote service

        Returns:
            Matching JobRunState
        """
        return _REMOTE_STATUS_MAP.get(status, cls.RUNNING)

    @property
    def is_terminal(self) -> bool:
        """Whether the run can no longer change state."""
        return self not in (JobRunState.QUEUED, JobRunState.RUNNING)


_REMOTE_STATUS_MAP = {
    "queued": JobRunState.QUEUED,
    "in_progress": JobRunState.RUNNING,
    "requires_action": JobRunState.RUNNING,
    "cancelling": JobRunState.RUNNING,
    "completed": JobRunState.COMPLETED,
    "failed": JobRunState.FAILED,
    "incomplete": JobRunState.FAILED,
    "expired": JobRunState.EXPIRED,
    "cancelled": JobRunState.CANCELLED,
}


@dataclass
class RemoteJobHandle:
    """Identifiers of the remote resources created for one generation run."""

    corpus_file_id: str | None = None
    job_definition_id: str | None = None
    conversation_id: str | None = None
    run_id: str | None = None


@dataclass
class ConversationMessage:
    """A message read back from a remote conversation."""

    role: str
    text: str | None = None


class GenerationOptions(BaseModel):
    """User-facing options for one generation request."""

    num_questions: int = Field(
        default=5,
        ge=1,
        le=20,
        alias="numQuestions",
        description="Number of items to generate",
    )
    question_types: list[QuestionType] = Field(
        default_factory=lambda: [QuestionType.MCQ],
        alias="questionTypes",
        description="Item types to generate",
    )
    difficulty: str = Field(
        default=QuestionDifficulty.MEDIUM.value,
        description="Difficulty level (easy, medium or hard)",
    )

    @field_validator("question_types", mode="before")
    @classmethod
    def accept_checkbox_mapping(cls, v: Any) -> Any:
        """Accept {"mcq": true, "trueFalse": false} as well as a list of names."""
        if isinstance(v, dict):
            return [name for name, checked in v.items() if checked]
        return v

    @field_validator("question_types")
    @classmethod
    def dedupe_question_types(cls, v: list[QuestionType]) -> list[QuestionType]:
        """Drop repeated types, keeping first occurrence."""
        return list(dict.fromkeys(v))

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v: Any) -> Any:
        """Lower-case the difficulty so 'Easy' and 'easy' are the same level."""
        if isinstance(v, Enum):
            v = v.value
        if isinstance(v, str):
            return v.strip().lower()
        return v

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "numQuestions": 5,
                "questionTypes": {"mcq": True, "trueFalse": False, "shortAnswer": False},
                "difficulty": "medium",
            }
        },
    }


_TYPE_SPELLINGS = {
    "mcq": QuestionType.MCQ.value,
    "multiplechoice": QuestionType.MCQ.value,
    "truefalse": QuestionType.TRUE_FALSE.value,
    "shortanswer": QuestionType.SHORT_ANSWER.value,
}


class QuizItem(BaseModel):
    """A single generated assessment item."""

    stem: str = Field(..., min_length=1, description="Question text")
    type: QuestionType = Field(..., description="Item type")
    options: list[str] | None = Field(
        default=None,
        description="Four answer options, present only for mcq items",
    )
    answer: str = Field(..., min_length=1, description="Correct answer")
    ref: str = Field(default="", description="Reference into the source document")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept spelling variants such as 'MCQ', 'true_false' or 'short answer'."""
        if isinstance(v, str):
            key = "".join(ch for ch in v.lower() if ch.isalpha())
            return _TYPE_SPELLINGS.get(key, v)
        return v

    @field_validator("answer", mode="before")
    @classmethod
    def coerce_answer(cls, v: Any) -> Any:
        """JSON-mode generators may answer trueFalse items with a bare boolean."""
        if isinstance(v, bool):
            return "True" if v else "False"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("stem", "answer")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank")
        return v

    @field_validator("ref", mode="before")
    @classmethod
    def coerce_ref(cls, v: Any) -> Any:
        """Generators sometimes cite a bare page number."""
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @model_validator(mode="after")
    def check_type_invariants(self) -> "QuizItem":
        """MCQ items need four options and a letter answer; others carry no options."""
        if self.type is QuestionType.MCQ:
            if self.options is None or len(self.options) != len(OPTION_LETTERS):
                raise ValueError("mcq items must have exactly 4 options")
            for letter, option in zip(OPTION_LETTERS, self.options):
                if not option or not option.strip():
                    raise ValueError(f"Option {letter} cannot be empty")
            answer = self.answer.upper()
            if answer not in OPTION_LETTERS:
                raise ValueError("mcq answer must be one of A, B, C, D")
            self.answer = answer
        else:
            self.options = None
        return self

    @property
    def correct_option_text(self) -> str | None:
        """Text of the correct option for mcq items."""
        if self.type is not QuestionType.MCQ or not self.options:
            return None
        return self.options[OPTION_LETTERS.index(self.answer)]

    model_config = {
        "json_schema_extra": {
            "example": {
                "stem": "Which organelle produces most of a cell's ATP?",
                "type": "mcq",
                "options": ["Nucleus", "Mitochondrion", "Ribosome", "Golgi body"],
                "answer": "B",
                "ref": "p. 4",
            }
        },
    }


class QuizItemSet(BaseModel):
    """Ordered list of generated items, serialised as {"questions": [...]}."""

    questions: list[QuizItem] = Field(
        default_factory=list,
        description="Items in generator order",
    )

    def __len__(self) -> int:
        return len(self.questions)

    def count_by_type(self) -> dict[QuestionType, int]:
        """Count items per question type."""
        counts: dict[QuestionType, int] = {}
        for item in self.questions:
            counts[item.type] = counts.get(item.type, 0) + 1
        return counts


class ExportRequest(BaseModel):
    """Payload for rendering an item set to a document."""

    questions: list[QuizItem] = Field(..., min_length=1, description="Items to render")
    title: str = Field(..., description="Document title")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v
