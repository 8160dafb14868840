"""Shared test fixtures and configuration for pytest."""

import json
from typing import Any

import fitz
import pytest

from src.config.settings import Settings
from src.errors import RemoteJobError
from src.models.quiz import (
    ConversationMessage,
    GenerationOptions,
    QuestionType,
    QuizItem,
    QuizItemSet,
)


class FakeGenerationService:
    """
    In-memory GenerationService that records every call.

    Args:
        statuses: Run statuses returned by successive polls; the last one
            repeats forever
        reply: Text of the assistant reply
        messages: Messages to return instead of the default reply
        fail_on: Name of a method that raises RemoteJobError
        fail_cleanup: Make delete_job_definition and delete_corpus raise
    """

    def __init__(
        self,
        statuses: tuple[str, ...] = ("queued", "in_progress", "completed"),
        reply: str = '{"questions": []}',
        messages: list[ConversationMessage] | None = None,
        fail_on: str | None = None,
        fail_cleanup: bool = False,
    ):
        self._statuses = list(statuses)
        self.reply = reply
        self.messages = messages
        self.fail_on = fail_on
        self.fail_cleanup = fail_cleanup
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name == self.fail_on:
            raise RemoteJobError(f"{name} failed")

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def count(self, name: str) -> int:
        return self.call_names.count(name)

    def upload_corpus(self, text: str, filename: str) -> str:
        self._record("upload_corpus", text, filename)
        return "file-123"

    def delete_corpus(self, file_id: str) -> None:
        self._record("delete_corpus", file_id)
        if self.fail_cleanup:
            raise RemoteJobError("corpus deletion failed")

    def create_job_definition(self) -> str:
        self._record("create_job_definition")
        return "asst-123"

    def delete_job_definition(self, job_id: str) -> None:
        self._record("delete_job_definition", job_id)
        if self.fail_cleanup:
            raise RemoteJobError("job deletion failed")

    def create_conversation(self) -> str:
        self._record("create_conversation")
        return "thread-123"

    def attach_message(self, conversation_id: str, content: str, file_id: str) -> None:
        self._record("attach_message", conversation_id, content, file_id)

    def start_run(self, conversation_id: str, job_id: str) -> str:
        self._record("start_run", conversation_id, job_id)
        return "run-123"

    def get_run_status(self, conversation_id: str, run_id: str) -> str:
        self._record("get_run_status", conversation_id, run_id)
        if len(self._statuses) > 1:
            return self._statuses.pop(0)
        return self._statuses[0]

    def cancel_run(self, conversation_id: str, run_id: str) -> None:
        self._record("cancel_run", conversation_id, run_id)

    def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        self._record("list_messages", conversation_id)
        if self.messages is not None:
            return self.messages
        return [
            ConversationMessage(role="assistant", text=self.reply),
            ConversationMessage(role="user", text="task"),
        ]


class FakeClock:
    """Monotonic clock advanced only by sleep()."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_pdf(pages: list[str]) -> bytes:
    """Build a PDF with one line of text per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def mcq_element(index: int) -> dict[str, Any]:
    """Raw generator element for an mcq item."""
    return {
        "stem": f"Which statement about topic {index} is correct?",
        "type": "mcq",
        "options": [f"Option {index}a", f"Option {index}b", f"Option {index}c", f"Option {index}d"],
        "answer": "B",
        "ref": f"p. {index}",
    }


@pytest.fixture
def sample_options() -> GenerationOptions:
    """Create sample GenerationOptions for testing."""
    return GenerationOptions(
        num_questions=3,
        question_types=[QuestionType.MCQ],
        difficulty="easy",
    )


@pytest.fixture
def mixed_options() -> GenerationOptions:
    """Options selecting every question type."""
    return GenerationOptions(
        num_questions=6,
        question_types=[
            QuestionType.MCQ,
            QuestionType.TRUE_FALSE,
            QuestionType.SHORT_ANSWER,
        ],
        difficulty="hard",
    )


@pytest.fixture
def sample_items() -> list[QuizItem]:
    """Create one item of each type."""
    return [
        QuizItem(
            stem="Which organelle produces most of a cell's ATP?",
            type=QuestionType.MCQ,
            options=["Nucleus", "Mitochondrion", "Ribosome", "Golgi body"],
            answer="B",
            ref="p. 4",
        ),
        QuizItem(
            stem="Plant cells have a cell wall.",
            type=QuestionType.TRUE_FALSE,
            answer="True",
            ref="p. 2",
        ),
        QuizItem(
            stem="Describe the role of chlorophyll in photosynthesis.",
            type=QuestionType.SHORT_ANSWER,
            answer="Chlorophyll absorbs light energy used to convert carbon dioxide and water into glucose.",
            ref="Section 3",
        ),
    ]


@pytest.fixture
def sample_item_set(sample_items: list[QuizItem]) -> QuizItemSet:
    """Wrap the sample items in a QuizItemSet."""
    return QuizItemSet(questions=sample_items)


@pytest.fixture
def three_mcq_reply() -> str:
    """Fenced generator reply holding three mcq items."""
    body = json.dumps({"questions": [mcq_element(i) for i in range(1, 4)]})
    return f"```json\n{body}\n```"


@pytest.fixture
def sample_pdf() -> bytes:
    """A three-page PDF with distinct text on each page."""
    return make_pdf(
        [
            "Cells are the basic unit of life.",
            "Mitochondria produce ATP through respiration.",
            "Chloroplasts carry out photosynthesis in plants.",
        ]
    )


@pytest.fixture
def fake_service(three_mcq_reply: str) -> FakeGenerationService:
    """Service whose run completes after two polls with three mcq items."""
    return FakeGenerationService(reply=three_mcq_reply)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock for driving the poll loop without real waiting."""
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fast polling and no API key."""
    return Settings(
        openai_api_key=None,
        poll_interval_seconds=0.1,
        run_timeout_seconds=5.0,
    )
