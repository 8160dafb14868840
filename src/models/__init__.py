"""Data models for quiz generation."""

from .quiz import (
    OPTION_LETTERS,
    ConversationMessage,
    ExportRequest,
    GenerationOptions,
    JobRunState,
    QuestionDifficulty,
    QuestionType,
    QuizItem,
    QuizItemSet,
    RemoteJobHandle,
)

__all__ = [
    "OPTION_LETTERS",
    "QuestionType",
    "QuestionDifficulty",
    "GenerationOptions",
    "QuizItem",
    "QuizItemSet",
    "ExportRequest",
    "JobRunState",
    "RemoteJobHandle",
    "ConversationMessage",
]
