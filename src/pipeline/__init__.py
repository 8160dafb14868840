"""Generation pipeline: request composition, remote job orchestration, parsing."""

from .composer import compose_task_spec
from .orchestrator import RemoteJobOrchestrator
from .parser import parse_quiz_items, serialize_quiz_items
from .service import GenerationService, OpenAIAssistantsService

__all__ = [
    "compose_task_spec",
    "RemoteJobOrchestrator",
    "parse_quiz_items",
    "serialize_quiz_items",
    "GenerationService",
    "OpenAIAssistantsService",
]
