"""LangGraph workflow definition for quiz generation."""

import logging
from typing import Any

from langgraph.graph import END, StateGraph

from src.config.settings import Settings, get_settings
from src.extraction.pdf_text import extract_text
from src.graph.state import GenerationState, create_initial_state
from src.models.quiz import GenerationOptions, QuizItemSet
from src.pipeline.composer import compose_task_spec
from src.pipeline.orchestrator import RemoteJobOrchestrator
from src.pipeline.parser import parse_quiz_items
from src.pipeline.service import GenerationService, OpenAIAssistantsService

logger = logging.getLogger(__name__)


def extract_corpus(state: GenerationState) -> dict[str, Any]:
    """Decode the source document into plain text."""
    return {"corpus_text": extract_text(state["document"])}


def compose_request(state: GenerationState) -> dict[str, Any]:
    """Build the task specification from the options and focus hint."""
    return {"task_spec": compose_task_spec(state["options"], state.get("focus_hint", ""))}


def parse_output(state: GenerationState) -> dict[str, Any]:
    """
    Parse the generator's reply into validated items.

    A count different from the one requested is tolerated: the generator is
    not bound to an exact number, so the mismatch is only logged.
    """
    items = parse_quiz_items(state["raw_output"])
    requested = state["options"].num_questions
    if len(items) != requested:
        logger.warning(
            "Requested %d questions but generator returned %d", requested, len(items)
        )
    return {"items": items}


def create_generation_workflow(orchestrator: RemoteJobOrchestrator) -> StateGraph:
    """
    Create the LangGraph workflow for quiz generation.

    The workflow is strictly linear:
    1. extract_corpus - PDF bytes to text
    2. compose_request - options to task specification
    3. run_remote_job - remote job lifecycle, with cleanup
    4. parse_output - reply to validated items

    Args:
        orchestrator: Orchestrator that runs the remote job

    Returns:
        Uncompiled StateGraph
    """

    def run_remote_job(state: GenerationState) -> dict[str, Any]:
        """Run the remote generation job and capture its raw reply."""
        raw_output = orchestrator.run(
            state["corpus_text"], state["task_spec"], state["source_label"]
        )
        return {"raw_output": raw_output}

    workflow = StateGraph(GenerationState)

    workflow.add_node("extract_corpus", extract_corpus)
    workflow.add_node("compose_request", compose_request)
    workflow.add_node("run_remote_job", run_remote_job)
    workflow.add_node("parse_output", parse_output)

    workflow.set_entry_point("extract_corpus")
    workflow.add_edge("extract_corpus", "compose_request")
    workflow.add_edge("compose_request", "run_remote_job")
    workflow.add_edge("run_remote_job", "parse_output")
    workflow.add_edge("parse_output", END)

    return workflow


def compile_workflow(orchestrator: RemoteJobOrchestrator):
    """
    Compile the workflow and return it ready for execution.

    Args:
        orchestrator: Orchestrator that runs the remote job

    Returns:
        Compiled workflow
    """
    return create_generation_workflow(orchestrator).compile()


def build_orchestrator(
    service: GenerationService | None = None, settings: Settings | None = None
) -> RemoteJobOrchestrator:
    """Create an orchestrator configured from settings."""
    settings = settings or get_settings()
    if service is None:
        service = OpenAIAssistantsService(settings=settings)
    return RemoteJobOrchestrator(
        service,
        poll_interval=settings.poll_interval_seconds,
        timeout=settings.run_timeout_seconds,
        delete_uploaded_files=settings.delete_uploaded_files,
    )


def generate_quiz(
    document: bytes,
    options: GenerationOptions,
    focus_hint: str = "",
    source_label: str = "document",
    service: GenerationService | None = None,
    settings: Settings | None = None,
) -> QuizItemSet:
    """
    Generate a quiz from a source document.

    Args:
        document: Raw bytes of the source PDF
        options: Generation options
        focus_hint: Optional subject area to prioritise
        source_label: Name of the source document
        service: Remote generation service (OpenAI by default)
        settings: Settings to use instead of the cached ones

    Returns:
        Validated QuizItemSet

    Raises:
        QuizGenerationError: Any pipeline failure, unchanged
    """
    workflow = compile_workflow(build_orchestrator(service, settings))
    state = create_initial_state(document, options, focus_hint, source_label)
    final_state = workflow.invoke(state)
    return final_state["items"]
