"""State carried through the generation workflow."""

from typing import TypedDict

from src.models.quiz import GenerationOptions, QuizItemSet


class GenerationState(TypedDict, total=False):
    """
    State shared by the workflow nodes.

    Inputs are set by `create_initial_state`; each node fills in the field
    it produces.
    """

    # Inputs
    document: bytes
    source_label: str
    options: GenerationOptions
    focus_hint: str

    # Produced by the nodes, in order
    corpus_text: str
    task_spec: str
    raw_output: str
    items: QuizItemSet


def create_initial_state(
    document: bytes,
    options: GenerationOptions,
    focus_hint: str = "",
    source_label: str = "document",
) -> GenerationState:
    """
    Create the initial workflow state for one request.

    Args:
        document: Raw bytes of the source document
        options: Generation options
        focus_hint: Optional subject area to prioritise
        source_label: Name of the source document

    Returns:
        GenerationState with inputs set and outputs unset
    """
    return GenerationState(
        document=document,
        source_label=source_label,
        options=options,
        focus_hint=focus_hint or "",
    )
