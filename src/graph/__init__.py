"""LangGraph workflow and state management."""

# Note: Avoid importing workflow here to prevent circular imports
# Import directly from modules as needed:
# from src.graph.state import GenerationState, create_initial_state
# from src.graph.workflow import compile_workflow, generate_quiz

__all__ = [
    "GenerationState",
    "create_initial_state",
    "compile_workflow",
    "create_generation_workflow",
    "generate_quiz",
]
