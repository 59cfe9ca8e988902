"""
LangGraph orchestration of a single HTML generation run.

A run describes each reference image in order, composes the prompt, issues
one generation call and classifies the cleaned response.
"""

from mailer_gen.orchestration.graph import create_generation_graph
from mailer_gen.orchestration.orchestrator import (
    GenerationOrchestrator,
    summarize_outcome,
)
from mailer_gen.orchestration.state import GenerationRunState

__all__ = [
    "create_generation_graph",
    "GenerationOrchestrator",
    "GenerationRunState",
    "summarize_outcome",
]
