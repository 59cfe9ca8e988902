"""
Composition of the natural-language generation request.

Everything here is pure: the same inputs always produce the same prompt.
"""

from typing import List, Sequence

from mailer_gen.models import ImageDescription, StructuredDataArtifact
from mailer_gen.pipeline.prompts import (
    DESIGN_REFERENCE_REQUIREMENTS,
    GENERIC_LAYOUT_REQUIREMENTS,
    OUTPUT_FORMAT,
    STRUCTURED_DATA_REQUIREMENTS,
)

STRUCTURED_DATA_BUDGET = 6000
# A closing bracket is only an acceptable cut point past this share of the budget
MIN_CLOSER_RATIO = 0.7
STRUCTURAL_CLOSERS = ("}", "]")


def truncate_structured_text(text: str, budget: int = STRUCTURED_DATA_BUDGET) -> str:
    """
    Bound serialized structured data to the character budget.

    Text within the budget is returned unchanged. Longer text is cut at the
    last closing bracket inside the budget when that bracket lies past 70% of
    the budget, and at exactly the budget otherwise.

    Args:
        text: Serialized structured data.
        budget: Maximum number of characters to keep.

    Returns:
        Possibly truncated text.
    """
    if len(text) <= budget:
        return text

    head = text[:budget]
    last_closer = max(head.rfind(closer) for closer in STRUCTURAL_CLOSERS)
    if last_closer > budget * MIN_CLOSER_RATIO:
        return text[:last_closer + 1]
    return head


def _numbered(items: Sequence[str], start: int = 1) -> List[str]:
    return [f"{number}. {item}" for number, item in enumerate(items, start=start)]


def compose_prompt(
    user_text: str,
    structured_artifacts: Sequence[StructuredDataArtifact],
    image_descriptions: Sequence[ImageDescription],
    budget: int = STRUCTURED_DATA_BUDGET,
) -> str:
    """
    Build the composite prompt from user intent, data files and design descriptions.

    Args:
        user_text: Free-text user request (may be empty).
        structured_artifacts: Structured-data artifacts, in upload order.
        image_descriptions: Design descriptions, in upload order.
        budget: Per-artifact character budget for structured data.

    Returns:
        Composite prompt text.
    """
    sections: List[str] = []

    user_text = (user_text or "").strip()
    if user_text:
        sections.append(f"User Request: {user_text}\n\n")

    if structured_artifacts:
        sections.append("=== JSON DATA TO DISPLAY ===\n\n")
        for artifact in structured_artifacts:
            sections.append(f"{truncate_structured_text(artifact.serialized_full, budget)}\n\n")

    if image_descriptions:
        sections.append("=== DESIGN REFERENCE (RECREATE EXACTLY) ===\n\n")
        for description in image_descriptions:
            sections.append(
                f"DESIGN SPECIFICATION ({description.source_file_name}):\n"
                f"{description.descriptive_text}\n\n"
            )

    sections.append("\n=== CRITICAL INSTRUCTIONS ===\n\n")

    if image_descriptions:
        task = "YOUR TASK: Recreate the design from the analysis EXACTLY as described."
        requirements = list(DESIGN_REFERENCE_REQUIREMENTS)
    else:
        task = "YOUR TASK: Create a professional HTML page displaying the JSON data."
        requirements = list(GENERIC_LAYOUT_REQUIREMENTS)

    if structured_artifacts:
        requirements.extend(STRUCTURED_DATA_REQUIREMENTS)

    sections.append(f"{task}\n\nREQUIREMENTS:\n")
    sections.append("\n".join(_numbered(requirements)) + "\n")
    sections.append(f"\n{OUTPUT_FORMAT}")

    return "".join(sections)


class PromptComposer:
    """Object wrapper around compose_prompt with a fixed per-artifact budget."""

    def __init__(self, budget: int = STRUCTURED_DATA_BUDGET):
        self.budget = budget

    def compose(
        self,
        user_text: str,
        structured_artifacts: Sequence[StructuredDataArtifact],
        image_descriptions: Sequence[ImageDescription],
    ) -> str:
        return compose_prompt(user_text, structured_artifacts, image_descriptions, self.budget)
