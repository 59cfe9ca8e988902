"""
State for one orchestration run through the LangGraph pipeline.
"""

from typing import List, Optional, TypedDict

from mailer_gen.models import ImageArtifact, ImageDescription, StructuredDataArtifact


class GenerationRunState(TypedDict, total=False):
    """
    State carried between pipeline stages of a single generation run.

    All fields are optional (total=False) so each stage returns only the keys
    it updates.
    """

    run_id: str

    # Inputs, already partitioned and in upload order
    user_text: str
    structured_artifacts: List[StructuredDataArtifact]
    image_artifacts: List[ImageArtifact]

    # Filled stage by stage
    image_descriptions: List[ImageDescription]
    prompt: Optional[str]
    raw_response: Optional[str]
    cleaned_response: Optional[str]
    is_document: bool
