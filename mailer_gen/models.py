"""
Data models and schemas for the HTML generation pipeline.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Process-unique identifier for artifacts and conversation entries."""
    return uuid.uuid4().hex


class ArtifactKind(str, Enum):
    """Kinds of uploaded files the pipeline understands."""
    STRUCTURED_DATA = "structured_data"
    IMAGE = "image"


class StructuredDataArtifact(BaseModel):
    """A parsed JSON upload with its canonical and preview serializations."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    kind: Literal["structured_data"] = "structured_data"
    parsed_value: Any = None
    serialized_full: str
    serialized_preview: str


class ImageArtifact(BaseModel):
    """A reference screenshot held in memory as base64 text."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    kind: Literal["image"] = "image"
    mime_type: str
    encoded_bytes: str
    size_bytes: int
    preview_data_uri: str


Artifact = Annotated[
    Union[StructuredDataArtifact, ImageArtifact],
    Field(discriminator="kind"),
]


def partition_artifacts(
    artifacts: List[Artifact],
) -> Tuple[List[StructuredDataArtifact], List[ImageArtifact]]:
    """
    Split artifacts into structured-data and image subsets, preserving order.

    Raises:
        TypeError: If an artifact is not one of the known variants.
    """
    structured: List[StructuredDataArtifact] = []
    images: List[ImageArtifact] = []
    for artifact in artifacts:
        if isinstance(artifact, StructuredDataArtifact):
            structured.append(artifact)
        elif isinstance(artifact, ImageArtifact):
            images.append(artifact)
        else:
            raise TypeError(f"Unknown artifact type: {type(artifact).__name__}")
    return structured, images


class Role(str, Enum):
    """Conversation participants."""
    USER = "user"
    ASSISTANT = "assistant"


class ConversationEntry(BaseModel):
    """One immutable chat transcript entry."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    role: Role
    text: str
    attached_artifacts: List[Artifact] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)


class ImageDescription(BaseModel):
    """Design description of one image, produced during a single run."""
    source_file_name: str
    descriptive_text: str
    degraded: bool = False


class GeneratedDocument(BaseModel):
    """Text returned by the generation service and its classification."""
    model_config = ConfigDict(frozen=True)

    raw_text: str
    is_document: bool


class OutcomeKind(str, Enum):
    """How an orchestration run ended."""
    DOCUMENT = "document"
    REPLY = "reply"
    GUIDANCE = "guidance"
    ERROR = "error"


class GenerationOutcome(BaseModel):
    """Result of one orchestration run. Errors are carried here, not raised."""
    kind: OutcomeKind
    text: str
    document: Optional[GeneratedDocument] = None
    error_code: Optional[str] = None
    metadata: dict = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.kind == OutcomeKind.ERROR


class ViewMode(str, Enum):
    """Viewer modes for the generated document."""
    PREVIEW = "preview"
    CODE = "code"


class SamplingConfig(BaseModel):
    """Sampling parameters for one remote call."""
    temperature: float
    max_output_tokens: int
    top_p: Optional[float] = None


# Sampling for image analysis and for document generation
VISION_SAMPLING = SamplingConfig(temperature=0.7, max_output_tokens=2048)
GENERATION_SAMPLING = SamplingConfig(temperature=0.3, max_output_tokens=8192, top_p=1.0)
