"""
Tests for data models.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from mailer_gen.models import (
    GENERATION_SAMPLING,
    Artifact,
    ConversationEntry,
    ImageArtifact,
    Role,
    StructuredDataArtifact,
    VISION_SAMPLING,
    partition_artifacts,
)


def _structured(name="data.json"):
    return StructuredDataArtifact(
        name=name,
        parsed_value={"a": 1},
        serialized_full='{\n  "a": 1\n}',
        serialized_preview='{\n  "a": 1\n}...',
    )


def _image(name="shot.png"):
    return ImageArtifact(
        name=name,
        mime_type="image/png",
        encoded_bytes="AAAA",
        size_bytes=3,
        preview_data_uri="data:image/png;base64,AAAA",
    )


def test_artifact_ids_are_unique():
    assert _structured().id != _structured().id


def test_image_artifact_is_immutable():
    image = _image()
    with pytest.raises(ValidationError):
        image.encoded_bytes = "BBBB"


def test_artifact_union_discriminates_on_kind():
    adapter = TypeAdapter(Artifact)

    parsed = adapter.validate_python(_image().model_dump())

    assert isinstance(parsed, ImageArtifact)


def test_partition_artifacts_preserves_order():
    first, second = _structured("a.json"), _structured("b.json")
    image = _image()

    structured, images = partition_artifacts([first, image, second])

    assert [a.name for a in structured] == ["a.json", "b.json"]
    assert images == [image]


def test_partition_artifacts_rejects_unknown_variant():
    with pytest.raises(TypeError):
        partition_artifacts([object()])


def test_conversation_entry_keeps_attachments():
    entry = ConversationEntry(role=Role.USER, text="hi", attached_artifacts=[_image()])

    assert entry.attached_artifacts[0].kind == "image"
    assert entry.timestamp is not None


def test_sampling_profiles():
    assert VISION_SAMPLING.temperature == 0.7
    assert VISION_SAMPLING.max_output_tokens == 2048
    assert GENERATION_SAMPLING.temperature == 0.3
    assert GENERATION_SAMPLING.top_p == 1.0
    assert GENERATION_SAMPLING.max_output_tokens == 8192
