"""
Tests for artifact normalization and document export.
"""

import base64
import json
from io import BytesIO

import pytest
from PIL import Image

from mailer_gen.errors import DecodeError, ReadError, SizeLimitError
from mailer_gen.io.artifact_loader import (
    MAX_IMAGE_BYTES,
    ArtifactNormalizer,
    DocumentExporter,
)
from mailer_gen.models import ArtifactKind, ImageArtifact, StructuredDataArtifact


def test_load_structured_data(normalizer, sample_json):
    artifact = normalizer.load_file(sample_json)

    assert isinstance(artifact, StructuredDataArtifact)
    assert artifact.name == "data.json"
    assert artifact.parsed_value["title"] == "Weekly digest"
    assert artifact.serialized_full == json.dumps(artifact.parsed_value, indent=2)


def test_structured_preview_is_prefix_of_full(normalizer):
    data = json.dumps({"rows": [{"id": i, "label": f"row {i}"} for i in range(50)]}).encode()

    artifact = normalizer.normalize(data, "rows.json")

    assert len(artifact.serialized_full) > 300
    assert artifact.serialized_preview == artifact.serialized_full[:300] + "..."


def test_malformed_json_keeps_parser_message(normalizer):
    with pytest.raises(DecodeError) as exc_info:
        normalizer.normalize(b'{"title": ', "broken.json", kind=ArtifactKind.STRUCTURED_DATA)

    assert exc_info.value.file_name == "broken.json"
    assert "Expecting value" in str(exc_info.value)


def test_load_image(normalizer, sample_png):
    artifact = normalizer.load_file(sample_png)

    assert isinstance(artifact, ImageArtifact)
    assert artifact.mime_type == "image/png"
    assert artifact.preview_data_uri.startswith("data:image/png;base64,")

    decoded = base64.b64decode(artifact.encoded_bytes)
    assert Image.open(BytesIO(decoded)).size == (600, 400)


def test_image_mime_type_is_sniffed_when_unknown(normalizer):
    buffer = BytesIO()
    Image.new("RGB", (10, 10)).save(buffer, format="JPEG")

    artifact = normalizer.normalize(buffer.getvalue(), "upload", kind=ArtifactKind.IMAGE)

    assert artifact.mime_type == "image/jpeg"


def test_declared_mime_type_is_kept(normalizer):
    artifact = normalizer.normalize(b"\x00" * 16, "shot", kind="image", mime_type="image/webp")

    assert artifact.mime_type == "image/webp"


def test_image_at_size_bound_is_accepted(normalizer):
    artifact = normalizer.normalize(b"\x00" * MAX_IMAGE_BYTES, "big.png", mime_type="image/png")

    assert artifact.size_bytes == MAX_IMAGE_BYTES


def test_image_over_size_bound_is_rejected(normalizer):
    with pytest.raises(SizeLimitError) as exc_info:
        normalizer.normalize(b"\x00" * (MAX_IMAGE_BYTES + 1), "huge.png", mime_type="image/png")

    assert exc_info.value.size_bytes == MAX_IMAGE_BYTES + 1


def test_oversized_file_is_rejected_before_reading(tmp_path, monkeypatch):
    path = tmp_path / "huge.png"
    path.write_bytes(b"\x00" * (MAX_IMAGE_BYTES + 1))

    def fail_read(self):
        raise AssertionError("file should not be read")

    monkeypatch.setattr(type(path), "read_bytes", fail_read)

    with pytest.raises(SizeLimitError):
        ArtifactNormalizer().load_file(path)


def test_missing_file_raises_read_error(normalizer, tmp_path):
    with pytest.raises(ReadError):
        normalizer.load_file(tmp_path / "missing.json")


def test_unsupported_file_type(normalizer):
    with pytest.raises(DecodeError):
        normalizer.normalize(b"hello", "notes.txt")


def test_document_exporter_saves_html(tmp_path):
    exporter = DocumentExporter(tmp_path / "out")

    path = exporter.save("<html></html>")

    assert path.name.startswith("generated-page-")
    assert path.suffix == ".html"
    assert path.read_text(encoding="utf-8") == "<html></html>"


def test_document_exporter_requires_content(tmp_path):
    with pytest.raises(ValueError):
        DocumentExporter(tmp_path).save("")
