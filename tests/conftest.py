"""
Shared fixtures: sample uploads and an in-memory remote generation stub.
"""

import json
from typing import List, Optional

import pytest
from PIL import Image

from mailer_gen.io.artifact_loader import ArtifactNormalizer

HTML_DOCUMENT = "<!DOCTYPE html>\n<html><head><style>.c{max-width:600px}</style></head><body>Hi</body></html>"


class StubRemote:
    """Records every call and answers vision and generation calls from canned values."""

    def __init__(
        self,
        response: str = HTML_DOCUMENT,
        vision_responses: Optional[List[str]] = None,
        vision_error: Optional[Exception] = None,
        generation_error: Optional[Exception] = None,
    ):
        self.response = response
        self.vision_responses = list(vision_responses or [])
        self.vision_error = vision_error
        self.generation_error = generation_error
        self.calls = []

    @property
    def vision_calls(self):
        return [c for c in self.calls if c["component"] == "vision"]

    @property
    def generation_calls(self):
        return [c for c in self.calls if c["component"] == "generator"]

    async def generate(self, parts, sampling, system_instruction=None, component="generator"):
        self.calls.append({
            "parts": list(parts),
            "sampling": sampling,
            "system_instruction": system_instruction,
            "component": component,
        })
        if component == "vision":
            if self.vision_error is not None:
                raise self.vision_error
            if self.vision_responses:
                return self.vision_responses.pop(0)
            return f"analysis {len(self.vision_calls)}"
        if self.generation_error is not None:
            raise self.generation_error
        return self.response


@pytest.fixture
def stub_remote():
    return StubRemote()


@pytest.fixture
def normalizer():
    return ArtifactNormalizer()


@pytest.fixture
def sample_png(tmp_path):
    """A small real PNG screenshot."""
    path = tmp_path / "design.png"
    Image.new("RGB", (600, 400), color="#f4f4f4").save(path)
    return path


@pytest.fixture
def sample_json(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"title": "Weekly digest", "items": [{"name": "A"}, {"name": "B"}]}))
    return path


@pytest.fixture
def json_artifact(normalizer, sample_json):
    return normalizer.load_file(sample_json)


@pytest.fixture
def image_artifact(normalizer, sample_png):
    return normalizer.load_file(sample_png)
