"""
Utilities for loading uploaded files into typed artifacts and saving documents.
"""

import base64
import json
import logging
import mimetypes
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from mailer_gen.errors import DecodeError, ReadError, SizeLimitError
from mailer_gen.models import (
    Artifact,
    ArtifactKind,
    ImageArtifact,
    StructuredDataArtifact,
)

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 4 * 1024 * 1024
PREVIEW_CHARS = 300
PREVIEW_SUFFIX = "..."


class ArtifactNormalizer:
    """Reads raw uploaded bytes into structured-data or image artifacts."""

    def __init__(self, max_image_bytes: int = MAX_IMAGE_BYTES):
        """
        Initialize the normalizer.

        Args:
            max_image_bytes: Largest accepted image source, in bytes.
        """
        self.max_image_bytes = max_image_bytes

    def infer_kind(self, name: str, mime_type: Optional[str] = None) -> ArtifactKind:
        """
        Infer the artifact kind from a MIME type or file name.

        Raises:
            DecodeError: If the file is neither JSON nor an image.
        """
        mime_type = mime_type or mimetypes.guess_type(name)[0] or ""
        if mime_type == "application/json" or name.lower().endswith(".json"):
            return ArtifactKind.STRUCTURED_DATA
        if mime_type.startswith("image/"):
            return ArtifactKind.IMAGE
        raise DecodeError(name, "Unsupported file type. Upload a JSON file or an image.")

    def normalize(
        self,
        data: bytes,
        name: str,
        kind: Optional[ArtifactKind] = None,
        mime_type: Optional[str] = None,
    ) -> Artifact:
        """
        Normalize raw file bytes into an artifact.

        Args:
            data: Raw file content.
            name: Original file name.
            kind: Declared artifact kind (inferred from the name if omitted).
            mime_type: Declared MIME type, used for images.

        Returns:
            StructuredDataArtifact or ImageArtifact.
        """
        kind = ArtifactKind(kind) if kind else self.infer_kind(name, mime_type)
        if kind == ArtifactKind.STRUCTURED_DATA:
            return self.load_structured_data(data, name)
        if kind == ArtifactKind.IMAGE:
            return self.load_image(data, name, mime_type)
        raise ValueError(f"Unknown artifact kind: {kind}")

    def load_file(
        self,
        path: Union[str, Path],
        kind: Optional[ArtifactKind] = None,
        mime_type: Optional[str] = None,
    ) -> Artifact:
        """
        Load an artifact from disk.

        Image size is checked against the bound before the file is read.

        Raises:
            ReadError: If the file cannot be read.
            SizeLimitError: If an image exceeds the size bound.
            DecodeError: If the content cannot be decoded.
        """
        path = Path(path)
        kind = ArtifactKind(kind) if kind else self.infer_kind(path.name, mime_type)

        try:
            if kind == ArtifactKind.IMAGE:
                size = path.stat().st_size
                if size > self.max_image_bytes:
                    raise SizeLimitError(path.name, size, self.max_image_bytes)
            data = path.read_bytes()
        except OSError as e:
            raise ReadError(path.name, e.strerror or str(e)) from e

        return self.normalize(data, path.name, kind=kind, mime_type=mime_type)

    def load_structured_data(self, data: bytes, name: str) -> StructuredDataArtifact:
        """
        Parse JSON bytes into a structured-data artifact.

        Raises:
            DecodeError: With the parser's message if the JSON is malformed.
        """
        try:
            parsed = json.loads(data.decode("utf-8-sig"))
        except UnicodeDecodeError as e:
            raise DecodeError(name, f"Invalid JSON file: {e.reason}") from e
        except json.JSONDecodeError as e:
            raise DecodeError(name, f"Invalid JSON file: {e}") from e

        serialized = json.dumps(parsed, indent=2, ensure_ascii=False)
        artifact = StructuredDataArtifact(
            name=name,
            parsed_value=parsed,
            serialized_full=serialized,
            serialized_preview=serialized[:PREVIEW_CHARS] + PREVIEW_SUFFIX,
        )
        logger.info("JSON file read successfully: %s (%d chars)", name, len(serialized))
        return artifact

    def load_image(
        self,
        data: bytes,
        name: str,
        mime_type: Optional[str] = None,
    ) -> ImageArtifact:
        """
        Encode image bytes into an image artifact.

        Raises:
            SizeLimitError: If the image exceeds the size bound.
            DecodeError: If no image MIME type can be determined.
        """
        if len(data) > self.max_image_bytes:
            raise SizeLimitError(name, len(data), self.max_image_bytes)

        mime_type = mime_type or mimetypes.guess_type(name)[0] or self.sniff_mime_type(data)
        if not mime_type or not mime_type.startswith("image/"):
            raise DecodeError(name, "Failed to read image: unknown image format")

        encoded = self.bytes_to_base64(data)
        logger.info("Image file read successfully: %s (%s, %d bytes)", name, mime_type, len(data))
        return ImageArtifact(
            name=name,
            mime_type=mime_type,
            encoded_bytes=encoded,
            size_bytes=len(data),
            preview_data_uri=f"data:{mime_type};base64,{encoded}",
        )

    def sniff_mime_type(self, data: bytes) -> Optional[str]:
        """Detect an image MIME type from content with Pillow."""
        try:
            with Image.open(BytesIO(data)) as image:
                return Image.MIME.get(image.format)
        except (UnidentifiedImageError, OSError):
            return None

    def bytes_to_base64(self, data: bytes) -> str:
        """
        Convert raw bytes to a base64 string.

        Args:
            data: Raw bytes.

        Returns:
            Base64-encoded string.
        """
        return base64.b64encode(data).decode("utf-8")


class DocumentExporter:
    """Writes generated documents to disk as downloadable HTML files."""

    def __init__(self, output_dir: Union[str, Path] = "outputs"):
        """
        Initialize the exporter.

        Args:
            output_dir: Directory for saved documents.
        """
        self.output_dir = Path(output_dir)

    def save(self, html_content: str, filename: Optional[str] = None) -> Path:
        """
        Save a document to the output directory.

        Args:
            html_content: Document text to save.
            filename: Output filename (default: generated-page-<timestamp>.html).

        Returns:
            Path to saved HTML file.
        """
        if not html_content:
            raise ValueError("No document to save")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        if filename is None:
            filename = f"generated-page-{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.html"
        html_path = self.output_dir / filename
        html_path.write_text(html_content, encoding="utf-8")
        return html_path
