"""
Design analysis of reference screenshots.
"""

import logging

from mailer_gen.models import VISION_SAMPLING, ImageArtifact, ImageDescription
from mailer_gen.pipeline.llm import InlineDataPart, RemoteGenerator, TextPart
from mailer_gen.pipeline.prompts import VISION_INSTRUCTION

logger = logging.getLogger(__name__)

DEGRADED_DESCRIPTION_PREFIX = "Could not analyze image:"


class VisionDescriber:
    """Turns one image artifact into a detailed textual design description."""

    def __init__(self, remote: RemoteGenerator):
        self.remote = remote

    async def describe(
        self,
        image: ImageArtifact,
        instruction_prompt: str = VISION_INSTRUCTION,
    ) -> ImageDescription:
        """
        Describe an image with a single remote call.

        A failed call does not raise; the error is recorded as a degraded
        description so the rest of the run can proceed.

        Args:
            image: Image to analyze.
            instruction_prompt: Analysis instructions sent with the image.

        Returns:
            ImageDescription for the image.
        """
        parts = [
            TextPart(text=instruction_prompt),
            InlineDataPart(mime_type=image.mime_type, data=image.encoded_bytes),
        ]
        try:
            text = await self.remote.generate(parts, VISION_SAMPLING, component="vision")
        except Exception as e:
            logger.warning("Error analyzing %s: %s", image.name, e)
            return ImageDescription(
                source_file_name=image.name,
                descriptive_text=f"{DEGRADED_DESCRIPTION_PREFIX} {e}",
                degraded=True,
            )

        logger.info("Image %s analyzed in detail (%d chars)", image.name, len(text))
        return ImageDescription(source_file_name=image.name, descriptive_text=text)
