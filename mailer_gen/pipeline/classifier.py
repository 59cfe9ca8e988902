"""
Cleaning and classification of generation responses.
"""

import re

DOCUMENT_PREFIXES = ("<!doctype html", "<html")

_FENCE_OPEN_PATTERN = re.compile(r"```html\n?", re.IGNORECASE)
_FENCE_PATTERN = re.compile(r"```\n?")
_IMG_TAG_PATTERN = re.compile(r"<img[^>]*>", re.IGNORECASE)


class ResponseParser:
    """Sanitizes and classifies raw LLM responses."""

    @staticmethod
    def strip_code_fences(response_text: str) -> str:
        """
        Remove markdown code fence markers wherever they appear.

        Args:
            response_text: Raw LLM response.

        Returns:
            Response without fence markers.
        """
        without_lang = _FENCE_OPEN_PATTERN.sub("", response_text)
        return _FENCE_PATTERN.sub("", without_lang)

    @staticmethod
    def remove_image_tags(html_content: str) -> str:
        """Drop every <img> tag, even if the model ignored the no-image instruction."""
        return _IMG_TAG_PATTERN.sub("", html_content)

    @classmethod
    def clean(cls, response_text: str) -> str:
        """
        Strip fences, trim surrounding whitespace and remove image tags.

        Args:
            response_text: Raw LLM response.

        Returns:
            Cleaned response text.
        """
        cleaned = cls.strip_code_fences(response_text).strip()
        return cls.remove_image_tags(cleaned)

    @staticmethod
    def is_document(text: str) -> bool:
        """
        Whether the text is a complete HTML document.

        Only the prefix is checked; malformed markup that starts like a
        document still counts as one.
        """
        return text.strip().lower().startswith(DOCUMENT_PREFIXES)


def clean_response(response_text: str) -> str:
    return ResponseParser.clean(response_text)


def is_document(text: str) -> bool:
    return ResponseParser.is_document(text)
