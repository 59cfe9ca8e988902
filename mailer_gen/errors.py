"""
Error taxonomy for ingestion, session commands and remote generation.

Ingestion errors are reported per file. Generation errors are converted by the
orchestrator into a single human-readable chat message each and are never
retried automatically.
"""

from typing import Optional

import anthropic
import httpx
import openai


class MailerGenError(Exception):
    """Base class for all pipeline errors."""

    code = "error"
    default_message = "Error generating HTML. Please try with smaller files or contact support."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def user_message(self) -> str:
        """Message shown in the chat transcript."""
        return self.message


class ConfigurationError(MailerGenError):
    code = "configuration"
    default_message = "Error: API key not configured."


class ValidationError(MailerGenError):
    code = "validation"
    default_message = "Please enter a valid message or upload a file."


class SessionBusyError(ValidationError):
    code = "busy"
    default_message = "A generation is already in progress. Please wait for it to finish."


class ArtifactError(MailerGenError):
    """Failure to ingest one uploaded file."""

    code = "artifact"

    def __init__(self, file_name: str, message: str):
        super().__init__(f"Error reading file {file_name}: {message}")
        self.file_name = file_name
        self.reason = message


class DecodeError(ArtifactError):
    code = "decode"


class SizeLimitError(ArtifactError):
    code = "size_limit"

    def __init__(self, file_name: str, size_bytes: int, limit_bytes: int):
        super().__init__(
            file_name,
            f"{size_bytes:,} bytes exceeds the {limit_bytes // (1024 * 1024)}MB limit. "
            "Please use images smaller than 4MB.",
        )
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class ReadError(ArtifactError):
    code = "read"


class GenerationError(MailerGenError):
    """Generic remote generation failure."""

    code = "generation"


class RemoteAuthError(GenerationError):
    code = "auth"
    default_message = "Error: Invalid API key. Please check your API key."


class RemoteRateLimitError(GenerationError):
    code = "rate_limit"
    default_message = "Error: Rate limit exceeded. Please try again in a moment."


class RemoteBadRequestError(GenerationError):
    code = "bad_request"

    def __init__(self, upstream_message: Optional[str] = None):
        self.upstream_message = upstream_message or "Bad request"
        super().__init__(
            f"Error: {self.upstream_message}. Try with smaller files or simpler prompts."
        )


class RemotePayloadTooLargeError(GenerationError):
    code = "payload_too_large"
    default_message = (
        "Error: Files too large. Please use smaller JSON files (under 50KB) "
        "and images (under 2MB)."
    )


class RemoteServerError(GenerationError):
    code = "server"
    default_message = "Error: Server error. Please try again in a moment."


class NetworkUnavailableError(GenerationError):
    code = "network"
    default_message = "Error: No internet connection."


class UnexpectedResponseShapeError(GenerationError):
    code = "unexpected_response"
    default_message = "Sorry, I received an unexpected response format."


_NETWORK_ERRORS = (
    ConnectionError,
    httpx.TransportError,
    openai.APIConnectionError,
    anthropic.APIConnectionError,
)


def _status_code(exc: BaseException) -> Optional[int]:
    """Best-effort HTTP status extraction across provider SDKs."""
    for candidate in (
        getattr(exc, "status_code", None),
        getattr(exc, "code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    ):
        if isinstance(candidate, int):
            return candidate
    # LangChain integrations sometimes wrap the SDK error
    if exc.__cause__ is not None and exc.__cause__ is not exc:
        return _status_code(exc.__cause__)
    return None


def _upstream_message(exc: BaseException) -> str:
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    message = getattr(exc, "message", None)
    if message:
        return str(message)
    return str(exc) or "Bad request"


def translate_remote_error(exc: BaseException) -> MailerGenError:
    """
    Map a provider exception onto the generation error taxonomy.

    Args:
        exc: Exception raised while talking to the remote service.

    Returns:
        The matching MailerGenError (exc itself if it already is one).
    """
    if isinstance(exc, MailerGenError):
        return exc

    status = _status_code(exc)
    if status in (401, 403):
        return RemoteAuthError()
    if status == 429:
        return RemoteRateLimitError()
    if status == 400:
        return RemoteBadRequestError(_upstream_message(exc))
    if status == 413:
        return RemotePayloadTooLargeError()
    if status is not None and status >= 500:
        return RemoteServerError()
    if isinstance(exc, _NETWORK_ERRORS):
        return NetworkUnavailableError()
    return GenerationError()
