"""
LangChain-based adapter for the remote multi-modal generation service.

The pipeline talks to the service through the RemoteGenerator protocol: a list
of content parts (text and inline binary data), an optional system
instruction and a sampling configuration in, the first candidate's text out.
"""

from typing import Any, List, Optional, Protocol, Sequence, Union

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from mailer_gen.config import Settings
from mailer_gen.errors import UnexpectedResponseShapeError, translate_remote_error
from mailer_gen.models import SamplingConfig
from mailer_gen.utils.llm_logger import LoggedLLM


class TextPart(BaseModel):
    """Plain text content part."""
    text: str


class InlineDataPart(BaseModel):
    """Base64-encoded binary content part with its MIME type."""
    mime_type: str
    data: str


ContentPart = Union[TextPart, InlineDataPart]


class RemoteGenerator(Protocol):
    """Contract of the remote generation capability."""

    async def generate(
        self,
        parts: Sequence[ContentPart],
        sampling: SamplingConfig,
        system_instruction: Optional[str] = None,
        component: str = "generator",
    ) -> str:
        ...


def create_chat_model(
    settings: Settings,
    model_name: str,
    sampling: SamplingConfig,
) -> Any:
    """
    Create a LangChain chat model for the configured provider.

    Client retries are disabled: a failed call surfaces immediately.

    Args:
        settings: Provider and credential settings.
        model_name: Model to use.
        sampling: Temperature, nucleus sampling and output token budget.

    Returns:
        ChatGoogleGenerativeAI, ChatOpenAI or ChatAnthropic instance
    """
    api_key = settings.require_api_key()

    if settings.provider == "google":
        kwargs = {}
        if sampling.top_p is not None:
            kwargs["top_p"] = sampling.top_p
        return ChatGoogleGenerativeAI(
            model=model_name,
            temperature=sampling.temperature,
            max_output_tokens=sampling.max_output_tokens,
            google_api_key=api_key,
            max_retries=0,
            **kwargs,
        )
    elif settings.provider == "openai":
        kwargs = {}
        if sampling.top_p is not None:
            kwargs["top_p"] = sampling.top_p
        return ChatOpenAI(
            model=model_name,
            temperature=sampling.temperature,
            max_tokens=sampling.max_output_tokens,
            api_key=api_key,
            max_retries=0,
            **kwargs,
        )
    elif settings.provider == "anthropic":
        # Anthropic rejects temperature and top_p together on recent models
        return ChatAnthropic(
            model=model_name,
            temperature=sampling.temperature,
            max_tokens=sampling.max_output_tokens,
            api_key=api_key,
            max_retries=0,
        )
    else:
        raise ValueError(f"Unsupported provider: {settings.provider}")


def build_message_content(provider: str, parts: Sequence[ContentPart]) -> List[dict]:
    """
    Convert content parts into LangChain multi-modal message content.

    Args:
        provider: Provider name, which decides the image block format.
        parts: Text and inline data parts, in order.

    Returns:
        List of content blocks for a HumanMessage.
    """
    content = []
    for part in parts:
        if isinstance(part, TextPart):
            content.append({"type": "text", "text": part.text})
        elif isinstance(part, InlineDataPart):
            if provider == "anthropic":
                content.append({
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": part.mime_type,
                        "data": part.data,
                    },
                })
            else:
                content.append({
                    "type": "image_url",
                    "image_url": {"url": f"data:{part.mime_type};base64,{part.data}"},
                })
        else:
            raise TypeError(f"Unknown content part: {type(part).__name__}")
    return content


def extract_text(response: Any) -> str:
    """
    Extract the first candidate's text from a chat model response.

    Raises:
        UnexpectedResponseShapeError: If the response carries no text.
    """
    content = getattr(response, "content", None)
    if isinstance(content, str):
        text = content
    elif isinstance(content, list):
        text = "".join(
            block if isinstance(block, str) else block.get("text", "")
            for block in content
            if isinstance(block, (str, dict))
        )
    else:
        raise UnexpectedResponseShapeError()

    if not text.strip():
        raise UnexpectedResponseShapeError()
    return text


class LangChainGenerator:
    """RemoteGenerator backed by LangChain chat models."""

    def __init__(self, settings: Settings, run_id: Optional[str] = None):
        """
        Initialize the generator.

        Args:
            settings: Provider, model and credential settings.
            run_id: Optional run ID attached to LLM call logs.
        """
        self.settings = settings
        self.run_id = run_id

    def _model_for(self, component: str) -> str:
        if component == "vision":
            return self.settings.resolved_vision_model
        return self.settings.resolved_generation_model

    async def generate(
        self,
        parts: Sequence[ContentPart],
        sampling: SamplingConfig,
        system_instruction: Optional[str] = None,
        component: str = "generator",
    ) -> str:
        """
        Send one request to the remote service.

        Args:
            parts: Content parts of the user turn.
            sampling: Sampling configuration for this call.
            system_instruction: Optional system instruction.
            component: Component name for logging and model selection.

        Returns:
            Text of the first candidate.

        Raises:
            GenerationError: Translated provider failure.
        """
        model_name = self._model_for(component)
        llm = LoggedLLM(
            llm_instance=create_chat_model(self.settings, model_name, sampling),
            component=component,
            provider=self.settings.provider,
            model=model_name,
            run_id=self.run_id,
        )

        messages = []
        if system_instruction:
            messages.append(SystemMessage(content=system_instruction))
        messages.append(HumanMessage(content=build_message_content(self.settings.provider, parts)))

        try:
            response = await llm.ainvoke(messages)
        except Exception as e:
            raise translate_remote_error(e) from e

        return extract_text(response)
