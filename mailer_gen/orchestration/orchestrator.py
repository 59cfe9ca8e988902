"""
Generation orchestrator: validates a submission, runs the staged pipeline and
converts every failure into a user-facing outcome.
"""

import logging
from typing import List, Optional, Sequence

from mailer_gen.config import Settings
from mailer_gen.errors import MailerGenError, translate_remote_error
from mailer_gen.models import (
    Artifact,
    GeneratedDocument,
    GenerationOutcome,
    OutcomeKind,
    new_id,
    partition_artifacts,
)
from mailer_gen.orchestration.graph import create_generation_graph, run_config
from mailer_gen.orchestration.state import GenerationRunState
from mailer_gen.pipeline.composer import PromptComposer
from mailer_gen.pipeline.llm import LangChainGenerator, RemoteGenerator
from mailer_gen.pipeline.prompts import EMPTY_INPUT_GUIDANCE

logger = logging.getLogger(__name__)


class GenerationOrchestrator:
    """Sequences vision calls, prompt composition and the generation call."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        remote: Optional[RemoteGenerator] = None,
        composer: Optional[PromptComposer] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Provider settings (read from the environment if omitted).
            remote: Remote generation capability. When omitted, a
                LangChainGenerator is created per run after the credential
                check.
            composer: Prompt composer (default budget if omitted).
        """
        self._settings = settings
        self.remote = remote
        self.composer = composer or PromptComposer()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings.from_env()
        return self._settings

    def _remote_for_run(self, run_id: str) -> RemoteGenerator:
        if self.remote is not None:
            return self.remote
        self.settings.require_api_key()
        return LangChainGenerator(self.settings, run_id=run_id)

    async def generate(
        self,
        user_text: str,
        artifacts: Sequence[Artifact],
    ) -> GenerationOutcome:
        """
        Run one generation.

        Never raises for remote or configuration failures; they come back as
        an ERROR outcome with a human-readable message.

        Args:
            user_text: Effective prompt text.
            artifacts: Artifacts submitted with the prompt, in upload order.

        Returns:
            GenerationOutcome describing a document, a conversational reply,
            guidance for empty input, or an error.
        """
        structured, images = partition_artifacts(list(artifacts))
        user_text = (user_text or "").strip()

        if not user_text and not structured and not images:
            return GenerationOutcome(kind=OutcomeKind.GUIDANCE, text=EMPTY_INPUT_GUIDANCE)

        run_id = new_id()
        logger.info(
            "Processing request %s: %d JSON file(s), %d image(s), prompt length %d",
            run_id, len(structured), len(images), len(user_text),
        )

        try:
            remote = self._remote_for_run(run_id)
            app = create_generation_graph(remote, self.composer)
            initial_state: GenerationRunState = {
                "run_id": run_id,
                "user_text": user_text,
                "structured_artifacts": structured,
                "image_artifacts": images,
                "image_descriptions": [],
                "prompt": None,
                "raw_response": None,
                "cleaned_response": None,
                "is_document": False,
            }
            result = await app.ainvoke(initial_state, config=run_config(len(images)))
        except MailerGenError as e:
            logger.error("Generation %s failed: %s", run_id, e)
            return self._error_outcome(e, run_id)
        except Exception as e:
            logger.exception("Generation %s failed unexpectedly", run_id)
            return self._error_outcome(translate_remote_error(e), run_id)

        return self._success_outcome(result, run_id)

    def _error_outcome(self, error: MailerGenError, run_id: str) -> GenerationOutcome:
        return GenerationOutcome(
            kind=OutcomeKind.ERROR,
            text=error.user_message,
            error_code=error.code,
            metadata={"run_id": run_id},
        )

    def _success_outcome(self, result: GenerationRunState, run_id: str) -> GenerationOutcome:
        text = result["cleaned_response"]
        descriptions = result.get("image_descriptions") or []
        metadata = {
            "run_id": run_id,
            "prompt_length": len(result.get("prompt") or ""),
            "degraded_images": [d.source_file_name for d in descriptions if d.degraded],
        }

        if result.get("is_document"):
            logger.info("Generation %s returned an HTML document (%d chars)", run_id, len(text))
            return GenerationOutcome(
                kind=OutcomeKind.DOCUMENT,
                text=text,
                document=GeneratedDocument(raw_text=text, is_document=True),
                metadata=metadata,
            )

        logger.info("Generation %s returned a conversational reply", run_id)
        return GenerationOutcome(
            kind=OutcomeKind.REPLY,
            text=text,
            document=GeneratedDocument(raw_text=text, is_document=False),
            metadata=metadata,
        )


def summarize_outcome(outcome: GenerationOutcome) -> List[str]:
    """Human-readable summary lines for an outcome."""
    lines = [f"Outcome: {outcome.kind.value}"]
    if outcome.error_code:
        lines.append(f"Error code: {outcome.error_code}")
    if outcome.metadata.get("run_id"):
        lines.append(f"Run ID: {outcome.metadata['run_id']}")
    if outcome.metadata.get("degraded_images"):
        lines.append(f"Images without analysis: {', '.join(outcome.metadata['degraded_images'])}")
    if outcome.document is not None:
        lines.append(f"Length: {len(outcome.document.raw_text)} chars")
    return lines
