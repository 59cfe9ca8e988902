"""
Session controller: turns user actions into session events and runs submissions.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from mailer_gen.errors import ArtifactError, SessionBusyError, ValidationError
from mailer_gen.io.artifact_loader import ArtifactNormalizer, DocumentExporter
from mailer_gen.models import (
    Artifact,
    ArtifactKind,
    ConversationEntry,
    GenerationOutcome,
    OutcomeKind,
    Role,
    ViewMode,
    partition_artifacts,
)
from mailer_gen.orchestration.orchestrator import GenerationOrchestrator
from mailer_gen.pipeline.prompts import (
    DEFAULT_DISPLAY_TEXT,
    DOCUMENT_GENERATED_MESSAGE,
    EMPTY_INPUT_GUIDANCE,
    START_COMMAND,
    START_COMMAND_DISPLAY,
    START_COMMAND_INSTRUCTION,
    START_REQUIRES_BOTH_MESSAGE,
    UNHANDLED_ERROR_MESSAGE,
)
from mailer_gen.session.state import (
    ArtifactRemoved,
    ArtifactStaged,
    DocumentEdited,
    EditsApplied,
    SessionCleared,
    SessionEvent,
    SessionState,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    ViewModeChanged,
    reduce_session,
)

logger = logging.getLogger(__name__)


def resolve_submission(text: str, pending_artifacts: Sequence[Artifact]) -> Tuple[str, str]:
    """
    Work out the effective prompt and the transcript text for a submission.

    The reserved "start" command (case-insensitive) requires a JSON file and
    an image to be staged and is replaced by the email-safe instruction; the
    transcript shows a generic placeholder instead.

    Args:
        text: Text typed by the user.
        pending_artifacts: Artifacts staged for this submission.

    Returns:
        Tuple of (effective_text, display_text).

    Raises:
        ValidationError: If "start" is used without both artifact kinds staged.
    """
    if text.strip().lower() == START_COMMAND:
        structured, images = partition_artifacts(list(pending_artifacts))
        if not structured or not images:
            raise ValidationError(START_REQUIRES_BOTH_MESSAGE)
        return START_COMMAND_INSTRUCTION, START_COMMAND_DISPLAY

    return text, text or DEFAULT_DISPLAY_TEXT


class SessionController:
    """Owns one SessionState and mutates it only through events."""

    def __init__(
        self,
        orchestrator: Optional[GenerationOrchestrator] = None,
        normalizer: Optional[ArtifactNormalizer] = None,
    ):
        self.orchestrator = orchestrator or GenerationOrchestrator()
        self.normalizer = normalizer or ArtifactNormalizer()
        self.state = SessionState()

    def dispatch(self, event: SessionEvent) -> SessionState:
        self.state = reduce_session(self.state, event)
        return self.state

    def stage_file(
        self,
        path: Union[str, Path],
        kind: Optional[ArtifactKind] = None,
    ) -> Artifact:
        """
        Load a file from disk and stage it for the next submission.

        Raises:
            ArtifactError: If the file cannot be ingested; nothing is staged.
        """
        artifact = self.normalizer.load_file(path, kind=kind)
        self.dispatch(ArtifactStaged(artifact=artifact))
        return artifact

    def stage_bytes(
        self,
        data: bytes,
        name: str,
        kind: Optional[ArtifactKind] = None,
        mime_type: Optional[str] = None,
    ) -> Artifact:
        """Normalize uploaded bytes and stage the artifact."""
        artifact = self.normalizer.normalize(data, name, kind=kind, mime_type=mime_type)
        self.dispatch(ArtifactStaged(artifact=artifact))
        return artifact

    def stage_files(
        self,
        paths: Sequence[Union[str, Path]],
    ) -> Tuple[List[Artifact], List[ArtifactError]]:
        """
        Stage several files, collecting per-file errors instead of stopping.

        Returns:
            Tuple of (staged artifacts, ingestion errors).
        """
        staged, errors = [], []
        for path in paths:
            try:
                staged.append(self.stage_file(path))
            except ArtifactError as e:
                logger.warning("Could not stage %s: %s", path, e)
                errors.append(e)
        return staged, errors

    def remove_artifact(self, artifact_id: str) -> SessionState:
        return self.dispatch(ArtifactRemoved(artifact_id=artifact_id))

    async def submit(self, text: str) -> GenerationOutcome:
        """
        Submit the typed text with all staged artifacts.

        Args:
            text: Text typed by the user.

        Returns:
            Outcome of the orchestration run.

        Raises:
            SessionBusyError: If a submission is already in flight.
            ValidationError: For empty input or an incomplete "start" command.
        """
        if self.state.busy:
            raise SessionBusyError()

        pending = list(self.state.pending_artifacts)
        if not text.strip() and not pending:
            raise ValidationError(EMPTY_INPUT_GUIDANCE)

        effective_text, display_text = resolve_submission(text, pending)

        self.dispatch(SubmissionStarted(entry=ConversationEntry(
            role=Role.USER,
            text=display_text,
            attached_artifacts=pending,
        )))

        try:
            outcome = await self.orchestrator.generate(effective_text, pending)
        except Exception:
            logger.exception("Submission failed")
            self.dispatch(SubmissionFailed(message=UNHANDLED_ERROR_MESSAGE))
            raise

        if outcome.kind == OutcomeKind.ERROR:
            self.dispatch(SubmissionFailed(message=outcome.text))
        elif outcome.kind == OutcomeKind.DOCUMENT:
            self.dispatch(SubmissionSucceeded(
                reply_text=DOCUMENT_GENERATED_MESSAGE,
                document=outcome.document,
            ))
        else:
            self.dispatch(SubmissionSucceeded(reply_text=outcome.text))
        return outcome

    def edit_document(self, text: str) -> SessionState:
        return self.dispatch(DocumentEdited(text=text))

    def apply_edits(self) -> SessionState:
        """Replace the current document with the edited text and show the preview."""
        return self.dispatch(EditsApplied())

    def set_view_mode(self, view_mode: Union[ViewMode, str]) -> SessionState:
        return self.dispatch(ViewModeChanged(view_mode=ViewMode(view_mode)))

    def clear(self) -> SessionState:
        return self.dispatch(SessionCleared())

    @property
    def active_document_text(self) -> str:
        return self.state.active_document_text

    def export_document(self, exporter: DocumentExporter, filename: Optional[str] = None) -> Path:
        """
        Save the active document (edited copy first) through the exporter.

        Raises:
            ValueError: If there is no document to save.
        """
        return exporter.save(self.active_document_text, filename=filename)
