"""
Session state and its pure transition function.

The session is only ever changed by reducing an event into a new state:
``state = reduce_session(state, event)``.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mailer_gen.models import (
    Artifact,
    ConversationEntry,
    GeneratedDocument,
    Role,
    ViewMode,
)
from mailer_gen.pipeline.classifier import is_document


class SessionState(BaseModel):
    """Conversation, staged uploads and the current document of one session."""
    model_config = ConfigDict(frozen=True)

    conversation: List[ConversationEntry] = Field(default_factory=list)
    pending_artifacts: List[Artifact] = Field(default_factory=list)
    current_document: Optional[GeneratedDocument] = None
    edited_document_text: str = ""
    view_mode: ViewMode = ViewMode.PREVIEW
    busy: bool = False

    @property
    def active_document_text(self) -> str:
        """Text to download: the edited copy takes precedence over the original."""
        if self.edited_document_text:
            return self.edited_document_text
        if self.current_document is not None:
            return self.current_document.raw_text
        return ""


class ArtifactStaged(BaseModel):
    type: Literal["artifact_staged"] = "artifact_staged"
    artifact: Artifact


class ArtifactRemoved(BaseModel):
    type: Literal["artifact_removed"] = "artifact_removed"
    artifact_id: str


class SubmissionStarted(BaseModel):
    type: Literal["submission_started"] = "submission_started"
    entry: ConversationEntry


class SubmissionSucceeded(BaseModel):
    """A run finished with a reply; ``document`` is set only for HTML documents."""
    type: Literal["submission_succeeded"] = "submission_succeeded"
    reply_text: str
    document: Optional[GeneratedDocument] = None


class SubmissionFailed(BaseModel):
    type: Literal["submission_failed"] = "submission_failed"
    message: str


class DocumentEdited(BaseModel):
    type: Literal["document_edited"] = "document_edited"
    text: str


class EditsApplied(BaseModel):
    type: Literal["edits_applied"] = "edits_applied"


class ViewModeChanged(BaseModel):
    type: Literal["view_mode_changed"] = "view_mode_changed"
    view_mode: ViewMode


class SessionCleared(BaseModel):
    type: Literal["session_cleared"] = "session_cleared"


SessionEvent = Union[
    ArtifactStaged,
    ArtifactRemoved,
    SubmissionStarted,
    SubmissionSucceeded,
    SubmissionFailed,
    DocumentEdited,
    EditsApplied,
    ViewModeChanged,
    SessionCleared,
]


def _assistant_entry(text: str) -> ConversationEntry:
    return ConversationEntry(role=Role.ASSISTANT, text=text)


def reduce_session(state: SessionState, event: SessionEvent) -> SessionState:
    """
    Apply one event to the session.

    Args:
        state: Current session state (not modified).
        event: Event to apply.

    Returns:
        New session state.
    """
    if isinstance(event, ArtifactStaged):
        return state.model_copy(update={
            "pending_artifacts": [*state.pending_artifacts, event.artifact],
        })

    if isinstance(event, ArtifactRemoved):
        return state.model_copy(update={
            "pending_artifacts": [
                a for a in state.pending_artifacts if a.id != event.artifact_id
            ],
        })

    if isinstance(event, SubmissionStarted):
        return state.model_copy(update={
            "conversation": [*state.conversation, event.entry],
            "pending_artifacts": [],
            "busy": True,
        })

    if isinstance(event, SubmissionSucceeded):
        update = {
            "conversation": [*state.conversation, _assistant_entry(event.reply_text)],
            "busy": False,
        }
        if event.document is not None and event.document.is_document:
            update.update({
                "current_document": event.document,
                "edited_document_text": event.document.raw_text,
                "view_mode": ViewMode.PREVIEW,
            })
        return state.model_copy(update=update)

    if isinstance(event, SubmissionFailed):
        return state.model_copy(update={
            "conversation": [*state.conversation, _assistant_entry(event.message)],
            "busy": False,
        })

    if isinstance(event, DocumentEdited):
        return state.model_copy(update={"edited_document_text": event.text})

    if isinstance(event, EditsApplied):
        if not state.edited_document_text:
            return state
        text = state.edited_document_text
        return state.model_copy(update={
            "current_document": GeneratedDocument(raw_text=text, is_document=is_document(text)),
            "view_mode": ViewMode.PREVIEW,
        })

    if isinstance(event, ViewModeChanged):
        return state.model_copy(update={"view_mode": event.view_mode})

    if isinstance(event, SessionCleared):
        return SessionState()

    raise TypeError(f"Unknown session event: {type(event).__name__}")
