"""
Tests for the session reducer and controller.
"""

import asyncio

import pytest

from conftest import HTML_DOCUMENT, StubRemote
from mailer_gen.errors import SessionBusyError, SizeLimitError, ValidationError
from mailer_gen.io.artifact_loader import MAX_IMAGE_BYTES, DocumentExporter
from mailer_gen.models import (
    ConversationEntry,
    GeneratedDocument,
    GenerationOutcome,
    OutcomeKind,
    Role,
    ViewMode,
)
from mailer_gen.orchestration.orchestrator import GenerationOrchestrator
from mailer_gen.pipeline.prompts import (
    DEFAULT_DISPLAY_TEXT,
    DOCUMENT_GENERATED_MESSAGE,
    START_COMMAND_DISPLAY,
    START_COMMAND_INSTRUCTION,
    START_REQUIRES_BOTH_MESSAGE,
    UNHANDLED_ERROR_MESSAGE,
)
from mailer_gen.session import SessionController, SessionState, reduce_session, resolve_submission
from mailer_gen.session.state import (
    ArtifactRemoved,
    ArtifactStaged,
    DocumentEdited,
    EditsApplied,
    SessionCleared,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    ViewModeChanged,
)


class RecordingOrchestrator:
    """Records submissions and returns a fixed outcome."""

    def __init__(self, outcome=None, error=None):
        self.outcome = outcome or GenerationOutcome(
            kind=OutcomeKind.DOCUMENT,
            text=HTML_DOCUMENT,
            document=GeneratedDocument(raw_text=HTML_DOCUMENT, is_document=True),
        )
        self.error = error
        self.calls = []

    async def generate(self, user_text, artifacts):
        self.calls.append((user_text, list(artifacts)))
        if self.error is not None:
            raise self.error
        return self.outcome


def _document_state():
    document = GeneratedDocument(raw_text=HTML_DOCUMENT, is_document=True)
    return reduce_session(SessionState(), SubmissionSucceeded(reply_text="done", document=document))


# Reducer

def test_reducer_does_not_mutate_input(image_artifact):
    state = SessionState()

    new_state = reduce_session(state, ArtifactStaged(artifact=image_artifact))

    assert state.pending_artifacts == []
    assert new_state.pending_artifacts == [image_artifact]


def test_artifact_removed(image_artifact, json_artifact):
    state = reduce_session(SessionState(), ArtifactStaged(artifact=image_artifact))
    state = reduce_session(state, ArtifactStaged(artifact=json_artifact))

    state = reduce_session(state, ArtifactRemoved(artifact_id=image_artifact.id))

    assert state.pending_artifacts == [json_artifact]


def test_submission_started_moves_pending_into_conversation(image_artifact):
    state = reduce_session(SessionState(), ArtifactStaged(artifact=image_artifact))
    entry = ConversationEntry(role=Role.USER, text="hi", attached_artifacts=[image_artifact])

    state = reduce_session(state, SubmissionStarted(entry=entry))

    assert state.busy
    assert state.pending_artifacts == []
    assert state.conversation == [entry]


def test_submission_succeeded_with_document_sets_preview():
    state = reduce_session(SessionState(), ViewModeChanged(view_mode=ViewMode.CODE))
    document = GeneratedDocument(raw_text=HTML_DOCUMENT, is_document=True)

    state = reduce_session(state, SubmissionSucceeded(reply_text="done", document=document))

    assert state.current_document == document
    assert state.edited_document_text == HTML_DOCUMENT
    assert state.view_mode == ViewMode.PREVIEW
    assert state.conversation[-1].role == Role.ASSISTANT
    assert not state.busy


def test_conversational_reply_keeps_existing_document():
    state = _document_state()

    state = reduce_session(state, SubmissionSucceeded(reply_text="Sure, here's some info"))

    assert state.current_document.raw_text == HTML_DOCUMENT
    assert state.conversation[-1].text == "Sure, here's some info"


def test_submission_failed_appends_message():
    state = reduce_session(SessionState(busy=True), SubmissionFailed(message="Error: boom"))

    assert not state.busy
    assert state.conversation[-1].text == "Error: boom"


def test_edits_applied_replaces_document():
    state = _document_state()
    state = reduce_session(state, DocumentEdited(text="<html><body>edited</body></html>"))
    state = reduce_session(state, ViewModeChanged(view_mode=ViewMode.CODE))

    state = reduce_session(state, EditsApplied())

    assert state.current_document.raw_text == "<html><body>edited</body></html>"
    assert state.current_document.is_document
    assert state.view_mode == ViewMode.PREVIEW


def test_edits_applied_with_empty_text_is_a_no_op():
    state = reduce_session(_document_state(), DocumentEdited(text=""))

    assert reduce_session(state, EditsApplied()) == state


def test_active_document_prefers_edited_text():
    state = reduce_session(_document_state(), DocumentEdited(text="<html>v2</html>"))

    assert state.active_document_text == "<html>v2</html>"


def test_session_cleared(image_artifact):
    state = reduce_session(_document_state(), ArtifactStaged(artifact=image_artifact))

    assert reduce_session(state, SessionCleared()) == SessionState()


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        reduce_session(SessionState(), object())


# Submission resolution

def test_resolve_plain_text():
    assert resolve_submission("Build a page", []) == ("Build a page", "Build a page")


def test_resolve_empty_text_with_files(json_artifact):
    assert resolve_submission("", [json_artifact]) == ("", DEFAULT_DISPLAY_TEXT)


def test_resolve_start_with_both_kinds(json_artifact, image_artifact):
    effective, display = resolve_submission("  START ", [json_artifact, image_artifact])

    assert effective == START_COMMAND_INSTRUCTION
    assert display == START_COMMAND_DISPLAY


def test_resolve_start_requires_both_kinds(json_artifact):
    with pytest.raises(ValidationError) as exc_info:
        resolve_submission("start", [json_artifact])

    assert exc_info.value.message == START_REQUIRES_BOTH_MESSAGE


# Controller

def test_start_without_image_makes_no_remote_call(json_artifact):
    orchestrator = RecordingOrchestrator()
    controller = SessionController(orchestrator=orchestrator)
    controller.dispatch(ArtifactStaged(artifact=json_artifact))

    with pytest.raises(ValidationError):
        asyncio.run(controller.submit("start"))

    assert orchestrator.calls == []
    assert controller.state.pending_artifacts == [json_artifact]
    assert controller.state.conversation == []


def test_start_sends_email_instruction_verbatim(json_artifact, image_artifact):
    orchestrator = RecordingOrchestrator()
    controller = SessionController(orchestrator=orchestrator)
    controller.dispatch(ArtifactStaged(artifact=json_artifact))
    controller.dispatch(ArtifactStaged(artifact=image_artifact))

    outcome = asyncio.run(controller.submit("start"))

    assert outcome.kind == OutcomeKind.DOCUMENT
    assert orchestrator.calls == [(START_COMMAND_INSTRUCTION, [json_artifact, image_artifact])]

    user_entry, assistant_entry = controller.state.conversation
    assert user_entry.text == START_COMMAND_DISPLAY
    assert user_entry.attached_artifacts == [json_artifact, image_artifact]
    assert assistant_entry.text == DOCUMENT_GENERATED_MESSAGE
    assert controller.state.current_document.raw_text == HTML_DOCUMENT
    assert controller.state.pending_artifacts == []


def test_empty_submission_is_rejected():
    orchestrator = RecordingOrchestrator()
    controller = SessionController(orchestrator=orchestrator)

    with pytest.raises(ValidationError):
        asyncio.run(controller.submit("   "))

    assert orchestrator.calls == []


def test_busy_session_rejects_submission():
    controller = SessionController(orchestrator=RecordingOrchestrator())
    controller.state = SessionState(busy=True)

    with pytest.raises(SessionBusyError):
        asyncio.run(controller.submit("hello"))


def test_error_outcome_is_appended_to_transcript():
    outcome = GenerationOutcome(
        kind=OutcomeKind.ERROR,
        text="Error: Rate limit exceeded. Please try again in a moment.",
        error_code="rate_limit",
    )
    controller = SessionController(orchestrator=RecordingOrchestrator(outcome=outcome))

    asyncio.run(controller.submit("page"))

    assert controller.state.conversation[-1].text == outcome.text
    assert controller.state.current_document is None
    assert not controller.state.busy


def test_unexpected_failure_is_reported_and_raised():
    controller = SessionController(orchestrator=RecordingOrchestrator(error=RuntimeError("boom")))

    with pytest.raises(RuntimeError):
        asyncio.run(controller.submit("page"))

    assert controller.state.conversation[-1].text == UNHANDLED_ERROR_MESSAGE
    assert not controller.state.busy


def test_full_run_through_orchestrator(json_artifact, image_artifact):
    remote = StubRemote()
    controller = SessionController(orchestrator=GenerationOrchestrator(remote=remote))
    controller.dispatch(ArtifactStaged(artifact=json_artifact))
    controller.dispatch(ArtifactStaged(artifact=image_artifact))

    asyncio.run(controller.submit("start"))

    assert len(remote.vision_calls) == 1
    assert len(remote.generation_calls) == 1
    assert START_COMMAND_INSTRUCTION.strip() in remote.generation_calls[0]["parts"][0].text
    assert controller.state.current_document.is_document


def test_oversized_upload_is_not_staged():
    controller = SessionController(orchestrator=RecordingOrchestrator())

    with pytest.raises(SizeLimitError):
        controller.stage_bytes(b"\x00" * (MAX_IMAGE_BYTES + 1), "huge.png", mime_type="image/png")

    assert controller.state.pending_artifacts == []


def test_upload_at_size_bound_is_staged():
    controller = SessionController(orchestrator=RecordingOrchestrator())

    artifact = controller.stage_bytes(b"\x00" * MAX_IMAGE_BYTES, "big.png", mime_type="image/png")

    assert controller.state.pending_artifacts == [artifact]


def test_stage_files_collects_errors(sample_json, tmp_path):
    controller = SessionController(orchestrator=RecordingOrchestrator())
    broken = tmp_path / "broken.json"
    broken.write_text("{nope")

    staged, errors = controller.stage_files([sample_json, broken, tmp_path / "missing.png"])

    assert [a.name for a in staged] == ["data.json"]
    assert [e.file_name for e in errors] == ["broken.json", "missing.png"]
    assert len(controller.state.pending_artifacts) == 1


def test_export_prefers_edited_text(tmp_path):
    controller = SessionController(orchestrator=RecordingOrchestrator())
    asyncio.run(controller.submit("page"))
    controller.edit_document("<html>edited</html>")

    path = controller.export_document(DocumentExporter(tmp_path), filename="page.html")

    assert path.read_text(encoding="utf-8") == "<html>edited</html>"


def test_export_without_document_fails(tmp_path):
    controller = SessionController(orchestrator=RecordingOrchestrator())

    with pytest.raises(ValueError):
        controller.export_document(DocumentExporter(tmp_path))


def test_clear_resets_session(image_artifact):
    controller = SessionController(orchestrator=RecordingOrchestrator())
    controller.dispatch(ArtifactStaged(artifact=image_artifact))
    asyncio.run(controller.submit("page"))

    controller.clear()

    assert controller.state == SessionState()
