#!/usr/bin/env python3
"""
Command-line interface for the HTML generation pipeline.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from mailer_gen.config import Settings
from mailer_gen.errors import MailerGenError
from mailer_gen.io.artifact_loader import DocumentExporter
from mailer_gen.models import ArtifactKind, ImageArtifact, OutcomeKind, ViewMode
from mailer_gen.orchestration.orchestrator import GenerationOrchestrator, summarize_outcome
from mailer_gen.pipeline.prompts import START_COMMAND
from mailer_gen.session.controller import SessionController

# Load environment variables
load_dotenv()


CHAT_HELP = """Commands:
  /data PATH      Stage a JSON data file
  /image PATH     Stage a reference screenshot
  /files          List staged files
  /remove ID      Remove a staged file
  /edit PATH      Load edited HTML from a file
  /apply          Apply the edited HTML to the current document
  /view MODE      Switch viewer mode (preview or code)
  /show           Print the current document
  /save [PATH]    Save the current document
  /clear          Start over
  /quit           Exit
Anything else is sent as a prompt. Type "start" with a JSON file and an image
staged to generate email-safe HTML."""


def _build_controller(args) -> SessionController:
    settings = Settings.from_env(provider=args.provider)
    if args.model:
        settings = settings.model_copy(update={"generation_model": args.model})
    return SessionController(orchestrator=GenerationOrchestrator(settings=settings))


def _print_outcome(outcome) -> None:
    if outcome.kind == OutcomeKind.DOCUMENT:
        print("✅ HTML code generated successfully")
    elif outcome.kind == OutcomeKind.ERROR:
        print(f"❌ {outcome.text}")
    else:
        print(f"🤖 {outcome.text}")
    for line in summarize_outcome(outcome):
        print(f"   {line}")


def cmd_generate(args):
    """Generate HTML from data files and screenshots."""
    print("🚀 Generating HTML...")

    controller = _build_controller(args)

    for path, kind in (
        [(p, ArtifactKind.STRUCTURED_DATA) for p in args.data or []]
        + [(p, ArtifactKind.IMAGE) for p in args.image or []]
    ):
        try:
            artifact = controller.stage_file(path, kind=kind)
        except MailerGenError as e:
            print(f"❌ {e}")
            continue
        icon = "🖼️ " if isinstance(artifact, ImageArtifact) else "📄"
        print(f"{icon} Staged: {artifact.name}")

    prompt = START_COMMAND if args.start else (args.prompt or "")

    try:
        outcome = asyncio.run(controller.submit(prompt))
    except MailerGenError as e:
        print(f"❌ {e.user_message}")
        return 1

    _print_outcome(outcome)
    if outcome.kind != OutcomeKind.DOCUMENT:
        return 1 if outcome.kind == OutcomeKind.ERROR else 0

    html_path = controller.export_document(DocumentExporter(args.output))
    print(f"📄 HTML: {html_path}")
    return 0


def _chat_command(controller: SessionController, line: str) -> bool:
    """Handle one slash command. Returns False when the session should end."""
    command, _, argument = line.partition(" ")
    argument = argument.strip()

    if command == "/quit":
        return False
    elif command == "/help":
        print(CHAT_HELP)
    elif command in ("/data", "/image"):
        kind = ArtifactKind.STRUCTURED_DATA if command == "/data" else ArtifactKind.IMAGE
        try:
            artifact = controller.stage_file(argument, kind=kind)
            print(f"📎 Staged {artifact.name} ({artifact.id[:8]})")
        except MailerGenError as e:
            print(f"❌ {e}")
    elif command == "/files":
        pending = controller.state.pending_artifacts
        print(f"📎 {len(pending)} file(s) ready to analyze")
        for artifact in pending:
            print(f"   {artifact.id[:8]}  {artifact.kind}  {artifact.name}")
    elif command == "/remove":
        matches = [a for a in controller.state.pending_artifacts if a.id.startswith(argument)]
        if not argument or not matches:
            print(f"⚠️  No staged file with id {argument!r}")
        else:
            controller.remove_artifact(matches[0].id)
            print(f"🗑️  Removed {matches[0].name}")
    elif command == "/edit":
        try:
            controller.edit_document(Path(argument).read_text(encoding="utf-8"))
            controller.set_view_mode(ViewMode.CODE)
            print("✏️  Edited code loaded. Use /apply to update the preview.")
        except OSError as e:
            print(f"❌ Could not read {argument}: {e}")
    elif command == "/apply":
        controller.apply_edits()
        print("✅ Changes applied")
    elif command == "/view":
        try:
            controller.set_view_mode(argument)
            print(f"👁️  View: {controller.state.view_mode.value}")
        except ValueError:
            print("⚠️  View must be 'preview' or 'code'")
    elif command == "/show":
        text = controller.active_document_text
        print(text if text else "ℹ️  No document generated yet")
    elif command == "/save":
        try:
            exporter = DocumentExporter(Path(argument).parent if argument else "outputs")
            path = controller.export_document(exporter, Path(argument).name if argument else None)
            print(f"💾 Saved: {path}")
        except ValueError as e:
            print(f"⚠️  {e}")
    elif command == "/clear":
        controller.clear()
        print("🧹 Session cleared")
    else:
        print(f"⚠️  Unknown command: {command}. Type /help for commands.")
    return True


def cmd_chat(args):
    """Run an interactive generation session."""
    controller = _build_controller(args)
    print("🤖 Upload a screenshot + JSON, and type start. /help lists commands.")

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break

        if line.startswith("/"):
            if not _chat_command(controller, line):
                break
            continue

        try:
            print("⏳ Analyzing files and generating response...")
            outcome = asyncio.run(controller.submit(line))
        except MailerGenError as e:
            print(f"⚠️  {e.user_message}")
            continue
        _print_outcome(outcome)

    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pixel-matched HTML generation from JSON data and screenshots",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show pipeline log messages")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate HTML from data files and screenshots")
    gen_parser.add_argument("--data", "-d", action="append", help="Path to a JSON data file (repeatable)")
    gen_parser.add_argument("--image", "-i", action="append", help="Path to a reference screenshot (repeatable)")
    prompt_group = gen_parser.add_mutually_exclusive_group()
    prompt_group.add_argument("--prompt", "-p", help="Free-text request")
    prompt_group.add_argument("--start", action="store_true", help="Generate email-safe HTML (needs --data and --image)")
    gen_parser.add_argument("--output", "-o", default="outputs", help="Output directory")
    gen_parser.add_argument("--provider", choices=["google", "openai", "anthropic"])
    gen_parser.add_argument("--model", help="Generation model name (default: provider default)")

    chat_parser = subparsers.add_parser("chat", help="Interactive generation session")
    chat_parser.add_argument("--provider", choices=["google", "openai", "anthropic"])
    chat_parser.add_argument("--model", help="Generation model name (default: provider default)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "generate":
            return cmd_generate(args)
        elif args.command == "chat":
            return cmd_chat(args)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
