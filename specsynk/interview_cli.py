"""Console harness for running the product interview without the HTTP server.

It drives the same session controller the FastAPI app uses. Run with:

    python -m specsynk.interview_cli --idea "A marketplace for used climbing gear"

Pass ``--offline`` to use the stub model, or ``--script path/to/turns.json`` to
replay scripted answers instead of typing them.
"""
from __future__ import annotations

import argparse
import dataclasses
import json
from pathlib import Path
from typing import Iterable, List

from .config import DEFAULT_EXPORT_DIR, configure_logging, get_settings
from .interview import InterviewController, ModelGateway, SessionManager, format_countdown
from .llm import LLMClient, StubLLMClient, get_default_client
from .memory import Message
from .phases import ExperienceLevel, phase_label
from .sheets import SheetLogger


COMMANDS = {
    "/skip": "Skip the current question",
    "/finish": "Generate the spec document now",
    "/status": "Show phase and remaining time",
    "/quit": "Leave without generating a spec",
}


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a timed product-manager interview in the terminal."
    )
    parser.add_argument("--user-id", default="guest", help="Name shown to the interviewer.")
    parser.add_argument("--email", default="", help="Contact address logged with the session.")
    parser.add_argument("--idea", default=None, help="Product idea; prompted for if omitted.")
    parser.add_argument(
        "--level",
        choices=[level.value for level in ExperienceLevel],
        default=ExperienceLevel.intermediate.value,
        help="Experience level used to pick the interviewer's tone.",
    )
    parser.add_argument("--model", default=None, help="Override the Gemini model name.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_EXPORT_DIR,
        help="Where the exported Markdown spec is written.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the stub model instead of calling the hosted API.",
    )
    parser.add_argument(
        "--script",
        type=Path,
        default=None,
        help="JSON file with scripted answers (a list, or an object with a 'turns' list).",
    )
    return parser.parse_args(argv)


def build_client(args: argparse.Namespace) -> LLMClient:
    if args.offline:
        return StubLLMClient()
    settings = get_settings()
    if args.model:
        settings = dataclasses.replace(settings, model=args.model)
    return get_default_client(settings)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging()
    idea = args.idea or input("idea> ").strip()
    if not idea:
        raise SystemExit("An idea is required to start the interview.")

    manager = SessionManager(
        ModelGateway(build_client(args)),
        sheet_logger=SheetLogger(get_settings().sheet_url),
    )
    controller = manager.create_session(
        user_id=args.user_id,
        email=args.email,
        idea=idea,
        experience_level=args.level,
    )
    print(f"Session with {args.user_id}. Commands: {', '.join(COMMANDS)}\n")
    _print_message(controller.start())

    if args.script:
        _run_scripted_turns(controller, _load_scripted_turns(args.script), args.output_dir)
    else:
        _interactive_loop(controller, args.output_dir)


def _load_scripted_turns(path: Path) -> List[str]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SystemExit(f"Unable to read scripted turns: {exc}") from exc
    raw_turns = payload.get("turns", []) if isinstance(payload, dict) else payload
    if not isinstance(raw_turns, list):
        raise SystemExit("Script format must be a list or an object with a 'turns' list.")
    turns = [str(item).strip() for item in raw_turns if str(item).strip()]
    if not turns:
        raise SystemExit("No valid turns found in the script.")
    return turns


def _run_scripted_turns(
    controller: InterviewController,
    turns: Iterable[str],
    output_dir: Path,
) -> None:
    for turn in turns:
        print(f"You: {turn}")
        if _handle_input(controller, turn, output_dir):
            return
    if controller.editor is None:
        _finish(controller, output_dir)


def _interactive_loop(controller: InterviewController, output_dir: Path) -> None:
    announced = False
    while True:
        if controller.show_finish and not announced:
            print("Time to wrap up: type /finish to generate your spec.\n")
            announced = True
        prompt = (
            f"[{phase_label(controller.session.phase)} | "
            f"{format_countdown(controller.timer.seconds_left)}] you> "
        )
        try:
            text = input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break
        if not text:
            continue
        if _handle_input(controller, text, output_dir):
            break


def _handle_input(controller: InterviewController, text: str, output_dir: Path) -> bool:
    """Process one line of input; return True once the session is over."""
    command = text.lower()
    if command in {"/quit", "/exit"}:
        print("Goodbye!")
        return True
    if command == "/status":
        _print_status(controller)
        return False
    if command == "/finish":
        return _finish(controller, output_dir)
    if command == "/skip":
        _print_message(controller.skip())
        return False
    _print_message(controller.send(text))
    return False


def _finish(controller: InterviewController, output_dir: Path) -> bool:
    print("Generating Product Spec...")
    document = controller.finish()
    if document is None or controller.editor is None:
        _print_message(controller.session.messages[-1])
        return False
    path = controller.editor.export(output_dir)
    print(f"\n{controller.editor.to_markdown()}\n")
    print(f"Spec saved to {path}")
    return True


def _print_status(controller: InterviewController) -> None:
    session = controller.session
    print(f"\nPhase: {phase_label(session.phase)}")
    print(f"Time left: {format_countdown(controller.timer.seconds_left)}")
    print(f"Messages: {len(session.messages)}\n")


def _print_message(message: Message) -> None:
    speaker = "PM" if message.role == "assistant" else "You"
    print(f"{speaker}: {message.text}\n")


if __name__ == "__main__":
    main()
