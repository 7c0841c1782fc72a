"""Command-line interface for research-loop.

Runs a chained research session against the research service and prints
each step as it completes.

Usage examples::

    research-loop "machine learning trends"
    research-loop "quantum computing" --loops 3
    research-loop "battery chemistry" -n 5 --export txt --output-dir ./out
    API_BASE_URL=https://api.prod.com research-loop "research topic"
    LOG_LEVEL=DEBUG research-loop "research topic"
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

import structlog

from research_loop import __version__
from research_loop.backend.base_client import ResearchBackend
from research_loop.backend.http_client import HttpResearchBackend
from research_loop.config import Settings, settings
from research_loop.export import write_session
from research_loop.logging_config import configure_logging
from research_loop.loop.controller import LoopController, LoopObserver
from research_loop.loop.exceptions import LoopAborted
from research_loop.models.enums import TerminationReason
from research_loop.models.research_models import LoopSession, ResearchStep
from research_loop.retry.engine import RetryEngine

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_INTERRUPTED = 130

TERMINATION_MESSAGES = {
    TerminationReason.EXHAUSTED_REQUESTED_STEPS: "Research loop complete.",
    TerminationReason.NO_NEXT_SUBJECT: "Next inquiry not provided. Ending loop early.",
    TerminationReason.NEXT_INQUIRY_FAILED: "Failed to locate the next inquiry. Stopping loop.",
    TerminationReason.CANCELLED: "Research loop cancelled.",
}

ENVIRONMENT_HELP = """\
Environment Variables:
  API_BASE_URL  Custom backend API URL (e.g., https://api.example.com)
  PORT          Backend port if using localhost (default: 4000)
  LOG_LEVEL     Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FORMAT    Set to "json" for JSON log output (default: text)
"""


def _loop_count_type(max_loops: int):
    def parse(value: str) -> int:
        try:
            parsed = int(value, 10)
        except ValueError:
            raise argparse.ArgumentTypeError("Loop count must be a valid number.")
        if parsed < 1:
            raise argparse.ArgumentTypeError("Loop count must be at least 1.")
        if parsed > max_loops:
            raise argparse.ArgumentTypeError(f"Loop count cannot exceed {max_loops}.")
        return parsed

    return parse


def build_parser(max_loops: int = 10, default_loops: int = 1) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-loop",
        description="Chain deep research steps, each following up on the last.",
        epilog=ENVIRONMENT_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"research-loop CLI v{__version__}",
    )
    parser.add_argument(
        "-n",
        "--loops",
        type=_loop_count_type(max_loops),
        default=default_loops,
        metavar="NUM",
        help=f"Number of research loops to run (1-{max_loops}, default: {default_loops})",
    )
    parser.add_argument(
        "--export",
        choices=["txt", "json"],
        default=None,
        help="Also write the session to a file in this format",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for exported files (default: current directory)",
    )
    parser.add_argument("prompt", nargs="*", help="Initial research subject")
    return parser


class ConsoleLoopObserver(LoopObserver):
    """Prints loop progress to stdout."""

    def __init__(self, requested_step_count: int):
        self.requested_step_count = requested_step_count

    def step_started(self, step_number: int, subject: str) -> None:
        print()
        print(f'[Loop {step_number}/{self.requested_step_count}] Researching: "{subject}"')

    def step_completed(self, step: ResearchStep) -> None:
        print("--- Summary ---")
        print(step.artifact.summary)
        if step.artifact.sources:
            print("--- Sources ---")
            for source in step.artifact.sources:
                print(f"- {source.title}: {source.uri}")

    def next_subject_found(self, step_number: int, next_subject: str) -> None:
        print(f'Next inquiry: "{next_subject}"')


def print_retry(attempt_number: int, error: Exception, delay: float) -> None:
    print(
        f"  attempt {attempt_number} failed ({error}); retrying in {delay:.1f}s",
        file=sys.stderr,
    )


async def run_research(
    prompt: str,
    loops: int,
    app_settings: Settings,
    backend: Optional[ResearchBackend] = None,
) -> LoopSession:
    """
    Run one session.

    The first Ctrl+C cancels the in-flight request or backoff wait and ends
    the session as cancelled; a second Ctrl+C cancels this task outright.

    Raises:
        LoopAborted: A research request failed
    """
    cancel_event = asyncio.Event()
    event_loop = asyncio.get_running_loop()
    current_task = asyncio.current_task()

    def on_sigint() -> None:
        if cancel_event.is_set():
            logger.info("Second interrupt, stopping immediately")
            current_task.cancel()
            return
        print("\nCancelling... press Ctrl+C again to stop immediately.", file=sys.stderr)
        cancel_event.set()

    try:
        event_loop.add_signal_handler(signal.SIGINT, on_sigint)
        signal_handler_installed = True
    except (NotImplementedError, RuntimeError):
        # Windows / non-main thread: Ctrl+C falls back to KeyboardInterrupt
        signal_handler_installed = False

    backend = backend or HttpResearchBackend(
        base_url=app_settings.resolved_api_base_url,
        timeout=app_settings.REQUEST_TIMEOUT,
    )
    controller = LoopController(
        backend,
        engine=RetryEngine(),
        on_retry=print_retry,
        observer=ConsoleLoopObserver(loops),
    )
    try:
        async with backend:
            return await controller.run_loop(
                prompt,
                loops,
                app_settings.retry_policy(),
                cancel_event=cancel_event,
            )
    finally:
        if signal_handler_installed:
            event_loop.remove_signal_handler(signal.SIGINT)


def main(argv: Optional[list[str]] = None, app_settings: Optional[Settings] = None) -> int:
    app_settings = app_settings or settings
    parser = build_parser(app_settings.MAX_LOOPS, app_settings.DEFAULT_LOOPS)
    args = parser.parse_args(argv)

    prompt = " ".join(args.prompt).strip()
    if not prompt:
        parser.error("A prompt is required.")

    configure_logging(app_settings.LOG_LEVEL, app_settings.LOG_FORMAT, stream=sys.stderr)
    logger.debug(
        "Configuration",
        api_base_url=app_settings.resolved_api_base_url,
        loop_count=args.loops,
        log_level=app_settings.LOG_LEVEL,
        log_format=app_settings.LOG_FORMAT,
    )

    try:
        session = asyncio.run(run_research(prompt, args.loops, app_settings))
    except LoopAborted as e:
        print(f"An error occurred during research: {e.error}", file=sys.stderr)
        return EXIT_ABORTED
    except (KeyboardInterrupt, asyncio.CancelledError):
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    print()
    print(TERMINATION_MESSAGES[session.termination_reason])

    if args.export:
        try:
            path = write_session(session, args.export, args.output_dir)
        except OSError as e:
            print(f"Failed to export session: {e}", file=sys.stderr)
            return EXIT_ABORTED
        print(f"Saved {args.export.upper()} export to {path}")

    if session.termination_reason is TerminationReason.CANCELLED:
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
