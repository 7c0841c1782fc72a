"""Unit tests for the command-line interface."""

import asyncio
import os
import signal
import sys
import time
from unittest.mock import AsyncMock, patch

import pytest

from research_loop.backend.exceptions import BackendResponseError
from research_loop.cli import (
    EXIT_ABORTED,
    EXIT_INTERRUPTED,
    EXIT_OK,
    ConsoleLoopObserver,
    build_parser,
    main,
    run_research,
)
from research_loop.models.enums import TerminationReason
from research_loop.models.research_models import ResearchStep


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep main() from replacing the root logging handlers."""
    with patch("research_loop.cli.configure_logging"):
        yield


@pytest.fixture
def fast_settings(test_settings):
    test_settings.RETRY_INITIAL_DELAY = 0.0
    test_settings.RETRY_MAX_DELAY = 0.0
    return test_settings


# ============================================================================
# Argument parsing
# ============================================================================


def test_parser_defaults():
    args = build_parser().parse_args(["quantum", "computing"])

    assert args.loops == 1
    assert args.prompt == ["quantum", "computing"]
    assert args.export is None


def test_parser_loops():
    assert build_parser().parse_args(["-n", "3", "x"]).loops == 3
    assert build_parser().parse_args(["--loops", "10", "x"]).loops == 10


@pytest.mark.parametrize(
    "value,message",
    [
        ("abc", "Loop count must be a valid number."),
        ("0", "Loop count must be at least 1."),
        ("11", "Loop count cannot exceed 10."),
    ],
)
def test_parser_rejects_invalid_loops(capsys, value, message):
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["-n", value, "x"])

    assert exc_info.value.code == 2
    assert message in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["--version"])

    assert exc_info.value.code == 0
    assert "research-loop CLI v0.1.0" in capsys.readouterr().out


def test_missing_prompt_is_usage_error(capsys, test_settings):
    with pytest.raises(SystemExit) as exc_info:
        main(["   "], app_settings=test_settings)

    assert exc_info.value.code == 2
    assert "A prompt is required." in capsys.readouterr().err


# ============================================================================
# Output
# ============================================================================


def test_console_observer_output(capsys, sample_artifact):
    observer = ConsoleLoopObserver(requested_step_count=2)
    step = ResearchStep(sequence_number=1, subject="quantum", artifact=sample_artifact)

    observer.step_started(1, "quantum")
    observer.step_completed(step)
    observer.next_subject_found(1, "qubits")

    out = capsys.readouterr().out
    assert '[Loop 1/2] Researching: "quantum"' in out
    assert "--- Summary ---\n" + sample_artifact.summary in out
    assert "- Qubits explained: https://example.com/qubits" in out
    assert 'Next inquiry: "qubits"' in out


# ============================================================================
# Running sessions
# ============================================================================


@pytest.mark.asyncio
async def test_run_research_uses_injected_backend(mock_backend, make_artifact, fast_settings):
    mock_backend.fetch_research.side_effect = lambda subject: make_artifact(subject)
    mock_backend.fetch_next_subject.return_value = "B"

    session = await run_research("A", 2, fast_settings, backend=mock_backend)

    assert [s.subject for s in session.steps] == ["A", "B"]
    assert session.termination_reason is TerminationReason.EXHAUSTED_REQUESTED_STEPS
    mock_backend.__aexit__.assert_awaited_once()


def test_main_success(capsys, mock_backend, sample_artifact, fast_settings):
    mock_backend.fetch_research.return_value = sample_artifact

    with patch("research_loop.cli.HttpResearchBackend", return_value=mock_backend) as backend_cls:
        exit_code = main(["quantum", "computing"], app_settings=fast_settings)

    assert exit_code == EXIT_OK
    backend_cls.assert_called_once_with(base_url="http://localhost:4000", timeout=5.0)
    out = capsys.readouterr().out
    assert '[Loop 1/1] Researching: "quantum computing"' in out
    assert "Research loop complete." in out


def test_main_early_stop_message(capsys, mock_backend, make_artifact, fast_settings):
    mock_backend.fetch_research.side_effect = lambda subject: make_artifact(subject)
    mock_backend.fetch_next_subject.return_value = None

    with patch("research_loop.cli.HttpResearchBackend", return_value=mock_backend):
        exit_code = main(["-n", "3", "A"], app_settings=fast_settings)

    assert exit_code == EXIT_OK
    assert "Next inquiry not provided. Ending loop early." in capsys.readouterr().out


def test_main_research_failure(capsys, mock_backend, fast_settings):
    mock_backend.fetch_research.side_effect = BackendResponseError(
        'Failed to perform deep research on "A".', status_code=502
    )

    with patch("research_loop.cli.HttpResearchBackend", return_value=mock_backend):
        exit_code = main(["A"], app_settings=fast_settings)

    assert exit_code == EXIT_ABORTED
    assert mock_backend.fetch_research.await_count == 3
    err = capsys.readouterr().err
    assert 'An error occurred during research: Failed to perform deep research on "A".' in err


def test_main_export(tmp_path, mock_backend, sample_artifact, fast_settings):
    mock_backend.fetch_research.return_value = sample_artifact

    with patch("research_loop.cli.HttpResearchBackend", return_value=mock_backend):
        exit_code = main(
            ["--export", "json", "--output-dir", str(tmp_path), "my subject"],
            app_settings=fast_settings,
        )

    assert exit_code == EXIT_OK
    assert (tmp_path / "my_subject_research.json").exists()


@pytest.mark.parametrize("interrupt", [KeyboardInterrupt(), asyncio.CancelledError()])
def test_main_interrupted(capsys, fast_settings, interrupt):
    with patch("research_loop.cli.run_research", AsyncMock(side_effect=interrupt)):
        exit_code = main(["A"], app_settings=fast_settings)

    assert exit_code == EXIT_INTERRUPTED
    assert "Interrupted." in capsys.readouterr().err


# ============================================================================
# Ctrl+C handling
# ============================================================================

needs_posix_signals = pytest.mark.skipif(
    sys.platform == "win32", reason="loop signal handlers need a POSIX event loop"
)


def _send_sigint() -> None:
    os.kill(os.getpid(), signal.SIGINT)


@needs_posix_signals
@pytest.mark.asyncio
async def test_sigint_cancels_in_flight_request(capsys, mock_backend, fast_settings):
    """Ctrl+C during a slow request ends the session without waiting it out."""

    async def slow_research(subject):
        await asyncio.sleep(3)

    mock_backend.fetch_research.side_effect = slow_research
    asyncio.get_running_loop().call_later(0.2, _send_sigint)

    started = time.monotonic()
    session = await asyncio.wait_for(
        run_research("A", 3, fast_settings, backend=mock_backend), timeout=5.0
    )

    assert time.monotonic() - started < 2.0
    assert session.termination_reason is TerminationReason.CANCELLED
    assert session.steps == ()
    mock_backend.fetch_next_subject.assert_not_awaited()
    assert "press Ctrl+C again" in capsys.readouterr().err


@needs_posix_signals
@pytest.mark.asyncio
async def test_second_sigint_stops_immediately(mock_backend, fast_settings):
    """A second Ctrl+C cancels the run even while shutdown is still blocked."""
    close_interrupted = asyncio.Event()

    async def slow_research(subject):
        await asyncio.sleep(3)

    async def slow_close(*exc_info):
        try:
            await asyncio.sleep(3)
        except asyncio.CancelledError:
            close_interrupted.set()
            raise

    mock_backend.fetch_research.side_effect = slow_research
    mock_backend.__aexit__.side_effect = slow_close
    event_loop = asyncio.get_running_loop()
    event_loop.call_later(0.2, _send_sigint)
    event_loop.call_later(0.4, _send_sigint)

    started = time.monotonic()
    task = asyncio.create_task(run_research("A", 3, fast_settings, backend=mock_backend))
    await asyncio.wait({task}, timeout=5.0)

    assert task.cancelled()
    assert close_interrupted.is_set()
    assert time.monotonic() - started < 2.0
