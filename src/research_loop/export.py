"""
Session export to text and JSON.

Text layout:

    DEEP RESEARCH JOURNEY
    Initial Subject: <subject>

    ==================================================
    STEP 1: <subject>
    ==================================================

    SUMMARY:
    ...

JSON layout: list of steps with keys id, subject, summary, sources,
nextSubject (2-space indent).
"""

import json
import re
from pathlib import Path
from typing import Literal

import structlog

from research_loop.models.research_models import LoopSession

ExportFormat = Literal["txt", "json"]

RULE = "=" * 50

# Anything but word characters, dots and dashes (path separators included)
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")

logger = structlog.get_logger(__name__)


def export_filename(session: LoopSession, fmt: ExportFormat) -> str:
    """File name derived from the initial subject; always a single path component."""
    title = _UNSAFE_FILENAME_CHARS.sub("_", session.initial_subject or "").strip("._")
    return f"{title or 'Research'}_research.{fmt}"


def session_to_text(session: LoopSession) -> str:
    title = session.initial_subject or "Research"
    content = f"DEEP RESEARCH JOURNEY\nInitial Subject: {title}\n\n"

    for step in session.steps:
        content += f"{RULE}\n"
        content += f"STEP {step.sequence_number}: {step.subject}\n"
        content += f"{RULE}\n\n"
        content += f"SUMMARY:\n{step.artifact.summary}\n\n"

        if step.artifact.sources:
            content += "SOURCES:\n"
            for source in step.artifact.sources:
                content += f"- {source.title}: {source.uri}\n"
            content += "\n"

        if step.next_subject:
            content += f"NEXT INQUIRY: {step.next_subject}\n"
        content += "\n"

    return content


def session_to_json(session: LoopSession) -> str:
    steps = [
        {
            "id": step.sequence_number,
            "subject": step.subject,
            "summary": step.artifact.summary,
            "sources": [
                {"uri": source.uri, "title": source.title}
                for source in step.artifact.sources
            ],
            "nextSubject": step.next_subject,
        }
        for step in session.steps
    ]
    return json.dumps(steps, indent=2, ensure_ascii=False)


def write_session(session: LoopSession, fmt: ExportFormat, output_dir: Path) -> Path:
    """
    Write the session to `output_dir` and return the file path.

    Raises:
        ValueError: Unknown export format
        OSError: The file could not be written
    """
    if fmt == "txt":
        content = session_to_text(session)
    elif fmt == "json":
        content = session_to_json(session)
    else:
        raise ValueError(f"Unsupported export format: {fmt}")

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(session, fmt)
    path.write_text(content, encoding="utf-8")
    logger.info("Session exported", path=str(path), format=fmt, steps=len(session.steps))
    return path
