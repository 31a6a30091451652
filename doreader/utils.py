"""
Utility functions for the doreader library.
"""

from __future__ import annotations

import linecache
import os
import sys
from dataclasses import dataclass, field
from typing import Any

# Environment variable to control debug mode
DEBUG_READERS = os.environ.get("DOREADER_DEBUG", "").lower() in ("1", "true", "yes")


_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _is_doreader_internal(path: str) -> bool:
    if path.startswith("<"):
        return False
    return os.path.abspath(path).startswith(_PACKAGE_DIR + os.sep)


@dataclass(frozen=True)
class CreationContext:
    """Where a reader was built."""

    filename: str
    line: int
    function: str
    code: str | None = None
    stack_trace: list[dict[str, Any]] = field(default_factory=list)

    def format_location(self) -> str:
        return f"{self.filename}:{self.line} in {self.function}"

    def format_full(self) -> str:
        lines = [f"Reader created at {self.format_location()}"]
        if self.code:
            lines.append(f"    {self.code}")
        if self.stack_trace:
            lines.append("\nCreation stack trace:")
            for frame in self.stack_trace:
                lines.append(
                    f'  File "{frame["filename"]}", line {frame["line"]}, in {frame["function"]}'
                )
                if frame.get("code"):
                    lines.append(f"    {frame['code']}")
        return "\n".join(lines)


def capture_creation_context(skip_frames: int = 2) -> CreationContext | None:
    """
    Capture the first stack frame outside doreader.

    Only active when ``DOREADER_DEBUG`` is set; returns ``None`` otherwise, or
    when the interpreter does not expose ``sys._getframe``.

    Args:
        skip_frames: Number of frames to skip before searching (this function and its caller)
    """
    if not DEBUG_READERS:
        return None

    getframe = getattr(sys, "_getframe", None)
    if getframe is None:
        return None

    try:
        frame = getframe(skip_frames)
    except ValueError:
        return None

    while frame is not None and _is_doreader_internal(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return None

    filename = frame.f_code.co_filename
    line = frame.f_lineno

    stack_data = []
    current = frame.f_back
    while current is not None and len(stack_data) < 8:
        frame_data = {
            "filename": current.f_code.co_filename,
            "line": current.f_lineno,
            "function": current.f_code.co_name,
        }
        code_line = linecache.getline(current.f_code.co_filename, current.f_lineno)
        if code_line:
            frame_data["code"] = code_line.strip()
        stack_data.append(frame_data)
        current = current.f_back

    return CreationContext(
        filename=filename,
        line=line,
        function=frame.f_code.co_name,
        code=linecache.getline(filename, line).strip() or None,
        stack_trace=stack_data,
    )


def callable_name(func: Any) -> str:
    """Best-effort display name for a callable."""

    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if name is None:
        return type(func).__name__
    return name.replace("<locals>.", "")


__all__ = [
    "DEBUG_READERS",
    "CreationContext",
    "callable_name",
    "capture_creation_context",
]
