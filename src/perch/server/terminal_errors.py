"""Terminal error formatting for listener failures.

Replaces a raw ``logger.exception()`` with output that highlights the
application frames. Verbosity comes from ``AppConfig.traceback_style``
and can be overridden with the ``PERCH_TRACEBACK`` environment variable:

- ``compact`` (default): error summary plus the last application frames.
- ``full``: the complete Python traceback.
- ``minimal``: one line with the raising location.
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perch.http.context import Context

logger = logging.getLogger("perch.server")

TRACEBACK_STYLES = ("compact", "full", "minimal")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages/perch)."""
    if "site-packages" in filename or filename.startswith("<"):
        return False
    if f"{os.sep}perch{os.sep}" in filename:
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus at most five application frames.

    Falls back to the last three frames when none belong to the app.
    """
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")
    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def resolve_style(default: str = "compact") -> str:
    style = os.environ.get("PERCH_TRACEBACK", default).lower()
    return style if style in TRACEBACK_STYLES else "compact"


def log_error(
    exc: BaseException,
    ctx: Context | None = None,
    *,
    status: int = 500,
    style: str = "compact",
) -> None:
    """Log a contained listener error with the configured verbosity."""
    prefix = f"{status} {ctx.method} {ctx.url}" if ctx is not None else "Server error"

    match resolve_style(style):
        case "full":
            logger.error("%s", prefix, exc_info=exc)
        case "minimal":
            logger.error("%s - %s", prefix, format_minimal_error(exc))
        case _:
            logger.error("%s\n%s", prefix, format_compact_traceback(exc))
