"""Subprocess helpers for running external build tools.

Collaborators (protoc, the C++ compiler, ar) are always run through
run_tool() so they get the same treatment: no inherited stdin, captured
text output, and no console window flashing on Windows.
"""

import logging
import shlex
import subprocess
import sys
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

STDERR_PREVIEW_LIMIT = 500


def get_subprocess_creation_flags() -> int:
    """Return CREATE_NO_WINDOW on Windows, 0 elsewhere."""
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def format_command(cmd: Sequence[str]) -> str:
    """Render a command line the way a user would paste it into a shell."""
    return shlex.join(str(part) for part in cmd)


def run_tool(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    """Run a build tool to completion and capture its output.

    stdin is redirected to DEVNULL so a tool can never block waiting for
    input from the build log.

    Args:
        cmd: Command and arguments

    Returns:
        CompletedProcess with text stdout/stderr. The caller checks returncode.

    Raises:
        OSError: If the executable cannot be started (e.g. not on PATH)
    """
    kwargs = {}
    flags = get_subprocess_creation_flags()
    if flags:
        kwargs["creationflags"] = flags

    logger.debug(f"running: {format_command(cmd)}")
    return subprocess.run(
        [str(part) for part in cmd],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        check=False,
        **kwargs,
    )


def stderr_preview(stderr: Optional[str]) -> str:
    """Truncate tool stderr to a readable length for diagnostics."""
    if not stderr:
        return ""
    text = stderr.strip()
    if len(text) > STDERR_PREVIEW_LIMIT:
        return text[:STDERR_PREVIEW_LIMIT] + "... (truncated)"
    return text
