"""
Timestamped progress output for ortools-build.

Every line is prefixed with the elapsed time since the build script started,
in MM:SS.cc format (minutes:seconds.centiseconds), so a slow build step is
easy to spot in the build log.

Progress goes to stderr. stdout is reserved for the directive stream read
by the downstream build system, so nothing in this module ever writes there.

Example output:
    00:00.01 ortools-build v0.3.0
    00:00.02 [1/5] Validating host and target...
    00:00.02       Target: x86_64-unknown-linux-gnu
    00:00.45 [2/5] Generating protobuf bindings...

Usage:
    from ortools_build.output import log, log_phase, log_detail

    log_phase(1, 5, "Validating host and target...")
    log_detail("Target: x86_64-unknown-linux-gnu")
"""

import sys
import time
from types import TracebackType
from typing import Optional, TextIO

_start_time: Optional[float] = None
_output_stream: TextIO = sys.stderr
_verbose: bool = False


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Initialize the program timer.

    Called automatically on first use if not called explicitly.

    Args:
        output_stream: Optional output stream (defaults to sys.stderr)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """Enable or disable verbose-only messages."""
    global _verbose
    _verbose = verbose


def get_elapsed() -> float:
    """Seconds elapsed since the timer was initialized."""
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """
    Format the current elapsed time as MM:SS.cc.

    Returns:
        Formatted timestamp string
    """
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: str) -> None:
    _output_stream.write(f"{format_timestamp()} {message}\n")
    _output_stream.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """
    Log a pipeline stage message.

    Format: [N/M] message
    """
    if verbose_only and not _verbose:
        return
    _print(f"[{phase}/{total}] {message}")


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """
    Log a detail message (indented).

    Args:
        message: Detail message
        indent: Number of spaces to indent (default 6)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_header(title: str, version: str) -> None:
    _print(f"{title} v{version}")


class TimedLogger:
    """
    Context manager that logs a stage and how long it took.

    Usage:
        with TimedLogger("Compiling interop shim", phase=(4, 5)) as stage:
            stage.detail("Compiler: c++")
    """

    def __init__(self, operation: str, phase: Optional[tuple[int, int]] = None, verbose_only: bool = False):
        self.operation = operation
        self.phase = phase
        self.verbose_only = verbose_only
        self.start_time = 0.0
        self.failed = False

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        if self.phase:
            log_phase(self.phase[0], self.phase[1], f"{self.operation}...", self.verbose_only)
        else:
            log(f"{self.operation}...", self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        del exc_val, exc_tb  # Unused
        elapsed = time.time() - self.start_time
        if exc_type is None and not self.failed:
            log_detail(f"Done ({elapsed:.2f}s)", verbose_only=True)
        return None

    def detail(self, message: str) -> None:
        """Log a detail message within this stage."""
        log_detail(message, verbose_only=self.verbose_only)

    def mark_failed(self) -> None:
        """Suppress the completion line for a stage that returned a failure."""
        self.failed = True
