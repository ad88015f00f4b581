"""
Failure reporting.

Every failure ends the run with exactly one diagnostic, made of two parts:
    - an error directive on the directive stream, so the build system fails
      the build and shows the message
    - a remediation hint rendered for humans on stderr with Rich

The hint depends on the failure kind and, for a missing library, on whether
the library or only its headers were missing.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console, Group
from rich.text import Text

from .directives import DirectiveWriter
from .discovery.override import DEFAULT_INCLUDE_VAR, DEFAULT_LIB_VAR
from .errors import (
    ConfigurationError,
    CrossCompilationUnsupportedError,
    FailureKind,
    NotFoundError,
    NotFoundReason,
    OrtoolsBuildError,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A failure paired with what the user should do about it."""

    kind: FailureKind
    message: str
    hint: str
    details: tuple[tuple[str, str], ...] = field(default_factory=tuple)


class DiagnosticReporter:
    """Turns the first failure of a run into an error directive and a hint."""

    def __init__(
        self,
        writer: DirectiveWriter,
        console: Optional[Console] = None,
        lib_var: str = DEFAULT_LIB_VAR,
        include_var: str = DEFAULT_INCLUDE_VAR,
    ):
        self.writer = writer
        self.console = console if console is not None else Console(stderr=True)
        self.lib_var = lib_var
        self.include_var = include_var
        self.reported: Optional[Diagnostic] = None

    def _override_vars(self) -> str:
        return f"`{self.lib_var}` and `{self.include_var}`"

    def remediation_for(self, failure: OrtoolsBuildError) -> str:
        """Pick the remediation hint for a failure."""
        if isinstance(failure, ConfigurationError):
            return (
                f"Set both {self._override_vars()} to use a custom OR-Tools location, "
                "or unset both to use automatic discovery."
            )

        if isinstance(failure, NotFoundError):
            if failure.reason is NotFoundReason.HEADERS_MISSING:
                return (
                    "Install the OR-Tools development headers (the `ortools/` include directory) "
                    f"or provide the {self._override_vars()} env vars."
                )
            install_command = failure.context.get("install_command")
            if install_command:
                return f"Run `{install_command}` or provide the {self._override_vars()} env vars."
            return (
                "If not installed in a standard location provide the "
                f"{self._override_vars()} env vars."
            )

        if isinstance(failure, UnsupportedPlatformError):
            return (
                f"unsupported target: {failure.triple}. "
                f"Alternatively provide the {self._override_vars()} env vars."
            )

        if isinstance(failure, CrossCompilationUnsupportedError):
            return f"Build on the target machine (host {failure.host}, target {failure.target})."

        if failure.kind is FailureKind.SCHEMA_GENERATION:
            return "Check that grpcio-tools is installed and that the .proto files compile."

        return (
            "Check that a C++17 compiler is available (set `CXX` to choose one) "
            "and that the OR-Tools headers match the installed library."
        )

    def diagnose(self, failure: OrtoolsBuildError) -> Diagnostic:
        details = [(key, value) for key, value in failure.context.items() if value]
        if isinstance(failure, NotFoundError) and failure.searched:
            details.append(("searched", ", ".join(failure.searched)))
        return Diagnostic(
            kind=failure.kind,
            message=failure.message,
            hint=self.remediation_for(failure),
            details=tuple(details),
        )

    def report(self, failure: OrtoolsBuildError) -> Diagnostic:
        """Emit the one diagnostic of this run.

        Raises:
            RuntimeError: If a diagnostic was already reported for this run
        """
        if self.reported is not None:
            raise RuntimeError(f"diagnostic already reported for this run: {self.reported.message}")

        diagnostic = self.diagnose(failure)
        self.reported = diagnostic

        logger.debug(f"{diagnostic.kind.value}: {diagnostic.message}")
        self.writer.emit_error(diagnostic.kind.value, diagnostic.message, diagnostic.hint)
        self.console.print(self.render(diagnostic))
        return diagnostic

    def render(self, diagnostic: Diagnostic) -> Group:
        lines = [
            Text.assemble(("error", "bold red"), f": {diagnostic.message}"),
            Text.assemble(("  hint", "bold cyan"), f": {diagnostic.hint}"),
        ]
        for key, value in diagnostic.details:
            lines.append(Text(f"  {key}: {value}", style="dim"))
        return Group(*lines)
