"""Failure taxonomy for the ortools-build pipeline.

Every failure the pipeline can produce is one of the classes below. They are
Exception subclasses so a caller outside the pipeline can raise them, but the
pipeline itself passes them around as values inside a StageResult.

Remediation text is not stored here; see ortools_build.diagnostics.
"""

from enum import Enum
from typing import Mapping, Optional


class FailureKind(Enum):
    """Which stage contract was broken."""

    CONFIGURATION = "configuration"
    NOT_FOUND = "not_found"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    CROSS_COMPILATION = "cross_compilation"
    SCHEMA_GENERATION = "schema_generation"
    COMPILATION = "compilation"


class NotFoundReason(Enum):
    """Sub-reason of a NotFoundError."""

    LIBRARY_MISSING = "library_missing"
    HEADERS_MISSING = "headers_missing"


class OrtoolsBuildError(Exception):
    """Base class carrying the failure kind and diagnostic context."""

    kind: FailureKind

    def __init__(self, message: str, context: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ConfigurationError(OrtoolsBuildError):
    """The override variables were only partially set."""

    kind = FailureKind.CONFIGURATION

    def __init__(self, lib_var: str, include_var: str, present: str):
        super().__init__(
            f"'{lib_var}' and '{include_var}' must be set together.",
            {"lib_var": lib_var, "include_var": include_var, "present": present},
        )
        self.lib_var = lib_var
        self.include_var = include_var


class NotFoundError(OrtoolsBuildError):
    """Platform discovery could not find the library or its headers."""

    kind = FailureKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        reason: NotFoundReason,
        platform: str,
        searched: tuple[str, ...] = (),
        context: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(message, context)
        self.reason = reason
        self.platform = platform
        self.searched = searched


class UnsupportedPlatformError(OrtoolsBuildError):
    """The target triple has no discovery strategy."""

    kind = FailureKind.UNSUPPORTED_PLATFORM

    def __init__(self, triple: str, family: str = ""):
        label = f"Unsupported {family} platform" if family else "Unsupported platform"
        super().__init__(f"{label}: {triple}", {"triple": triple})
        self.triple = triple


class CrossCompilationUnsupportedError(OrtoolsBuildError):
    kind = FailureKind.CROSS_COMPILATION

    def __init__(self, host: str, target: str):
        super().__init__(
            "Cross-compilation is not supported.",
            {"host": host, "target": target},
        )
        self.host = host
        self.target = target


class SchemaGenerationError(OrtoolsBuildError):
    kind = FailureKind.SCHEMA_GENERATION


class CompilationError(OrtoolsBuildError):
    kind = FailureKind.COMPILATION
