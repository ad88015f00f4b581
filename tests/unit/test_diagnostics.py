"""Unit tests for DiagnosticReporter remediation and emission."""

import io
import json

import pytest
from conftest import make_writer
from rich.console import Console

from ortools_build import output
from ortools_build.diagnostics import DiagnosticReporter
from ortools_build.directives import DirectiveFormat
from ortools_build.errors import (
    CompilationError,
    ConfigurationError,
    CrossCompilationUnsupportedError,
    FailureKind,
    NotFoundError,
    NotFoundReason,
    SchemaGenerationError,
    UnsupportedPlatformError,
)


@pytest.fixture
def console_buffer():
    return io.StringIO()


@pytest.fixture
def reporter(console_buffer):
    return DiagnosticReporter(make_writer(), console=Console(file=console_buffer, width=200))


ALL_FAILURES = [
    ConfigurationError("OR_TOOLS_LIB_DIR", "OR_TOOLS_INCLUDE_DIR", "OR_TOOLS_LIB_DIR"),
    NotFoundError(
        "Could not find `libortools` library.",
        NotFoundReason.LIBRARY_MISSING,
        "homebrew",
        context={"install_command": "brew install or-tools"},
    ),
    NotFoundError("Could not find `libortools` library.", NotFoundReason.LIBRARY_MISSING, "linux"),
    NotFoundError("Found `libortools` in /usr/lib but not its `ortools` headers.", NotFoundReason.HEADERS_MISSING, "linux"),
    UnsupportedPlatformError("x86_64-pc-windows-msvc"),
    CrossCompilationUnsupportedError("aarch64-unknown-linux-gnu", "x86_64-unknown-linux-gnu"),
    SchemaGenerationError("Failed to compile proto files (protoc exited with 1)"),
    CompilationError("c++ exited with 1 building libcp_sat_wrapper.a"),
]


class TestRemediation:
    """Each failure gets its own actionable hint."""

    def test_hints_are_distinct(self, reporter):
        hints = [reporter.remediation_for(f) for f in ALL_FAILURES]
        assert len(set(hints)) == len(hints)

    def test_configuration_names_both_variables(self, reporter):
        hint = reporter.remediation_for(ALL_FAILURES[0])
        assert "OR_TOOLS_LIB_DIR" in hint
        assert "OR_TOOLS_INCLUDE_DIR" in hint

    def test_homebrew_not_found_names_install_command(self, reporter):
        hint = reporter.remediation_for(ALL_FAILURES[1])
        assert "brew install or-tools" in hint
        assert "OR_TOOLS_LIB_DIR" in hint

    def test_linux_library_missing_mentions_standard_location(self, reporter):
        hint = reporter.remediation_for(ALL_FAILURES[2])
        assert "standard location" in hint

    def test_headers_missing_differs_from_library_missing(self, reporter):
        library_hint = reporter.remediation_for(ALL_FAILURES[2])
        headers_hint = reporter.remediation_for(ALL_FAILURES[3])
        assert library_hint != headers_hint
        assert "headers" in headers_hint

    def test_unsupported_target_names_triple(self, reporter):
        hint = reporter.remediation_for(ALL_FAILURES[4])
        assert hint.startswith("unsupported target: x86_64-pc-windows-msvc")

    def test_cross_compilation_names_both_triples(self, reporter):
        hint = reporter.remediation_for(ALL_FAILURES[5])
        assert "aarch64-unknown-linux-gnu" in hint
        assert "x86_64-unknown-linux-gnu" in hint

    def test_custom_variable_names_in_hints(self):
        reporter = DiagnosticReporter(
            make_writer(), console=Console(file=io.StringIO()), lib_var="MY_LIB", include_var="MY_INC"
        )
        hint = reporter.remediation_for(ALL_FAILURES[2])
        assert "MY_LIB" in hint
        assert "OR_TOOLS_LIB_DIR" not in hint


class TestReport:
    """Tests for DiagnosticReporter.report()"""

    def test_writes_error_directive(self, reporter):
        reporter.report(ALL_FAILURES[4])

        line = reporter.writer.stream.getvalue()
        assert line.startswith("cargo::error=Unsupported platform: x86_64-pc-windows-msvc")
        assert line.count("\n") == 1

    def test_renders_hint_on_console(self, reporter, console_buffer):
        reporter.report(ALL_FAILURES[0])

        rendered = console_buffer.getvalue()
        assert "error" in rendered
        assert "hint" in rendered
        assert "must be set together" in rendered

    def test_message_shown_once_for_humans(self, reporter, console_buffer):
        """The console render is the only human-facing copy of the message."""
        reporter.report(ALL_FAILURES[0])

        human_text = console_buffer.getvalue() + output._output_stream.getvalue()
        assert human_text.count("must be set together") == 1

    def test_context_details_rendered(self, reporter, console_buffer):
        failure = CompilationError("c++ exited with 1", {"command": "c++ -c shim.cpp", "stderr": "fatal error"})
        reporter.report(failure)

        rendered = console_buffer.getvalue()
        assert "command: c++ -c shim.cpp" in rendered
        assert "stderr: fatal error" in rendered

    def test_second_report_rejected(self, reporter):
        """Only the first failure of a run is reported."""
        reporter.report(ALL_FAILURES[0])
        with pytest.raises(RuntimeError):
            reporter.report(ALL_FAILURES[1])

    def test_returns_diagnostic(self, reporter):
        diagnostic = reporter.report(ALL_FAILURES[3])

        assert diagnostic.kind is FailureKind.NOT_FOUND
        assert diagnostic.message == ALL_FAILURES[3].message

    def test_json_error_document(self):
        writer = make_writer(DirectiveFormat.JSON)
        reporter = DiagnosticReporter(writer, console=Console(file=io.StringIO()))
        reporter.report(ALL_FAILURES[6])

        payload = json.loads(writer.stream.getvalue())
        assert payload["error"]["kind"] == "schema_generation"
        assert "grpcio-tools" in payload["error"]["hint"]
