"""Pytest configuration and fixtures for ortools-build tests.

Test doubles for the pipeline's collaborators live here so every test
module can build an orchestrator without touching the real machine:

- FakeHost: HostProvider over an in-memory set of paths and env vars,
  recording every probe and read
- RecordingGenerator / RecordingCompiler: pass/fail collaborators that
  record their calls
"""

import io
import sys
from pathlib import Path
from typing import Iterable, Mapping, Optional

import pytest
from rich.console import Console

from ortools_build.compiler import archive_link_name
from ortools_build.config import BuildConfig
from ortools_build.diagnostics import DiagnosticReporter
from ortools_build.directives import DirectiveFormat, DirectiveWriter
from ortools_build.errors import CompilationError, OrtoolsBuildError, SchemaGenerationError
from ortools_build.host import TargetTriple
from ortools_build.models import CompiledShim
from ortools_build.result import StageResult

LINUX = "x86_64-unknown-linux-gnu"
MAC_ARM = "aarch64-apple-darwin"


class FakeHost:
    """Deterministic HostProvider that counts probes and reads."""

    def __init__(self, paths: Iterable[str] = (), env: Optional[Mapping[str, str]] = None):
        self.paths = set(paths)
        self.env = dict(env or {})
        self.probes: list[str] = []
        self.reads: list[str] = []

    def path_exists(self, path: str) -> bool:
        self.probes.append(path)
        return path in self.paths

    def read_var(self, name: str) -> Optional[str]:
        self.reads.append(name)
        return self.env.get(name) or None


class RecordingGenerator:
    """SchemaGenerator double; fails with `failure` when one is given."""

    def __init__(self, failure: Optional[OrtoolsBuildError] = None):
        self.failure = failure
        self.calls: list[tuple[tuple[Path, ...], tuple[Path, ...], Path]] = []

    def generate(self, proto_files, include_dirs, out_dir):
        self.calls.append((tuple(proto_files), tuple(include_dirs), out_dir))
        if self.failure is not None:
            return StageResult.fail(self.failure)
        return StageResult.ok(out_dir)


class RecordingCompiler:
    """NativeCompiler double; fails with `failure` when one is given."""

    def __init__(self, failure: Optional[OrtoolsBuildError] = None):
        self.failure = failure
        self.calls: list[dict] = []

    def compile(self, source, include_dir, out_dir, archive_name, flags):
        self.calls.append(
            {
                "source": source,
                "include_dir": include_dir,
                "out_dir": out_dir,
                "archive_name": archive_name,
                "flags": tuple(flags),
            }
        )
        if self.failure is not None:
            return StageResult.fail(self.failure)
        link_name = archive_link_name(archive_name)
        return StageResult.ok(
            CompiledShim(
                archive_path=str(out_dir / f"lib{link_name}.a"),
                link_name=link_name,
                search_dir=str(out_dir),
            )
        )


def make_config(
    tmp_path: Path,
    target: str = LINUX,
    host: Optional[str] = None,
    **overrides,
) -> BuildConfig:
    """BuildConfig rooted in tmp_path with explicit triples."""
    manifest_dir = tmp_path / "crate"
    values = dict(
        host=TargetTriple.parse(host or target),
        target=TargetTriple.parse(target),
        manifest_dir=manifest_dir,
        out_dir=tmp_path / "out",
        proto_files=(manifest_dir / "src/cp_model.proto", manifest_dir / "src/sat_parameters.proto"),
        proto_include_dirs=(manifest_dir / "src",),
        shim_source=manifest_dir / "src/cp_sat_wrapper.cpp",
    )
    values.update(overrides)
    return BuildConfig(**values)


def make_writer(fmt: DirectiveFormat = DirectiveFormat.CARGO) -> DirectiveWriter:
    return DirectiveWriter(io.StringIO(), fmt)


def make_reporter(writer: DirectiveWriter) -> DiagnosticReporter:
    return DiagnosticReporter(writer, console=Console(file=io.StringIO(), width=200))


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def generator():
    return RecordingGenerator()


@pytest.fixture
def compiler():
    return RecordingCompiler()


@pytest.fixture
def schema_failure():
    return SchemaGenerationError("Failed to compile proto files (protoc exited with 1)")


@pytest.fixture
def compile_failure():
    return CompilationError("c++ exited with 1 building libcp_sat_wrapper.a")


@pytest.fixture(autouse=True)
def isolate_output_globals():
    """Reset output.py global state before/after each test."""
    from ortools_build import output

    original_start_time = output._start_time
    original_output_stream = output._output_stream
    original_verbose = output._verbose

    output._start_time = None
    output._output_stream = io.StringIO()
    output._verbose = False

    yield

    output._start_time = original_start_time
    output._output_stream = original_output_stream
    output._verbose = original_verbose


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are restored if a test closed them."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__
