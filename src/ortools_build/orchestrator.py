"""
Build orchestration for the OR-Tools interop layer.

One run walks five stages in a fixed order and stops at the first failure:

    1. Validate          host triple must equal target triple
    2. GenerateSchema    protobuf bindings for the CP-SAT schemas
    3. LocateLibrary     user override, else platform discovery
    4. CompileShim       C++ shim -> static archive (skipped for doc builds)
    5. EmitDirectives    link search paths and libraries, written once

The order is a correctness requirement: discovery must never run for a
cross-compilation attempt, and nothing is written to the directive stream
unless every earlier stage succeeded. Each stage returns a StageResult; a
failed result is handed to the DiagnosticReporter and the run ends.
"""

import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .compiler import NativeCompiler, ShimCompiler
from .config import BuildConfig
from .diagnostics import Diagnostic, DiagnosticReporter
from .directives import DirectiveWriter
from .discovery import locator_for, resolve_override
from .errors import CrossCompilationUnsupportedError, OrtoolsBuildError
from .host import HostProvider, TargetTriple
from .models import BuildDirective, CompiledShim, LibraryLocation
from .output import TimedLogger, log_detail
from .platform_configs import PlatformTables, load_tables
from .result import StageResult
from .schema import ProtocGenerator, SchemaGenerator

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    VALIDATE = "validate"
    GENERATE_SCHEMA = "generate_schema"
    LOCATE_LIBRARY = "locate_library"
    COMPILE_SHIM = "compile_shim"
    EMIT_DIRECTIVES = "emit_directives"


TOTAL_STAGES = len(PipelineStage)


@dataclass(frozen=True)
class PipelineOutcome:
    """Result of one orchestrator run.

    Attributes:
        success: True if directives were emitted
        directive: The emitted directive set (None on failure)
        failed_stage: Stage that stopped the run (None on success)
        diagnostic: The single diagnostic reported (None on success)
        completed: Stages that finished successfully, in order
        build_time: Wall-clock seconds for the run
    """

    success: bool
    directive: Optional[BuildDirective]
    failed_stage: Optional[PipelineStage]
    diagnostic: Optional[Diagnostic]
    completed: tuple[PipelineStage, ...]
    build_time: float


class BuildOrchestrator:
    """
    Runs the OR-Tools build pipeline once.

    Collaborators are injected so every stage can be exercised with fakes:
    the host provider for env reads and path probes, the schema generator,
    the native compiler, and the directive writer.
    """

    def __init__(
        self,
        config: BuildConfig,
        host: HostProvider,
        generator: Optional[SchemaGenerator] = None,
        compiler: Optional[NativeCompiler] = None,
        writer: Optional[DirectiveWriter] = None,
        reporter: Optional[DiagnosticReporter] = None,
        tables: Optional[PlatformTables] = None,
    ):
        self.config = config
        self.host = host
        self.generator = generator if generator is not None else ProtocGenerator()
        self.compiler = compiler if compiler is not None else ShimCompiler(cxx=config.cxx, ar=config.ar)
        self.writer = writer if writer is not None else DirectiveWriter(sys.stdout, config.directive_format)
        self.reporter = (
            reporter
            if reporter is not None
            else DiagnosticReporter(
                self.writer,
                lib_var=config.lib_env_var,
                include_var=config.include_env_var,
            )
        )
        self._tables = tables

    def _platform_tables(self) -> PlatformTables:
        if self._tables is None:
            self._tables = load_tables()
        return self._tables

    def validate(self) -> StageResult[TargetTriple]:
        """Stage 1: reject cross-compilation."""
        host, target = self.config.host, self.config.target
        if host != target:
            return StageResult.fail(CrossCompilationUnsupportedError(host.raw, target.raw))
        return StageResult.ok(target)

    def generate_schema(self) -> StageResult[Path]:
        """Stage 2: generate protobuf bindings into the output directory."""
        return self.generator.generate(
            self.config.proto_files,
            self.config.proto_include_dirs,
            self.config.out_dir,
        )

    def locate_library(self) -> StageResult[LibraryLocation]:
        """Stage 3: override first; platform discovery only when none is set."""
        override = resolve_override(self.host, self.config.lib_env_var, self.config.include_env_var)
        if not override.is_ok:
            return override.propagate()
        if override.value is not None:
            return StageResult.ok(override.value)

        locator = locator_for(self.config.target, self._platform_tables())
        if not locator.is_ok:
            return locator.propagate()
        strategy = locator.unwrap()
        logger.debug(f"no override set, using {strategy.name}")
        return strategy.locate(self.host)

    def compile_shim(self, location: LibraryLocation) -> StageResult[Optional[CompiledShim]]:
        """Stage 4: compile the shim, or do nothing for documentation builds."""
        if self.config.skip_compile:
            return StageResult.ok(None)
        result = self.compiler.compile(
            self.config.shim_source,
            location.include_dir,
            self.config.out_dir,
            self.config.archive_name,
            self.config.cxx_flags,
        )
        if not result.is_ok:
            return result.propagate()
        return StageResult.ok(result.value)

    def assemble_directive(self, location: LibraryLocation, shim: Optional[CompiledShim]) -> BuildDirective:
        """Collect the link configuration in emission order."""
        search_paths = list(location.link_search_paths)
        if shim is not None and shim.search_dir not in search_paths:
            search_paths.append(shim.search_dir)

        return BuildDirective(
            link_search_paths=tuple(search_paths),
            archive=shim.link_name if shim is not None else None,
            link_libs=self.config.link_libs,
            rerun_if_env_changed=(self.config.lib_env_var, self.config.include_env_var),
            rerun_if_changed=() if self.config.skip_compile else (self.config.shim_display_path,),
        )

    def run(self) -> PipelineOutcome:
        """Execute all stages in order, stopping at the first failure."""
        start_time = time.time()
        completed: list[PipelineStage] = []

        def fail(stage: PipelineStage, failure: OrtoolsBuildError) -> PipelineOutcome:
            diagnostic = self.reporter.report(failure)
            return PipelineOutcome(
                success=False,
                directive=None,
                failed_stage=stage,
                diagnostic=diagnostic,
                completed=tuple(completed),
                build_time=time.time() - start_time,
            )

        with TimedLogger("Validating host and target", phase=(1, TOTAL_STAGES)) as step:
            step.detail(f"Target: {self.config.target}")
            validated = self.validate()
            if not validated.is_ok:
                step.mark_failed()
                return fail(PipelineStage.VALIDATE, validated.error)
        completed.append(PipelineStage.VALIDATE)

        with TimedLogger("Generating protobuf bindings", phase=(2, TOTAL_STAGES)) as step:
            generated = self.generate_schema()
            if not generated.is_ok:
                step.mark_failed()
                return fail(PipelineStage.GENERATE_SCHEMA, generated.error)
            step.detail(f"Bindings: {generated.value}")
        completed.append(PipelineStage.GENERATE_SCHEMA)

        with TimedLogger("Locating OR-Tools", phase=(3, TOTAL_STAGES)) as step:
            located = self.locate_library()
            if not located.is_ok:
                step.mark_failed()
                return fail(PipelineStage.LOCATE_LIBRARY, located.error)
            location = located.unwrap()
            step.detail(f"Found via: {location.source}")
            step.detail(f"Include: {location.include_dir}")
            for path in location.link_search_paths:
                step.detail(f"Library search path: {path}")
        completed.append(PipelineStage.LOCATE_LIBRARY)

        with TimedLogger("Compiling interop shim", phase=(4, TOTAL_STAGES)) as step:
            if self.config.skip_compile:
                step.detail("Skipped (documentation build)")
            compiled = self.compile_shim(location)
            if not compiled.is_ok:
                step.mark_failed()
                return fail(PipelineStage.COMPILE_SHIM, compiled.error)
            if compiled.value is not None:
                step.detail(f"Archive: {compiled.value.archive_path}")
        completed.append(PipelineStage.COMPILE_SHIM)

        with TimedLogger("Emitting link directives", phase=(5, TOTAL_STAGES)):
            directive = self.assemble_directive(location, compiled.value)
            self.writer.emit(directive)
        completed.append(PipelineStage.EMIT_DIRECTIVES)

        build_time = time.time() - start_time
        log_detail(f"Build script finished in {build_time:.2f}s", verbose_only=True)
        return PipelineOutcome(
            success=True,
            directive=directive,
            failed_stage=None,
            diagnostic=None,
            completed=tuple(completed),
            build_time=build_time,
        )
