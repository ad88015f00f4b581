"""Interop shim compilation.

Compiles the single C++ shim source against the discovered OR-Tools
headers and packs the object into a static archive: compile with the C++
compiler, then `ar rcs`.
"""

import logging
from pathlib import Path
from typing import Protocol, Sequence

from .errors import CompilationError
from .models import CompiledShim
from .result import StageResult
from .subprocess_utils import format_command, run_tool, stderr_preview

logger = logging.getLogger(__name__)

# Same on every platform. OR_PROTO_DLL is the export annotation in the
# generated OR-Tools protobuf headers; it must expand to nothing.
SHIM_FLAGS: tuple[str, ...] = ("-std=c++17", "-DOR_PROTO_DLL=")


class NativeCompiler(Protocol):
    """Opaque pass/fail compiler producing one static archive."""

    def compile(
        self,
        source: Path,
        include_dir: str,
        out_dir: Path,
        archive_name: str,
        flags: Sequence[str],
    ) -> StageResult[CompiledShim]:
        ...


def archive_link_name(archive_name: str) -> str:
    """Strip the lib prefix and .a suffix: 'cp_sat_wrapper.a' -> 'cp_sat_wrapper'."""
    name = archive_name
    if name.endswith(".a"):
        name = name[:-2]
    if name.startswith("lib"):
        name = name[3:]
    return name


class ShimCompiler:
    """Compiles the shim with $CXX and archives it with $AR."""

    def __init__(self, cxx: str = "c++", ar: str = "ar"):
        self.cxx = cxx
        self.ar = ar

    def compile_command(self, source: Path, include_dir: str, obj_path: Path, flags: Sequence[str]) -> list[str]:
        return [self.cxx, *flags, "-I", include_dir, "-c", str(source), "-o", str(obj_path)]

    def archive_command(self, archive_path: Path, obj_path: Path) -> list[str]:
        return [self.ar, "rcs", str(archive_path), str(obj_path)]

    def compile(
        self,
        source: Path,
        include_dir: str,
        out_dir: Path,
        archive_name: str,
        flags: Sequence[str] = SHIM_FLAGS,
    ) -> StageResult[CompiledShim]:
        try:
            source_found = source.is_file()
        except OSError as e:
            return StageResult.fail(CompilationError(f"Cannot read shim source {source}: {e}", {"source": str(source)}))
        if not source_found:
            return StageResult.fail(CompilationError(f"Shim source not found: {source}", {"source": str(source)}))

        link_name = archive_link_name(archive_name)
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return StageResult.fail(
                CompilationError(f"Failed to create output directory {out_dir}: {e}", {"out_dir": str(out_dir)})
            )
        obj_path = out_dir / f"{source.stem}.o"
        archive_path = out_dir / f"lib{link_name}.a"

        for cmd in (
            self.compile_command(source, include_dir, obj_path, flags),
            self.archive_command(archive_path, obj_path),
        ):
            try:
                result = run_tool(cmd)
            except OSError as e:
                return StageResult.fail(
                    CompilationError(f"Failed to run {cmd[0]}: {e}", {"command": format_command(cmd)})
                )
            if result.returncode != 0:
                return StageResult.fail(
                    CompilationError(
                        f"{Path(cmd[0]).name} exited with {result.returncode} building {archive_path.name}",
                        {"command": format_command(cmd), "stderr": stderr_preview(result.stderr)},
                    )
                )

        logger.debug(f"built {archive_path}")
        return StageResult.ok(
            CompiledShim(archive_path=str(archive_path), link_name=link_name, search_dir=str(out_dir))
        )
