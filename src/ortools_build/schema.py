"""Protocol-buffer binding generation.

Bindings for the CP-SAT model and parameter schemas are generated with
protoc from grpcio-tools, run as `python -m grpc_tools.protoc` in a child
process so a crashing protoc cannot take the build script down with it.
"""

import logging
import sys
from pathlib import Path
from typing import Protocol, Sequence

from .errors import SchemaGenerationError
from .result import StageResult
from .subprocess_utils import format_command, run_tool, stderr_preview

logger = logging.getLogger(__name__)


class SchemaGenerator(Protocol):
    """Opaque pass/fail code generator for .proto files."""

    def generate(
        self,
        proto_files: Sequence[Path],
        include_dirs: Sequence[Path],
        out_dir: Path,
    ) -> StageResult[Path]:
        """Generate bindings into out_dir and return out_dir."""
        ...


class ProtocGenerator:
    """Runs grpc_tools.protoc to produce Python message modules."""

    def __init__(self, python: str = sys.executable):
        self.python = python

    def build_command(
        self,
        proto_files: Sequence[Path],
        include_dirs: Sequence[Path],
        out_dir: Path,
    ) -> list[str]:
        cmd = [self.python, "-m", "grpc_tools.protoc"]
        cmd.extend(f"-I{d}" for d in include_dirs)
        cmd.append(f"--python_out={out_dir}")
        cmd.extend(str(p) for p in proto_files)
        return cmd

    def generate(
        self,
        proto_files: Sequence[Path],
        include_dirs: Sequence[Path],
        out_dir: Path,
    ) -> StageResult[Path]:
        try:
            missing = [str(p) for p in proto_files if not Path(p).is_file()]
        except OSError as e:
            return StageResult.fail(SchemaGenerationError(f"Failed to compile proto files: {e}"))
        if missing:
            return StageResult.fail(
                SchemaGenerationError(
                    "Failed to compile proto files: missing " + ", ".join(missing),
                    {"missing": ", ".join(missing)},
                )
            )

        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return StageResult.fail(
                SchemaGenerationError(
                    f"Failed to create output directory {out_dir}: {e}",
                    {"out_dir": str(out_dir)},
                )
            )

        cmd = self.build_command(proto_files, include_dirs, out_dir)
        try:
            result = run_tool(cmd)
        except OSError as e:
            return StageResult.fail(
                SchemaGenerationError(
                    f"Failed to compile proto files: {e}",
                    {"command": format_command(cmd)},
                )
            )

        if result.returncode != 0:
            return StageResult.fail(
                SchemaGenerationError(
                    f"Failed to compile proto files (protoc exited with {result.returncode})",
                    {"command": format_command(cmd), "stderr": stderr_preview(result.stderr)},
                )
            )

        logger.debug(f"generated bindings for {len(proto_files)} schema files into {out_dir}")
        return StageResult.ok(out_dir)
