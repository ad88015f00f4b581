"""
Command-line interface for ortools-build.

Provides the `ortools-build` command. It is normally run by a build script
(for example a Cargo build.rs) with HOST, TARGET and OUT_DIR already set,
and writes link directives to stdout. All human-facing output goes to
stderr.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ortools_build import __version__
from ortools_build.config import BuildConfig
from ortools_build.directives import DirectiveFormat
from ortools_build.host import SystemHost
from ortools_build.orchestrator import BuildOrchestrator
from ortools_build.output import init_timer, log_header, set_verbose


@dataclass
class BuildArgs:
    """Arguments for a build run."""

    manifest_dir: Optional[Path] = None
    out_dir: Optional[Path] = None
    host: Optional[str] = None
    target: Optional[str] = None
    skip_compile: bool = False
    directive_format: DirectiveFormat = DirectiveFormat.CARGO
    verbose: bool = False


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_command(args: BuildArgs) -> None:
    """Run the pipeline once and exit with its status.

    Examples:
        ortools-build                              # Use HOST/TARGET/OUT_DIR from env
        ortools-build --out-dir build/ortools      # Explicit output directory
        ortools-build --skip-compile               # Documentation build
        ortools-build --format json                # JSON directive document
    """
    init_timer(sys.stderr)
    set_verbose(args.verbose)
    configure_logging(args.verbose)
    log_header("ortools-build", __version__)

    try:
        host = SystemHost()
        config = BuildConfig.from_host(
            host,
            manifest_dir=args.manifest_dir,
            out_dir=args.out_dir,
            host_triple=args.host,
            target_triple=args.target,
            skip_compile=args.skip_compile,
            directive_format=args.directive_format,
            verbose=args.verbose,
        )
        outcome = BuildOrchestrator(config, host).run()
        sys.exit(0 if outcome.success else 1)

    except KeyboardInterrupt:
        print("Build interrupted", file=sys.stderr)
        sys.exit(130)  # Standard exit code for SIGINT


def main() -> None:
    """ortools-build - locate OR-Tools and emit link directives."""
    parser = argparse.ArgumentParser(
        prog="ortools-build",
        description="Locate OR-Tools, build the CP-SAT interop shim and emit link directives",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ortools-build {__version__}",
    )
    parser.add_argument(
        "--manifest-dir",
        type=Path,
        default=None,
        help="Project root holding src/ (default: $CARGO_MANIFEST_DIR or current directory)",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory for bindings and the shim archive (default: $OUT_DIR)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host triple (default: $HOST or the running machine)",
    )
    parser.add_argument(
        "--target",
        default=None,
        help="Target triple (default: $TARGET or the host triple)",
    )
    parser.add_argument(
        "--skip-compile",
        action="store_true",
        help="Documentation build: do not compile the interop shim (also set by $DOCS_RS)",
    )
    parser.add_argument(
        "--format",
        dest="directive_format",
        type=DirectiveFormat,
        choices=list(DirectiveFormat),
        default=DirectiveFormat.CARGO,
        help="Directive stream format (default: cargo)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    parsed = parser.parse_args()
    build_command(
        BuildArgs(
            manifest_dir=parsed.manifest_dir,
            out_dir=parsed.out_dir,
            host=parsed.host,
            target=parsed.target,
            skip_compile=parsed.skip_compile,
            directive_format=parsed.directive_format,
            verbose=parsed.verbose,
        )
    )


if __name__ == "__main__":
    main()
