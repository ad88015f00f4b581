"""Build Config - everything one pipeline run needs, resolved up front.

BuildConfig is created once per run from the host environment plus any CLI
overrides, and then only read. Environment names follow the Cargo build
script conventions so the tool can run as, or be called from, a build.rs:

    HOST, TARGET          host and target triples
    OUT_DIR               where generated bindings and the archive go
    CARGO_MANIFEST_DIR    root that the schema and shim paths are relative to
    DOCS_RS               documentation-only build, skip native compilation
    CXX, AR               C++ compiler and archiver
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .compiler import SHIM_FLAGS
from .directives import DirectiveFormat
from .discovery.override import DEFAULT_INCLUDE_VAR, DEFAULT_LIB_VAR
from .host import HostProvider, TargetTriple, detect_host_triple

PROTO_FILES: tuple[str, ...] = ("src/cp_model.proto", "src/sat_parameters.proto")
PROTO_INCLUDE_DIRS: tuple[str, ...] = ("src/",)
SHIM_SOURCE = "src/cp_sat_wrapper.cpp"
ARCHIVE_NAME = "cp_sat_wrapper.a"
SOLVER_LIB = "ortools"
PROTOBUF_LIB = "protobuf"

DOCS_BUILD_VAR = "DOCS_RS"


@dataclass(frozen=True)
class BuildConfig:
    """Resolved configuration for one run.

    Attributes:
        host: Triple of the machine running the build
        target: Triple being built for (must equal host)
        manifest_dir: Project root; relative schema and shim paths resolve against it
        out_dir: Output directory for bindings and the shim archive
        proto_files: Schema sources handed to the generator, in order
        proto_include_dirs: Import search directories for the generator
        shim_source: The C++ interop shim
        archive_name: Archive name as given to the compiler (e.g. "cp_sat_wrapper.a")
        cxx_flags: Fixed flags for the shim compile
        link_libs: Libraries linked after the shim archive, in order
        lib_env_var: Name of the library directory override variable
        include_env_var: Name of the include directory override variable
        skip_compile: Documentation build; do not compile the shim
        cxx: C++ compiler executable
        ar: Archiver executable
        directive_format: Format of the directive stream
        verbose: Verbose progress output
    """

    host: TargetTriple
    target: TargetTriple
    manifest_dir: Path
    out_dir: Path
    proto_files: tuple[Path, ...]
    proto_include_dirs: tuple[Path, ...]
    shim_source: Path
    archive_name: str = ARCHIVE_NAME
    cxx_flags: tuple[str, ...] = SHIM_FLAGS
    link_libs: tuple[str, ...] = (SOLVER_LIB, PROTOBUF_LIB)
    lib_env_var: str = DEFAULT_LIB_VAR
    include_env_var: str = DEFAULT_INCLUDE_VAR
    skip_compile: bool = False
    cxx: str = "c++"
    ar: str = "ar"
    directive_format: DirectiveFormat = DirectiveFormat.CARGO
    verbose: bool = False

    @classmethod
    def from_host(
        cls,
        host: HostProvider,
        manifest_dir: Optional[Path] = None,
        out_dir: Optional[Path] = None,
        host_triple: Optional[str] = None,
        target_triple: Optional[str] = None,
        skip_compile: bool = False,
        **overrides: Any,
    ) -> "BuildConfig":
        """Resolve a config from the environment; explicit arguments win.

        When HOST is unset the running machine's triple is used, and when
        TARGET is unset it defaults to the host.
        """
        raw_host = host_triple or host.read_var("HOST")
        host_t = TargetTriple.parse(raw_host) if raw_host else detect_host_triple()
        raw_target = target_triple or host.read_var("TARGET")
        target_t = TargetTriple.parse(raw_target) if raw_target else host_t

        if manifest_dir is None:
            env_manifest = host.read_var("CARGO_MANIFEST_DIR")
            manifest_dir = Path(env_manifest) if env_manifest else Path.cwd()
        if out_dir is None:
            env_out = host.read_var("OUT_DIR")
            out_dir = Path(env_out) if env_out else manifest_dir / "target" / "ortools-build"

        values: dict[str, Any] = dict(
            host=host_t,
            target=target_t,
            manifest_dir=manifest_dir,
            out_dir=out_dir,
            proto_files=tuple(manifest_dir / p for p in PROTO_FILES),
            proto_include_dirs=tuple(manifest_dir / d for d in PROTO_INCLUDE_DIRS),
            shim_source=manifest_dir / SHIM_SOURCE,
            skip_compile=skip_compile or host.read_var(DOCS_BUILD_VAR) is not None,
            cxx=host.read_var("CXX") or "c++",
            ar=host.read_var("AR") or "ar",
        )
        values.update(overrides)
        return cls(**values)

    @property
    def shim_display_path(self) -> str:
        """Shim path relative to the manifest dir when possible, for rerun triggers."""
        try:
            return self.shim_source.relative_to(self.manifest_dir).as_posix()
        except ValueError:
            return str(self.shim_source)
