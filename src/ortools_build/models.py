"""
Value types passed between pipeline stages.

All of them are frozen: a stage builds one, hands it on, and nothing
downstream changes it.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class OverrideConfig:
    """User-forced library location read from the environment.

    Either both directories are set or the override is absent; the resolver
    never constructs a half-filled instance.
    """

    lib_dir: str
    include_dir: str


@dataclass(frozen=True)
class LibraryLocation:
    """Result of library discovery.

    Attributes:
        include_dir: Directory passed to the compiler with -I
        link_search_paths: Library directories registered during discovery, in order
        source: "override" or the name of the locator that found it
    """

    include_dir: str
    link_search_paths: tuple[str, ...]
    source: str


@dataclass(frozen=True)
class CompiledShim:
    """Static archive produced by the shim compiler.

    Attributes:
        archive_path: Full path of the produced archive (lib<name>.a)
        link_name: Name used in the link directive (archive name without lib/.a)
        search_dir: Directory holding the archive
    """

    archive_path: str
    link_name: str
    search_dir: str


@dataclass(frozen=True)
class BuildDirective:
    """Everything the downstream linker step needs, emitted once.

    Attributes:
        link_search_paths: Link search directories, in emission order
        archive: Link name of the compiled shim archive, or None for doc builds
        link_libs: Dynamic libraries to link, in emission order
        rerun_if_env_changed: Environment variables that invalidate this output
        rerun_if_changed: Files that invalidate this output
    """

    link_search_paths: tuple[str, ...]
    archive: Optional[str]
    link_libs: tuple[str, ...]
    rerun_if_env_changed: tuple[str, ...] = field(default_factory=tuple)
    rerun_if_changed: tuple[str, ...] = field(default_factory=tuple)
