"""Platform-specific OR-Tools discovery.

OR-Tools ships no pkg-config file, so when the user gives no override the
library has to be found by probing well-known locations. Each supported
platform family has a locator; every other triple is rejected before any
probing happens.

Strategies:
    HomebrewLocator       - aarch64 macOS, keyed on the Homebrew package prefix
    LinuxHeuristicLocator - glibc Linux, scanning lib dirs then include roots
"""

import logging
import posixpath
from typing import Optional, Protocol, Sequence

from ..errors import NotFoundError, NotFoundReason, UnsupportedPlatformError
from ..host import HostProvider, TargetTriple
from ..models import LibraryLocation
from ..platform_configs import HomebrewTable, LinuxTable, PlatformTables
from ..result import StageResult

logger = logging.getLogger(__name__)


class PlatformLibraryLocator(Protocol):
    """Discovery strategy for one platform family."""

    name: str

    def locate(self, host: HostProvider) -> StageResult[LibraryLocation]:
        """Find the library directory and include directory on this host."""
        ...


def first_existing(host: HostProvider, candidates: Sequence[str]) -> Optional[str]:
    """Return the first candidate that exists, probing in order.

    Probing stops at the first hit; later candidates are never checked.
    """
    for candidate in candidates:
        if host.path_exists(candidate):
            return candidate
    return None


class HomebrewLocator:
    """Finds OR-Tools installed with Homebrew on Apple silicon.

    The package prefix only signals that the formula is installed; the
    library and headers are used from Homebrew's shared lib/include roots.
    """

    def __init__(self, table: HomebrewTable):
        self.table = table
        self.name = table.name

    def locate(self, host: HostProvider) -> StageResult[LibraryLocation]:
        prefix = first_existing(host, self.table.prefixes)
        if prefix is None:
            return StageResult.fail(
                NotFoundError(
                    "Could not find `libortools` library.",
                    reason=NotFoundReason.LIBRARY_MISSING,
                    platform="homebrew",
                    searched=self.table.prefixes,
                    context={"install_command": self.table.install_command},
                )
            )

        logger.debug(f"Homebrew prefix {prefix} exists")
        return StageResult.ok(
            LibraryLocation(
                include_dir=self.table.include_dir,
                link_search_paths=(self.table.lib_dir,),
                source=self.name,
            )
        )


class LinuxHeuristicLocator:
    """Finds OR-Tools in conventional Linux system directories.

    Two independent ordered scans: first the library directories for the
    shared object, then the include roots for the header directory. The
    include scan only runs once the library has been found.
    """

    def __init__(self, table: LinuxTable):
        self.table = table
        self.name = table.name

    def locate(self, host: HostProvider) -> StageResult[LibraryLocation]:
        lib_candidates = [posixpath.join(d, self.table.library_file) for d in self.table.lib_dirs]
        lib_hit = first_existing(host, lib_candidates)
        if lib_hit is None:
            return StageResult.fail(
                NotFoundError(
                    "Could not find `libortools` library.",
                    reason=NotFoundReason.LIBRARY_MISSING,
                    platform="linux",
                    searched=tuple(lib_candidates),
                )
            )
        lib_dir = self.table.lib_dirs[lib_candidates.index(lib_hit)]
        logger.debug(f"Found {self.table.library_file} in {lib_dir}")

        header_candidates = [posixpath.join(r, self.table.header_subdir) for r in self.table.include_roots]
        header_hit = first_existing(host, header_candidates)
        if header_hit is None:
            return StageResult.fail(
                NotFoundError(
                    f"Found `libortools` in {lib_dir} but not its `{self.table.header_subdir}` headers.",
                    reason=NotFoundReason.HEADERS_MISSING,
                    platform="linux",
                    searched=tuple(header_candidates),
                    context={"lib_dir": lib_dir},
                )
            )
        include_dir = self.table.include_roots[header_candidates.index(header_hit)]
        logger.debug(f"Found {self.table.header_subdir}/ headers under {include_dir}")

        return StageResult.ok(
            LibraryLocation(
                include_dir=include_dir,
                link_search_paths=(lib_dir,),
                source=self.name,
            )
        )


def locator_for(target: TargetTriple, tables: PlatformTables) -> StageResult[PlatformLibraryLocator]:
    """Pick the discovery strategy for a target, or reject it.

    Rejection never probes the filesystem.
    """
    if target.is_apple_darwin:
        if target.arch not in tables.darwin.supported_arches:
            return StageResult.fail(UnsupportedPlatformError(target.raw, family=tables.darwin.family))
        return StageResult.ok(HomebrewLocator(tables.darwin))

    if target.is_linux_gnu:
        return StageResult.ok(LinuxHeuristicLocator(tables.linux))

    return StageResult.fail(UnsupportedPlatformError(target.raw))
