"""
Type-safe models for the platform candidate tables.

The JSON tables are parsed once into these frozen dataclasses so locators
never do dict.get() lookups, and tests can build synthetic tables directly.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class HomebrewTable:
    """
    Homebrew discovery table for macOS.

    Attributes:
        name: Human-readable strategy name
        family: Platform family label used in messages ("Apple")
        supported_arches: Architectures with a known Homebrew layout
        prefixes: Package prefixes to probe, highest priority first
        lib_dir: Library directory registered when any prefix exists
        include_dir: Include directory returned when any prefix exists
        install_command: Command suggested when nothing is installed
    """

    name: str
    family: str
    supported_arches: tuple[str, ...]
    prefixes: tuple[str, ...]
    lib_dir: str
    include_dir: str
    install_command: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HomebrewTable":
        return cls(
            name=data["name"],
            family=data.get("family", "Apple"),
            supported_arches=tuple(data["supported_arches"]),
            prefixes=tuple(data["prefixes"]),
            lib_dir=data["lib_dir"],
            include_dir=data["include_dir"],
            install_command=data["install_command"],
        )


@dataclass(frozen=True)
class LinuxTable:
    """
    Heuristic discovery table for Linux.

    Attributes:
        name: Human-readable strategy name
        family: Platform family label used in messages ("Linux")
        library_file: Shared library file name looked for in lib_dirs
        lib_dirs: Library directories to scan, highest priority first
        header_subdir: Directory that must exist under an include root
        include_roots: Include roots to scan, highest priority first
    """

    name: str
    family: str
    library_file: str
    lib_dirs: tuple[str, ...]
    header_subdir: str
    include_roots: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LinuxTable":
        return cls(
            name=data["name"],
            family=data.get("family", "Linux"),
            library_file=data["library_file"],
            lib_dirs=tuple(data["lib_dirs"]),
            header_subdir=data["header_subdir"],
            include_roots=tuple(data["include_roots"]),
        )
