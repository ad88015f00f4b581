"""OR-Tools discovery: user override first, platform probing second."""

from .locators import (
    HomebrewLocator,
    LinuxHeuristicLocator,
    PlatformLibraryLocator,
    first_existing,
    locator_for,
)
from .override import DEFAULT_INCLUDE_VAR, DEFAULT_LIB_VAR, read_override, resolve_override

__all__ = [
    "DEFAULT_INCLUDE_VAR",
    "DEFAULT_LIB_VAR",
    "HomebrewLocator",
    "LinuxHeuristicLocator",
    "PlatformLibraryLocator",
    "first_existing",
    "locator_for",
    "read_override",
    "resolve_override",
]
