"""Candidate path tables for platform library discovery.

Each supported platform family has a JSON table listing the locations to
probe. List order is priority order: the first existing entry wins and
later entries are never consulted. Tables ship as package data and are read
with importlib.resources so they work from an installed wheel.

Tables:
    darwin.json - Homebrew prefixes and the brew lib/include roots
    linux.json  - conventional library directories and include roots
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from typing import Any

from .table_model import HomebrewTable, LinuxTable

__all__ = [
    "HomebrewTable",
    "LinuxTable",
    "PlatformTables",
    "list_available_tables",
    "load_table",
    "load_tables",
]


def load_table(name: str) -> dict[str, Any] | None:
    """Load a raw platform table by name.

    Args:
        name: Table name without extension (e.g. 'darwin', 'linux')

    Returns:
        The table dictionary if found, None otherwise.
    """
    if not name:
        return None

    try:
        table_file = resources.files(__package__).joinpath(f"{name}.json")
        if table_file.is_file():
            with table_file.open("r", encoding="utf-8") as f:
                return json.load(f)
    except (FileNotFoundError, TypeError):
        pass

    return None


def list_available_tables() -> list[str]:
    """List the names of all packaged tables (without .json extension)."""
    names = []
    try:
        for f in resources.files(__package__).iterdir():
            if f.name.endswith(".json") and f.is_file():
                names.append(f.name[:-5])
    except (TypeError, AttributeError, FileNotFoundError):
        pass
    return sorted(names)


@dataclass(frozen=True)
class PlatformTables:
    """The parsed tables for every supported platform family."""

    darwin: HomebrewTable
    linux: LinuxTable


def load_tables() -> PlatformTables:
    """Load and parse the packaged darwin and linux tables.

    Raises:
        FileNotFoundError: If a packaged table is missing (broken install)
    """
    darwin = load_table("darwin")
    linux = load_table("linux")
    if darwin is None or linux is None:
        raise FileNotFoundError(
            f"Platform tables missing from package. Available: {list_available_tables()}"
        )
    return PlatformTables(
        darwin=HomebrewTable.from_dict(darwin),
        linux=LinuxTable.from_dict(linux),
    )
