"""User override of the OR-Tools location.

Setting both OR_TOOLS_LIB_DIR and OR_TOOLS_INCLUDE_DIR bypasses platform
discovery entirely, which is also how unsupported platforms are built.
"""

import logging
from typing import Optional

from ..errors import ConfigurationError
from ..host import HostProvider
from ..models import LibraryLocation, OverrideConfig
from ..result import StageResult

logger = logging.getLogger(__name__)

DEFAULT_LIB_VAR = "OR_TOOLS_LIB_DIR"
DEFAULT_INCLUDE_VAR = "OR_TOOLS_INCLUDE_DIR"


def read_override(
    host: HostProvider,
    lib_var: str = DEFAULT_LIB_VAR,
    include_var: str = DEFAULT_INCLUDE_VAR,
) -> StageResult[Optional[OverrideConfig]]:
    """Read the override pair, enforcing that it is all-or-nothing."""
    lib_dir = host.read_var(lib_var)
    include_dir = host.read_var(include_var)

    if lib_dir is not None and include_dir is not None:
        return StageResult.ok(OverrideConfig(lib_dir=lib_dir, include_dir=include_dir))

    if lib_dir is None and include_dir is None:
        return StageResult.ok(None)

    present = lib_var if lib_dir is not None else include_var
    logger.debug(f"override incomplete: only {present} is set")
    return StageResult.fail(ConfigurationError(lib_var, include_var, present))


def resolve_override(
    host: HostProvider,
    lib_var: str = DEFAULT_LIB_VAR,
    include_var: str = DEFAULT_INCLUDE_VAR,
) -> StageResult[Optional[LibraryLocation]]:
    """Turn a complete override into a LibraryLocation.

    Returns:
        ok(None) when no override is set, ok(location) when both variables
        are set, fail(ConfigurationError) when only one is. Never touches
        the filesystem.
    """
    result = read_override(host, lib_var, include_var)
    if not result.is_ok:
        return result.propagate()

    override = result.value
    if override is None:
        return StageResult.ok(None)

    logger.info(f"Using {lib_var}={override.lib_dir} and {include_var}={override.include_dir}")
    return StageResult.ok(
        LibraryLocation(
            include_dir=override.include_dir,
            link_search_paths=(override.lib_dir,),
            source="override",
        )
    )
