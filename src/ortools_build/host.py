"""Host access and target triples.

All environment reads and filesystem existence checks made by the pipeline
go through a HostProvider, so discovery can be exercised against a fake
filesystem instead of the build machine.
"""

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class HostProvider(Protocol):
    """Read-only view of the build machine."""

    def path_exists(self, path: str) -> bool:
        """Return True if a file or directory exists at path."""
        ...

    def read_var(self, name: str) -> Optional[str]:
        """Return an environment variable, or None when unset or empty."""
        ...


class SystemHost:
    """HostProvider backed by the real process environment and filesystem."""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self._env = os.environ if env is None else env

    def path_exists(self, path: str) -> bool:
        exists = os.path.exists(path)
        logger.debug(f"probe {path}: {'found' if exists else 'missing'}")
        return exists

    def read_var(self, name: str) -> Optional[str]:
        value = self._env.get(name)
        return value or None


@dataclass(frozen=True)
class TargetTriple:
    """Architecture-vendor-OS-ABI identifier of a build target.

    Two triples are equal when their raw identifiers are equal; the parsed
    components are for strategy selection only.

    Attributes:
        raw: The identifier as given (e.g. "x86_64-unknown-linux-gnu")
        arch: First component (e.g. "x86_64", "aarch64")
        vendor: Second component (e.g. "unknown", "apple")
        os: Third component (e.g. "linux", "darwin")
        abi: Remaining components joined with "-" (e.g. "gnu"), may be empty
    """

    raw: str
    arch: str = field(compare=False, default="")
    vendor: str = field(compare=False, default="")
    os: str = field(compare=False, default="")
    abi: str = field(compare=False, default="")

    @classmethod
    def parse(cls, raw: str) -> "TargetTriple":
        parts = raw.split("-")
        arch = parts[0] if parts else ""
        vendor = parts[1] if len(parts) > 1 else ""
        os_name = parts[2] if len(parts) > 2 else ""
        abi = "-".join(parts[3:])
        return cls(raw=raw, arch=arch, vendor=vendor, os=os_name, abi=abi)

    @property
    def is_apple_darwin(self) -> bool:
        return self.raw.endswith("-apple-darwin")

    @property
    def is_linux_gnu(self) -> bool:
        return "unknown-linux-gnu" in self.raw

    def __str__(self) -> str:
        return self.raw


_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
}


def detect_host_triple() -> TargetTriple:
    """Build a triple describing the running interpreter's machine.

    Only used when the build system did not pass HOST explicitly.
    """
    machine = platform.machine().lower()
    arch = _ARCH_ALIASES.get(machine, machine)

    if sys.platform == "darwin":
        raw = f"{arch}-apple-darwin"
    elif sys.platform.startswith("linux"):
        libc, _ = platform.libc_ver()
        raw = f"{arch}-unknown-linux-{'gnu' if libc == 'glibc' else 'musl'}"
    elif sys.platform == "win32":
        raw = f"{arch}-pc-windows-msvc"
    else:
        raw = f"{arch}-unknown-{sys.platform}"

    logger.debug(f"detected host triple {raw}")
    return TargetTriple.parse(raw)
