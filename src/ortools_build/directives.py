"""
Build-system directive stream.

The directive stream on stdout is the only output the downstream linker
step reads. Two formats are supported:

    cargo - one `cargo:` instruction per line, as a Cargo build script prints
    json  - a single JSON document for other build frontends

Example (cargo):
    cargo:rerun-if-env-changed=OR_TOOLS_LIB_DIR
    cargo:rerun-if-env-changed=OR_TOOLS_INCLUDE_DIR
    cargo:rerun-if-changed=src/cp_sat_wrapper.cpp
    cargo:rustc-link-search=native=/usr/local/lib64
    cargo:rustc-link-search=native=/build/out
    cargo:rustc-link-lib=static=cp_sat_wrapper
    cargo:rustc-link-lib=ortools
    cargo:rustc-link-lib=protobuf
"""

import json
from enum import Enum
from typing import Any, Optional, TextIO

from .models import BuildDirective


class DirectiveFormat(Enum):
    CARGO = "cargo"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


def render_cargo(directive: BuildDirective) -> list[str]:
    """Render a directive set as cargo instructions in emission order."""
    lines = [f"cargo:rerun-if-env-changed={name}" for name in directive.rerun_if_env_changed]
    lines.extend(f"cargo:rerun-if-changed={path}" for path in directive.rerun_if_changed)
    lines.extend(f"cargo:rustc-link-search=native={path}" for path in directive.link_search_paths)
    if directive.archive is not None:
        lines.append(f"cargo:rustc-link-lib=static={directive.archive}")
    lines.extend(f"cargo:rustc-link-lib={lib}" for lib in directive.link_libs)
    return lines


def directive_to_dict(directive: BuildDirective) -> dict[str, Any]:
    return {
        "rerun_if_env_changed": list(directive.rerun_if_env_changed),
        "rerun_if_changed": list(directive.rerun_if_changed),
        "link_search": list(directive.link_search_paths),
        "link_static": directive.archive,
        "link_libs": list(directive.link_libs),
    }


def _one_line(text: str) -> str:
    return " ".join(text.split())


class DirectiveWriter:
    """Writes the directive stream; accepts exactly one directive set or error.

    Emission is write-once: after a successful emit or an error, any further
    emit raises RuntimeError, so a run can never mix directives and errors.
    """

    def __init__(self, stream: TextIO, fmt: DirectiveFormat = DirectiveFormat.CARGO):
        self.stream = stream
        self.format = fmt
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _claim(self) -> None:
        if self._closed:
            raise RuntimeError("directive stream already written for this run")
        self._closed = True

    def emit(self, directive: BuildDirective) -> None:
        self._claim()
        if self.format is DirectiveFormat.JSON:
            self.stream.write(json.dumps(directive_to_dict(directive), indent=2) + "\n")
        else:
            for line in render_cargo(directive):
                self.stream.write(line + "\n")
        self.stream.flush()

    def emit_error(self, kind: str, message: str, hint: Optional[str] = None) -> None:
        self._claim()
        if self.format is DirectiveFormat.JSON:
            payload: dict[str, Any] = {"error": {"kind": kind, "message": message}}
            if hint is not None:
                payload["error"]["hint"] = hint
            self.stream.write(json.dumps(payload, indent=2) + "\n")
        else:
            text = f"{message} {hint}" if hint else message
            self.stream.write(f"cargo::error={_one_line(text)}\n")
        self.stream.flush()
