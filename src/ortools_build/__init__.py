"""ortools-build - build-time discovery and linking of OR-Tools.

Locates an installed OR-Tools library, generates the CP-SAT protobuf
bindings, compiles the C++ interop shim and emits the link directives for
the downstream linker step.
"""

__version__ = "0.3.0"

from .config import BuildConfig  # noqa: E402
from .orchestrator import BuildOrchestrator, PipelineOutcome, PipelineStage  # noqa: E402

__all__ = [
    "BuildConfig",
    "BuildOrchestrator",
    "PipelineOutcome",
    "PipelineStage",
    "__version__",
]
