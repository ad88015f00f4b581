"""Explicit stage results.

Each pipeline stage returns a StageResult instead of raising, so a stage
can be called and inspected on its own and the orchestrator decides what
happens after a failure.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, cast

from .errors import OrtoolsBuildError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one stage: either a value or the failure that stopped it.

    Attributes:
        value: Stage output when successful (may legitimately be None)
        failure: The failure when unsuccessful, None otherwise
    """

    value: Optional[T] = None
    failure: Optional[OrtoolsBuildError] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: OrtoolsBuildError) -> "StageResult[T]":
        return cls(failure=failure)

    @property
    def is_ok(self) -> bool:
        return self.failure is None

    @property
    def error(self) -> OrtoolsBuildError:
        """The failure of an unsuccessful result.

        Raises:
            ValueError: If the result is successful
        """
        if self.failure is None:
            raise ValueError("successful result has no failure")
        return self.failure

    def propagate(self) -> "StageResult[U]":
        """Re-type a failed result so a caller can return it as its own."""
        return StageResult(failure=self.error)

    def unwrap(self) -> T:
        """Return the value, raising the stored failure if there is one."""
        if self.failure is not None:
            raise self.failure
        return cast(T, self.value)
