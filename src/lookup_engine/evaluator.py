"""Instrumented, exception-safe member evaluation.

Every evaluation records its own wall time and allocation delta. A failing
accessor never propagates: the raised error becomes the evaluated value, after
unwrapping any ``InvocationError`` indirection, and its cost is still recorded.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from lookup_engine.diagnostics import measure
from lookup_engine.exceptions import InvocationError
from lookup_engine.variants import unpack_variant


@dataclass(frozen=True)
class Evaluation:
    """Outcome of one accessor invocation.

    Attributes:
        value: Produced value, or the captured error
        description: Description reported by a variant result
        error: The captured error, None on success
        elapsed_ms: Wall time of the invocation
        allocated_bytes: Memory allocated during the invocation
    """

    value: Any
    description: str | None = None
    error: BaseException | None = None
    elapsed_ms: float = 0.0
    allocated_bytes: int = 0

    @property
    def failed(self) -> bool:
        return self.error is not None


def unwrap_error(error: BaseException) -> BaseException:
    """Return the innermost real error behind InvocationError wrappers."""
    while isinstance(error, InvocationError) and error.__cause__ is not None:
        error = error.__cause__
    return error


def evaluate(producer: Callable[[], Any], unpack: bool = False) -> Evaluation:
    """Invoke a producer and capture its value or error.

    Args:
        producer: Zero-argument accessor
        unpack: Treat the result as a variant and split off its description
    """
    value: Any = None
    description: str | None = None
    error: BaseException | None = None

    with measure() as measurement:
        try:
            value = producer()
        except Exception as exc:
            error = unwrap_error(exc)
            value = error

    if error is None and unpack:
        value, description = unpack_variant(value)

    return Evaluation(
        value=value,
        description=description,
        error=error,
        elapsed_ms=measurement.elapsed_ms,
        allocated_bytes=measurement.allocated_bytes,
    )
