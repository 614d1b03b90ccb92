"""Per-member cost measurement.

Every evaluated member records the wall time of its accessor and the memory
allocated while it ran. Timing uses ``time.perf_counter``; allocations are
read from ``tracemalloc`` and are therefore only available while tracing is
active, for example inside ``track_allocations()``:

    with track_allocations():
        result = decompose(value)
"""

from __future__ import annotations

import time
import tracemalloc
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class Measurement:
    """Cost of a single accessor invocation."""

    elapsed_ms: float = 0.0
    allocated_bytes: int = 0


def _traced_bytes() -> int | None:
    if not tracemalloc.is_tracing():
        return None
    current, _peak = tracemalloc.get_traced_memory()
    return current


@contextmanager
def measure() -> Iterator[Measurement]:
    """Measure the enclosed block.

    The measurement is completed on every exit path, including when the
    block raises: the cost of failing is diagnostic data too.

    ``tracemalloc`` counts are process-wide, so when other threads allocate
    or free memory while the block runs, their traffic is included in
    ``allocated_bytes``. The delta is clamped at zero; treat it as an upper
    bound under concurrent decompositions.

    Yields:
        Measurement filled in when the block exits
    """
    measurement = Measurement()
    allocated_before = _traced_bytes()
    start = time.perf_counter()
    try:
        yield measurement
    finally:
        measurement.elapsed_ms = (time.perf_counter() - start) * 1000
        allocated_after = _traced_bytes()
        if allocated_before is not None and allocated_after is not None:
            measurement.allocated_bytes = max(0, allocated_after - allocated_before)


@contextmanager
def track_allocations(frames: int = 1) -> Iterator[None]:
    """Enable allocation tracking for the enclosed block.

    Tracing is process-wide; if it was already active it is left running.

    Args:
        frames: Traceback depth stored per allocation
    """
    started = not tracemalloc.is_tracing()
    if started:
        tracemalloc.start(frames)
    try:
        yield
    finally:
        if started:
            tracemalloc.stop()
