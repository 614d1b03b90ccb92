"""Default descriptors used by the default type resolver."""

from __future__ import annotations

import io
import queue
import socket
import subprocess
import threading
import types
from collections.abc import Iterable, Iterator, Mapping, MutableMapping, MutableSequence, MutableSet
from dataclasses import dataclass
from typing import Any

from lookup_engine.descriptors import Descriptor, Parameters, Producer
from lookup_engine.models import KeyValuePair
from lookup_engine.naming import infer_type_arguments
from lookup_engine.variants import Variants

# Zero-argument methods of mutable collections that would modify the value
COLLECTION_MUTATORS = frozenset({"clear", "pop", "popitem", "popleft", "reverse", "sort"})


@dataclass(frozen=True)
class SideEffects:
    """Zero-argument methods of a family of types that must never run.

    Attributes:
        families: Types the rule applies to, subclasses included
        methods: Method names that release, consume, block or close
        private: Also disable every ``_private`` method of these types
    """

    families: tuple[type, ...]
    methods: frozenset[str]
    private: bool = False

    def disables(self, value: Any, name: str) -> bool:
        if not isinstance(value, self.families):
            return False
        return name in self.methods or (self.private and name.startswith("_"))


SIDE_EFFECTS = (
    SideEffects((MutableSequence, MutableSet, MutableMapping), COLLECTION_MUTATORS),
    SideEffects((io.IOBase,), frozenset({"close", "detach", "flush", "getbuffer", "readall"}), private=True),
    SideEffects((socket.socket,), frozenset({"accept", "close", "detach", "dup"}), private=True),
    SideEffects((subprocess.Popen,), frozenset({"kill", "poll", "terminate"}), private=True),
    SideEffects(
        (types.GeneratorType, types.CoroutineType, types.AsyncGeneratorType),
        frozenset({"aclose", "close"}),
    ),
    SideEffects(
        (type(threading.Lock()), type(threading.RLock())),
        frozenset({"release", "release_lock"}),
        private=True,
    ),
    SideEffects((threading.Event,), frozenset({"clear", "set"}), private=True),
    SideEffects((threading.Condition,), frozenset({"notify_all", "notifyAll"}), private=True),
    SideEffects((threading.Semaphore, threading.Barrier), frozenset({"abort", "reset"}), private=True),
    SideEffects((threading.Thread,), frozenset({"cancel", "run", "start"}), private=True),
    SideEffects((queue.Queue, queue.SimpleQueue), frozenset({"get_nowait", "join", "task_done"}), private=True),
)


def has_side_effects(value: Any, name: str) -> bool:
    """Whether invoking the named zero-argument method would change ``value``."""
    return any(rule.disables(value, name) for rule in SIDE_EFFECTS)


def is_enumerable(value: Any) -> bool:
    """Whether the value can be re-iterated without being consumed.

    Iterators and generators are excluded: walking them would exhaust the
    inspected object.
    """
    return isinstance(value, Iterable) and not isinstance(value, Iterator)


class BooleanDescriptor(Descriptor):
    def __init__(self, value: bool):
        super().__init__(str(value))


class ObjectDescriptor(Descriptor):
    """Fallback descriptor for values without a dedicated one.

    Disables the side-effecting methods of IO objects, sockets, processes,
    generators, synchronization primitives, threads and queues.
    """

    def __init__(self, value: Any):
        super().__init__(value.__name__ if isinstance(value, type) else None)
        self.value = value

    def resolve(self, target: str, parameters: Parameters) -> Producer | None:
        if target == "__format__":
            return lambda: Variants.value(format(self.value, ""), "Empty format spec")
        if has_side_effects(self.value, target):
            return Variants.disabled
        return None


class ExceptionDescriptor(Descriptor):
    def __init__(self, value: BaseException):
        try:
            message = str(value)
        except Exception:
            message = ""
        super().__init__(message or type(value).__name__)


class EnumerableDescriptor(Descriptor):
    """Presents a collection as one pseudo-member per element.

    Mappings are presented as one ``KeyValuePair`` per entry. Mutating
    methods of mutable collections are disabled.
    """

    def __init__(self, value: Iterable[Any]):
        super().__init__()
        self.value = value

    def iterate(self) -> Iterator[Any]:
        """Return a fresh iterator over the elements to present."""
        if isinstance(self.value, Mapping):
            return self._iterate_pairs(self.value)
        return iter(self.value)

    @staticmethod
    def _iterate_pairs(mapping: Mapping[Any, Any]) -> Iterator[Any]:
        args = infer_type_arguments(mapping)
        pair_type = KeyValuePair[args] if len(args) == 2 else KeyValuePair
        for key, value in mapping.items():
            yield pair_type(key, value)

    def resolve(self, target: str, parameters: Parameters) -> Producer | None:
        if has_side_effects(self.value, target):
            return Variants.disabled
        return None


class StringDescriptor(EnumerableDescriptor):
    """Names a string by its content and presents it as characters."""

    def __init__(self, value: str):
        super().__init__(value)
        self.name = value
