"""Variants: results reported by extension and resolver callbacks.

A callback reports either a single value (optionally described) or several
candidate values collected through a builder and sealed into an immutable
collection:

    Variants.value(42)
    Variants.value(42, "The answer")
    Variants.values(2).add("first").add("second", "Second value").consume()

A sealed collection holding exactly one entry behaves like a plain single
value variant: its ``value`` and ``description`` are those of the entry.
"""

from __future__ import annotations

from collections.abc import Iterator, Sized
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from lookup_engine.exceptions import MemberDisabledError

T = TypeVar("T")


@runtime_checkable
class VariantLike(Protocol):
    """Anything that reports a value with an optional description."""

    @property
    def value(self) -> Any: ...

    @property
    def description(self) -> str | None: ...


@dataclass(frozen=True)
class Variant(Generic[T]):
    """A single reported value."""

    value: T
    description: str | None = None


class VariantCollection(Generic[T]):
    """Sealed, ordered collection of variants.

    With exactly one entry it degenerates to that entry; otherwise the
    collection itself is the value and it carries no description.
    """

    __slots__ = ("_items",)

    def __init__(self, items: tuple[Variant[T], ...] = ()):
        self._items = items

    @property
    def value(self) -> Any:
        if len(self._items) == 1:
            return self._items[0].value
        return self

    @property
    def description(self) -> str | None:
        if len(self._items) == 1:
            return self._items[0].description
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Variant[T]]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Variant[T]:
        return self._items[index]

    def __repr__(self) -> str:
        return f"VariantCollection({list(self._items)!r})"


class VariantsBuilder(Generic[T]):
    """Collects variants up to a fixed capacity, then seals them."""

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        self._capacity = capacity
        self._items: list[Variant[T]] = []
        self._consumed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, value: T | None, description: str | None = None) -> VariantsBuilder[T]:
        """Append a value; ``None`` and empty collections are skipped.

        Raises:
            ValueError: If the builder was consumed or is already full
        """
        if self._consumed:
            raise ValueError("Variants have already been consumed")
        if value is None:
            return self
        if isinstance(value, Sized) and len(value) == 0:
            return self
        if len(self._items) >= self._capacity:
            raise ValueError(f"Variants capacity of {self._capacity} exceeded")

        self._items.append(Variant(value, description))
        return self

    def consume(self) -> VariantCollection[T]:
        """Seal the builder into an immutable collection."""
        if self._consumed:
            raise ValueError("Variants have already been consumed")
        self._consumed = True
        return VariantCollection(tuple(self._items))


class Variants:
    """Factory for variant results."""

    @staticmethod
    def value(value: T, description: str | None = None) -> Variant[T]:
        return Variant(value, description)

    @staticmethod
    def values(capacity: int) -> VariantsBuilder[Any]:
        return VariantsBuilder(capacity)

    @staticmethod
    def empty() -> VariantCollection[Any]:
        return VariantCollection()

    @staticmethod
    def disabled() -> Variant[MemberDisabledError]:
        """Variant reported for members that must not be evaluated."""
        return Variant(MemberDisabledError())


def unpack_variant(result: Any) -> tuple[Any, str | None]:
    """Split a callback result into (value, description).

    Callbacks may return a plain value instead of a variant.
    Any object exposing ``value`` and ``description`` counts as a variant.
    """
    if isinstance(result, VariantLike):
        return result.value, result.description
    return result, None
