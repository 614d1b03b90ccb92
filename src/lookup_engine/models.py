"""Decomposition result model.

Results are immutable snapshots: they hold references to the inspected values
for display but never copy or mutate them, and may be retained freely after
the decomposition call returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Any, Generic, TypeVar


class MemberAttributes(Flag):
    """Categorization flags of a decomposed member."""

    NONE = 0
    PROPERTY = auto()
    FIELD = auto()
    METHOD = auto()
    EVENT = auto()
    EXTENSION = auto()
    STATIC = auto()
    PRIVATE = auto()


@dataclass(frozen=True)
class DecomposedObject:
    """One decomposed value.

    Attributes:
        name: Display name (descriptor name, or the type name as fallback)
        raw_value: The inspected value itself
        type_name: Short type name, parameterised as ``name<arg, ...>``
        type_full_name: Module-qualified type name
        description: Description reported by the variant that produced the value
        members: Members in discovery order
    """

    name: str
    raw_value: Any
    type_name: str
    type_full_name: str
    description: str | None = None
    members: tuple[DecomposedMember, ...] = ()


@dataclass(frozen=True)
class DecomposedMember:
    """One entry of a decomposed object's member list.

    Attributes:
        name: Member name, or ``type[index]`` for enumerable elements
        value: The evaluated value (root-only, without members)
        member_attributes: Categorization flags
        declaring_type_name: Short name of the type that introduced the member
        declaring_type_full_name: Qualified name of the declaring type
        depth: MRO distance between the value's type and the declaring type
        computation_time: Accessor wall time in milliseconds
        allocated_bytes: Memory allocated by the accessor
    """

    name: str
    value: DecomposedObject
    member_attributes: MemberAttributes
    declaring_type_name: str
    declaring_type_full_name: str
    depth: int = 0
    computation_time: float = 0.0
    allocated_bytes: int = 0


K = TypeVar("K")
V = TypeVar("V")


class KeyValuePair(Generic[K, V]):
    """One entry of a decomposed mapping."""

    def __init__(self, key: K, value: V):
        self._key = key
        self._value = value

    @property
    def key(self) -> K:
        return self._key

    @property
    def value(self) -> V:
        return self._value

    def __repr__(self) -> str:
        return f"[{self._key!r}, {self._value!r}]"
