"""Decomposition options.

Options are frozen: a single instance, including its resolver and context,
may be shared by any number of concurrent decompositions. Use
``dataclasses.replace`` to derive variations.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from lookup_engine.descriptors import Descriptor
from lookup_engine.descriptors.builtin import (
    BooleanDescriptor,
    EnumerableDescriptor,
    ExceptionDescriptor,
    ObjectDescriptor,
    StringDescriptor,
    is_enumerable,
)

TContext = TypeVar("TContext")

TypeResolver = Callable[[Any, type | None], Descriptor]


def default_type_resolver(value: Any, declared_type: type | None) -> Descriptor:
    """Map system types to the default descriptors.

    ``declared_type`` is None for runtime values and the class itself for
    static requests. Custom resolvers should fall back to this function for
    types they do not handle.
    """
    if isinstance(value, bool) and declared_type in (None, bool):
        return BooleanDescriptor(value)
    if isinstance(value, str) and declared_type in (None, str):
        return StringDescriptor(value)
    if is_enumerable(value):
        return EnumerableDescriptor(value)
    if isinstance(value, BaseException) and declared_type is None:
        return ExceptionDescriptor(value)
    return ObjectDescriptor(value)


@dataclass(frozen=True)
class DecomposeOptions:
    """What a decomposition includes and how values are described.

    Attributes:
        include_root: Include members declared by ``object`` itself
        include_fields: Include fields (instance and class data attributes)
        include_events: Include events (signal-like class attributes)
        include_unsupported: Include members that cannot be evaluated
        include_private_members: Include ``_private`` members
        include_static_members: Include static members
        enable_extensions: Let descriptors add synthetic members
        enable_redirection: Let descriptors substitute member values
        type_resolver: Maps ``(value, declared_type)`` to a Descriptor
    """

    include_root: bool = False
    include_fields: bool = False
    include_events: bool = False
    include_unsupported: bool = False
    include_private_members: bool = False
    include_static_members: bool = False
    enable_extensions: bool = False
    enable_redirection: bool = False
    type_resolver: TypeResolver = default_type_resolver

    @classmethod
    def default(cls) -> DecomposeOptions:
        return cls()

    @property
    def has_context(self) -> bool:
        return False

    @property
    def context_value(self) -> Any:
        return None


@dataclass(frozen=True)
class ContextDecomposeOptions(DecomposeOptions, Generic[TContext]):
    """Options carrying a context for context-aware descriptor callbacks."""

    context: TContext | None = None

    @property
    def has_context(self) -> bool:
        return self.context is not None

    @property
    def context_value(self) -> Any:
        return self.context
