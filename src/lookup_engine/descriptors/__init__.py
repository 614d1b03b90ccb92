"""Descriptor contracts: the engine's extension points.

A type resolver returns one ``Descriptor`` per decomposed value. A descriptor
names the value and may additionally implement any subset of the capability
protocols below; the engine detects them with ``isinstance`` checks:

- DescriptorExtension / ContextDescriptorExtension: add synthetic members
- DescriptorResolver / ContextDescriptorResolver: supply producers for
  members that cannot be invoked directly (or override ones that can)
- DescriptorRedirector / ContextDescriptorRedirector: substitute another
  value for a member

Context-aware variants receive the ``context`` of ``ContextDecomposeOptions``
and are preferred when a context is supplied.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

TContext = TypeVar("TContext")

Producer = Callable[[], Any]
ContextProducer = Callable[[Any], Any]
Parameters = tuple[inspect.Parameter, ...]


class Descriptor:
    """Presentation strategy for a value.

    Attributes:
        name: Display name of the value; the type name is used when None
    """

    name: str | None = None

    def __init__(self, name: str | None = None):
        if name is not None:
            self.name = name


@dataclass(frozen=True)
class Extension:
    """A registered synthetic member."""

    name: str
    producer: Callable[..., Any]
    contextual: bool = False


class ExtensionManager(Generic[TContext]):
    """Collects the extensions a descriptor registers for one value.

    A manager created with ``contextual=True`` expects producers taking the
    context as their only argument.
    """

    def __init__(self, contextual: bool = False):
        self._contextual = contextual
        self._extensions: dict[str, Extension] = {}

    @property
    def contextual(self) -> bool:
        return self._contextual

    def register(self, name: str, producer: Callable[..., Any]) -> None:
        """Register a named producer.

        Raises:
            ValueError: If an extension with the same name is already registered
        """
        if name in self._extensions:
            raise ValueError(f"Extension '{name}' is already registered")
        self._extensions[name] = Extension(name, producer, self._contextual)

    def __iter__(self) -> Iterator[Extension]:
        return iter(self._extensions.values())

    def __len__(self) -> int:
        return len(self._extensions)


# =============================================================================
# Capability Protocols
# =============================================================================


@runtime_checkable
class DescriptorExtension(Protocol):
    """Adds synthetic members to a value."""

    def register_extensions(self, manager: ExtensionManager[Any]) -> None: ...


@runtime_checkable
class ContextDescriptorExtension(Protocol):
    """Adds synthetic members whose producers receive the context."""

    def register_context_extensions(self, manager: ExtensionManager[Any]) -> None: ...


@runtime_checkable
class DescriptorResolver(Protocol):
    """Supplies producers for members by name and parameter signature."""

    def resolve(self, target: str, parameters: Parameters) -> Producer | None:
        """Return a zero-argument producer, or None to leave the member alone."""
        ...


@runtime_checkable
class ContextDescriptorResolver(Protocol):
    """Context-aware resolver; producers receive the context."""

    def resolve_with_context(self, target: str, parameters: Parameters) -> ContextProducer | None: ...


@runtime_checkable
class DescriptorRedirector(Protocol):
    """Substitutes another value for the member named ``target``."""

    def try_redirect(self, target: str) -> tuple[bool, Any]:
        """Return ``(True, replacement)`` to redirect, ``(False, None)`` otherwise."""
        ...


@runtime_checkable
class ContextDescriptorRedirector(Protocol):
    """Context-aware redirector."""

    def try_redirect_with_context(self, target: str, context: Any) -> tuple[bool, Any]: ...


__all__ = [
    "ContextDescriptorExtension",
    "ContextDescriptorRedirector",
    "ContextDescriptorResolver",
    "ContextProducer",
    "Descriptor",
    "DescriptorExtension",
    "DescriptorRedirector",
    "DescriptorResolver",
    "Extension",
    "ExtensionManager",
    "Parameters",
    "Producer",
]
