"""Member discovery.

A ``MemberSource`` lists the members of a value per category. The default
``InspectMemberSource`` walks the MRO from the base-most class to the value's
own type and classifies every entry of each class ``__dict__``:

    property, cached_property, data descriptors    -> PROPERTY
    __slots__ members, instance attributes         -> FIELD
    plain class attributes                         -> FIELD | STATIC
    functions, builtin method descriptors          -> METHOD
    staticmethod, classmethod                      -> METHOD | STATIC
    objects with callable connect/disconnect       -> EVENT

Only the most-derived declaration of a name is listed. Dunder and sunder
names are runtime internals and never listed, with the exception of the
members of ``object`` itself, which are surfaced when the root is included.
"""

from __future__ import annotations

import functools
import inspect
import types
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from lookup_engine.descriptors import Parameters
from lookup_engine.exceptions import InvocationError
from lookup_engine.models import MemberAttributes

# Members of object that construct or mutate instances, or are plain metadata
_ROOT_EXCLUDED = frozenset(
    {
        "__new__",
        "__init__",
        "__init_subclass__",
        "__subclasshook__",
        "__setattr__",
        "__delattr__",
        "__getattribute__",
        "__doc__",
    }
)

_BUILTIN_METHODS = (types.MethodDescriptorType, types.WrapperDescriptorType)

_VOID_ANNOTATIONS = (None, type(None), "None")

_MISSING = object()


class MemberKind(Enum):
    """Member categories, in decomposition order."""

    PROPERTY = "property"
    FIELD = "field"
    METHOD = "method"
    EVENT = "event"


_KIND_FLAGS = {
    MemberKind.PROPERTY: MemberAttributes.PROPERTY,
    MemberKind.FIELD: MemberAttributes.FIELD,
    MemberKind.METHOD: MemberAttributes.METHOD,
    MemberKind.EVENT: MemberAttributes.EVENT,
}


@dataclass(frozen=True)
class MemberScope:
    """Visibility filters applied while listing members."""

    static_request: bool = False
    include_private: bool = False
    include_static: bool = False
    include_root: bool = False

    def admits(self, attributes: MemberAttributes) -> bool:
        if MemberAttributes.STATIC in attributes:
            if not self.include_static:
                return False
        elif self.static_request:
            return False
        if MemberAttributes.PRIVATE in attributes and not self.include_private:
            return False
        return True


@dataclass(frozen=True)
class MemberInfo:
    """A discovered member.

    Attributes:
        name: Member name
        kind: Category
        attributes: Categorization flags
        declaring_type: Class that introduced the member
        depth: MRO distance from the inspected type to the declaring type
        accessor: Zero-argument callable producing the value, or None when
            the member has no natural invocable form
        parameters: Parameters the member requires (methods only)
    """

    name: str
    kind: MemberKind
    attributes: MemberAttributes
    declaring_type: type
    depth: int
    accessor: Callable[[], Any] | None
    parameters: Parameters = ()


@runtime_checkable
class MemberSource(Protocol):
    """Lists the members of a value for one category."""

    def list_members(
        self,
        target: Any,
        owner: type,
        kind: MemberKind,
        scope: MemberScope,
    ) -> Iterator[MemberInfo]:
        """Yield members in declaration order, base-most class first.

        Args:
            target: The inspected value (the class itself for static requests)
            owner: The type whose members are listed
            kind: Category to list
            scope: Visibility filters
        """
        ...


def is_special_name(name: str) -> bool:
    """Dunder (``__x__``) and sunder (``_x_``) names."""
    if len(name) > 4 and name.startswith("__") and name.endswith("__"):
        return True
    return len(name) > 2 and name[0] == "_" and name[-1] == "_" and name[1] != "_" and name[-2] != "_"


def is_private_name(name: str) -> bool:
    return name.startswith("_") and not is_special_name(name)


def _is_event(raw: Any) -> bool:
    connect = inspect.getattr_static(raw, "connect", None)
    disconnect = inspect.getattr_static(raw, "disconnect", None)
    return callable(connect) and callable(disconnect)


def classify(raw: Any) -> tuple[MemberKind, MemberAttributes] | None:
    """Classify a class ``__dict__`` entry; None for entries that are not members."""
    if isinstance(raw, type):
        return None
    if isinstance(raw, (staticmethod, classmethod, types.ClassMethodDescriptorType)):
        return MemberKind.METHOD, MemberAttributes.STATIC
    if isinstance(raw, (property, functools.cached_property)):
        return MemberKind.PROPERTY, MemberAttributes.NONE
    if isinstance(raw, types.MemberDescriptorType):
        return MemberKind.FIELD, MemberAttributes.NONE
    if inspect.isfunction(raw) or isinstance(raw, _BUILTIN_METHODS):
        return MemberKind.METHOD, MemberAttributes.NONE
    if _is_event(raw):
        return MemberKind.EVENT, MemberAttributes.NONE
    if inspect.isdatadescriptor(raw):
        return MemberKind.PROPERTY, MemberAttributes.NONE
    if inspect.ismethoddescriptor(raw):
        return MemberKind.METHOD, MemberAttributes.NONE
    return MemberKind.FIELD, MemberAttributes.STATIC


def _instance_dict(target: Any) -> dict[str, Any]:
    try:
        namespace = object.__getattribute__(target, "__dict__")
    except AttributeError:
        return {}
    return namespace if isinstance(namespace, dict) else {}


def _own_annotations(cls: type) -> tuple[str, ...]:
    try:
        return tuple(inspect.get_annotations(cls))
    except Exception:
        # Unresolvable annotations still leave the attributes discoverable
        return ()


def _bind(raw: Any, target: Any, owner: type) -> Any:
    getter = getattr(type(raw), "__get__", None)
    if getter is None:
        return raw
    if isinstance(raw, (staticmethod, classmethod)):
        return getter(raw, None, owner)
    return getter(raw, target, owner)


def _signature(bound: Any) -> inspect.Signature | None:
    try:
        return inspect.signature(bound)
    except (TypeError, ValueError):
        return None


def _method_accessor(bound: Any) -> tuple[Callable[[], Any] | None, Parameters]:
    """Accessor and parameter list of a bound method.

    Methods are naturally invocable when their bound signature has no
    parameters at all, they are not coroutine functions and they are not
    annotated as returning None. Optional parameters still count: their
    defaults may block or consume (``Event.wait``, ``IOBase.read``).
    """
    if not callable(bound):
        return None, ()
    signature = _signature(bound)
    if signature is None:
        return None, ()
    parameters = tuple(signature.parameters.values())
    if parameters:
        return None, parameters
    if inspect.iscoroutinefunction(bound):
        return None, parameters
    if signature.return_annotation in _VOID_ANNOTATIONS:
        return None, parameters
    return bound, parameters


class InspectMemberSource:
    """MemberSource built on ``inspect`` and class namespaces."""

    def list_members(
        self,
        target: Any,
        owner: type,
        kind: MemberKind,
        scope: MemberScope,
    ) -> Iterator[MemberInfo]:
        mro = owner.__mro__
        instance = {} if scope.static_request else _instance_dict(target)
        claims = self._claim_instance_fields(instance, mro) if kind is MemberKind.FIELD else {}

        for depth in range(len(mro) - 1, -1, -1):
            cls = mro[depth]
            if cls is object:
                if scope.include_root and not scope.static_request:
                    yield from self._root_members(target, kind, depth)
                continue

            yield from self._declared_members(target, owner, cls, depth, kind, scope, instance)

            for name in claims.get(depth, ()):
                attributes = MemberAttributes.FIELD
                if is_private_name(name):
                    attributes |= MemberAttributes.PRIVATE
                if not scope.admits(attributes):
                    continue
                yield MemberInfo(
                    name=name,
                    kind=MemberKind.FIELD,
                    attributes=attributes,
                    declaring_type=cls,
                    depth=depth,
                    accessor=functools.partial(instance.__getitem__, name),
                )

    def _declared_members(
        self,
        target: Any,
        owner: type,
        cls: type,
        depth: int,
        kind: MemberKind,
        scope: MemberScope,
        instance: dict[str, Any],
    ) -> Iterator[MemberInfo]:
        mro = owner.__mro__
        for name, raw in vars(cls).items():
            if is_special_name(name):
                continue
            if any(name in vars(derived) for derived in mro[:depth]):
                continue

            classified = classify(raw)
            if classified is None or classified[0] is not kind:
                continue

            attributes = _KIND_FLAGS[kind] | classified[1]
            if is_private_name(name):
                attributes |= MemberAttributes.PRIVATE
            if not scope.admits(attributes):
                continue
            if MemberAttributes.STATIC in attributes and kind is MemberKind.FIELD and name in instance:
                continue

            accessor, parameters = self._accessor(name, raw, target, owner, kind)
            yield MemberInfo(
                name=name,
                kind=kind,
                attributes=attributes,
                declaring_type=cls,
                depth=depth,
                accessor=accessor,
                parameters=parameters,
            )

    @staticmethod
    def _accessor(
        name: str, raw: Any, target: Any, owner: type, kind: MemberKind
    ) -> tuple[Callable[[], Any] | None, Parameters]:
        if kind is MemberKind.METHOD:
            try:
                bound = _bind(raw, target, owner)
            except Exception as exc:
                return _reflective(name, functools.partial(_reraise, exc)), ()
            accessor, parameters = _method_accessor(bound)
            return (None if accessor is None else _reflective(name, accessor)), parameters
        if kind is MemberKind.PROPERTY and isinstance(raw, property) and raw.fget is None:
            return None, ()
        if kind is MemberKind.FIELD and not hasattr(type(raw), "__get__"):
            return functools.partial(_read, raw), ()
        return _reflective(name, functools.partial(_bind, raw, target, owner)), ()

    @staticmethod
    def _claim_instance_fields(instance: dict[str, Any], mro: tuple[type, ...]) -> dict[int, list[str]]:
        """Attribute instance attributes to the class that annotates them.

        Unannotated attributes belong to the inspected type itself. Attributes
        shadowing a class-level property or method (e.g. cached values) are
        not fields.
        """
        claims: dict[int, list[str]] = {}
        claimed: set[str] = set()

        for depth, cls in enumerate(mro):
            for name in _own_annotations(cls):
                if name in instance and name not in claimed:
                    claimed.add(name)
                    claims.setdefault(depth, []).append(name)

        for name in instance:
            if name not in claimed:
                claims.setdefault(0, []).append(name)

        def is_field(name: str) -> bool:
            if is_special_name(name):
                return False
            for cls in mro:
                raw = vars(cls).get(name, _MISSING)
                if raw is not _MISSING:
                    classified = classify(raw)
                    return classified is not None and classified[0] is MemberKind.FIELD
            return True

        return {depth: [n for n in names if is_field(n)] for depth, names in claims.items()}

    @staticmethod
    def _root_members(target: Any, kind: MemberKind, depth: int) -> Iterator[MemberInfo]:
        for name, raw in vars(object).items():
            if name in _ROOT_EXCLUDED:
                continue
            classified = classify(raw)
            if classified is None or classified[0] is not kind:
                continue

            if kind is MemberKind.METHOD:
                invocable, parameters = _method_accessor(raw.__get__(target, type(target)))
                accessor = None
                if invocable is not None:
                    accessor = _reflective(name, functools.partial(_call_attribute, target, name))
            else:
                parameters = ()
                accessor = _reflective(name, functools.partial(getattr, target, name))

            yield MemberInfo(
                name=name,
                kind=kind,
                attributes=_KIND_FLAGS[kind],
                declaring_type=object,
                depth=depth,
                accessor=accessor,
                parameters=parameters,
            )


def _call_attribute(target: Any, name: str) -> Any:
    return getattr(target, name)()


def _read(value: Any) -> Any:
    return value


def _reraise(exc: Exception) -> Any:
    raise exc


def _reflective(name: str, func: Callable[[], Any]) -> Callable[[], Any]:
    """Wrap an accessor so failures surface as InvocationError."""

    def invoke() -> Any:
        try:
            return func()
        except Exception as exc:
            raise InvocationError(name) from exc

    return invoke
