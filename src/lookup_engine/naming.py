"""Type name formatting.

Short names use ``__name__`` and full names ``module.qualname``. Parameterised
types render their arguments in declared order: ``dict<str, int>`` and
``builtins.dict<builtins.str, builtins.int>``.

Runtime values do not carry type arguments, so they are recovered from:
- ``__orig_class__`` on instances of generic classes (``Box[int]()``)
- the elements of builtin containers (nearest common type, ``None`` ignored)
"""

from __future__ import annotations

import inspect
from collections import deque
from typing import Any, get_args, get_origin

_SEQUENCE_CONTAINERS = (list, tuple, set, frozenset, deque)

_NOTHING = object()


def _base_name(tp: Any) -> str:
    name = getattr(tp, "__name__", None) or getattr(tp, "_name", None)
    return name or repr(tp)


def _base_full_name(tp: Any) -> str:
    qualname = getattr(tp, "__qualname__", None) or _base_name(tp)
    module = getattr(tp, "__module__", None)
    if not module:
        return qualname
    return f"{module}.{qualname}"


def _format(tp: Any, args: tuple[Any, ...], full: bool) -> str:
    base = _base_full_name(tp) if full else _base_name(tp)
    if not args:
        return base
    rendered = ", ".join(_format_argument(arg, full) for arg in args)
    return f"{base}<{rendered}>"


def _format_argument(arg: Any, full: bool) -> str:
    if arg is None:
        arg = type(None)
    if arg is Ellipsis:
        return "..."
    origin = get_origin(arg)
    if origin is not None:
        return _format(origin, get_args(arg), full)
    if isinstance(arg, (list, tuple)):
        return "[" + ", ".join(_format_argument(a, full) for a in arg) + "]"
    return _format(arg, (), full)


def format_type_name(tp: Any, args: tuple[Any, ...] = ()) -> str:
    """Short display name of a type."""
    return _format(tp, args, full=False)


def format_type_full_name(tp: Any, args: tuple[Any, ...] = ()) -> str:
    """Qualified display name of a type."""
    return _format(tp, args, full=True)


def split_generic(target: Any) -> tuple[type, tuple[Any, ...]] | None:
    """Split a class or generic alias into (class, arguments).

    Returns:
        None when the target is neither a class nor a generic alias
    """
    if isinstance(target, type) and get_origin(target) is None:
        return target, ()
    origin = get_origin(target)
    if isinstance(origin, type):
        return origin, get_args(target)
    return None


def common_type(values: Any) -> type | None:
    """Nearest common type of the non-None values, or None if there are none."""
    unique = dict.fromkeys(type(v) for v in values if v is not None)
    if not unique:
        return None
    first = next(iter(unique))
    for candidate in first.__mro__:
        if all(issubclass(t, candidate) for t in unique):
            return candidate
    return object


def infer_type_arguments(value: Any) -> tuple[Any, ...]:
    """Recover the type arguments of a runtime value, if any."""
    orig_class = inspect.getattr_static(value, "__orig_class__", _NOTHING)
    if orig_class is not _NOTHING and get_origin(orig_class) is not None:
        return get_args(orig_class)

    try:
        return _element_type_arguments(value)
    except Exception:
        # Container subclasses may override iteration; names fall back to the bare type
        return ()


def _element_type_arguments(value: Any) -> tuple[Any, ...]:
    if isinstance(value, dict):
        if not value:
            return ()
        key_type = common_type(value.keys()) or object
        value_type = common_type(value.values()) or object
        return key_type, value_type

    if isinstance(value, _SEQUENCE_CONTAINERS):
        if not value:
            return ()
        return (common_type(value) or object,)

    return ()


def describe_value_type(value: Any) -> tuple[str, str]:
    """(short, full) type names of a runtime value."""
    if value is None:
        return format_type_name(object), format_type_full_name(object)
    tp = type(value)
    args = infer_type_arguments(value)
    return format_type_name(tp, args), format_type_full_name(tp, args)
