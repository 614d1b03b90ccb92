"""Member enumeration and categorization.

The enumerator decides which categories a decomposition lists, asks the
member source for candidates in each, and walks the elements of values whose
descriptor presents them as collections.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from lookup_engine.descriptors.builtin import EnumerableDescriptor
from lookup_engine.members import InspectMemberSource, MemberInfo, MemberKind, MemberScope, MemberSource
from lookup_engine.options import DecomposeOptions


def categories(options: DecomposeOptions) -> tuple[MemberKind, ...]:
    """Categories to list, in decomposition order."""
    kinds = [MemberKind.PROPERTY]
    if options.include_fields:
        kinds.append(MemberKind.FIELD)
    kinds.append(MemberKind.METHOD)
    if options.include_events:
        kinds.append(MemberKind.EVENT)
    return tuple(kinds)


@contextmanager
def scoped_iteration(iterator: Iterator[Any]) -> Iterator[Iterator[Any]]:
    """Release the iterator's resources once traversal ends, however it ends."""
    try:
        yield iterator
    finally:
        close = getattr(iterator, "close", None)
        if callable(close):
            close()


class MemberEnumerator:
    """Lists the members of one value, category by category."""

    def __init__(
        self,
        options: DecomposeOptions,
        static_request: bool = False,
        member_source: MemberSource | None = None,
    ):
        self._options = options
        self._source = member_source or InspectMemberSource()
        self._scope = MemberScope(
            static_request=static_request,
            include_private=options.include_private_members,
            include_static=options.include_static_members,
            include_root=options.include_root,
        )

    @property
    def scope(self) -> MemberScope:
        return self._scope

    def members(self, target: Any, owner: type) -> Iterator[MemberInfo]:
        """Yield candidate members of every enabled category."""
        for kind in categories(self._options):
            yield from self._source.list_members(target, owner, kind, self._scope)

    @staticmethod
    def elements(descriptor: Any) -> Iterator[Any] | None:
        """Element iterator when the descriptor presents a collection.

        The descriptor's own iterator is opened by the first ``next`` call,
        so a failing ``__iter__`` surfaces as the first element's value.
        """
        if isinstance(descriptor, EnumerableDescriptor):
            return _open_lazily(descriptor.iterate)
        return None


def _open_lazily(open_elements: Callable[[], Iterator[Any]]) -> Iterator[Any]:
    with scoped_iteration(open_elements()) as iterator:
        yield from iterator
