"""Composer: the decomposition entry point.

Decomposing a value runs a linear pipeline per node:

    resolve descriptor -> list members per category -> evaluate each member
    -> optionally redirect -> describe the member value

Members are ordered by category (properties, fields, methods, events), then
extensions, then collection elements; within a category the MRO is walked
from the base-most class to the value's own type. Member values are described
without their own members; call ``decompose`` on ``member.value.raw_value``
to drill down.

Passing a class (or a generic alias such as ``list[int]``) requests a static
decomposition: only static members are listed.

All state is local to a single call, so one ``DecomposeOptions`` instance can
be shared across threads.
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Callable
from typing import Any

from lookup_engine.descriptors import (
    ContextDescriptorExtension,
    ContextDescriptorRedirector,
    ContextDescriptorResolver,
    Descriptor,
    DescriptorExtension,
    DescriptorRedirector,
    DescriptorResolver,
    ExtensionManager,
)
from lookup_engine.enumerator import MemberEnumerator, scoped_iteration
from lookup_engine.evaluator import Evaluation, evaluate
from lookup_engine.exceptions import EngineError, UnsupportedMemberError
from lookup_engine.logging import get_logger
from lookup_engine.members import MemberInfo, MemberKind, MemberSource
from lookup_engine.models import DecomposedMember, DecomposedObject, MemberAttributes
from lookup_engine.naming import describe_value_type, format_type_full_name, format_type_name, split_generic
from lookup_engine.options import DecomposeOptions
from lookup_engine.variants import Variant, unpack_variant

logger = get_logger("composer")

_END = object()


class LookupComposer:
    """Decomposes one value. Create a new composer per call."""

    def __init__(
        self,
        value: Any,
        options: DecomposeOptions | None = None,
        member_source: MemberSource | None = None,
    ):
        self._input = value
        self._options = options or DecomposeOptions()
        self._member_source = member_source
        self._descriptor: Descriptor | None = None
        self._owner: type | None = None
        self._type_name: str | None = None
        self._type_full_name: str | None = None
        self._members: list[DecomposedMember] = []

    # -------------------------------------------------------------------------
    # Internal state
    # -------------------------------------------------------------------------

    @property
    def descriptor(self) -> Descriptor:
        if self._descriptor is None:
            EngineError.not_initialized("Descriptor")
        return self._descriptor

    @property
    def owner(self) -> type:
        if self._owner is None:
            EngineError.not_initialized("Owner type")
        return self._owner

    @property
    def type_name(self) -> str:
        if self._type_name is None:
            EngineError.not_initialized("Type name")
        return self._type_name

    @property
    def type_full_name(self) -> str:
        if self._type_full_name is None:
            EngineError.not_initialized("Type full name")
        return self._type_full_name

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def compose(self, include_members: bool = True) -> DecomposedObject:
        """Build the decomposition tree of the input value."""
        static = split_generic(self._input)
        if static is not None:
            cls, args = static
            self._owner = cls
            self._type_name = format_type_name(cls, args)
            self._type_full_name = format_type_full_name(cls, args)
            self._descriptor = self._resolve(cls, cls)
        else:
            self._owner = type(self._input)
            self._type_name, self._type_full_name = describe_value_type(self._input)
            self._descriptor = self._resolve(self._input, None)

        if include_members and self._input is not None:
            log = logger.with_operation("decompose").with_target(self.type_name)
            log.debug("decomposition started", static=static is not None)
            with log.timed("decomposition") as stats:
                self._decompose_members(static_request=static is not None)
                stats["members"] = len(self._members)

        return DecomposedObject(
            name=self.descriptor.name or self.type_name,
            raw_value=self._input,
            type_name=self.type_name,
            type_full_name=self.type_full_name,
            members=tuple(self._members),
        )

    def _resolve(self, value: Any, declared_type: type | None) -> Descriptor:
        descriptor = self._options.type_resolver(value, declared_type)
        if not isinstance(descriptor, Descriptor):
            raise TypeError(f"Type resolver returned {type(descriptor).__name__}, expected a Descriptor")
        return descriptor

    def _decompose_members(self, static_request: bool) -> None:
        enumerator = MemberEnumerator(self._options, static_request, self._member_source)

        target = self.owner if static_request else self._input
        for member in enumerator.members(target, self.owner):
            self._decompose_member(member)

        if self._options.enable_extensions:
            self._decompose_extensions()

        elements = None if static_request else enumerator.elements(self.descriptor)
        if elements is not None:
            self._decompose_elements(elements)

    def _decompose_member(self, member: MemberInfo) -> None:
        producer = None
        if member.kind is MemberKind.METHOD or member.accessor is None:
            producer = self._resolve_producer(member)

        if producer is not None:
            evaluation = evaluate(producer, unpack=True)
        elif member.accessor is not None:
            evaluation = evaluate(member.accessor)
        elif self._options.include_unsupported:
            evaluation = Evaluation(value=UnsupportedMemberError(member.name, member.parameters))
        else:
            return

        if evaluation.failed:
            logger.debug(
                "Member evaluation failed",
                member=member.name,
                error=type(evaluation.error).__name__,
            )
        else:
            evaluation = self._redirect(member.name, evaluation)

        self._write_member(
            name=member.name,
            evaluation=evaluation,
            attributes=member.attributes,
            declaring_type=member.declaring_type,
            depth=member.depth,
        )

    def _resolve_producer(self, member: MemberInfo) -> Callable[[], Any] | None:
        descriptor = self.descriptor
        if self._options.has_context and isinstance(descriptor, ContextDescriptorResolver):
            producer = descriptor.resolve_with_context(member.name, member.parameters)
            if producer is not None:
                return functools.partial(producer, self._options.context_value)
        if isinstance(descriptor, DescriptorResolver):
            return descriptor.resolve(member.name, member.parameters)
        return None

    def _redirect(self, name: str, evaluation: Evaluation) -> Evaluation:
        if not self._options.enable_redirection:
            return evaluation

        descriptor = self._resolve(evaluation.value, None)
        if self._options.has_context and isinstance(descriptor, ContextDescriptorRedirector):
            context = self._options.context_value
            redirection = evaluate(functools.partial(descriptor.try_redirect_with_context, name, context))
        elif isinstance(descriptor, DescriptorRedirector):
            redirection = evaluate(functools.partial(descriptor.try_redirect, name))
        else:
            return evaluation

        if redirection.failed:
            return dataclasses.replace(evaluation, value=redirection.value, description=None, error=redirection.error)

        redirected, value = redirection.value
        if not redirected:
            return evaluation

        value, description = unpack_variant(value)
        return dataclasses.replace(evaluation, value=value, description=description)

    def _decompose_extensions(self) -> None:
        descriptor = self.descriptor
        managers: list[ExtensionManager[Any]] = []

        if isinstance(descriptor, DescriptorExtension):
            manager: ExtensionManager[Any] = ExtensionManager()
            descriptor.register_extensions(manager)
            managers.append(manager)

        if self._options.has_context and isinstance(descriptor, ContextDescriptorExtension):
            context_manager: ExtensionManager[Any] = ExtensionManager(contextual=True)
            descriptor.register_context_extensions(context_manager)
            managers.append(context_manager)

        for manager in managers:
            for extension in manager:
                producer = extension.producer
                if extension.contextual:
                    producer = functools.partial(producer, self._options.context_value)

                self._write_member(
                    name=extension.name,
                    evaluation=evaluate(producer, unpack=True),
                    attributes=MemberAttributes.EXTENSION,
                    declaring_type=self.owner,
                    depth=0,
                )

    def _decompose_elements(self, elements: Any) -> None:
        index = 0
        with scoped_iteration(elements) as iterator:
            while True:
                evaluation = evaluate(functools.partial(next, iterator, _END))
                if evaluation.value is _END:
                    break

                if isinstance(evaluation.value, Variant):
                    variant = evaluation.value
                    evaluation = dataclasses.replace(evaluation, value=variant.value, description=variant.description)

                self._write_member(
                    name=f"{self.type_name}[{index}]",
                    evaluation=evaluation,
                    attributes=MemberAttributes.NONE,
                    declaring_type=self.owner,
                    depth=0,
                )
                index += 1

                # A failing iterator cannot be resumed reliably
                if evaluation.failed:
                    break

    def _write_member(
        self,
        name: str,
        evaluation: Evaluation,
        attributes: MemberAttributes,
        declaring_type: type,
        depth: int,
    ) -> None:
        self._members.append(
            DecomposedMember(
                name=name,
                value=self._describe(evaluation.value, evaluation.description),
                member_attributes=attributes,
                declaring_type_name=format_type_name(declaring_type),
                declaring_type_full_name=format_type_full_name(declaring_type),
                depth=depth,
                computation_time=evaluation.elapsed_ms,
                allocated_bytes=evaluation.allocated_bytes,
            )
        )

    def _describe(self, value: Any, description: str | None) -> DecomposedObject:
        descriptor = self._resolve(value, None)
        type_name, type_full_name = describe_value_type(value)
        return DecomposedObject(
            name=descriptor.name or type_name,
            raw_value=value,
            type_name=type_name,
            type_full_name=type_full_name,
            description=description,
        )


# =============================================================================
# Public API
# =============================================================================


def decompose(
    value: Any,
    options: DecomposeOptions | None = None,
    member_source: MemberSource | None = None,
) -> DecomposedObject:
    """Decompose a value into a described object and its members.

    Args:
        value: Value to inspect; a class requests a static decomposition
        options: Inclusion policy, resolver and optional context
        member_source: Member discovery strategy (defaults to inspect-based)

    Returns:
        The decomposed object; ``None`` yields an empty ``object`` node

    Raises:
        EngineError: If the engine's own invariants are violated
    """
    return LookupComposer(value, options, member_source).compose()


def decompose_object(value: Any, options: DecomposeOptions | None = None) -> DecomposedObject:
    """Describe a value without listing its members."""
    return LookupComposer(value, options).compose(include_members=False)


def decompose_members(
    value: Any,
    options: DecomposeOptions | None = None,
    member_source: MemberSource | None = None,
) -> list[DecomposedMember]:
    """Decompose a value and return only its members."""
    if value is None:
        return []
    return list(LookupComposer(value, options, member_source).compose().members)
