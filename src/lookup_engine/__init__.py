"""lookup-engine: structured decomposition of runtime values.

Turns any value into a tree of named, typed, categorized members for
debuggers and inspectors:

    from lookup_engine import DecomposeOptions, decompose

    result = decompose(value, DecomposeOptions(include_fields=True))
    for member in result.members:
        print(member.name, member.value.name, member.member_attributes)

Presentation is customized per type through descriptors returned by the
options' ``type_resolver`` (see ``lookup_engine.descriptors``).
"""

from lookup_engine.composer import LookupComposer, decompose, decompose_members, decompose_object
from lookup_engine.descriptors import Descriptor, ExtensionManager
from lookup_engine.exceptions import EngineError, InvocationError, MemberDisabledError, UnsupportedMemberError
from lookup_engine.models import DecomposedMember, DecomposedObject, KeyValuePair, MemberAttributes
from lookup_engine.options import ContextDecomposeOptions, DecomposeOptions, default_type_resolver
from lookup_engine.variants import Variant, VariantCollection, Variants

__all__ = [
    "ContextDecomposeOptions",
    "DecomposeOptions",
    "DecomposedMember",
    "DecomposedObject",
    "Descriptor",
    "EngineError",
    "ExtensionManager",
    "InvocationError",
    "KeyValuePair",
    "LookupComposer",
    "MemberAttributes",
    "MemberDisabledError",
    "UnsupportedMemberError",
    "Variant",
    "VariantCollection",
    "Variants",
    "decompose",
    "decompose_members",
    "decompose_object",
    "default_type_resolver",
]
