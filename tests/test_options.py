"""Tests for decomposition options."""

import dataclasses

import pytest

from lookup_engine import ContextDecomposeOptions, DecomposeOptions, decompose, default_type_resolver
from lookup_engine.enumerator import MemberEnumerator, categories
from lookup_engine.members import MemberKind


class Widget:
    def __init__(self):
        self.size = 3


class TestDecomposeOptions:
    """Tests for DecomposeOptions."""

    def test_defaults(self):
        options = DecomposeOptions()

        assert not options.include_root
        assert not options.include_fields
        assert not options.include_events
        assert not options.include_unsupported
        assert not options.include_private_members
        assert not options.include_static_members
        assert not options.enable_extensions
        assert not options.enable_redirection
        assert options.type_resolver is default_type_resolver

    def test_default_factory(self):
        assert DecomposeOptions.default() == DecomposeOptions()

    def test_frozen(self):
        options = DecomposeOptions()

        with pytest.raises(dataclasses.FrozenInstanceError):
            options.include_fields = True

    def test_replace(self):
        options = dataclasses.replace(DecomposeOptions(), include_fields=True)

        assert options.include_fields
        assert "size" in [m.name for m in decompose(Widget(), options).members]

    def test_no_context(self):
        options = DecomposeOptions()

        assert not options.has_context
        assert options.context_value is None


class TestContextDecomposeOptions:
    """Tests for ContextDecomposeOptions."""

    def test_has_context(self):
        options = ContextDecomposeOptions(context={"scope": "debug"})

        assert options.has_context
        assert options.context_value == {"scope": "debug"}

    def test_none_context(self):
        assert not ContextDecomposeOptions().has_context

    def test_falsy_context_counts(self):
        assert ContextDecomposeOptions(context=0).has_context

    def test_inherits_flags(self):
        options = ContextDecomposeOptions(context=1, include_fields=True)

        assert options.include_fields
        assert isinstance(options, DecomposeOptions)


class TestCategories:
    """Tests for category selection."""

    def test_default_categories(self):
        assert categories(DecomposeOptions()) == (MemberKind.PROPERTY, MemberKind.METHOD)

    def test_all_categories(self):
        options = DecomposeOptions(include_fields=True, include_events=True)

        assert categories(options) == (
            MemberKind.PROPERTY,
            MemberKind.FIELD,
            MemberKind.METHOD,
            MemberKind.EVENT,
        )

    def test_scope_from_options(self):
        options = DecomposeOptions(include_private_members=True, include_static_members=True, include_root=True)
        scope = MemberEnumerator(options, static_request=True).scope

        assert scope.include_private
        assert scope.include_static
        assert scope.include_root
        assert scope.static_request
