"""Tests for member categorization."""

from lookup_engine import DecomposeOptions, MemberAttributes, decompose
from lookup_engine.members import MemberKind, classify, is_private_name, is_special_name


class Signal:
    def __init__(self):
        self._handlers = []

    def connect(self, handler):
        self._handlers.append(handler)

    def disconnect(self, handler):
        self._handlers.remove(handler)


class Sample:
    counter = 0
    changed = Signal()

    def __init__(self):
        self.visible = 1
        self._hidden = 2

    @property
    def prop(self) -> int:
        return 1

    @property
    def _secret(self) -> int:
        return 2

    def method(self) -> int:
        return 3

    def _internal(self) -> int:
        return 5

    @staticmethod
    def helper() -> int:
        return 4

    @classmethod
    def build(cls) -> "Sample":
        return cls()


ALL = DecomposeOptions(
    include_fields=True,
    include_events=True,
    include_private_members=True,
    include_static_members=True,
)


def by_name(result):
    return {m.name: m for m in result.members}


class TestCategories:
    """Tests for category flags."""

    def test_property(self):
        assert by_name(decompose(Sample()))["prop"].member_attributes == MemberAttributes.PROPERTY

    def test_method(self):
        assert by_name(decompose(Sample()))["method"].member_attributes == MemberAttributes.METHOD

    def test_field(self):
        members = by_name(decompose(Sample(), DecomposeOptions(include_fields=True)))

        assert members["visible"].member_attributes == MemberAttributes.FIELD
        assert members["visible"].value.raw_value == 1

    def test_event(self):
        members = by_name(decompose(Sample(), DecomposeOptions(include_events=True)))

        assert members["changed"].member_attributes == MemberAttributes.EVENT
        assert isinstance(members["changed"].value.raw_value, Signal)

    def test_static_field(self):
        members = by_name(decompose(Sample(), ALL))

        assert members["counter"].member_attributes == MemberAttributes.FIELD | MemberAttributes.STATIC
        assert members["counter"].value.raw_value == 0

    def test_static_methods(self):
        members = by_name(decompose(Sample(), ALL))

        assert members["helper"].member_attributes == MemberAttributes.METHOD | MemberAttributes.STATIC
        assert members["helper"].value.raw_value == 4
        assert isinstance(members["build"].value.raw_value, Sample)

    def test_private_members(self):
        members = by_name(decompose(Sample(), ALL))

        assert members["_secret"].member_attributes == MemberAttributes.PROPERTY | MemberAttributes.PRIVATE
        assert members["_hidden"].member_attributes == MemberAttributes.FIELD | MemberAttributes.PRIVATE
        assert members["_internal"].member_attributes == MemberAttributes.METHOD | MemberAttributes.PRIVATE


class TestVisibility:
    """Tests for option-driven visibility."""

    def test_defaults(self):
        names = set(by_name(decompose(Sample())))

        assert names == {"prop", "method"}

    def test_events_excluded_by_default(self):
        assert "changed" not in by_name(decompose(Sample(), DecomposeOptions(include_fields=True)))

    def test_private_excluded_by_default(self):
        names = set(by_name(decompose(Sample(), DecomposeOptions(include_fields=True))))

        assert "_hidden" not in names
        assert "_secret" not in names

    def test_static_excluded_by_default(self):
        names = set(by_name(decompose(Sample(), DecomposeOptions(include_fields=True))))

        assert "counter" not in names
        assert "helper" not in names

    def test_special_names_never_listed(self):
        names = set(by_name(decompose(Sample(), ALL)))

        assert not any(is_special_name(name) for name in names)

    def test_category_order(self):
        names = list(by_name(decompose(Sample(), ALL)))

        assert names.index("prop") < names.index("visible")
        assert names.index("visible") < names.index("method")
        assert names.index("method") < names.index("changed")


class TestRootMembers:
    """Tests for members of object itself."""

    def test_root_excluded_by_default(self):
        assert "__class__" not in by_name(decompose(Sample()))

    def test_root_included(self):
        members = by_name(decompose(Sample(), DecomposeOptions(include_root=True)))

        assert members["__class__"].value.raw_value is Sample
        assert members["__class__"].value.name == "Sample"
        assert members["__class__"].declaring_type_name == "object"
        assert members["__class__"].depth == 1
        assert "__repr__" in members
        assert "__sizeof__" in members

    def test_root_comes_first(self):
        names = list(by_name(decompose(Sample(), DecomposeOptions(include_root=True))))

        assert names.index("__class__") < names.index("prop")

    def test_constructors_excluded(self):
        members = by_name(decompose(Sample(), DecomposeOptions(include_root=True, include_unsupported=True)))

        assert "__init__" not in members
        assert "__new__" not in members
        assert "__setattr__" not in members

    def test_overrides_dispatch(self):
        class Custom:
            def __repr__(self):
                return "<custom>"

        members = by_name(decompose(Custom(), DecomposeOptions(include_root=True)))

        assert members["__repr__"].value.raw_value == "<custom>"

    def test_format_resolved(self):
        members = by_name(decompose(42, DecomposeOptions(include_root=True)))

        assert members["__format__"].value.raw_value == "42"
        assert members["__format__"].value.description == "Empty format spec"


class TestClassify:
    """Tests for class attribute classification."""

    def test_nested_class_is_not_a_member(self):
        assert classify(Sample) is None

    def test_property(self):
        assert classify(vars(Sample)["prop"]) == (MemberKind.PROPERTY, MemberAttributes.NONE)

    def test_staticmethod(self):
        assert classify(vars(Sample)["helper"]) == (MemberKind.METHOD, MemberAttributes.STATIC)

    def test_plain_data(self):
        assert classify(0) == (MemberKind.FIELD, MemberAttributes.STATIC)

    def test_event(self):
        assert classify(Signal()) == (MemberKind.EVENT, MemberAttributes.NONE)


class TestNames:
    """Tests for name helpers."""

    def test_special(self):
        assert is_special_name("__init__")
        assert is_special_name("_missing_")
        assert not is_special_name("_private")
        assert not is_special_name("__mangled")
        assert not is_special_name("public")

    def test_private(self):
        assert is_private_name("_private")
        assert is_private_name("__mangled")
        assert not is_private_name("__init__")
        assert not is_private_name("public")
