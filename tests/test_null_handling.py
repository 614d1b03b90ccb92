"""Tests for None inputs and None-valued members."""

from lookup_engine import DecomposeOptions, decompose, decompose_members, decompose_object


class TreeNode:
    def __init__(self, parent=None):
        self.parent = parent

    @property
    def root(self):
        return None if self.parent is None else self.parent


class TestNoneInput:
    """Tests for decomposing None."""

    def test_decompose_none(self):
        result = decompose(None)

        assert result.name == "object"
        assert result.type_name == "object"
        assert result.type_full_name == "builtins.object"
        assert result.raw_value is None
        assert result.members == ()

    def test_decompose_object_none(self):
        result = decompose_object(None)

        assert result.type_name == "object"
        assert result.members == ()

    def test_decompose_members_none(self):
        assert decompose_members(None) == []

    def test_none_with_all_options(self):
        options = DecomposeOptions(
            include_root=True,
            include_fields=True,
            include_events=True,
            include_unsupported=True,
            include_private_members=True,
            include_static_members=True,
            enable_extensions=True,
            enable_redirection=True,
        )

        assert decompose(None, options).members == ()


class TestNoneMembers:
    """Tests for members whose value is None."""

    def test_none_property(self):
        result = decompose(TreeNode())

        root = result.members[0]
        assert root.name == "root"
        assert root.value.raw_value is None
        assert root.value.type_name == "object"

    def test_none_field(self):
        result = decompose(TreeNode(), DecomposeOptions(include_fields=True))

        parent = next(m for m in result.members if m.name == "parent")
        assert parent.value.raw_value is None
        assert parent.value.name == "object"

    def test_none_elements(self):
        result = decompose([None, 1])

        assert result.type_name == "list<int>"
        values = [m.value.raw_value for m in result.members if m.name.startswith("list<int>[")]
        assert values == [None, 1]

    def test_all_none_list(self):
        result = decompose([None])

        assert result.type_name == "list<object>"
