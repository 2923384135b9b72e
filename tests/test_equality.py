"""Unit tests for structural equality helpers."""

from envchain.core.equality import contains_deep, deep_equals, is_sequence


class TestDeepEquals:
    """Test suite for deep_equals."""

    def test_nested_structures(self):
        """Test nested maps and lists compare by content."""
        assert deep_equals({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]})
        assert not deep_equals({"a": [1, {"b": 2}]}, {"a": [1, {"b": 3}]})

    def test_list_and_tuple_compare_structurally(self):
        """Test different sequence types with equal items are equal."""
        assert deep_equals([1, [2, 3]], (1, (2, 3)))

    def test_map_never_equals_list(self):
        """Test containers of different kinds never compare equal."""
        assert not deep_equals({}, [])
        assert not deep_equals([1], 1)

    def test_bool_is_not_int(self):
        """Test booleans are not treated as integers."""
        assert not deep_equals(True, 1)
        assert deep_equals(True, True)

    def test_none_only_equals_none(self):
        """Test None is only equal to itself."""
        assert deep_equals(None, None)
        assert not deep_equals(None, "")

    def test_equal_shaped_cycles(self):
        """Test self-referencing lists of the same shape terminate and compare equal."""
        a = []
        a.append(a)
        b = []
        b.append(b)
        assert deep_equals(a, b)

    def test_cyclic_maps(self):
        """Test self-referencing maps of the same shape compare equal."""
        a = {"k": 1}
        a["self"] = a
        b = {"k": 1}
        b["self"] = b
        assert deep_equals(a, b)


def test_contains_deep():
    """Test membership uses structural equality."""
    assert contains_deep([{"a": 1}, [2]], {"a": 1})
    assert contains_deep([{"a": 1}, [2]], (2,))
    assert not contains_deep([1], True)


def test_is_sequence_excludes_strings():
    """Test strings and bytes are not treated as sequences."""
    assert is_sequence([1])
    assert is_sequence((1,))
    assert not is_sequence("abc")
    assert not is_sequence(b"abc")
