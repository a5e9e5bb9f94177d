"""Tests for apicompare.diff.equality."""

from __future__ import annotations

from apicompare.diff.equality import deep_equal


class TestDeepEqual:
    """Structural equality of parsed spec fragments."""

    def test_mapping_key_order_is_ignored(self) -> None:
        left = {"name": "id", "in": "path", "schema": {"type": "string", "format": "uuid"}}
        right = {"schema": {"format": "uuid", "type": "string"}, "in": "path", "name": "id"}
        assert deep_equal(left, right)

    def test_sequence_order_matters(self) -> None:
        assert not deep_equal({"required": ["a", "b"]}, {"required": ["b", "a"]})

    def test_extra_key_is_a_difference(self) -> None:
        assert not deep_equal({"type": "string"}, {"type": "string", "maxLength": 5})

    def test_nested_value_difference(self) -> None:
        left = {"properties": {"id": {"type": "integer"}}}
        right = {"properties": {"id": {"type": "string"}}}
        assert not deep_equal(left, right)

    def test_bool_never_equals_number(self) -> None:
        assert not deep_equal(True, 1)
        assert not deep_equal({"required": False}, {"required": 0})

    def test_int_and_float_are_the_same_json_number(self) -> None:
        assert deep_equal({"maximum": 1}, {"maximum": 1.0})

    def test_none_is_not_an_empty_container(self) -> None:
        assert not deep_equal(None, {})
        assert not deep_equal(None, [])

    def test_mapping_versus_sequence(self) -> None:
        assert not deep_equal({}, [])

    def test_scalars(self) -> None:
        assert deep_equal("a", "a")
        assert not deep_equal("1", 1)
