from . import types


class Test_is_mapping:
    def test_dict(self) -> None:
        assert types.is_mapping({})
        assert types.is_mapping({"a": 1})

    def test_non_mappings(self) -> None:
        assert types.is_mapping([]) is False
        assert types.is_mapping("string") is False
        assert types.is_mapping(None) is False


class Test_is_str_sequence:
    def test_list_and_tuple(self) -> None:
        assert types.is_str_sequence(["a", "b"])
        assert types.is_str_sequence(("a",))
        assert types.is_str_sequence([])

    def test_str_is_not_a_sequence_of_names(self) -> None:
        assert types.is_str_sequence("abc") is False

    def test_mixed_items(self) -> None:
        assert types.is_str_sequence(["a", 1]) is False
