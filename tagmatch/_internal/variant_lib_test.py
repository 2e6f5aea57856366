import copy
import os
import pickle
import unittest

import pydantic
import pytest

from . import const, errors, variant_lib

Shape = variant_lib.state(
    {
        "Circle": ["radius"],
        "Rect": ["width", "height"],
        "Empty": [],
    },
    name="Shape",
)


class _Point(pydantic.BaseModel):
    x: int
    y: int
    label: str = ""


class TestConstructors(unittest.TestCase):
    def test_tag_and_payload(self) -> None:
        value = Shape.Rect(width=2, height=3)
        assert value.tag == "Rect"
        assert value.payload == {"width": 2, "height": 3}
        assert value.to_dict() == {"tag": "Rect", "width": 2, "height": 3}

    def test_no_payload(self) -> None:
        value = Shape.Empty()
        assert value.payload == {}
        assert dict(value) == {"tag": "Empty"}

    def test_attribute_and_item_access(self) -> None:
        value = Shape.Circle(radius=1.5)
        assert value.radius == 1.5
        assert value["radius"] == 1.5
        assert value["tag"] == "Circle"

        with pytest.raises(AttributeError):
            value.width  # noqa: B018
        with pytest.raises(KeyError):
            value["width"]

    def test_constructor_by_item(self) -> None:
        assert Shape["Circle"](radius=1) == Shape.Circle(radius=1)
        assert Shape["Circle"].fields == ("radius",)

    def test_pure(self) -> None:
        """
        Equal arguments give structurally equal values
        """

        a = Shape.Circle(radius=1)
        b = Shape.Circle(radius=1)
        assert a == b
        assert a is not b
        assert hash(a) == hash(b)
        assert Shape.Circle(radius=2) != a
        assert Shape.Rect(width=1, height=1) != Shape.Circle(radius=1)

    def test_equals_plain_mapping(self) -> None:
        assert Shape.Circle(radius=1) == {"tag": "Circle", "radius": 1}

    def test_immutable(self) -> None:
        value = Shape.Circle(radius=1)
        with pytest.raises(AttributeError):
            value.radius = 2  # type: ignore[misc]
        with pytest.raises(AttributeError):
            del value.radius

    def test_payload_is_a_copy(self) -> None:
        value = Shape.Circle(radius=1)
        value.payload["radius"] = 2
        assert value.radius == 1

    def test_unexpected_field(self) -> None:
        with pytest.raises(errors.PayloadInvalidError) as exc_info:
            Shape.Circle(radius=1, color="red")
        assert "color" in str(exc_info.value)

    def test_missing_field(self) -> None:
        with pytest.raises(errors.PayloadInvalidError) as exc_info:
            Shape.Rect(width=1)
        assert "height" in str(exc_info.value)

    def test_repr(self) -> None:
        assert repr(Shape.Circle(radius=1)) == "Shape.Circle(radius=1)"
        assert repr(variant_lib.TaggedValue("Foo", {"a": "b"})) == "Foo(a='b')"

    def test_union_reference(self) -> None:
        assert Shape.Circle(radius=1).union is Shape
        assert variant_lib.TaggedValue("Foo").union is None


class TestPydanticShape(unittest.TestCase):
    Geo = variant_lib.state({"Point": _Point, "Nowhere": []}, name="Geo")

    def test_valid(self) -> None:
        value = self.Geo.Point(x=1, y=2)
        assert value.payload == {"x": 1, "y": 2}

    def test_defaults_are_not_added(self) -> None:
        value = self.Geo.Point(x=1, y=2)
        assert "label" not in value

    def test_strict_validation(self) -> None:
        with pytest.raises(errors.PayloadInvalidError) as exc_info:
            self.Geo.Point(x="1", y=2)
        assert str(exc_info.value).startswith("Point.x: ")

    def test_missing_required(self) -> None:
        with pytest.raises(errors.PayloadInvalidError):
            self.Geo.Point(x=1)


class TestUnion(unittest.TestCase):
    def tearDown(self) -> None:
        os.environ.pop(const.EnvKey.TAG_FIELD.value, None)

    def test_tags(self) -> None:
        assert Shape.tags == ("Circle", "Rect", "Empty")
        assert list(Shape) == ["Circle", "Rect", "Empty"]
        assert "Circle" in Shape
        assert "Triangle" not in Shape

    def test_unknown_variant(self) -> None:
        with pytest.raises(AttributeError):
            Shape.Triangle  # noqa: B018

    def test_is_member(self) -> None:
        assert Shape.is_member(Shape.Circle(radius=1))
        assert Shape.is_member({"tag": "Rect"})
        assert Shape.is_member({"tag": "Triangle"}) is False
        assert Shape.is_member(object()) is False

    def test_custom_tag_field(self) -> None:
        State = variant_lib.state({"On": [], "Off": []}, tag_field="_state")
        value = State.On()
        assert value.to_dict() == {"_state": "On"}
        assert value.tag_field == "_state"

    def test_tag_field_env_var(self) -> None:
        os.environ[const.EnvKey.TAG_FIELD.value] = "kind"
        State = variant_lib.state({"On": []})
        assert State.On().to_dict() == {"kind": "On"}

    def test_invalid_descriptors(self) -> None:
        invalid: list[object] = [
            {},
            ["Circle"],
            {"_otherwise": []},
            {"not an identifier": []},
            {"Circle": "radius"},
            {"Circle": ["radius", "radius"]},
            {"Circle": ["tag"]},
            {"Circle": 1},
        ]
        for descriptor in invalid:
            with pytest.raises(errors.DescriptorInvalidError):
                variant_lib.state(descriptor)  # type: ignore[arg-type]

    def test_validate_lookup(self) -> None:
        Shape.validate_lookup({"Circle": 1, "Rect": 2, "Empty": 3})
        Shape.validate_lookup({"Circle": 1, const.OTHERWISE: 0})

    def test_validate_lookup_not_exhaustive(self) -> None:
        with pytest.raises(errors.LookupInvalidError) as exc_info:
            Shape.validate_lookup({"Circle": 1})
        assert "Rect" in str(exc_info.value)

    def test_validate_lookup_unknown_tag(self) -> None:
        with pytest.raises(errors.LookupInvalidError) as exc_info:
            Shape.validate_lookup({"Triangle": 1, const.OTHERWISE: 0})
        assert "Triangle" in str(exc_info.value)


class Test_get_tag:
    def test_tagged_value(self) -> None:
        assert variant_lib.get_tag(Shape.Circle(radius=1), "other") == "Circle"

    def test_mapping(self) -> None:
        assert variant_lib.get_tag({"_state": "Ok"}, "_state") == "Ok"

    def test_object(self) -> None:
        class Obj:
            kind = "Ok"

        assert variant_lib.get_tag(Obj(), "kind") == "Ok"

    def test_missing(self) -> None:
        assert isinstance(
            variant_lib.get_tag({"tag": 1}, "tag"),
            errors.TagMissingError,
        )
        assert isinstance(
            variant_lib.get_tag(None, "tag"),
            errors.TagMissingError,
        )


class TestCopy(unittest.TestCase):
    def tearDown(self) -> None:
        os.environ.pop(const.EnvKey.TAG_FIELD.value, None)

    def test_copy(self) -> None:
        value = Shape.Circle(radius=1)
        assert copy.copy(value) is value

    def test_deepcopy(self) -> None:
        value = Shape.Rect(width=[1], height=2)
        copied = copy.deepcopy(value)
        assert copied == value
        assert copied.width is not value.width
        assert copied.union is Shape

    def test_deepcopy_nested(self) -> None:
        value = Shape.Circle(radius=1)
        copied = copy.deepcopy({"shapes": [value]})
        assert copied == {"shapes": [value]}

    def test_pickle(self) -> None:
        value = Shape.Rect(width=2, height=3)
        restored = pickle.loads(pickle.dumps(value))
        assert restored == value
        assert type(restored) is variant_lib.TaggedValue
        assert restored.union is not None
        assert restored.union.tags == Shape.tags

    def test_pickle_without_union(self) -> None:
        value = variant_lib.TaggedValue("Foo", {"a": 1})
        restored = pickle.loads(pickle.dumps(value))
        assert restored == value
        assert restored.union is None

    def test_keeps_tag_field(self) -> None:
        """
        Restoring doesn't re-read the tag field from the env var
        """

        value = variant_lib.TaggedValue("Foo", {"a": 1}, tag_field="_state")
        os.environ[const.EnvKey.TAG_FIELD.value] = "kind"

        assert copy.deepcopy(value).tag_field == "_state"
        assert pickle.loads(pickle.dumps(value)).tag_field == "_state"


class TestShapes(unittest.TestCase):
    def test_mapping_shape(self) -> None:
        Response = variant_lib.state({"Ok": {"val": int}, "Err": {}})
        assert Response["Ok"].fields == ("val",)
        assert Response.Ok(val=1).to_dict() == {"tag": "Ok", "val": 1}

        with pytest.raises(errors.PayloadInvalidError):
            Response.Ok()

    def test_mapping_shape_non_str_keys(self) -> None:
        with pytest.raises(errors.DescriptorInvalidError):
            variant_lib.state({"Ok": {1: int}})  # type: ignore[dict-item]

    def test_fields_shadowing_attributes(self) -> None:
        for field in ("items", "keys", "get", "payload", "union", "to_dict"):
            with pytest.raises(errors.DescriptorInvalidError) as exc_info:
                variant_lib.state({"Page": [field, "count"]})
            assert field in str(exc_info.value)

    def test_tag_field_name_is_reserved_under_custom_tag_field(self) -> None:
        with pytest.raises(errors.DescriptorInvalidError):
            variant_lib.state({"Page": ["tag"]}, tag_field="kind")

    def test_pydantic_fields_shadowing_attributes(self) -> None:
        class Page(pydantic.BaseModel):
            values: list[int]

        with pytest.raises(errors.DescriptorInvalidError):
            variant_lib.state({"Page": Page})
