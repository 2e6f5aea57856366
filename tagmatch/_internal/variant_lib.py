from __future__ import annotations

import copy
import dataclasses
import typing

import pydantic

from . import config_lib, const, errors, types

Shape = typing.Union[
    typing.Sequence[str],
    typing.Mapping[str, object],
    type[pydantic.BaseModel],
]
Descriptor = typing.Mapping[str, Shape]

TaggedValueT = typing.TypeVar("TaggedValueT", bound="TaggedValue")


class TaggedValue(typing.Mapping[str, object]):
    """
    Immutable pairing of a variant tag with its payload fields. Reads like a
    mapping ({tag_field: tag, **payload}) and exposes payload fields as
    attributes.
    """

    __slots__ = ("_payload", "_tag", "_tag_field", "_union")

    def __init__(
        self,
        tag: str,
        payload: typing.Optional[typing.Mapping[str, object]] = None,
        *,
        tag_field: typing.Optional[str] = None,
        union: typing.Optional[Union] = None,
    ) -> None:
        tag_field = config_lib.get_tag_field(tag_field)
        payload = dict(payload or {})
        if tag_field in payload:
            raise errors.PayloadInvalidError(
                f"{tag}: payload must not contain the tag field {tag_field!r}"
            )

        object.__setattr__(self, "_tag", tag)
        object.__setattr__(self, "_tag_field", tag_field)
        object.__setattr__(self, "_payload", payload)
        object.__setattr__(self, "_union", union)

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def tag_field(self) -> str:
        return self._tag_field

    @property
    def payload(self) -> dict[str, object]:
        return dict(self._payload)

    @property
    def union(self) -> typing.Optional[Union]:
        """
        Union that built this value, if any.
        """

        return self._union

    def to_dict(self) -> dict[str, object]:
        return {self._tag_field: self._tag, **self._payload}

    def __getattr__(self, name: str) -> object:
        payload = object.__getattribute__(self, "_payload")
        if name in payload:
            return payload[name]
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> TaggedValue:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> TaggedValue:
        return _rebuild(
            type(self),
            self._tag,
            copy.deepcopy(self._payload, memo),
            self._tag_field,
            self._union,
        )

    def __reduce__(self) -> tuple[object, ...]:
        return (
            _rebuild,
            (
                type(self),
                self._tag,
                self._payload,
                self._tag_field,
                self._union,
            ),
        )

    def __getitem__(self, key: str) -> object:
        if key == self._tag_field:
            return self._tag
        return self._payload[key]

    def __iter__(self) -> typing.Iterator[str]:
        yield self._tag_field
        yield from self._payload

    def __len__(self) -> int:
        return len(self._payload) + 1

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TaggedValue):
            return (
                self._tag_field == other._tag_field
                and self._tag == other._tag
                and self._payload == other._payload
            )
        if isinstance(other, typing.Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(
            (self._tag_field, self._tag, frozenset(self._payload.items()))
        )

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._payload.items())
        if self._union is not None and self._union.name is not None:
            return f"{self._union.name}.{self._tag}({fields})"
        return f"{self._tag}({fields})"


@dataclasses.dataclass(frozen=True)
class _Shape:
    fields: tuple[str, ...]
    required: frozenset[str]
    model: typing.Optional[type[pydantic.BaseModel]] = None

    @classmethod
    def from_raw(
        cls,
        tag: str,
        raw: object,
        tag_field: str,
        value_cls: type[TaggedValue],
    ) -> types.MaybeError[_Shape]:
        if isinstance(raw, type) and issubclass(raw, pydantic.BaseModel):
            fields = tuple(raw.model_fields)
            required = frozenset(
                name
                for name, info in raw.model_fields.items()
                if info.is_required()
            )
            model: typing.Optional[type[pydantic.BaseModel]] = raw
        elif types.is_mapping(raw):
            if not all(isinstance(k, str) for k in raw):
                return errors.DescriptorInvalidError(
                    f"{tag}: field names must be strings"
                )
            fields = tuple(typing.cast(typing.Mapping[str, object], raw))
            required = frozenset(fields)
            model = None
        elif types.is_str_sequence(raw):
            fields = tuple(raw)
            required = frozenset(fields)
            model = None
        else:
            return errors.DescriptorInvalidError(
                f"{tag}: shape must be a sequence of field names, a mapping, "
                "or a Pydantic model"
            )

        if len(set(fields)) != len(fields):
            return errors.DescriptorInvalidError(
                f"{tag}: duplicate field names"
            )
        if tag_field in fields:
            return errors.DescriptorInvalidError(
                f"{tag}: field {tag_field!r} collides with the tag field"
            )

        reserved = [f for f in fields if f in dir(value_cls)]
        if len(reserved) > 0:
            return errors.DescriptorInvalidError(
                f"{tag}: fields shadow {value_cls.__name__} attributes: "
                f"{', '.join(reserved)}"
            )

        return cls(fields=fields, required=required, model=model)

    def check(
        self,
        tag: str,
        payload: dict[str, object],
    ) -> typing.Optional[errors.PayloadInvalidError]:
        unknown = [k for k in payload if k not in self.fields]
        if len(unknown) > 0:
            return errors.PayloadInvalidError(
                f"{tag}: unexpected fields {', '.join(sorted(unknown))}"
            )

        missing = self.required - payload.keys()
        if len(missing) > 0:
            return errors.PayloadInvalidError(
                f"{tag}: missing fields {', '.join(sorted(missing))}"
            )

        if self.model is not None:
            try:
                self.model.model_validate(payload, strict=True)
            except pydantic.ValidationError as err:
                return errors.PayloadInvalidError.from_validation_error(
                    tag, err
                )

        return None


class Constructor(typing.Generic[TaggedValueT]):
    """
    Builds tagged values for one variant of a union.
    """

    def __init__(
        self,
        union: Union[TaggedValueT],
        tag: str,
        shape: _Shape,
    ) -> None:
        self._shape = shape
        self.tag = tag
        self.union = union

    @property
    def fields(self) -> tuple[str, ...]:
        return self._shape.fields

    def __call__(self, /, **payload: object) -> TaggedValueT:
        err = self._shape.check(self.tag, payload)
        if err is not None:
            raise err

        return self.union.value_cls(
            self.tag,
            payload,
            tag_field=self.union.tag_field,
            union=self.union,
        )

    def __repr__(self) -> str:
        return f"<Constructor {self.union.name or 'union'}.{self.tag}>"


class Union(typing.Generic[TaggedValueT]):
    """
    Closed set of variants sharing one tag field. Exposes a constructor per
    tag, both as an attribute and by item.
    """

    def __init__(
        self,
        descriptor: Descriptor,
        *,
        name: typing.Optional[str] = None,
        tag_field: typing.Optional[str] = None,
        value_cls: type[TaggedValueT],
    ) -> None:
        self.name = name
        self.tag_field = config_lib.get_tag_field(tag_field)
        self.value_cls = value_cls

        if not types.is_mapping(descriptor) or len(descriptor) == 0:
            raise errors.DescriptorInvalidError(
                "descriptor must be a non-empty mapping of tags to shapes"
            )

        constructors: dict[str, Constructor[TaggedValueT]] = {}
        for tag, raw_shape in descriptor.items():
            if not isinstance(tag, str) or not tag.isidentifier():
                raise errors.DescriptorInvalidError(
                    f"tag must be an identifier: {tag!r}"
                )
            if tag.startswith("_"):
                raise errors.DescriptorInvalidError(
                    f"tag must not start with an underscore: {tag!r}"
                )

            shape = _Shape.from_raw(
                tag, raw_shape, self.tag_field, value_cls
            )
            if isinstance(shape, Exception):
                raise shape

            constructors[tag] = Constructor(self, tag, shape)

        self._constructors = constructors

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._constructors)

    def is_member(self, value: object) -> bool:
        tag = get_tag(value, self.tag_field)
        if isinstance(tag, Exception):
            return False
        return tag in self._constructors

    def validate_lookup(self, lookup: typing.Mapping[str, object]) -> None:
        """
        Ensure the lookup table only uses known tags and is exhaustive, either
        by covering every tag or by supplying _otherwise.
        """

        unknown = [
            k
            for k in lookup
            if k != const.OTHERWISE and k not in self._constructors
        ]
        if len(unknown) > 0:
            raise errors.LookupInvalidError(
                f"unknown tags in lookup: {', '.join(sorted(unknown))}"
            )

        if const.OTHERWISE in lookup:
            return

        missing = [tag for tag in self._constructors if tag not in lookup]
        if len(missing) > 0:
            raise errors.LookupInvalidError(
                f"lookup is not exhaustive, missing: {', '.join(missing)}"
            )

    def __getattr__(self, name: str) -> Constructor[TaggedValueT]:
        constructors = object.__getattribute__(self, "_constructors")
        if name in constructors:
            return constructors[name]  # type: ignore[no-any-return]
        raise AttributeError(
            f"{self.name or 'union'!r} has no variant {name!r}"
        )

    def __getitem__(self, tag: str) -> Constructor[TaggedValueT]:
        return self._constructors[tag]

    def __contains__(self, tag: object) -> bool:
        return tag in self._constructors

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._constructors)

    def __repr__(self) -> str:
        return f"<Union {self.name or ''}: {' | '.join(self._constructors)}>"



def _rebuild(
    cls: type[TaggedValueT],
    tag: str,
    payload: typing.Mapping[str, object],
    tag_field: str,
    union: typing.Optional[Union[typing.Any]],
) -> TaggedValueT:
    # tag_field is passed through so the env var is not consulted again
    return cls(tag, payload, tag_field=tag_field, union=union)


@typing.overload
def state(
    descriptor: Descriptor,
    *,
    name: typing.Optional[str] = None,
    tag_field: typing.Optional[str] = None,
) -> Union[TaggedValue]:
    ...


@typing.overload
def state(
    descriptor: Descriptor,
    *,
    name: typing.Optional[str] = None,
    tag_field: typing.Optional[str] = None,
    value_cls: type[TaggedValueT],
) -> Union[TaggedValueT]:
    ...


def state(
    descriptor: Descriptor,
    *,
    name: typing.Optional[str] = None,
    tag_field: typing.Optional[str] = None,
    value_cls: typing.Optional[type[TaggedValue]] = None,
) -> Union[typing.Any]:
    """
    Build a union from a descriptor mapping each tag to its payload shape.

    Args:
    ----
        descriptor: Tag to shape. A shape is a sequence of field names or a
            Pydantic model whose fields (and strict validation) define the
            payload.
        name: Union name, used in reprs and error messages.
        tag_field: Discriminant field name. Defaults to the TAGMATCH_TAG_FIELD
            env var, then "tag".
        value_cls: TaggedValue subclass to instantiate.
    """

    return Union(
        descriptor,
        name=name,
        tag_field=tag_field,
        value_cls=value_cls or TaggedValue,
    )


def get_tag(value: object, tag_field: str) -> types.MaybeError[str]:
    """
    Read the tag from a TaggedValue, a plain mapping, or any object with the
    tag field as an attribute.
    """

    if isinstance(value, TaggedValue):
        return value.tag

    if types.is_mapping(value):
        tag = value.get(tag_field)
    else:
        tag = getattr(value, tag_field, None)

    if not isinstance(tag, str):
        return errors.TagMissingError(
            f"value has no string {tag_field!r} field: {value!r}"
        )
    return tag


build = state
