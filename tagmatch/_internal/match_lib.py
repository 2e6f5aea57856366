from __future__ import annotations

import typing

from . import config_lib, const, errors, log, types, variant_lib

ValueT = typing.TypeVar("ValueT")

Handler = typing.Callable[[ValueT], types.Output]


class MatchExpression(typing.Generic[ValueT]):
    """
    Wraps one tagged value for a single with_/case dispatch. Holds no state
    between calls and never mutates the value.
    """

    def __init__(
        self,
        value: ValueT,
        *,
        strict: typing.Optional[bool] = None,
        tag_field: typing.Optional[str] = None,
    ) -> None:
        self._strict = strict
        self._tag_field = tag_field
        self._value = value

    def with_(
        self,
        lookup: typing.Optional[typing.Mapping[str, types.Output]] = None,
        /,
        **entries: types.Output,
    ) -> types.Output:
        """
        Return the table entry for the value's tag, falling back to
        _otherwise. A key that is present wins even if its value is None.
        """

        table = self._prepare(lookup, entries)
        tag = self._tag()

        if tag in table:
            return table[tag]

        if const.OTHERWISE in table:
            log.get_logger().debug(
                "No %r entry, using %s", tag, const.OTHERWISE
            )
            return table[const.OTHERWISE]

        raise errors.MatchUnmatchedError(tag)

    def case(
        self,
        lookup: typing.Optional[
            typing.Mapping[str, Handler[ValueT, types.Output]]
        ] = None,
        /,
        **entries: Handler[ValueT, types.Output],
    ) -> types.Output:
        """
        Call the handler for the value's tag with the value, falling back to
        _otherwise. An entry that isn't callable is treated as absent.
        A non-callable _otherwise raises LookupInvalidError.
        """

        table = self._prepare(lookup, entries)
        tag = self._tag()

        handler: object = table.get(tag)
        if callable(handler):
            return typing.cast(types.Output, handler(self._value))
        if tag in table:
            log.get_logger().debug("Skipping non-callable handler for %r", tag)

        if const.OTHERWISE in table:
            log.get_logger().debug(
                "No %r handler, using %s", tag, const.OTHERWISE
            )
            otherwise: object = table[const.OTHERWISE]
            if not callable(otherwise):
                raise errors.LookupInvalidError(
                    f"{const.OTHERWISE} handler is not callable: {otherwise!r}"
                )
            return typing.cast(types.Output, otherwise(self._value))

        raise errors.MatchUnmatchedError(tag)

    def _prepare(
        self,
        lookup: typing.Optional[typing.Mapping[str, types.T]],
        entries: dict[str, types.T],
    ) -> dict[str, types.T]:
        table: dict[str, types.T]
        if lookup is None:
            table = {}
        elif isinstance(lookup, typing.Mapping):
            table = dict(lookup)
        else:
            raise errors.LookupInvalidError(
                f"lookup must be a mapping: {lookup!r}"
            )
        table.update(entries)

        union = (
            self._value.union
            if isinstance(self._value, variant_lib.TaggedValue)
            else None
        )
        if union is not None and config_lib.get_strict(self._strict):
            union.validate_lookup(table)

        return table

    def _tag(self) -> str:
        tag = variant_lib.get_tag(
            self._value,
            config_lib.get_tag_field(self._tag_field),
        )
        if isinstance(tag, Exception):
            raise tag
        return tag


def match(
    value: ValueT,
    *,
    strict: typing.Optional[bool] = None,
    tag_field: typing.Optional[str] = None,
) -> MatchExpression[ValueT]:
    """
    Start a match over a tagged value.

    Args:
    ----
        value: TaggedValue, mapping, or object carrying a tag field.
        strict: Validate lookup tables against the value's union before
            dispatch. Defaults to the TAGMATCH_STRICT env var.
        tag_field: Discriminant field for values that aren't TaggedValues.
            Defaults to the TAGMATCH_TAG_FIELD env var, then "tag".
    """

    return MatchExpression(value, strict=strict, tag_field=tag_field)
