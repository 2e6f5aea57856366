from __future__ import annotations

import logging
import typing

import typing_extensions

if typing.TYPE_CHECKING:
    # https://github.com/python/typeshed/issues/7855
    Logger = typing.Union[logging.Logger, logging.LoggerAdapter[logging.Logger]]
else:
    Logger = object

T = typing.TypeVar("T")
Output = typing.TypeVar("Output")

MaybeError: typing_extensions.TypeAlias = typing.Union[T, Exception]


def is_mapping(v: object) -> typing.TypeGuard[typing.Mapping[object, object]]:
    return isinstance(v, typing.Mapping)


def is_str_sequence(v: object) -> typing.TypeGuard[typing.Sequence[str]]:
    if isinstance(v, (str, bytes)) or not isinstance(v, typing.Sequence):
        return False
    return all(isinstance(item, str) for item in v)
