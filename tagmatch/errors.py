from ._internal.errors import (
    DescriptorInvalidError,
    Error,
    ExpectError,
    LookupInvalidError,
    MatchUnmatchedError,
    PayloadInvalidError,
    TagMissingError,
    UnwrapError,
)

__all__ = [
    "DescriptorInvalidError",
    "Error",
    "ExpectError",
    "LookupInvalidError",
    "MatchUnmatchedError",
    "PayloadInvalidError",
    "TagMissingError",
    "UnwrapError",
]
