from __future__ import annotations

import pydantic

from . import const


class Error(Exception):
    """
    Base error for all our custom errors
    """

    code: const.ErrorCode = const.ErrorCode.UNKNOWN

    @property
    def message(self) -> str:
        return str(self)

    @property
    def name(self) -> str:
        return type(self).__name__


class DescriptorInvalidError(Error, ValueError):
    code = const.ErrorCode.DESCRIPTOR_INVALID


class PayloadInvalidError(Error, TypeError):
    code = const.ErrorCode.PAYLOAD_INVALID

    @classmethod
    def from_validation_error(
        cls,
        tag: str,
        err: pydantic.ValidationError,
    ) -> PayloadInvalidError:
        """
        Extract info from Pydantic's ValidationError and return our internal
        PayloadInvalidError error.
        """
        default = cls(f"{tag}: {err}")

        errors = err.errors()
        if len(errors) == 0:
            return default
        loc = errors[0].get("loc")
        if loc is None or len(loc) == 0:
            return default

        field = ""
        for part in loc:
            if isinstance(part, int):
                return default
            if len(field) > 0:
                field += "."
            field += part

        msg = errors[0].get("msg")
        if msg is None:
            return default

        return cls(f"{tag}.{field}: {msg}")


class TagMissingError(Error, TypeError):
    code = const.ErrorCode.TAG_MISSING


class LookupInvalidError(Error, ValueError):
    code = const.ErrorCode.LOOKUP_INVALID


class MatchUnmatchedError(Error):
    """
    Raised when a lookup table has neither an entry for the value's tag nor
    an _otherwise fallback.
    """

    code = const.ErrorCode.MATCH_UNMATCHED

    def __init__(self, tag: str) -> None:
        super().__init__(f"Value did not match with anything: {tag!r}")
        self.tag = tag


class UnwrapError(Error):
    """
    Raised by unwrap on an Err whose value is not an exception. The original
    value is kept as-is.
    """

    code = const.ErrorCode.UNWRAP_FAILED

    def __init__(self, value: object) -> None:
        super().__init__(repr(value))
        self.value = value


class ExpectError(Error):
    code = const.ErrorCode.EXPECT_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
