from __future__ import annotations

import typing

import typing_extensions

from . import errors, match_lib, types, variant_lib

ErrT = typing.TypeVar("ErrT")
OkT = typing.TypeVar("OkT")
NewOkT = typing.TypeVar("NewOkT")


class Result(variant_lib.TaggedValue, typing.Generic[OkT, ErrT]):
    """
    Tagged value of the {Ok: {val}, Err: {val}} union. Every accessor
    dispatches through match, so there is no Ok/Err branching outside of it.
    """

    __slots__ = ()

    def unwrap(self) -> OkT:
        """
        Return the Ok value. On Err, raise the wrapped error if it's an
        exception, otherwise raise UnwrapError carrying it.

        A wrapped exception is raised with a fresh traceback each time, so
        repeated calls don't grow it. Its __context__ is left as it was, even
        when unwrap is called while another exception is being handled.
        """

        return match_lib.match(self).case(Ok=_get_val, Err=_raise_val)

    def expect(self, message: str) -> OkT:
        """
        Return the Ok value. On Err, raise ExpectError with the message. The
        wrapped error is discarded.
        """

        def _raise_message(_: Result[OkT, ErrT]) -> typing.NoReturn:
            raise errors.ExpectError(message)

        return match_lib.match(self).case(Ok=_get_val, Err=_raise_message)

    def unwrap_or(self, otherwise: types.T) -> typing.Union[OkT, types.T]:
        """
        Return the Ok value or the parameter.
        """

        return match_lib.match(self).case(
            Ok=_get_val,
            Err=lambda _: otherwise,
        )

    def apply_to_ok(
        self,
        fn: typing.Callable[[OkT], NewOkT],
    ) -> Result[NewOkT, ErrT]:
        """
        Apply a transform function to the Ok value and return a new Result.
        Err passes through untouched.
        """

        return match_lib.match(self).case(
            Ok=lambda res: Ok(fn(_get_val(res))),
            Err=lambda res: res,
        )

    def is_err(self) -> bool:
        return match_lib.match(self).with_(Ok=False, Err=True)

    def is_ok(self) -> bool:
        return match_lib.match(self).with_(Ok=True, Err=False)

    @property
    def err_value(self) -> ErrT:
        return match_lib.match(self).case(Err=_get_val, Ok=_no_err_value)

    @property
    def ok_value(self) -> OkT:
        return match_lib.match(self).case(Ok=_get_val, Err=_no_ok_value)


ResultImpl = variant_lib.state(
    {
        "Err": ["val"],
        "Ok": ["val"],
    },
    name="Result",
    tag_field="tag",
    value_cls=Result,
)


def Err(err: ErrT) -> Result[typing_extensions.Never, ErrT]:  # noqa: N802
    return ResultImpl.Err(val=err)


def Ok(val: OkT) -> Result[OkT, typing_extensions.Never]:  # noqa: N802
    return ResultImpl.Ok(val=val)


def from_maybe_error(value: types.MaybeError[OkT]) -> Result[OkT, Exception]:
    """
    Convert a value-or-exception return into a Result.
    """

    if isinstance(value, Exception):
        return Err(value)
    return Ok(value)


def is_err(result: Result[OkT, ErrT]) -> bool:
    return result.is_err()


def is_ok(result: Result[OkT, ErrT]) -> bool:
    return result.is_ok()


def _get_val(res: variant_lib.TaggedValue) -> typing.Any:
    return res["val"]


def _raise_val(res: variant_lib.TaggedValue) -> typing.NoReturn:
    val = res["val"]
    if isinstance(val, BaseException):
        context = val.__context__
        try:
            raise val.with_traceback(None)
        finally:
            val.__context__ = context
    raise errors.UnwrapError(val)


def _no_err_value(_: variant_lib.TaggedValue) -> typing.NoReturn:
    raise AttributeError("Ok result has no err_value")


def _no_ok_value(_: variant_lib.TaggedValue) -> typing.NoReturn:
    raise AttributeError("Err result has no ok_value")
