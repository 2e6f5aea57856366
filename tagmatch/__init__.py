"""Public entrypoint for tagmatch."""


from ._internal.const import OTHERWISE, VERSION
from ._internal.log import set_logger
from ._internal.match_lib import MatchExpression, match
from ._internal.result import (
    Err,
    Ok,
    Result,
    from_maybe_error,
    is_err,
    is_ok,
)
from ._internal.variant_lib import (
    Constructor,
    TaggedValue,
    Union,
    build,
    state,
)

__version__ = VERSION

__all__ = [
    "Constructor",
    "Err",
    "MatchExpression",
    "OTHERWISE",
    "Ok",
    "Result",
    "TaggedValue",
    "Union",
    "build",
    "from_maybe_error",
    "is_err",
    "is_ok",
    "match",
    "set_logger",
    "state",
]
