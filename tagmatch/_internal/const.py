import enum
import importlib.metadata
import typing

DEFAULT_TAG_FIELD: typing.Final = "tag"
LOGGER_NAME: typing.Final = "tagmatch"

# Reserved lookup table key used when no tag matches
OTHERWISE: typing.Final = "_otherwise"

VERSION: typing.Final = importlib.metadata.version("tagmatch")


class EnvKey(enum.Enum):
    # Can be a boolean string ("true", "1", "false", "0")
    STRICT = "TAGMATCH_STRICT"

    TAG_FIELD = "TAGMATCH_TAG_FIELD"


class ErrorCode(enum.Enum):
    DESCRIPTOR_INVALID = "descriptor_invalid"
    EXPECT_FAILED = "expect_failed"
    LOOKUP_INVALID = "lookup_invalid"
    MATCH_UNMATCHED = "match_unmatched"
    PAYLOAD_INVALID = "payload_invalid"
    TAG_MISSING = "tag_missing"
    UNKNOWN = "unknown"
    UNWRAP_FAILED = "unwrap_failed"
