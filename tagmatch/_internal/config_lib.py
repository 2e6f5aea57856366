import os
import typing

from . import const


def get_tag_field(code_value: typing.Optional[str]) -> str:
    if code_value is not None:
        return code_value

    env_var_value = os.getenv(const.EnvKey.TAG_FIELD.value)
    if env_var_value:
        return env_var_value.strip()

    return const.DEFAULT_TAG_FIELD


def get_strict(code_value: typing.Optional[bool]) -> bool:
    if code_value is not None:
        return code_value

    return is_truthy(const.EnvKey.STRICT)


def is_truthy(env_var: const.EnvKey) -> bool:
    val = os.getenv(env_var.value)
    if val is None:
        return False
    val = val.strip()

    if val.lower() in ("false", "0", ""):
        return False

    return True
