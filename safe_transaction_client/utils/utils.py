import datetime
from typing import Any, Union

from hexbytes import HexBytes


def str_to_datetime(value: str | None) -> datetime.datetime | None:
    """
    :param value: ``ISO 8601`` date, ``Z`` suffix is supported
    :return: timezone aware `datetime.datetime`, ``None`` if no value provided
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(value)


def boolean_to_query_param(value: bool) -> str:
    return "true" if value else "false"


def int_or_none(value: Union[str, int, None]) -> int | None:
    if value is None:
        return None
    return int(value)


def hex_or_none(value: Any) -> bytes | None:
    if not value:
        return None
    return HexBytes(value)
