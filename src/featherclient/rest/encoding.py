"""Flattening of nested query and form values into bracket keys.

``requests`` only understands flat ``key=value`` pairs: a dict value is
iterated for its keys and ``True`` is sent as ``"True"``.  Feathers query
operators are nested maps, so values are flattened before dispatch::

    {"$sort": {"createdAt": -1}, "userId": {"$in": [1, 2]}}

becomes::

    [("$sort[createdAt]", "-1"), ("userId[$in][0]", "1"), ("userId[$in][1]", "2")]

Booleans are lower-cased and ``None`` is sent as an empty string.
"""

from collections.abc import Mapping
from typing import Any


def flatten(values: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Return *values* as an ordered list of ``(key, value)`` string pairs.

    Args:
        values: Query parameters or multipart fields, possibly nested.

    Returns:
        One pair per leaf value, keys in bracket form.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (values or {}).items():
        _append(pairs, str(key), value)
    return pairs


def _append(pairs: list[tuple[str, str]], key: str, value: Any) -> None:
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _append(pairs, f"{key}[{sub_key}]", sub_value)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _append(pairs, f"{key}[{index}]", item)
    else:
        pairs.append((key, _scalar(value)))


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
