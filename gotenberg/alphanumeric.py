"""Natural ordering of file names by a numeric prefix or suffix."""

from __future__ import annotations

import re
from typing import Iterable

_INT64_MAX = 2**63 - 1

_PREFIX = re.compile(r"^(\d+)(.*)$", re.ASCII)
_EXTENSION_SUFFIX = re.compile(r"^(.*?)(\d+)(\.[^.]+)$", re.ASCII)
_SUFFIX = re.compile(r"^(.*?)(\d+)$", re.ASCII)


def _base(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip("/")
    if stripped == "":
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _to_int(digits: str) -> int | None:
    value = int(digits)
    return value if value <= _INT64_MAX else None


def extract_number(value: str) -> tuple[int, str]:
    """Return the number found in the base name and what is left of it.

    A numeric prefix wins, then a number just before the extension, then a
    trailing number. Without any, the result is ``(-1, base name)``.
    """
    name = _base(value)

    match = _PREFIX.match(name)
    if match and (number := _to_int(match.group(1))) is not None:
        return number, match.group(2)

    match = _EXTENSION_SUFFIX.match(name)
    if match and (number := _to_int(match.group(2))) is not None:
        return number, match.group(1) + match.group(3)

    match = _SUFFIX.match(name)
    if match and (number := _to_int(match.group(2))) is not None:
        return number, match.group(1)

    return -1, name


def _sort_key(value: str) -> tuple:
    number, rest = extract_number(value)
    if number == -1:
        return (1, 0, value)
    return (0, number, rest)


def alphanumeric_less(a: str, b: str) -> bool:
    """Tell whether ``a`` sorts before ``b``.

    Values with a number come first, ordered by number then by the rest;
    the others follow in plain lexicographic order.
    """
    return _sort_key(a) < _sort_key(b)


def alphanumeric_sorted(values: Iterable[str]) -> list[str]:
    """Return the values in alphanumeric order."""
    return sorted(values, key=_sort_key)