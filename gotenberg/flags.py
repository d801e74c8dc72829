"""Typed command-line flags that remember which ones were set explicitly."""

from __future__ import annotations

import csv
import enum
import re
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from operator import attrgetter
from typing import Any, Callable, Iterable, Iterator

import regex

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class FlagError(ValueError):
    """Raised when a flag is unknown, has another type or holds a bad value."""


class FlagKind(enum.Enum):
    """The type of value a flag holds."""

    STRING = "string"
    STRING_SLICE = "stringSlice"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float64"
    DURATION = "duration"


# Durations.

_UNITS_NS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_TERM = re.compile(r"(\d*(?:\.\d*)?)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)", re.ASCII)


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``300ms``, ``1h2m3.5s`` or ``-1.5h``."""
    rest = text
    negative = False
    if rest[:1] in ("-", "+") and rest:
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    while rest:
        match = _DURATION_TERM.match(rest)
        if match is None or not any(ch.isdigit() for ch in match.group(1)):
            raise ValueError(f"invalid duration {text!r}")
        try:
            total += Decimal(match.group(1)) * _UNITS_NS[match.group(2)]
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration {text!r}") from exc
        rest = rest[match.end():]

    nanoseconds = int(total)
    if nanoseconds > _INT64_MAX + (1 if negative else 0):
        raise ValueError(f"invalid duration {text!r}")
    delta = timedelta(microseconds=nanoseconds // 1000)
    return -delta if negative else delta


def _fraction(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10**precision)
    if not frac:
        return str(whole)
    digits = f"{frac:0{precision}d}".rstrip("0")
    return f"{whole}.{digits}"


def format_duration(value: timedelta) -> str:
    """Format a duration the way ``parse_duration`` reads it, e.g. ``2m0s``."""
    total_ns = (value // timedelta(microseconds=1)) * 1000
    if total_ns == 0:
        return "0s"
    sign = "-" if total_ns < 0 else ""
    magnitude = abs(total_ns)

    if magnitude < 1_000_000_000:
        if magnitude < 1_000:
            return f"{sign}{magnitude}ns"
        if magnitude < 1_000_000:
            return f"{sign}{_fraction(magnitude, 3)}\u00b5s"
        return f"{sign}{_fraction(magnitude, 6)}ms"

    minutes, seconds_ns = divmod(magnitude, 60 * 1_000_000_000)
    out = _fraction(seconds_ns, 9) + "s"
    if minutes:
        hours, minutes = divmod(minutes, 60)
        out = f"{minutes}m{out}"
        if hours:
            out = f"{hours}h{out}"
    return sign + out


# Human-readable byte sizes.

_BINARY_BYTES = re.compile(r"(-?\d+(?:\.\d+)?)\s?([KMGTPE]iB?)", re.IGNORECASE | re.ASCII)
_DECIMAL_BYTES = re.compile(r"(-?\d+(?:\.\d+)?)\s?([KMGTPE]B?|B?)", re.IGNORECASE | re.ASCII)
_PREFIXES = "KMGTPE"


def parse_bytes(text: str) -> int:
    """Parse a size such as ``1MB`` (10^6), ``1MiB`` (2^20) or ``512``."""
    match = _BINARY_BYTES.fullmatch(text)
    if match:
        exponent = _PREFIXES.index(match.group(2)[0].upper()) + 1
        return int(float(match.group(1)) * 1024**exponent)

    match = _DECIMAL_BYTES.fullmatch(text)
    if match:
        unit = match.group(2).upper()
        factor = 1
        if unit and unit != "B":
            factor = 1000 ** (_PREFIXES.index(unit[0]) + 1)
        return int(float(match.group(1)) * factor)

    raise ValueError(f"error parsing value={text}")


# Value conversion.

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_LEGACY_OCTAL = re.compile(r"([+-]?)0([0-7_]+)", re.ASCII)


def _parse_bool(raw: str) -> bool:
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"invalid boolean {raw!r}")


def _parse_int(raw: str) -> int:
    if raw != raw.strip():
        raise ValueError(f"invalid integer {raw!r}")
    octal = _LEGACY_OCTAL.fullmatch(raw)
    value = int(f"{octal.group(1)}0o{octal.group(2)}", 0) if octal else int(raw, 0)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer {raw!r} out of range")
    return value


def _parse_float(raw: str) -> float:
    if "_" in raw or raw != raw.strip():
        raise ValueError(f"invalid float {raw!r}")
    return float(raw)


def _parse_csv(raw: str) -> list[str]:
    if raw == "":
        return []
    return next(csv.reader([raw]))


_PARSERS: dict[FlagKind, Callable[[str], Any]] = {
    FlagKind.STRING: str,
    FlagKind.STRING_SLICE: _parse_csv,
    FlagKind.BOOL: _parse_bool,
    FlagKind.INT: _parse_int,
    FlagKind.FLOAT: _parse_float,
    FlagKind.DURATION: parse_duration,
}


def _format_float(value: float) -> str:
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


@dataclass
class Flag:
    """A single named flag with its current value."""

    name: str
    kind: FlagKind
    default: Any
    usage: str
    value: Any
    changed: bool = False
    _appending: bool = field(default=False, init=False, repr=False, compare=False)

    def _convert(self, raw: str) -> Any:
        try:
            return _PARSERS[self.kind](raw)
        except ValueError as exc:
            raise FlagError(f'invalid argument "{raw}" for "--{self.name}" flag: {exc}') from exc

    def set(self, raw: str) -> None:
        """Set the value from text; a string slice is replaced once, then extended."""
        parsed = self._convert(raw)
        if self.kind is FlagKind.STRING_SLICE:
            self.value = [*self.value, *parsed] if self._appending else parsed
            self._appending = True
        else:
            self.value = parsed

    def replace(self, items: Iterable[str]) -> None:
        """Replace the whole value of a string slice flag."""
        if self.kind is not FlagKind.STRING_SLICE:
            raise FlagError(f"flag {self.name} of type {self.kind.value} cannot be replaced")
        self.value = [str(item) for item in items]

    def __str__(self) -> str:
        if self.kind is FlagKind.STRING_SLICE:
            return "[" + ",".join(self.value) + "]"
        if self.kind is FlagKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is FlagKind.FLOAT:
            return _format_float(self.value)
        if self.kind is FlagKind.DURATION:
            return format_duration(self.value)
        return str(self.value)


class FlagSet:
    """An ordered collection of flags that can parse ``--name=value`` arguments."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.args: list[str] = []
        self._flags: dict[str, Flag] = {}

    def _add(self, name: str, kind: FlagKind, default: Any, usage: str, value: Any) -> Flag:
        if name in self._flags:
            raise FlagError(f"{self.name} flag redefined: {name}")
        flag = Flag(name=name, kind=kind, default=default, usage=usage, value=value)
        self._flags[name] = flag
        return flag

    def add_string(self, name: str, default: str = "", usage: str = "") -> Flag:
        return self._add(name, FlagKind.STRING, default, usage, default)

    def add_string_slice(self, name: str, default: Iterable[str] | None = None, usage: str = "") -> Flag:
        items = list(default or [])
        return self._add(name, FlagKind.STRING_SLICE, list(items), usage, items)

    def add_bool(self, name: str, default: bool = False, usage: str = "") -> Flag:
        return self._add(name, FlagKind.BOOL, default, usage, default)

    def add_int(self, name: str, default: int = 0, usage: str = "") -> Flag:
        return self._add(name, FlagKind.INT, default, usage, default)

    def add_float(self, name: str, default: float = 0.0, usage: str = "") -> Flag:
        return self._add(name, FlagKind.FLOAT, default, usage, default)

    def add_duration(self, name: str, default: timedelta = timedelta(0), usage: str = "") -> Flag:
        return self._add(name, FlagKind.DURATION, default, usage, default)

    def add_flag_set(self, other: FlagSet | None) -> None:
        """Add every flag of ``other`` whose name is not defined here yet."""
        if other is None:
            return
        for flag in other:
            self._flags.setdefault(flag.name, flag)

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def get(self, name: str, kind: FlagKind) -> Any:
        """Return the value of a flag, checking that it has the expected kind."""
        flag = self._flags.get(name)
        if flag is None:
            raise FlagError(f"flag accessed but not defined: {name}")
        if flag.kind is not kind:
            raise FlagError(f"trying to get {kind.value} value of flag of type {flag.kind.value}")
        return list(flag.value) if kind is FlagKind.STRING_SLICE else flag.value

    def changed(self, name: str) -> bool:
        """Tell whether the flag was given on the parsed command line."""
        flag = self._flags.get(name)
        return flag is not None and flag.changed

    def parse(self, args: Iterable[str]) -> None:
        """Parse long flags; other arguments are kept in ``args``."""
        positional: list[str] = []
        tokens = iter(args)
        for arg in tokens:
            if arg == "--":
                positional.extend(tokens)
                break
            if arg == "-" or not arg.startswith("-"):
                positional.append(arg)
                continue
            if not arg.startswith("--"):
                raise FlagError(f"unknown shorthand flag in {arg!r}")
            body = arg[2:]
            if body.startswith(("-", "=")):
                raise FlagError(f"bad flag syntax: {arg}")
            name, sep, value = body.partition("=")
            flag = self._flags.get(name)
            if flag is None:
                raise FlagError(f"unknown flag: --{name}")
            if not sep:
                if flag.kind is FlagKind.BOOL:
                    value = "true"
                else:
                    following = next(tokens, None)
                    if following is None:
                        raise FlagError(f"flag needs an argument: --{name}")
                    value = following
            flag.set(value)
            flag.changed = True
        self.args = positional

    def __iter__(self) -> Iterator[Flag]:
        return iter(sorted(self._flags.values(), key=attrgetter("name")))


class ParsedFlags:
    """Typed access to the values of a parsed ``FlagSet``."""

    def __init__(self, flag_set: FlagSet | None = None) -> None:
        self.flag_set = flag_set if flag_set is not None else FlagSet("")

    def parse(self, args: Iterable[str]) -> None:
        self.flag_set.parse(args)

    def changed(self, name: str) -> bool:
        return self.flag_set.changed(name)

    def __iter__(self) -> Iterator[Flag]:
        return iter(self.flag_set)

    def _pick(self, deprecated: str, new_name: str) -> str:
        return deprecated if self.changed(deprecated) else new_name

    def must_string(self, name: str) -> str:
        return self.flag_set.get(name, FlagKind.STRING)

    def must_deprecated_string(self, deprecated: str, new_name: str) -> str:
        return self.must_string(self._pick(deprecated, new_name))

    def must_string_slice(self, name: str) -> list[str]:
        return self.flag_set.get(name, FlagKind.STRING_SLICE)

    def must_deprecated_string_slice(self, deprecated: str, new_name: str) -> list[str]:
        return self.must_string_slice(self._pick(deprecated, new_name))

    def must_bool(self, name: str) -> bool:
        return self.flag_set.get(name, FlagKind.BOOL)

    def must_deprecated_bool(self, deprecated: str, new_name: str) -> bool:
        return self.must_bool(self._pick(deprecated, new_name))

    def must_int(self, name: str) -> int:
        return self.flag_set.get(name, FlagKind.INT)

    def must_deprecated_int(self, deprecated: str, new_name: str) -> int:
        return self.must_int(self._pick(deprecated, new_name))

    def must_float(self, name: str) -> float:
        return self.flag_set.get(name, FlagKind.FLOAT)

    def must_deprecated_float(self, deprecated: str, new_name: str) -> float:
        return self.must_float(self._pick(deprecated, new_name))

    def must_duration(self, name: str) -> timedelta:
        return self.flag_set.get(name, FlagKind.DURATION)

    def must_deprecated_duration(self, deprecated: str, new_name: str) -> timedelta:
        return self.must_duration(self._pick(deprecated, new_name))

    def must_human_readable_bytes(self, name: str) -> int:
        """Return a size flag in bytes; an empty value means 0."""
        text = self.must_string(name)
        if text == "":
            return 0
        try:
            return parse_bytes(text)
        except ValueError as exc:
            raise FlagError(f"flag {name}: {exc}") from exc

    def must_deprecated_human_readable_bytes(self, deprecated: str, new_name: str) -> int:
        return self.must_human_readable_bytes(self._pick(deprecated, new_name))

    def must_regexp(self, name: str) -> regex.Pattern:
        text = self.must_string(name)
        try:
            return regex.compile(text)
        except regex.error as exc:
            raise FlagError(f"flag {name}: invalid regular expression {text!r}: {exc}") from exc

    def must_deprecated_regexp(self, deprecated: str, new_name: str) -> regex.Pattern:
        return self.must_regexp(self._pick(deprecated, new_name))