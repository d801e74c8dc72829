"""Allow/deny filtering of strings by regular expressions under a deadline."""

from __future__ import annotations

from datetime import datetime

import regex


class FilteredError(ValueError):
    """Raised when a value is rejected by the allowed or denied expression."""


class DeadlineExceededError(TimeoutError):
    """Raised when filtering does not finish before the deadline."""


def _source(pattern: regex.Pattern | str) -> str:
    return pattern if isinstance(pattern, str) else pattern.pattern


def _remaining(deadline: datetime) -> float:
    return (deadline - datetime.now(deadline.tzinfo)).total_seconds()


def _matches(source: str, s: str, deadline: datetime) -> bool:
    remaining = _remaining(deadline)
    if remaining <= 0:
        raise DeadlineExceededError("context deadline exceeded")
    try:
        return regex.search(source, s, timeout=remaining) is not None
    except TimeoutError as exc:
        if _remaining(deadline) <= 0:
            raise DeadlineExceededError("context deadline exceeded") from exc
        raise ValueError(f"'{source}' cannot handle '{s}': {exc}") from exc


def filter_deadline(
    allowed: regex.Pattern | str,
    denied: regex.Pattern | str,
    s: str,
    deadline: datetime,
) -> None:
    """Check that ``s`` matches ``allowed`` and not ``denied``; empty patterns are ignored."""
    allowed_source = _source(allowed)
    if allowed_source and not _matches(allowed_source, s, deadline):
        raise FilteredError(f"'{s}' does not match the expression from the allowed list: value filtered")

    denied_source = _source(denied)
    if denied_source and _matches(denied_source, s, deadline):
        raise FilteredError(f"'{s}' matches the expression from the denied list: value filtered")