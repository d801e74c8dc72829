from datetime import datetime, timedelta, timezone

import pytest
import regex

from gotenberg.filter import DeadlineExceededError, FilteredError, filter_deadline


def _past():
    return datetime.now() - timedelta(hours=1)


def _future():
    return datetime.now() + timedelta(seconds=5)


@pytest.mark.parametrize(
    "allowed, denied, value, deadline, expected",
    [
        ("foo", "", "foo", _past, DeadlineExceededError),
        ("foo", "", "bar", _future, FilteredError),
        ("", "foo", "foo", _past, DeadlineExceededError),
        ("", "foo", "foo", _future, FilteredError),
    ],
)
def test_filter_deadline_errors(allowed, denied, value, deadline, expected):
    with pytest.raises(expected):
        filter_deadline(regex.compile(allowed), regex.compile(denied), value, deadline())


def test_filter_deadline_success():
    assert filter_deadline(regex.compile(""), regex.compile(""), "foo", _future()) is None


def test_filter_deadline_allowed_and_not_denied():
    result = filter_deadline(
        regex.compile(r"^https?://"), regex.compile(r"internal"), "https://example.com", _future()
    )
    assert result is None


def test_filter_deadline_denied_after_allowed():
    with pytest.raises(FilteredError, match="denied"):
        filter_deadline(
            regex.compile(r"^https?://"), regex.compile(r"internal"), "https://internal.example.com", _future()
        )


def test_filter_deadline_accepts_sources_and_aware_deadline():
    deadline = datetime.now(timezone.utc) + timedelta(seconds=5)
    with pytest.raises(FilteredError, match="allowed"):
        filter_deadline("^a", "", "bcd", deadline)


def test_deadline_exceeded_is_timeout():
    with pytest.raises(TimeoutError):
        filter_deadline("foo", "", "foo", _past())