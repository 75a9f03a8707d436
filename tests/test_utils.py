"""Test rate limit header helpers."""

from datetime import datetime, timezone

import pytest

from gitrelease.utils import format_reset_time, retry_after_seconds

NOW = datetime(2015, 10, 21, 7, 28, 0, tzinfo=timezone.utc)


def test_format_reset_time():
    assert format_reset_time("1700000000") == "2023-11-14 22:13:20 UTC"
    assert format_reset_time("0") == "1970-01-01 00:00:00 UTC"


@pytest.mark.parametrize("value", [None, "", "soon", "1e400"])
def test_format_reset_time_unusable(value):
    assert format_reset_time(value) is None


def test_retry_after_delay_seconds():
    assert retry_after_seconds("120") == 120
    assert retry_after_seconds(" 5 ") == 5


def test_retry_after_fractional_seconds():
    assert retry_after_seconds("1.5", now=NOW) == 2
    assert retry_after_seconds("0.2", now=NOW) == 1
    assert retry_after_seconds("-3.5", now=NOW) == 0


def test_retry_after_http_date():
    assert retry_after_seconds("Wed, 21 Oct 2015 07:28:30 GMT", now=NOW) == 30


def test_retry_after_http_date_in_the_past():
    assert retry_after_seconds("Wed, 21 Oct 2015 07:00:00 GMT", now=NOW) == 0


@pytest.mark.parametrize("value", [None, "", "whenever", "nan", "inf"])
def test_retry_after_unusable(value):
    assert retry_after_seconds(value, now=NOW) is None
