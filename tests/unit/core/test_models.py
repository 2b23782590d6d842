"""Unit tests for core/models.py"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from mdblog.core.models import PostMetadata


def test_date_becomes_aware_midnight():
    """A bare YAML date is read as local midnight with an offset attached."""
    meta = PostMetadata(title="T", published=date(2024, 1, 1))
    assert meta.published.tzinfo is not None
    assert (meta.published.year, meta.published.hour) == (2024, 0)


def test_naive_datetime_gets_local_offset():
    """Naive timestamps are interpreted in local time."""
    meta = PostMetadata(title="T", published=datetime(2024, 1, 1, 10, 0))
    assert meta.published.utcoffset() is not None
    assert meta.published.hour == 10


def test_explicit_offset_is_kept():
    """An explicit offset survives validation."""
    tz = timezone(timedelta(hours=-5))
    meta = PostMetadata(title="T", published=datetime(2024, 1, 1, tzinfo=tz))
    assert meta.published.utcoffset() == timedelta(hours=-5)


def test_iso_string_published():
    """ISO-8601 strings are accepted."""
    meta = PostMetadata(title="T", published="2024-05-06T07:08:09+02:00")
    assert meta.published.utcoffset() == timedelta(hours=2)


def test_description_optional():
    """Posts may omit the description."""
    assert PostMetadata(title="T", published="2024-05-06T07:08:09Z").description is None


def test_malformed_published():
    """Unparseable dates fail validation."""
    with pytest.raises(ValidationError):
        PostMetadata(title="T", published="yesterday-ish")
