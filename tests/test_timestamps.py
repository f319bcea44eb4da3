# tests/test_timestamps.py
"""Unit tests for timestamp normalization."""

import math
from datetime import datetime, timezone

import pytest

from app.utils.timestamps import normalize_timestamp, now_epoch, MILLISECONDS_THRESHOLD


class TestNormalizeTimestamp:
    def test_seconds_unchanged(self):
        assert normalize_timestamp(1_700_000_000) == 1_700_000_000

    def test_milliseconds_floored_to_seconds(self):
        assert normalize_timestamp(1_700_000_000_999) == 1_700_000_000

    @pytest.mark.parametrize("value", [0, 1, 1_700_000_000, MILLISECONDS_THRESHOLD, 1_700_000_123_456])
    def test_idempotent(self, value):
        once = normalize_timestamp(value)
        assert normalize_timestamp(once) == once

    def test_threshold_is_treated_as_seconds(self):
        assert normalize_timestamp(MILLISECONDS_THRESHOLD) == MILLISECONDS_THRESHOLD
        assert normalize_timestamp(MILLISECONDS_THRESHOLD + 1) == math.floor((MILLISECONDS_THRESHOLD + 1) / 1000)

    def test_float_seconds_floored(self):
        assert normalize_timestamp(1_700_000_000.9) == 1_700_000_000

    def test_numeric_strings(self):
        assert normalize_timestamp("1700000000") == 1_700_000_000
        assert normalize_timestamp(" 1700000000123 ") == 1_700_000_000

    def test_iso_string_with_offset(self):
        assert normalize_timestamp("2023-11-14T22:13:20Z") == 1_700_000_000
        assert normalize_timestamp("2023-11-15T00:13:20+02:00") == 1_700_000_000

    def test_naive_string_is_local_time(self):
        expected = int(datetime(2024, 1, 15, 10, 30).timestamp())
        assert normalize_timestamp("2024-01-15T10:30:00") == expected
        assert normalize_timestamp("2024-01-15 10:30:00") == expected

    def test_datetime_objects(self):
        aware = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert normalize_timestamp(aware) == 1_700_000_000

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", True, float("nan")])
    def test_unparseable_returns_none(self, value):
        assert normalize_timestamp(value) is None

    def test_now_epoch_is_seconds(self):
        assert now_epoch() < MILLISECONDS_THRESHOLD
