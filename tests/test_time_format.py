"""Tests for the countdown clock formatter."""
from __future__ import annotations

import pytest

from sequence_timer.utils.time_format import format_clock


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0:00"),
        (9, "0:09"),
        (125, "2:05"),
        (3599, "59:59"),
        (3600, "1:00:00"),
        (3725, "1:02:05"),
    ],
)
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


def test_negative_is_clamped_to_zero():
    assert format_clock(-4) == "0:00"
