"""Tests for payment date normalization."""

from __future__ import annotations

import pytest

from nomina.parsing.dates import to_iso_date


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("15/03/2024", "2024-03-15"),
        ("5/3/2024", "2024-03-05"),
        ("05/3/2024", "2024-03-05"),
        (" 7 / 11 / 2023 ", "2023-11-07"),
    ],
)
def test_pads_day_and_month(raw, expected):
    assert to_iso_date(raw) == expected


def test_no_calendar_check_in_lenient_mode():
    assert to_iso_date("31/02/2024") == "2024-02-31"


def test_malformed_date_produces_garbage_not_error():
    assert to_iso_date("15/03") == "-03-15"
    assert to_iso_date("15/03/2024/9") == "2024-03-15"


def test_missing_date_raises():
    with pytest.raises(ValueError, match="missing payment date"):
        to_iso_date(None)


class TestStrict:
    def test_valid_date(self):
        assert to_iso_date("1/2/2024", strict=True) == "2024-02-01"

    def test_rejects_wrong_component_count(self):
        with pytest.raises(ValueError, match="invalid payment date"):
            to_iso_date("15/03", strict=True)

    def test_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            to_iso_date("aa/03/2024", strict=True)

    def test_rejects_impossible_date(self):
        with pytest.raises(ValueError):
            to_iso_date("31/02/2024", strict=True)
