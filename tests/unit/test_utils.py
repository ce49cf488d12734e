"""
Unit tests for the rounding and label helpers.
"""

from decimal import Decimal

import pytest

from delivery_analytics.utils import month_label, round_half_up, weekday_name


class TestRoundHalfUp:

    @pytest.mark.parametrize("value, expected", [
        (2.675, 2.68),
        (2.665, 2.67),
        (-66.66666, -66.67),
        (45, 45.0),
        (Decimal("25.6000"), 25.6),
    ])
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected

    def test_none_passes_through(self):
        assert round_half_up(None) is None

    def test_custom_places(self):
        assert round_half_up(1.23456, places=3) == 1.235


class TestLabels:

    def test_month_label_is_zero_padded(self):
        assert month_label(2024, 3) == "2024-03"

    def test_weekday_name_starts_on_sunday(self):
        assert weekday_name(0) == "Sunday"
        assert weekday_name(6) == "Saturday"
