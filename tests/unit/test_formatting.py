"""
Unit tests for display formatting helpers.
"""

import pytest

from runtimetrade.core.utils.formatting import (
    convert_for_display,
    format_currency,
    format_number,
    format_percent,
    pnl_direction,
)


class TestFormatting:
    """Test suite for currency, number and percent formatting."""

    def test_should_format_currency_with_separators(self) -> None:
        """Test USD formatting."""
        assert format_currency(1234.5) == "$1,234.50"

    def test_should_format_negative_currency(self) -> None:
        """Test the sign precedes the symbol."""
        assert format_currency(-3, "EUR") == "-€3.00"

    def test_should_format_unknown_currency_with_code(self) -> None:
        """Test currencies without a symbol use their code."""
        assert format_currency(5, "gbp") == "GBP 5.00"

    @pytest.mark.parametrize("value", [None, float("nan"), float("inf")])
    def test_should_render_unusable_values_as_zero(self, value: float | None) -> None:
        """Test NaN, infinity and None."""
        assert format_currency(value) == "$0.00"
        assert format_percent(value) == "0.00%"
        assert format_number(value) == "0.00"

    def test_should_format_number_with_decimals(self) -> None:
        """Test custom precision."""
        assert format_number(1234567.891, 0) == "1,234,568"
        assert format_number(60, 4) == "60.0000"

    def test_should_format_percent(self) -> None:
        """Test percentage formatting."""
        assert format_percent(19.880119) == "19.88%"
        assert format_percent(-5, 1) == "-5.0%"


class TestPnlDirection:
    """Test suite for P&L classification."""

    @pytest.mark.parametrize(
        "value,expected", [(1.0, "profit"), (-0.01, "loss"), (0.0, "flat"), (None, "flat")]
    )
    def test_should_classify_value(self, value: float | None, expected: str) -> None:
        """Test profit, loss and flat."""
        assert pnl_direction(value) == expected


class TestConvertForDisplay:
    """Test suite for display-only currency conversion."""

    def test_should_apply_rate(self) -> None:
        """Test conversion with a known rate."""
        assert convert_for_display(100.0, 0.92) == pytest.approx(92.0)

    @pytest.mark.parametrize("rate", [None, 0.0, -1.0, float("nan")])
    def test_should_fall_back_to_one(self, rate: float | None) -> None:
        """Test unknown rates leave the amount unchanged."""
        assert convert_for_display(100.0, rate) == 100.0
